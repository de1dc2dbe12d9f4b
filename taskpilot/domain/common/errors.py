from __future__ import annotations


class DomainError(Exception):
    """Base class for task domain errors."""


class ValidationError(DomainError):
    pass


class EmptyInputError(ValidationError):
    """Raised when the parser is given blank text. Caller re-prompts."""


class InvalidOverrideError(ValidationError):
    """Override value outside its enumerated domain (unknown priority, category, date)."""


class MalformedDurationError(ValidationError):
    """Estimate override that is non-numeric or not positive."""


class NotFoundError(DomainError):
    pass
