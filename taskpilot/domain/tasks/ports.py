from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional, Sequence

from taskpilot.models import Task


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime: ...


class IdGenerator(ABC):
    @abstractmethod
    def new_id(self) -> str: ...


class TaskRepository(ABC):
    """Persistence for the task collection. Stored quadrants are never trusted."""

    @abstractmethod
    async def list_all(self) -> Sequence[Task]: ...

    @abstractmethod
    async def get(self, task_id: str) -> Optional[Task]: ...

    @abstractmethod
    async def add(self, task: Task) -> None: ...

    @abstractmethod
    async def save(self, task: Task) -> None: ...
