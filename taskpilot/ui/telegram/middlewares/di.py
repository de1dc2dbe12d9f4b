from __future__ import annotations

from typing import Any, Awaitable, Callable, Dict

from aiogram import BaseMiddleware
from aiogram.types import TelegramObject

from taskpilot.config import Settings
from taskpilot.domain.tasks.ports import Clock
from taskpilot.domain.tasks.service import TaskService


class DIMiddleware(BaseMiddleware):
    """
    Inject dependencies to handlers via `data` dict.

    Handlers can request args by name, e.g.
      async def handler(message: Message, task_service: TaskService, clock: Clock, settings: Settings): ...
    """

    def __init__(self, task_service: TaskService, settings: Settings) -> None:
        self._tasks = task_service
        self._settings = settings

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        # keep names stable across the project
        data["task_service"] = self._tasks
        data["clock"] = self._tasks.clock
        data["settings"] = self._settings
        return await handler(event, data)
