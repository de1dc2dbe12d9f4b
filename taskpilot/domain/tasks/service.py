from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from taskpilot import grouping, insights, matrix, planner
from taskpilot.domain.common.errors import NotFoundError
from taskpilot.domain.tasks.ports import Clock, IdGenerator, TaskRepository
from taskpilot.hydrator import hydrate
from taskpilot.models import GroupedTasks, PlanBudget, Task, TaskOverrides, WeeklySummary
from taskpilot.parser import parse

logger = logging.getLogger(__name__)


class TaskService:
    """
    Task capture and read models. No aiogram here.

    Every read loads one snapshot of the collection and recomputes the
    matrix quadrants against the clock before handing tasks to the core.
    """

    def __init__(self, repo: TaskRepository, clock: Clock, ids: IdGenerator) -> None:
        self._repo = repo
        self._clock = clock
        self._ids = ids

    @property
    def clock(self) -> Clock:
        return self._clock

    async def capture(self, text: str, overrides: Optional[TaskOverrides] = None) -> Task:
        """Parse + hydrate + store. Raises EmptyInputError for blank text."""
        now = self._clock.now()
        draft = parse(text, now=now)
        task = hydrate(draft, overrides, now=now, ids=self._ids)
        await self._repo.add(task)
        logger.info("Captured task %s (%s, %s)", task.id, task.priority, task.matrix_quadrant)
        return task

    async def list_tasks(self) -> list[Task]:
        return matrix.refresh(await self._repo.list_all(), self._clock.now())

    async def get(self, task_id: str) -> Task:
        task = await self._repo.get(task_id)
        if task is None:
            raise NotFoundError(f"Task {task_id} not found.")
        return matrix.classify_task(task, self._clock.now())

    async def _apply(self, task_id: str, **changes: Any) -> Task:
        task = await self.get(task_id)
        updated = matrix.update_task(task, self._clock.now(), **changes)
        await self._repo.save(updated)
        logger.info("Updated task %s: %s", task_id, ", ".join(sorted(changes)))
        return updated

    async def change_status(self, task_id: str, status: str) -> Task:
        return await self._apply(task_id, status=status)

    async def change_priority(self, task_id: str, priority: str) -> Task:
        return await self._apply(task_id, priority=priority)

    async def change_due_date(self, task_id: str, due_date: Optional[datetime]) -> Task:
        return await self._apply(task_id, due_date=due_date)

    async def toggle_subtask(self, task_id: str, subtask_id: str) -> Task:
        task = await self.get(task_id)
        updated = matrix.toggle_subtask(task, subtask_id, self._clock.now())
        await self._repo.save(updated)
        return updated

    async def grouped(self) -> GroupedTasks:
        return grouping.group(await self.list_tasks(), self._clock.now())

    async def quadrants(self) -> dict[str, list[Task]]:
        return grouping.by_quadrant(await self.list_tasks())

    async def by_priority(self) -> dict[str, list[Task]]:
        return grouping.by_priority(await self.list_tasks())

    async def daily_plan(self, budget: Union[PlanBudget, Mapping[str, Any]]) -> list[Task]:
        return planner.plan(await self.list_tasks(), budget, now=self._clock.now())

    async def weekly_summary(self) -> WeeklySummary:
        return insights.summarize(await self.list_tasks(), self._clock.now())

    async def active_reminders(self) -> list[str]:
        return insights.reminders(await self.list_tasks(), self._clock.now())
