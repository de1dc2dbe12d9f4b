from __future__ import annotations

import json
from typing import Optional, Sequence

from taskpilot.domain.common.time import from_iso, from_iso_optional, to_iso, utc_now
from taskpilot.domain.tasks.ports import TaskRepository
from taskpilot.infra.db.connection import Database
from taskpilot.models import Subtask, Task


class TasksSqliteRepo(TaskRepository):
    """
    Tasks table. New tasks go to the front of the collection (lowest
    position). The matrix quadrant is not stored; callers reclassify on load.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def list_all(self) -> Sequence[Task]:
        rows = await self._db.fetchall("SELECT * FROM tasks ORDER BY position ASC, created_at DESC;")
        return [self._row_to_task(r) for r in rows]

    async def get(self, task_id: str) -> Optional[Task]:
        row = await self._db.fetchone("SELECT * FROM tasks WHERE task_id = ?;", (task_id,))
        return self._row_to_task(row) if row else None

    async def add(self, task: Task) -> None:
        row = await self._db.fetchone("SELECT MIN(position) AS first FROM tasks;")
        first = row["first"] if row and row["first"] is not None else 0
        await self._db.execute(
            """
            INSERT INTO tasks(
              task_id, position, name, priority, category, status,
              due_at, estimated_minutes, subtasks_json, notes,
              created_at, completed_at, updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?);
            """,
            (
                task.id,
                first - 1,
                task.name,
                task.priority,
                task.category,
                task.status,
                to_iso(task.due_date) if task.due_date else None,
                task.estimated_minutes,
                self._subtasks_json(task),
                task.notes,
                to_iso(task.created_at),
                to_iso(task.completed_at) if task.completed_at else None,
                to_iso(utc_now()),
            ),
        )

    async def save(self, task: Task) -> None:
        await self._db.execute(
            """
            UPDATE tasks
            SET name = ?, priority = ?, category = ?, status = ?,
                due_at = ?, estimated_minutes = ?, subtasks_json = ?, notes = ?,
                completed_at = ?, updated_at = ?
            WHERE task_id = ?;
            """,
            (
                task.name,
                task.priority,
                task.category,
                task.status,
                to_iso(task.due_date) if task.due_date else None,
                task.estimated_minutes,
                self._subtasks_json(task),
                task.notes,
                to_iso(task.completed_at) if task.completed_at else None,
                to_iso(utc_now()),
                task.id,
            ),
        )

    @staticmethod
    def _subtasks_json(task: Task) -> str:
        return json.dumps(
            [{"id": s.id, "title": s.title, "completed": s.completed} for s in task.subtasks],
            ensure_ascii=False,
        )

    @staticmethod
    def _row_to_task(row) -> Task:
        subtasks = tuple(
            Subtask(id=item["id"], title=item["title"], completed=bool(item.get("completed", False)))
            for item in json.loads(row["subtasks_json"] or "[]")
        )
        return Task(
            id=row["task_id"],
            name=row["name"],
            created_at=from_iso(row["created_at"]),
            priority=row["priority"],
            category=row["category"],
            status=row["status"],
            due_date=from_iso_optional(row["due_at"]),
            estimated_minutes=row["estimated_minutes"],
            subtasks=subtasks,
            notes=row["notes"],
            completed_at=from_iso_optional(row["completed_at"]),
        )
