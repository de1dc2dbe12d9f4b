from __future__ import annotations

from typing import Iterable

from aiogram.types import InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder

from taskpilot.constants import PRIORITIES, STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_PENDING
from taskpilot.models import Task

# callback_data is limited to 64 bytes, so enum values travel as one-letter codes
STATUS_CODES = {"p": STATUS_PENDING, "i": STATUS_IN_PROGRESS, "c": STATUS_COMPLETED}
PRIORITY_CODES = {p[0].lower(): p for p in PRIORITIES}

LIST_LIMIT = 20


def tasks_list_kb(tasks: Iterable[Task]) -> InlineKeyboardMarkup:
    """One button per task, opening its card."""
    kb = InlineKeyboardBuilder()
    for task in list(tasks)[:LIST_LIMIT]:
        title = task.name if len(task.name) <= 40 else task.name[:39] + "…"
        kb.button(text=title, callback_data=f"tk:open:{task.id}")
    kb.adjust(1)
    return kb.as_markup()

def task_card_kb(task: Task) -> InlineKeyboardMarkup:
    kb = InlineKeyboardBuilder()
    rows: list[int] = []

    for sub in task.subtasks:
        n = sub.id.rsplit("-", 1)[-1]
        mark = "✅" if sub.completed else "⬜️"
        kb.button(text=f"{mark} {sub.title}"[:60], callback_data=f"tk:sub:{task.id}:{n}")
        rows.append(1)

    for code, status in STATUS_CODES.items():
        text = f"• {status}" if status == task.status else status
        kb.button(text=text, callback_data=f"tk:st:{task.id}:{code}")
    rows.append(len(STATUS_CODES))

    for code, priority in PRIORITY_CODES.items():
        text = f"• {priority}" if priority == task.priority else priority
        kb.button(text=text, callback_data=f"tk:pr:{task.id}:{code}")
    rows.append(len(PRIORITY_CODES))

    kb.button(text="⬅️ Back to list", callback_data="tk:list")
    rows.append(1)

    kb.adjust(*rows)
    return kb.as_markup()
