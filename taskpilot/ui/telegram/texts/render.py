"""
Message texts for the Telegram front-end (HTML parse mode).

Pure functions over core results so they can be tested without a bot.
"""
from __future__ import annotations

import random
from datetime import datetime
from html import escape
from typing import Iterable, Mapping, Optional, Sequence

from taskpilot.constants import (
    PRIORITIES,
    PRIORITY_CRITICAL,
    PRIORITY_HIGH,
    PRIORITY_LOW,
    PRIORITY_MEDIUM,
    QUADRANTS,
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)
from taskpilot.models import GroupedTasks, PlanBudget, Task, WeeklySummary
from taskpilot.planner import planned_minutes
from taskpilot.utils import format_minutes, humanize_delta

PRIORITY_EMOJI = {
    PRIORITY_CRITICAL: "🚨",
    PRIORITY_HIGH: "🔥",
    PRIORITY_MEDIUM: "⚡",
    PRIORITY_LOW: "💤",
}

STATUS_EMOJI = {
    STATUS_PENDING: "⬜️",
    STATUS_IN_PROGRESS: "▶️",
    STATUS_COMPLETED: "✅",
}

COACHING_PROMPTS = (
    "Which task, if completed today, would unlock the most progress?",
    "Is there a commitment you can delegate or decline to protect focus?",
    "What would make your tomorrow feel lighter?",
    "Which habit will give you energy for the week ahead?",
    "Is there a high-priority task missing a clear next step?",
)

PRODUCTIVITY_TIPS = (
    "Batch similar tasks into themed blocks to reduce context switching.",
    "Use the 1-3-5 planning method: 1 big, 3 medium, 5 small wins per day.",
    "Schedule inbox time instead of living inside it.",
    "Close your day with a 5-minute review and reset ritual.",
    "Protect your first 90 minutes for deep work when possible.",
)

HELP_TEXT = (
    "<b>Taskpilot</b>\n"
    "Send any line of text to capture a task, e.g.\n"
    "<i>Tomorrow by 3pm finalize presentation deck urgent 45 min</i>\n\n"
    "/tasks – due-date overview\n"
    "/priority – open tasks by priority\n"
    "/matrix – Eisenhower matrix\n"
    "/plan [minutes] [low|medium|high] – daily plan\n"
    "/insights – weekly snapshot\n"
    "/reminders – overdue and due soon\n"
    "/tip – focus question and productivity cue"
)


def _due_text(due: datetime, now: datetime) -> str:
    stamp = due.astimezone(now.tzinfo).strftime("%a %d %b %H:%M") if now.tzinfo else due.strftime("%a %d %b %H:%M")
    if due < now:
        return f"{stamp} ({humanize_delta(now - due)} ago)"
    return f"{stamp} (in {humanize_delta(due - now)})"


def task_line(task: Task) -> str:
    line = f"{STATUS_EMOJI.get(task.status, '•')} {PRIORITY_EMOJI.get(task.priority, '')} {escape(task.name)}"
    if task.estimated_minutes:
        line += f" · ~{format_minutes(task.estimated_minutes)}"
    return line


def render_task_card(task: Task, now: datetime) -> str:
    lines = [
        f"<b>{escape(task.name)}</b>",
        f"{PRIORITY_EMOJI.get(task.priority, '')} {task.priority} · {escape(task.category)} · {escape(task.matrix_quadrant)}",
        f"Status: {task.status}",
    ]
    if task.due_date:
        marker = "⏰" if task.due_date >= now or task.is_completed else "⚠️"
        lines.append(f"{marker} Due {_due_text(task.due_date, now)}")
    if task.estimated_minutes:
        lines.append(f"🕒 ~{format_minutes(task.estimated_minutes)}")
    if task.notes:
        lines.append(f"📝 {escape(task.notes)}")
    if task.subtasks:
        lines.append("")
        for sub in task.subtasks:
            lines.append(f"{'✅' if sub.completed else '⬜️'} {escape(sub.title)}")
    return "\n".join(lines)


def render_capture_confirmation(task: Task, now: datetime) -> str:
    return "Task added.\n\n" + render_task_card(task, now)


def render_grouped(grouped: GroupedTasks) -> str:
    sections = (
        ("⚠️ Overdue", grouped.overdue),
        ("📅 Today", grouped.today),
        ("🔜 Upcoming", grouped.upcoming),
        ("🗂 Unscheduled", grouped.unscheduled),
    )
    counts = grouped.counts()
    lines = [
        "<b>📋 To-do overview</b>",
        "Today {today} · Upcoming {upcoming} · Overdue {overdue} · Unscheduled {unscheduled}".format(**counts),
    ]
    if not any(counts.values()):
        lines.append("")
        lines.append("Nothing captured yet. Send a line of text to add a task.")
        return "\n".join(lines)
    for title, tasks in sections:
        if not tasks:
            continue
        lines.append("")
        lines.append(f"<b>{title}</b>")
        lines.extend(task_line(t) for t in tasks)
    return "\n".join(lines)


def render_by_priority(sections: Mapping[str, Sequence[Task]]) -> str:
    lines = ["<b>By priority</b>"]
    for priority in PRIORITIES:
        tasks = [t for t in sections.get(priority, ()) if t.is_open]
        if not tasks:
            continue
        lines.append("")
        lines.append(f"<b>{PRIORITY_EMOJI[priority]} {priority}</b>")
        lines.extend(task_line(t) for t in tasks)
    if len(lines) == 1:
        lines.append("No open tasks.")
    return "\n".join(lines)


def render_matrix(matrix: Mapping[str, Sequence[Task]]) -> str:
    lines = ["<b>🧭 Eisenhower matrix</b>"]
    for quadrant in QUADRANTS:
        tasks = [t for t in matrix.get(quadrant, ()) if t.is_open]
        lines.append("")
        lines.append(f"<b>{escape(quadrant)}</b>")
        if tasks:
            lines.extend(f"• {escape(t.name)}" for t in tasks)
        else:
            lines.append("No tasks here. Maintain momentum.")
    return "\n".join(lines)


def render_plan(tasks: Sequence[Task], budget: PlanBudget, now: datetime) -> str:
    header = f"<b>🗓 Daily plan</b> · {format_minutes(budget.available_minutes)} focus · {budget.energy_level} energy"
    if not tasks:
        return header + "\n\nAll clear. No tasks align with the focus criteria for today."
    lines = [header, f"Planned: {format_minutes(planned_minutes(tasks))}", ""]
    for index, task in enumerate(tasks, start=1):
        line = f"<b>Block {index}</b> · {escape(task.name)} · {task.priority}"
        if task.estimated_minutes:
            line += f" · ~{format_minutes(task.estimated_minutes)}"
        if task.due_date:
            line += f" · due {_due_text(task.due_date, now)}"
        lines.append(line)
    return "\n".join(lines)


def render_summary(summary: WeeklySummary) -> str:
    lines = [
        "<b>📈 Weekly snapshot</b>",
        f"Week starting {summary.week_start.strftime('%a %d %b')}",
        f"Tasks completed: {summary.tasks_completed}",
        f"New tasks: {summary.tasks_created}",
        f"Completion rate: {summary.completion_rate}%",
        "",
        "<b>Bottlenecks</b>",
    ]
    if summary.bottlenecks:
        lines.extend(f"• {escape(item)}" for item in summary.bottlenecks)
    else:
        lines.append("System running smoothly.")
    lines.append("")
    lines.append("<b>Recommendations</b>")
    lines.extend(f"• {escape(item)}" for item in summary.recommendations)
    return "\n".join(lines)


def render_reminders(reminders: Iterable[str]) -> str:
    items = list(reminders)
    if not items:
        return "🔔 All deadlines under control."
    return "<b>🔔 Active reminders</b>\n" + "\n".join(f"• {escape(r)}" for r in items)


def render_tip(rng: Optional[random.Random] = None) -> str:
    rng = rng or random
    question = rng.choice(COACHING_PROMPTS)
    tip = rng.choice(PRODUCTIVITY_TIPS)
    return f"<b>Focus question</b>\n{question}\n\n<b>Productivity cue</b>\n{tip}"
