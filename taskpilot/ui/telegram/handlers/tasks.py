from __future__ import annotations

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject
from aiogram.types import CallbackQuery, Message

from taskpilot.domain.common.errors import EmptyInputError, NotFoundError
from taskpilot.domain.tasks.ports import Clock
from taskpilot.domain.tasks.service import TaskService
from taskpilot.ui.telegram.keyboards.mainmenu import BTN_TASKS, main_menu_kb
from taskpilot.ui.telegram.keyboards.tasks import PRIORITY_CODES, STATUS_CODES, task_card_kb, tasks_list_kb
from taskpilot.ui.telegram.texts.render import (
    render_by_priority,
    render_capture_confirmation,
    render_grouped,
    render_task_card,
)

logger = logging.getLogger(__name__)

router = Router()

CAPTURE_PROMPT = "Tell me what needs doing, e.g. <i>/add tomorrow 3pm call the dentist</i>"


async def _capture(message: Message, text: str, task_service: TaskService, clock: Clock) -> None:
    try:
        task = await task_service.capture(text)
    except EmptyInputError:
        await message.answer(CAPTURE_PROMPT)
        return
    await message.answer(render_capture_confirmation(task, clock.now()), reply_markup=task_card_kb(task))


async def _send_list(message: Message, task_service: TaskService) -> None:
    grouped = await task_service.grouped()
    open_tasks = [t for t in grouped.overdue + grouped.today + grouped.upcoming + grouped.unscheduled if t.is_open]
    await message.answer(render_grouped(grouped), reply_markup=main_menu_kb())
    if open_tasks:
        await message.answer("Open a task:", reply_markup=tasks_list_kb(open_tasks))


@router.message(Command("add"))
async def add_cmd(message: Message, command: CommandObject, task_service: TaskService, clock: Clock):
    await _capture(message, command.args or "", task_service, clock)


@router.message(Command("tasks"))
@router.message(F.text == BTN_TASKS)
async def tasks_cmd(message: Message, task_service: TaskService):
    await _send_list(message, task_service)


@router.message(Command("priority"))
async def priority_cmd(message: Message, task_service: TaskService):
    await message.answer(render_by_priority(await task_service.by_priority()), reply_markup=main_menu_kb())


@router.callback_query(F.data == "tk:list")
async def cb_list(cb: CallbackQuery, task_service: TaskService):
    await cb.answer()
    if cb.message:
        await _send_list(cb.message, task_service)


@router.callback_query(F.data.startswith("tk:"))
async def cb_task(cb: CallbackQuery, task_service: TaskService, clock: Clock):
    parts = (cb.data or "").split(":")
    if len(parts) < 3:
        await cb.answer()
        return
    action, task_id = parts[1], parts[2]
    value = parts[3] if len(parts) > 3 else ""

    try:
        if action == "open":
            task = await task_service.get(task_id)
        elif action == "st" and value in STATUS_CODES:
            task = await task_service.change_status(task_id, STATUS_CODES[value])
        elif action == "pr" and value in PRIORITY_CODES:
            task = await task_service.change_priority(task_id, PRIORITY_CODES[value])
        elif action == "sub" and value:
            task = await task_service.toggle_subtask(task_id, f"{task_id}-{value}")
        else:
            logger.warning("Unknown task callback: %s", cb.data)
            await cb.answer()
            return
    except NotFoundError:
        await cb.answer("This task no longer exists.", show_alert=True)
        return

    await cb.answer()
    if not cb.message:
        return
    text = render_task_card(task, clock.now())
    try:
        await cb.message.edit_text(text, reply_markup=task_card_kb(task))
    except TelegramBadRequest as e:
        if "message is not modified" in str(e).lower():
            return
        await cb.message.answer(text, reply_markup=task_card_kb(task))


# plain text capture must stay the last handler of the last router
@router.message(F.text & ~F.text.startswith("/"))
async def capture_text(message: Message, task_service: TaskService, clock: Clock):
    await _capture(message, message.text, task_service, clock)
