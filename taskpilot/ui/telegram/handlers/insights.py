from __future__ import annotations

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.types import Message

from taskpilot.domain.tasks.service import TaskService
from taskpilot.ui.telegram.keyboards.mainmenu import BTN_INSIGHTS, main_menu_kb
from taskpilot.ui.telegram.texts.render import render_reminders, render_summary, render_tip

router = Router()


@router.message(Command("insights"))
@router.message(F.text == BTN_INSIGHTS)
async def insights_cmd(message: Message, task_service: TaskService):
    summary = await task_service.weekly_summary()
    await message.answer(render_summary(summary), reply_markup=main_menu_kb())

    reminders = await task_service.active_reminders()
    if reminders:
        await message.answer(render_reminders(reminders))


@router.message(Command("reminders"))
async def reminders_cmd(message: Message, task_service: TaskService):
    await message.answer(render_reminders(await task_service.active_reminders()))


@router.message(Command("tip"))
async def tip_cmd(message: Message):
    await message.answer(render_tip())
