from __future__ import annotations

from typing import Optional

from aiogram import F, Router
from aiogram.filters import Command, CommandObject
from aiogram.types import Message

from taskpilot.config import Settings
from taskpilot.domain.common.errors import InvalidOverrideError
from taskpilot.domain.tasks.ports import Clock
from taskpilot.domain.tasks.service import TaskService
from taskpilot.ui.telegram.keyboards.mainmenu import BTN_MATRIX, BTN_PLAN, main_menu_kb
from taskpilot.ui.telegram.texts.render import render_matrix, render_plan
from taskpilot.ui.telegram.utils.commands import parse_plan_args

router = Router()


async def _send_plan(message: Message, args: Optional[str], task_service: TaskService, clock: Clock, settings: Settings):
    try:
        budget = parse_plan_args(args, settings.default_focus_minutes)
    except InvalidOverrideError as e:
        await message.answer(f"{e}\nUsage: /plan [minutes] [low|medium|high]")
        return
    tasks = await task_service.daily_plan(budget)
    await message.answer(render_plan(tasks, budget, clock.now()), reply_markup=main_menu_kb())


@router.message(Command("plan"))
async def plan_cmd(message: Message, command: CommandObject, task_service: TaskService, clock: Clock, settings: Settings):
    await _send_plan(message, command.args, task_service, clock, settings)


@router.message(F.text == BTN_PLAN)
async def mm_plan(message: Message, task_service: TaskService, clock: Clock, settings: Settings):
    await _send_plan(message, None, task_service, clock, settings)


@router.message(Command("matrix"))
@router.message(F.text == BTN_MATRIX)
async def matrix_cmd(message: Message, task_service: TaskService):
    await message.answer(render_matrix(await task_service.quadrants()), reply_markup=main_menu_kb())
