from __future__ import annotations

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.types import Message

from taskpilot.ui.telegram.keyboards.mainmenu import main_menu_kb
from taskpilot.ui.telegram.texts.render import HELP_TEXT

router = Router()


@router.message(CommandStart())
async def start_cmd(message: Message):
    await message.answer(HELP_TEXT, reply_markup=main_menu_kb())


@router.message(Command("help"))
async def help_cmd(message: Message):
    await message.answer(HELP_TEXT, reply_markup=main_menu_kb())
