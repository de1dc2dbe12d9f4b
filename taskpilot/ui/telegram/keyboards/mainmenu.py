from __future__ import annotations

from aiogram.types import ReplyKeyboardMarkup
from aiogram.utils.keyboard import ReplyKeyboardBuilder

BTN_TASKS = "📋 Tasks"
BTN_MATRIX = "🧭 Matrix"
BTN_PLAN = "🗓 Plan"
BTN_INSIGHTS = "📈 Insights"


def main_menu_kb() -> ReplyKeyboardMarkup:
    kb = ReplyKeyboardBuilder()

    kb.button(text=BTN_TASKS)
    kb.button(text=BTN_MATRIX)
    kb.button(text=BTN_PLAN)
    kb.button(text=BTN_INSIGHTS)

    # 2x2 grid
    kb.adjust(2, 2)

    return kb.as_markup(
        resize_keyboard=True,
        one_time_keyboard=False,
        input_field_placeholder="Type a task, e.g. 'tomorrow 3pm call dentist'",
    )
