from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import ExceptionTypeFilter
from aiogram.types import ErrorEvent

from taskpilot.config import load_settings
from taskpilot.domain.common.time import to_iso
from taskpilot.domain.tasks.service import TaskService
from taskpilot.infra.clock.system_clock import SystemClock
from taskpilot.infra.db.connection import Database
from taskpilot.infra.db.repo.tasks_sqlite import TasksSqliteRepo
from taskpilot.infra.db.schema_version import apply_migrations
from taskpilot.infra.ids.uuid_gen import UuidGenerator

from taskpilot.ui.telegram.middlewares.di import DIMiddleware
from taskpilot.ui.telegram.handlers.insights import router as insights_router
from taskpilot.ui.telegram.handlers.planning import router as planning_router
from taskpilot.ui.telegram.handlers.start import router as start_router
from taskpilot.ui.telegram.handlers.tasks import router as tasks_router

logger = logging.getLogger(__name__)


async def main() -> None:
    """
    Entry point for the Telegram bot.

    Only run ONE polling instance per token; a second one fails with
    TelegramConflictError ("terminated by other getUpdates request").
    """
    settings = load_settings()

    logging.basicConfig(
        level=settings.log_level,
        format='%(asctime)s - %(name)s - %(levelname)s - [PID:%(process)d] - %(message)s'
    )

    repo_root = Path(__file__).resolve().parents[3]  # .../taskpilot/ui/telegram/main.py -> repo root

    # --- DB path: one place, always absolute, ensure dir exists ---
    db_path = settings.db_path
    if not db_path.is_absolute():
        db_path = repo_root / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("DB_PATH: %s", db_path)

    db = Database(str(db_path))
    clock = SystemClock(settings.timezone)
    ids = UuidGenerator()
    logger.info("Timezone: %s", clock.tz_name)

    # --- migrations ---
    applied = await apply_migrations(db=db, now_iso=to_iso(clock.now()))
    if applied:
        logger.info("Migrations applied: %s", applied)

    # --- bot/dispatcher ---
    bot = Bot(
        token=settings.bot_token,
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
    )
    dp = Dispatcher()

    # --- services ---
    task_service = TaskService(repo=TasksSqliteRepo(db), clock=clock, ids=ids)

    # --- middlewares ---
    dp.message.middleware(DIMiddleware(task_service, settings))
    dp.callback_query.middleware(DIMiddleware(task_service, settings))

    # --- routers (tasks last: it owns the plain-text capture fallback) ---
    dp.include_router(start_router)
    dp.include_router(planning_router)
    dp.include_router(insights_router)
    dp.include_router(tasks_router)

    @dp.error(ExceptionTypeFilter(TelegramBadRequest))
    async def handle_old_callback_query(event: ErrorEvent) -> None:
        """Ignore TelegramBadRequest for old/invalid callback queries (e.g. after bot restart)."""
        msg = str(event.exception).lower()
        if "query is too old" in msg or "query id is invalid" in msg or "response timeout expired" in msg:
            logger.debug("Ignoring old/invalid callback query: %s", event.exception)
            return
        raise event.exception

    logger.info("Starting polling...")

    try:
        await dp.start_polling(bot)
    finally:
        await bot.session.close()
        logger.info("Bot shutdown complete")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
