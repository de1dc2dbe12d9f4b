from dataclasses import dataclass
import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from taskpilot.constants import DEFAULT_FOCUS_MINUTES


@dataclass(frozen=True)
class Settings:
    bot_token: str
    timezone: str
    db_path: Path
    default_focus_minutes: int
    log_level: str


def load_settings(require_bot_token: bool = True, env_file: Optional[str] = None) -> Settings:
    load_dotenv(env_file)

    bot_token = os.getenv("BOT_TOKEN", "").strip()
    tz = os.getenv("TZ", "Europe/Helsinki").strip()
    db_raw = os.getenv("DB_PATH", "data/taskpilot.db").strip()
    focus_raw = os.getenv("DEFAULT_FOCUS_MINUTES", str(DEFAULT_FOCUS_MINUTES)).strip()
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()

    if require_bot_token and not bot_token:
        raise RuntimeError("BOT_TOKEN missing in .env")
    try:
        focus_minutes = int(focus_raw)
    except ValueError:
        raise RuntimeError(f"DEFAULT_FOCUS_MINUTES must be an integer, got {focus_raw!r}") from None
    if focus_minutes <= 0:
        raise RuntimeError("DEFAULT_FOCUS_MINUTES must be positive")

    # db_path may be relative; the entry point anchors it to the repo root
    return Settings(
        bot_token=bot_token,
        timezone=tz,
        db_path=Path(db_raw),
        default_focus_minutes=focus_minutes,
        log_level=log_level,
    )
