# taskpilot/infra/db/connection.py
from __future__ import annotations

import aiosqlite
from typing import Any, Optional, Sequence

class Database:
    """
    Async SQLite helper:
    - opens a new connection per operation
    - sets row_factory to aiosqlite.Row
    - enables WAL for scripts
    """

    def __init__(self, path: str) -> None:
        self._path = path

    async def executescript(self, sql: str) -> None:
        async with aiosqlite.connect(self._path) as db:
            db.row_factory = aiosqlite.Row
            await db.execute("PRAGMA journal_mode=WAL;")
            await db.executescript(sql)
            await db.commit()

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> None:
        async with aiosqlite.connect(self._path) as db:
            await db.execute(sql, params)
            await db.commit()

    async def fetchone(self, sql: str, params: Sequence[Any] = ()) -> Optional[aiosqlite.Row]:
        async with aiosqlite.connect(self._path) as db:
            db.row_factory = aiosqlite.Row
            cur = await db.execute(sql, params)
            return await cur.fetchone()

    async def fetchall(self, sql: str, params: Sequence[Any] = ()) -> list[aiosqlite.Row]:
        async with aiosqlite.connect(self._path) as db:
            db.row_factory = aiosqlite.Row
            cur = await db.execute(sql, params)
            return list(await cur.fetchall())
