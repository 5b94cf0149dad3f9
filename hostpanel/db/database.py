from __future__ import annotations

from datetime import datetime
from pathlib import Path

import aiosqlite

from hostpanel.config import settings
from hostpanel.models import UserRecord

_SCHEMA_PATH = Path(__file__).with_name("schema.sql")


async def init_db() -> None:
    """Create tables if they don't exist."""
    Path(settings.db_path).parent.mkdir(parents=True, exist_ok=True)
    schema = _SCHEMA_PATH.read_text()
    async with aiosqlite.connect(settings.db_path) as db:
        await db.execute("PRAGMA journal_mode=WAL")
        await db.executescript(schema)
        await db.commit()


# ── users ───────────────────────────────────────────────

async def insert_user(user: UserRecord) -> None:
    async with aiosqlite.connect(settings.db_path) as db:
        await db.execute(
            "INSERT INTO users (username, password_hash, created_at) VALUES (?, ?, ?)",
            (user.username, user.password_hash, user.created_at.isoformat()),
        )
        await db.commit()


async def get_users() -> list[UserRecord]:
    async with aiosqlite.connect(settings.db_path) as db:
        db.row_factory = aiosqlite.Row
        cursor = await db.execute("SELECT * FROM users ORDER BY username")
        rows = await cursor.fetchall()
        return [_row_to_user(r) for r in rows]


async def count_users() -> int:
    async with aiosqlite.connect(settings.db_path) as db:
        cursor = await db.execute("SELECT COUNT(*) FROM users")
        row = await cursor.fetchone()
        return row[0] if row else 0


# ── helpers ─────────────────────────────────────────────

def _row_to_user(row: aiosqlite.Row) -> UserRecord:
    return UserRecord(
        username=row["username"],
        password_hash=row["password_hash"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )
