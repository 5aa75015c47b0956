"""SQLite database connection manager for Kali."""

from pathlib import Path
from typing import Optional

import aiosqlite


class Database:
    """Async SQLite database connection manager."""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self._connection: Optional[aiosqlite.Connection] = None

    async def connect(self) -> None:
        """Establish database connection and initialize schema."""
        # Ensure data directory exists
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

        self._connection = await aiosqlite.connect(self.db_path)
        self._connection.row_factory = aiosqlite.Row
        await self._connection.execute("PRAGMA foreign_keys = ON")
        await self._init_schema()

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None

    @property
    def connection(self) -> aiosqlite.Connection:
        """Get the database connection."""
        if not self._connection:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._connection

    async def _init_schema(self) -> None:
        """Initialize database schema."""
        schema = """
        -- One cumulative progress record per user
        CREATE TABLE IF NOT EXISTS user_progress (
            user_id TEXT PRIMARY KEY,
            current_lesson_id TEXT,
            xp INTEGER NOT NULL DEFAULT 0,
            streak INTEGER NOT NULL DEFAULT 0,
            last_activity_date TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- Completed lessons, position keeps first-seen order
        CREATE TABLE IF NOT EXISTS completed_lessons (
            user_id TEXT NOT NULL,
            lesson_id TEXT NOT NULL,
            position INTEGER NOT NULL,
            PRIMARY KEY (user_id, lesson_id),
            FOREIGN KEY (user_id) REFERENCES user_progress(user_id)
        );

        -- Latest attempt summary per lesson
        CREATE TABLE IF NOT EXISTS lesson_progress (
            user_id TEXT NOT NULL,
            lesson_id TEXT NOT NULL,
            completed BOOLEAN NOT NULL DEFAULT 0,
            score REAL NOT NULL DEFAULT 0.0,
            attempts INTEGER NOT NULL DEFAULT 0,
            stars INTEGER NOT NULL DEFAULT 0,
            completed_at TIMESTAMP,
            PRIMARY KEY (user_id, lesson_id),
            FOREIGN KEY (user_id) REFERENCES user_progress(user_id)
        );

        -- Append-only log of finished attempts
        CREATE TABLE IF NOT EXISTS lesson_results (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id TEXT NOT NULL,
            lesson_id TEXT NOT NULL,
            total_questions INTEGER NOT NULL,
            correct_answers INTEGER NOT NULL,
            xp_earned INTEGER NOT NULL,
            stars INTEGER NOT NULL,
            score REAL NOT NULL,
            time_spent REAL NOT NULL DEFAULT 0.0,
            completed_at TIMESTAMP NOT NULL
        );

        -- Indexes for performance
        CREATE INDEX IF NOT EXISTS idx_lesson_results_user ON lesson_results(user_id);
        CREATE INDEX IF NOT EXISTS idx_lesson_results_lesson ON lesson_results(lesson_id);
        """

        await self._connection.executescript(schema)
        await self._connection.commit()
