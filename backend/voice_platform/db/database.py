"""Async SQLite store for users, audio records and voice models.

Schema::

    users          (id, username UNIQUE, created_at)
    audio_records  (id, user_id -> users.id, filename, text_content,
                    type IN ('tts', 'stt', 'clone'), created_at)
    voice_models   (id, user_id -> users.id, model_id, model_name,
                    status IN ('training', 'ready', 'failed'), created_at)

Every route defaults to ``user_id = 1`` so ``initialize()`` seeds a
``default`` user with that id.
"""

from __future__ import annotations

import logging
from typing import Any

import aiosqlite

from voice_platform.config import settings
from voice_platform.models.records import (
    AudioRecord,
    ModelStatus,
    RecordType,
    User,
    VoiceModel,
)

logger = logging.getLogger(__name__)

DEFAULT_USER_ID = 1
DEFAULT_USERNAME = "default"

SCHEMA = """
CREATE TABLE IF NOT EXISTS users (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    username TEXT UNIQUE NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS audio_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    filename TEXT NOT NULL,
    text_content TEXT,
    type TEXT CHECK(type IN ('tts', 'stt', 'clone')) NOT NULL,
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users (id)
);

CREATE TABLE IF NOT EXISTS voice_models (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id INTEGER NOT NULL,
    model_id TEXT NOT NULL,
    model_name TEXT NOT NULL,
    status TEXT CHECK(status IN ('training', 'ready', 'failed')) DEFAULT 'training',
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    FOREIGN KEY (user_id) REFERENCES users (id)
);
"""


class DatabaseError(RuntimeError):
    """A store operation failed; the message names the operation."""


class Database:
    """Async wrapper around a single aiosqlite connection.

    Lifecycle:
        db = Database()
        await db.initialize()   # call once at startup
        ...
        await db.close()        # call once at shutdown
    """

    def __init__(self, path: str | None = None) -> None:
        self._path = path or settings.database_url
        self._conn: aiosqlite.Connection | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Open the connection, create tables and seed the default user."""
        if self._conn is not None:
            logger.warning("Database already initialized - skipping")
            return

        logger.info("Opening SQLite database at %s", self._path)
        try:
            conn = await aiosqlite.connect(self._path)
        except aiosqlite.Error as exc:
            logger.error("Database initialization failed: %s", exc)
            raise DatabaseError(f"Failed to initialize database: {exc}") from exc

        try:
            conn.row_factory = aiosqlite.Row
            await conn.execute("PRAGMA foreign_keys = ON")
            await conn.executescript(SCHEMA)
            await conn.execute(
                "INSERT OR IGNORE INTO users (id, username) VALUES (?, ?)",
                (DEFAULT_USER_ID, DEFAULT_USERNAME),
            )
            await conn.commit()
        except aiosqlite.Error as exc:
            await conn.close()
            logger.error("Database initialization failed: %s", exc)
            raise DatabaseError(f"Failed to initialize database: {exc}") from exc

        self._conn = conn
        logger.info("Database initialized")

    async def close(self) -> None:
        """Close the connection."""
        if self._conn is not None:
            await self._conn.close()
            self._conn = None
            logger.info("Database connection closed")

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database not initialized - call initialize() first")
        return self._conn

    @property
    def is_initialized(self) -> bool:
        return self._conn is not None

    async def ping(self) -> bool:
        """Return True when a trivial query succeeds."""
        try:
            async with self.conn.execute("SELECT 1") as cursor:
                row = await cursor.fetchone()
            return row is not None
        except (RuntimeError, aiosqlite.Error) as exc:
            logger.warning("Database ping failed: %s", exc)
            return False

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    async def create_user(self, username: str) -> User:
        try:
            cursor = await self.conn.execute(
                "INSERT INTO users (username) VALUES (?)", (username,)
            )
            await self.conn.commit()
            row = await self._fetch_one(
                "SELECT * FROM users WHERE id = ?", (cursor.lastrowid,)
            )
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to create user: {exc}") from exc
        return User(**row)

    async def get_user(self, user_id: int) -> User | None:
        try:
            row = await self._fetch_one("SELECT * FROM users WHERE id = ?", (user_id,))
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to get user: {exc}") from exc
        return User(**row) if row else None

    async def get_user_by_username(self, username: str) -> User | None:
        try:
            row = await self._fetch_one(
                "SELECT * FROM users WHERE username = ?", (username,)
            )
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to get user by username: {exc}") from exc
        return User(**row) if row else None

    # ------------------------------------------------------------------
    # Audio records
    # ------------------------------------------------------------------

    async def create_audio_record(
        self,
        user_id: int,
        filename: str,
        text_content: str | None,
        type: RecordType | str,
    ) -> AudioRecord:
        try:
            cursor = await self.conn.execute(
                "INSERT INTO audio_records (user_id, filename, text_content, type) "
                "VALUES (?, ?, ?, ?)",
                (user_id, filename, text_content, RecordType(type).value),
            )
            await self.conn.commit()
            row = await self._fetch_one(
                "SELECT * FROM audio_records WHERE id = ?", (cursor.lastrowid,)
            )
        except (aiosqlite.Error, ValueError) as exc:
            raise DatabaseError(f"Failed to create audio record: {exc}") from exc
        logger.debug("Audio record saved: %s", filename)
        return AudioRecord(**row)

    async def get_audio_records(
        self, user_id: int, type: RecordType | str | None = None
    ) -> list[AudioRecord]:
        """Return a user's records, newest first, optionally of one type."""
        query = "SELECT * FROM audio_records WHERE user_id = ?"
        params: list[Any] = [user_id]

        try:
            if type:
                query += " AND type = ?"
                params.append(RecordType(type).value)
            query += " ORDER BY created_at DESC, id DESC"
            rows = await self.conn.execute_fetchall(query, params)
        except (aiosqlite.Error, ValueError) as exc:
            raise DatabaseError(f"Failed to get audio records: {exc}") from exc
        return [AudioRecord(**dict(row)) for row in rows]

    # ------------------------------------------------------------------
    # Voice models
    # ------------------------------------------------------------------

    async def create_voice_model(
        self,
        user_id: int,
        model_id: str,
        model_name: str,
        status: ModelStatus | str = ModelStatus.TRAINING,
    ) -> VoiceModel:
        try:
            cursor = await self.conn.execute(
                "INSERT INTO voice_models (user_id, model_id, model_name, status) "
                "VALUES (?, ?, ?, ?)",
                (user_id, model_id, model_name, ModelStatus(status).value),
            )
            await self.conn.commit()
            row = await self._fetch_one(
                "SELECT * FROM voice_models WHERE id = ?", (cursor.lastrowid,)
            )
        except (aiosqlite.Error, ValueError) as exc:
            raise DatabaseError(f"Failed to create voice model: {exc}") from exc
        return VoiceModel(**row)

    async def get_voice_models(self, user_id: int) -> list[VoiceModel]:
        """Return a user's voice models, newest first."""
        try:
            rows = await self.conn.execute_fetchall(
                "SELECT * FROM voice_models WHERE user_id = ? "
                "ORDER BY created_at DESC, id DESC",
                (user_id,),
            )
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to get voice models: {exc}") from exc
        return [VoiceModel(**dict(row)) for row in rows]

    async def get_voice_model(
        self,
        user_id: int,
        id: int | None = None,
        model_id: str | None = None,
    ) -> VoiceModel | None:
        """Find one of a user's models by database id or remote model id."""
        if id:
            query, params = (
                "SELECT * FROM voice_models WHERE user_id = ? AND id = ?",
                (user_id, id),
            )
        elif model_id:
            query, params = (
                "SELECT * FROM voice_models WHERE user_id = ? AND model_id = ? "
                "ORDER BY id DESC",
                (user_id, model_id),
            )
        else:
            return None

        try:
            row = await self._fetch_one(query, params)
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to get voice model: {exc}") from exc
        return VoiceModel(**row) if row else None

    async def update_voice_model_status(
        self, id: int, status: ModelStatus | str
    ) -> None:
        try:
            await self.conn.execute(
                "UPDATE voice_models SET status = ? WHERE id = ?",
                (ModelStatus(status).value, id),
            )
            await self.conn.commit()
        except (aiosqlite.Error, ValueError) as exc:
            raise DatabaseError(
                f"Failed to update voice model status: {exc}"
            ) from exc

    async def delete_voice_model(self, id: int) -> None:
        try:
            await self.conn.execute("DELETE FROM voice_models WHERE id = ?", (id,))
            await self.conn.commit()
        except aiosqlite.Error as exc:
            raise DatabaseError(f"Failed to delete voice model: {exc}") from exc

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _fetch_one(
        self, query: str, params: tuple[Any, ...]
    ) -> dict[str, Any] | None:
        async with self.conn.execute(query, params) as cursor:
            row = await cursor.fetchone()
        return dict(row) if row else None
