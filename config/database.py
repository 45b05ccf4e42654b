# config/database.py
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Sequence
import aiosqlite

logger = logging.getLogger(__name__)

_NOW = "(strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))"

SCHEMA = f"""
CREATE TABLE IF NOT EXISTS intercepted_data (
  id TEXT PRIMARY KEY,
  source TEXT NOT NULL DEFAULT 'BBC' CHECK (source IN ('BBC', 'IPSO')),
  originUrl TEXT,
  title TEXT,
  description TEXT,
  emailaddress TEXT,
  firstname TEXT,
  lastname TEXT,
  salutation TEXT,
  generalissue1 TEXT,
  intro_text TEXT,
  iswelsh TEXT,
  liveorondemand TEXT,
  localradio TEXT,
  make TEXT,
  moderation_text TEXT,
  network TEXT,
  outside_the_uk TEXT,
  platform TEXT,
  programme TEXT,
  programmeid TEXT,
  reception_text TEXT,
  redbuttonfault TEXT,
  region TEXT,
  responserequired TEXT,
  servicetv TEXT,
  sounds_text TEXT,
  sourceurl TEXT,
  subject TEXT,
  transmissiondate TEXT,
  transmissiontime TEXT,
  under18 TEXT,
  verifyform TEXT,
  complaint_nature TEXT,
  complaint_nature_sounds TEXT,
  ipso_terms INTEGER,
  timestamp TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS ipso_complaint_fields (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  complaint_id TEXT NOT NULL REFERENCES intercepted_data(id) ON DELETE CASCADE,
  field_order INTEGER NOT NULL,
  field_value TEXT
);

CREATE TABLE IF NOT EXISTS ipso_code_breaches (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  complaint_id TEXT NOT NULL REFERENCES intercepted_data(id) ON DELETE CASCADE,
  clause TEXT,
  details TEXT
);

CREATE TABLE IF NOT EXISTS replies (
  id INTEGER PRIMARY KEY AUTOINCREMENT,
  bbc_ref_number TEXT,
  intercept_id TEXT NOT NULL REFERENCES intercepted_data(id) ON DELETE CASCADE,
  bbc_reply TEXT,
  timestamp TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS problematic_article (
  URL TEXT PRIMARY KEY,
  title TEXT,
  timestamp TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS uploaded_files (
  id TEXT PRIMARY KEY,
  complaint_id TEXT NOT NULL REFERENCES intercepted_data(id) ON DELETE CASCADE,
  original_name TEXT,
  stored_name TEXT NOT NULL,
  content_type TEXT,
  size_bytes INTEGER NOT NULL,
  timestamp TEXT NOT NULL DEFAULT {_NOW}
);

CREATE TABLE IF NOT EXISTS access_tokens (
  token TEXT PRIMARY KEY,
  email TEXT NOT NULL,
  status TEXT NOT NULL DEFAULT 'active' CHECK (status IN ('active', 'used')),
  created_at REAL NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_access_tokens_created ON access_tokens(created_at);
"""


class Database:
    """
    Single aiosqlite connection shared by the record repositories.

    Flow:
    - connect() opens the file, enables foreign keys and creates the schema.
    - execute() runs one write statement and commits it.
    - transaction() groups several writes; commit on exit, rollback on error.
    One lock serializes every statement, so reads never see the uncommitted
    rows of an open transaction.
    """

    def __init__(self, path: str) -> None:
        self._path = path
        self._conn: Optional[aiosqlite.Connection] = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        if self._conn is not None:
            return
        parent = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(parent, exist_ok=True)
        self._conn = await aiosqlite.connect(self._path)
        self._conn.row_factory = aiosqlite.Row
        await self._conn.execute("PRAGMA foreign_keys=ON;")
        await self._conn.execute("PRAGMA journal_mode=WAL;")
        await self._conn.executescript(SCHEMA)
        await self._conn.commit()
        logger.info("db.connected path=%s", self._path)

    async def close(self) -> None:
        if self._conn is not None:
            await self._conn.close()
            self._conn = None

    @property
    def conn(self) -> aiosqlite.Connection:
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    async def fetch_one(
        self, sql: str, params: Sequence[Any] = ()
    ) -> Optional[Dict[str, Any]]:
        async with self._lock:
            async with self.conn.execute(sql, params) as cur:
                row = await cur.fetchone()
        return dict(row) if row is not None else None

    async def fetch_all(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        async with self._lock:
            async with self.conn.execute(sql, params) as cur:
                rows = await cur.fetchall()
        return [dict(r) for r in rows]

    async def execute(self, sql: str, params: Sequence[Any] = ()) -> aiosqlite.Cursor:
        async with self._lock:
            try:
                cur = await self.conn.execute(sql, params)
                await self.conn.commit()
            except Exception:
                await self.conn.rollback()
                raise
        return cur

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        async with self._lock:
            try:
                yield self.conn
                await self.conn.commit()
            except BaseException:
                await self.conn.rollback()
                raise
