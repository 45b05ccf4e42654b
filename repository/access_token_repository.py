# repository/access_token_repository.py
import time
from typing import Final, Optional
from config.database import Database
from model.access_token import AccessToken
from repository.namespaces import ACCESS_TOKENS
from util.enums import TokenStatus

TABLE: Final[str] = ACCESS_TOKENS


class AccessTokenRepository:
    """
    Token ledger rows: (token, email, status, created_at epoch seconds).

    - insert() always starts a row as ACTIVE.
    - mark_used() only flips ACTIVE rows, so two racing consumers cannot both win.
    - delete_older_than() ignores status; the sweep is idempotent.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def insert(
        self, token: str, email: str, *, created_at: Optional[float] = None
    ) -> AccessToken:
        ts = time.time() if created_at is None else created_at
        await self._db.execute(
            f"INSERT INTO {TABLE} (token, email, status, created_at) VALUES (?, ?, ?, ?)",
            (token, email, TokenStatus.ACTIVE.value, ts),
        )
        return AccessToken(token=token, email=email, status=TokenStatus.ACTIVE, created_at=ts)

    async def get(self, token: str) -> Optional[AccessToken]:
        if not token:
            return None
        row = await self._db.fetch_one(
            f"SELECT token, email, status, created_at FROM {TABLE} WHERE token = ? LIMIT 1",
            (token,),
        )
        return AccessToken.model_validate(row) if row else None

    async def mark_used(self, token: str) -> bool:
        cur = await self._db.execute(
            f"UPDATE {TABLE} SET status = ? WHERE token = ? AND status = ?",
            (TokenStatus.USED.value, token, TokenStatus.ACTIVE.value),
        )
        return cur.rowcount == 1

    async def delete_older_than(self, cutoff: float) -> int:
        cur = await self._db.execute(
            f"DELETE FROM {TABLE} WHERE created_at < ?", (cutoff,)
        )
        return int(cur.rowcount or 0)
