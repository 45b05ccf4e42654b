# repository/reply_repository.py
from typing import Any, Dict, List, Optional
from config.database import Database
from repository.namespaces import REPLIES


class ReplyRepository:
    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(
        self, *, bbc_ref_number: Optional[str], intercept_id: str, bbc_reply: str
    ) -> int:
        cur = await self._db.execute(
            f"INSERT INTO {REPLIES} (bbc_ref_number, intercept_id, bbc_reply) VALUES (?, ?, ?)",
            (bbc_ref_number, intercept_id, bbc_reply),
        )
        return int(cur.lastrowid)

    async def for_intercept(self, intercept_id: str) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            f"SELECT id, bbc_ref_number, intercept_id, bbc_reply, timestamp FROM {REPLIES} "
            "WHERE intercept_id = ? ORDER BY timestamp ASC, id ASC",
            (intercept_id,),
        )
