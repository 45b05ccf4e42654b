# repository/file_repository.py
from typing import Any, Dict, List, Optional, Sequence
from config.database import Database
from repository.namespaces import FILES

COLUMNS = ("id", "complaint_id", "original_name", "stored_name", "content_type", "size_bytes")


class FileRepository:
    """Attachment metadata; bytes live on disk under FILES_DIR/<complaint_id>/."""

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create_many(self, rows: Sequence[Dict[str, Any]]) -> None:
        sql = (
            f"INSERT INTO {FILES} ({', '.join(COLUMNS)}) "
            f"VALUES ({', '.join('?' for _ in COLUMNS)})"
        )
        async with self._db.transaction() as conn:
            await conn.executemany(sql, [[r[c] for c in COLUMNS] for r in rows])

    async def for_complaint(self, complaint_id: str) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            f"SELECT * FROM {FILES} WHERE complaint_id = ? ORDER BY timestamp ASC, id ASC",
            (complaint_id,),
        )

    async def get(self, complaint_id: str, file_id: str) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(
            f"SELECT * FROM {FILES} WHERE complaint_id = ? AND id = ? LIMIT 1",
            (complaint_id, file_id),
        )

    async def delete(self, complaint_id: str, file_id: str) -> int:
        cur = await self._db.execute(
            f"DELETE FROM {FILES} WHERE complaint_id = ? AND id = ?", (complaint_id, file_id)
        )
        return int(cur.rowcount or 0)
