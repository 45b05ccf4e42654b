# repository/complaint_repository.py
from typing import Any, Dict, List, Optional, Sequence, Tuple
from config.database import Database
from repository.namespaces import COMPLAINTS, IPSO_BREACHES, IPSO_FIELDS, PROBLEMATIC

VIEW_COLUMNS = (
    "id",
    "originUrl",
    "title",
    "description",
    "programme",
    "transmissiondate",
    "transmissiontime",
    "sourceurl",
    "timestamp",
    "source",
)


class ComplaintRepository:
    """
    Complaint rows plus their IPSO children.

    create() writes the parent, its IPSO fields and its code breaches in one
    transaction: either all rows land or none do.
    """

    def __init__(self, db: Database) -> None:
        self._db = db

    async def create(
        self,
        row: Dict[str, Any],
        *,
        ipso_fields: Sequence[str] = (),
        breaches: Sequence[Tuple[str, str]] = (),
    ) -> None:
        columns = list(row.keys())
        placeholders = ", ".join("?" for _ in columns)
        insert = f"INSERT INTO {COMPLAINTS} ({', '.join(columns)}) VALUES ({placeholders})"
        complaint_id = row["id"]

        async with self._db.transaction() as conn:
            await conn.execute(insert, [row[c] for c in columns])
            if ipso_fields:
                await conn.executemany(
                    f"INSERT INTO {IPSO_FIELDS} (complaint_id, field_order, field_value) "
                    "VALUES (?, ?, ?)",
                    [(complaint_id, i, v) for i, v in enumerate(ipso_fields)],
                )
            if breaches:
                await conn.executemany(
                    f"INSERT INTO {IPSO_BREACHES} (complaint_id, clause, details) "
                    "VALUES (?, ?, ?)",
                    [(complaint_id, clause, details) for clause, details in breaches],
                )

    async def get(self, complaint_id: str) -> Optional[Dict[str, Any]]:
        return await self._db.fetch_one(
            f"SELECT {', '.join(VIEW_COLUMNS)} FROM {COMPLAINTS} WHERE id = ? LIMIT 1",
            (complaint_id,),
        )

    async def exists(self, complaint_id: str) -> bool:
        row = await self._db.fetch_one(
            f"SELECT id FROM {COMPLAINTS} WHERE id = ? LIMIT 1", (complaint_id,)
        )
        return row is not None

    async def ipso_fields(self, complaint_id: str) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            f"SELECT field_order, field_value FROM {IPSO_FIELDS} "
            "WHERE complaint_id = ? ORDER BY field_order ASC",
            (complaint_id,),
        )

    async def code_breaches(self, complaint_id: str) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            f"SELECT clause, details FROM {IPSO_BREACHES} WHERE complaint_id = ? ORDER BY id ASC",
            (complaint_id,),
        )

    async def problematic_articles(self) -> List[Dict[str, Any]]:
        return await self._db.fetch_all(
            f"SELECT URL, title, timestamp FROM {PROBLEMATIC} ORDER BY timestamp DESC"
        )
