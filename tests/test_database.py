# tests/test_database.py
import asyncio
import uuid
import pytest
from repository.complaint_repository import ComplaintRepository


async def test_reads_wait_for_an_open_transaction(db):
    repo = ComplaintRepository(db)
    complaint_id = str(uuid.uuid4())
    inserted = asyncio.Event()
    release = asyncio.Event()

    async def _aborted_write() -> None:
        async with db.transaction() as conn:
            await conn.execute(
                "INSERT INTO intercepted_data (id, source) VALUES (?, 'BBC')", (complaint_id,)
            )
            inserted.set()
            await release.wait()
            raise RuntimeError("abort")

    writer = asyncio.create_task(_aborted_write())
    await inserted.wait()
    reader = asyncio.create_task(repo.exists(complaint_id))
    await asyncio.sleep(0.05)
    assert not reader.done()

    release.set()
    with pytest.raises(RuntimeError):
        await writer
    assert await reader is False


async def test_transaction_commits_on_clean_exit(db):
    repo = ComplaintRepository(db)
    complaint_id = str(uuid.uuid4())
    async with db.transaction() as conn:
        await conn.execute(
            "INSERT INTO intercepted_data (id, source) VALUES (?, 'IPSO')", (complaint_id,)
        )
    assert await repo.exists(complaint_id) is True
