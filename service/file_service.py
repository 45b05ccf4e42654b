# service/file_service.py
import logging
import os
import sqlite3
import uuid
from typing import List, Sequence, Tuple
import aiofiles
import aiofiles.os
from fastapi import UploadFile
from config.settings import Settings
from model.complaint import StoredFile
from repository.complaint_repository import ComplaintRepository
from repository.file_repository import FileRepository
from util.enums import ErrorMessage
from util.errors import AppError, NotFoundError, StorageError, ValidationError
from util.sanitize import clean_field, safe_name

logger = logging.getLogger(__name__)

_CHUNK = 64 * 1024


class FileService:
    """
    Attachments for a complaint.

    Flow (upload):
    - complaint must exist; 1..MAX_FILES_PER_UPLOAD files, each <= MAX_FILE_MB
    - bytes are streamed to FILES_DIR/<complaint>/<generated id>
    - metadata rows are inserted in one transaction; on failure the bytes
      written by this request are removed again
    """

    def __init__(
        self, settings: Settings, files: FileRepository, complaints: ComplaintRepository
    ) -> None:
        self._root = os.path.abspath(settings.FILES_DIR)
        self._max_files = settings.MAX_FILES_PER_UPLOAD
        self._max_bytes = settings.max_file_bytes
        self._files = files
        self._complaints = complaints

    def _dir(self, complaint_id: str) -> str:
        return os.path.join(self._root, safe_name(complaint_id))

    def _path(self, complaint_id: str, stored_name: str) -> str:
        return os.path.join(self._dir(complaint_id), safe_name(stored_name))

    async def _require_complaint(self, complaint_id: str) -> None:
        try:
            known = await self._complaints.exists(complaint_id)
        except sqlite3.Error as e:
            logger.error("files.complaint_check.error err=%s", e)
            raise StorageError.of(ErrorMessage.INTERNAL_ERROR) from e
        if not known:
            raise NotFoundError.of(ErrorMessage.COMPLAINT_NOT_FOUND)

    async def _write_one(self, complaint_id: str, upload: UploadFile) -> Tuple[str, int]:
        stored_name = uuid.uuid4().hex
        path = self._path(complaint_id, stored_name)
        size = 0
        try:
            async with aiofiles.open(path, "wb") as fh:
                while True:
                    chunk = await upload.read(_CHUNK)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self._max_bytes:
                        raise AppError.of(ErrorMessage.FILE_TOO_LARGE)
                    await fh.write(chunk)
        except BaseException:
            await self._discard([path])
            raise
        return stored_name, size

    async def _discard(self, paths: Sequence[str]) -> None:
        for p in paths:
            try:
                await aiofiles.os.remove(p)
            except FileNotFoundError:
                continue
            except OSError as e:
                logger.error("files.cleanup.error path=%s err=%s", p, e)

    async def upload(self, complaint_id: str, uploads: Sequence[UploadFile]) -> List[StoredFile]:
        if not uploads:
            raise ValidationError.of(ErrorMessage.NO_FILES)
        if len(uploads) > self._max_files:
            raise ValidationError.of(ErrorMessage.TOO_MANY_FILES)
        await self._require_complaint(complaint_id)

        try:
            await aiofiles.os.makedirs(self._dir(complaint_id), exist_ok=True)
        except OSError as e:
            logger.error("files.mkdir.error complaint=%s err=%s", complaint_id, e)
            raise StorageError.of(ErrorMessage.UPLOAD_FAILED) from e

        rows = []
        written: List[str] = []
        try:
            for up in uploads:
                stored_name, size = await self._write_one(complaint_id, up)
                written.append(self._path(complaint_id, stored_name))
                rows.append(
                    {
                        "id": str(uuid.uuid4()),
                        "complaint_id": complaint_id,
                        "original_name": clean_field(up.filename),
                        "stored_name": stored_name,
                        "content_type": up.content_type,
                        "size_bytes": size,
                    }
                )
            await self._files.create_many(rows)
        except AppError:
            await self._discard(written)
            raise
        except (OSError, sqlite3.Error) as e:
            logger.error("files.upload.error complaint=%s err=%s", complaint_id, e)
            await self._discard(written)
            raise StorageError.of(ErrorMessage.UPLOAD_FAILED) from e

        logger.info("files.uploaded complaint=%s count=%d", complaint_id, len(rows))
        return await self.list_for(complaint_id)

    async def list_for(self, complaint_id: str) -> List[StoredFile]:
        try:
            rows = await self._files.for_complaint(complaint_id)
        except sqlite3.Error as e:
            logger.error("files.list.error complaint=%s err=%s", complaint_id, e)
            raise StorageError.of(ErrorMessage.FETCH_FAILED) from e
        return [StoredFile(**r) for r in rows]

    async def locate(self, complaint_id: str, file_id: str) -> Tuple[StoredFile, str]:
        """Return the metadata and on-disk path of one attachment."""
        try:
            row = await self._files.get(complaint_id, file_id)
        except sqlite3.Error as e:
            logger.error("files.get.error complaint=%s err=%s", complaint_id, e)
            raise StorageError.of(ErrorMessage.FETCH_FAILED) from e
        if row is None:
            raise NotFoundError.of(ErrorMessage.FILE_NOT_FOUND)
        path = self._path(complaint_id, row["stored_name"])
        if not await aiofiles.os.path.exists(path):
            logger.error("files.missing_on_disk complaint=%s file=%s", complaint_id, file_id)
            raise NotFoundError.of(ErrorMessage.FILE_NOT_FOUND)
        return StoredFile(**row), path

    async def delete(self, complaint_id: str, file_id: str) -> None:
        try:
            row = await self._files.get(complaint_id, file_id)
            if row is None:
                raise NotFoundError.of(ErrorMessage.FILE_NOT_FOUND)
            await self._files.delete(complaint_id, file_id)
        except sqlite3.Error as e:
            logger.error("files.delete.error complaint=%s err=%s", complaint_id, e)
            raise StorageError.of(ErrorMessage.INTERNAL_ERROR) from e
        await self._discard([self._path(complaint_id, row["stored_name"])])
        logger.info("files.deleted complaint=%s file=%s", complaint_id, file_id)
