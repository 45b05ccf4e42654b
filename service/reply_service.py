# service/reply_service.py
import logging
import sqlite3
from typing import List
from model.complaint import Reply, ReplyRequest
from repository.complaint_repository import ComplaintRepository
from repository.reply_repository import ReplyRepository
from util.constants import UUID_V4_PATTERN
from util.enums import ErrorMessage
from util.errors import StorageError, ValidationError
from util.sanitize import clean_field

logger = logging.getLogger(__name__)


class ReplyService:
    def __init__(self, replies: ReplyRepository, complaints: ComplaintRepository) -> None:
        self._replies = replies
        self._complaints = complaints

    async def add(self, payload: ReplyRequest) -> int:
        if not payload.intercept_id or not payload.bbc_reply:
            raise ValidationError.of(ErrorMessage.MISSING_REPLY_FIELDS)
        if not UUID_V4_PATTERN.fullmatch(payload.intercept_id):
            raise ValidationError.of(ErrorMessage.INVALID_RECORD_ID)

        try:
            known = await self._complaints.exists(payload.intercept_id)
        except sqlite3.Error as e:
            logger.error("reply.intercept_check.error err=%s", e)
            raise StorageError.of(ErrorMessage.INTERNAL_ERROR) from e
        if not known:
            raise ValidationError.of(ErrorMessage.UNKNOWN_INTERCEPT)

        try:
            reply_id = await self._replies.create(
                bbc_ref_number=(
                    clean_field(payload.bbc_ref_number) if payload.bbc_ref_number else None
                ),
                intercept_id=payload.intercept_id,
                bbc_reply=clean_field(payload.bbc_reply),
            )
        except sqlite3.Error as e:
            logger.error("reply.insert.error err=%s", e)
            raise StorageError.of(ErrorMessage.REPLY_STORE_FAILED) from e

        logger.info("reply.stored id=%d intercept=%s", reply_id, payload.intercept_id)
        return reply_id

    async def list_for(self, intercept_id: str) -> List[Reply]:
        try:
            rows = await self._replies.for_intercept(intercept_id)
        except sqlite3.Error as e:
            logger.error("reply.fetch.error err=%s", e)
            raise StorageError.of(ErrorMessage.REPLIES_FETCH_FAILED) from e
        return [Reply(**r) for r in rows]
