# service/complaint_service.py
import logging
import sqlite3
import uuid
from typing import Any, Dict, List, Tuple
from model.complaint import (
    ComplaintView,
    InterceptRequest,
    IpsoCodeBreach,
    IpsoField,
    ProblematicArticle,
)
from repository.complaint_repository import ComplaintRepository
from util.constants import BBC_FIELDS, REDACTED
from util.enums import ComplaintSource, ErrorMessage
from util.errors import NotFoundError, StorageError, ValidationError
from util.sanitize import clean_field

logger = logging.getLogger(__name__)


class ComplaintService:
    def __init__(self, complaints: ComplaintRepository) -> None:
        self._complaints = complaints

    @staticmethod
    def _source_of(payload: InterceptRequest) -> ComplaintSource:
        raw = (payload.where or ComplaintSource.BBC.value).upper()
        try:
            return ComplaintSource(raw)
        except ValueError:
            raise ValidationError.of(ErrorMessage.INVALID_SOURCE)

    @staticmethod
    def _bbc_row(data: Dict[str, Any]) -> Dict[str, Any]:
        return {field: clean_field(data.get(field)) for field in BBC_FIELDS}

    @staticmethod
    def _ipso_parts(
        data: Dict[str, Any],
    ) -> Tuple[Dict[str, Any], List[str], List[Tuple[str, str]]]:
        details = data.get("complaintDetails")
        contact = data.get("contactDetails")
        if not isinstance(details, dict) or not isinstance(contact, dict):
            raise ValidationError.of(ErrorMessage.MISSING_IPSO_DATA)

        raw_fields = details.get("fields")
        fields = (
            [clean_field(f) for f in raw_fields] if isinstance(raw_fields, list) else []
        )
        raw_breaches = data.get("codeBreaches")
        breaches = [
            (clean_field(b.get("clause")), clean_field(b.get("details")))
            for b in (raw_breaches if isinstance(raw_breaches, list) else [])
            if isinstance(b, dict)
        ]
        row = {
            "title": clean_field(details.get("title")),
            "description": "\n".join(fields),
            "emailaddress": clean_field(contact.get("email_address")),
            "firstname": clean_field(contact.get("first_name")),
            "lastname": clean_field(contact.get("last_name")),
            "ipso_terms": 1 if contact.get("terms-and-conditions") is True else 0,
        }
        return row, fields, breaches

    async def submit(self, payload: InterceptRequest) -> str:
        """
        Validate, sanitize and persist one intercepted complaint form.
        Order of checks: privacy consent, required body parts, source, IPSO parts.
        """
        if payload.privacyPolicyAccepted is not True:
            raise ValidationError.of(ErrorMessage.PRIVACY_NOT_ACCEPTED)
        if not payload.originUrl or not payload.interceptedData:
            logger.warning("complaint.invalid_body")
            raise ValidationError.of(ErrorMessage.INVALID_BODY)

        source = self._source_of(payload)
        complaint_id = str(uuid.uuid4())
        data = payload.interceptedData
        fields: List[str] = []
        breaches: List[Tuple[str, str]] = []

        if source == ComplaintSource.IPSO:
            body, fields, breaches = self._ipso_parts(data)
        else:
            body = self._bbc_row(data)

        row = {
            "id": complaint_id,
            "source": source.value,
            "originUrl": clean_field(payload.originUrl),
            **body,
        }
        try:
            await self._complaints.create(row, ipso_fields=fields, breaches=breaches)
        except sqlite3.Error as e:
            logger.error("complaint.insert.error source=%s err=%s", source.value, e)
            raise StorageError.of(ErrorMessage.STORE_FAILED) from e

        logger.info(
            "complaint.stored id=%s source=%s fields=%d breaches=%d",
            complaint_id,
            source.value,
            len(fields),
            len(breaches),
        )
        return complaint_id

    async def view(self, complaint_id: str) -> ComplaintView:
        try:
            row = await self._complaints.get(complaint_id)
            if row is None:
                raise NotFoundError.of(ErrorMessage.COMPLAINT_NOT_FOUND)
            view = ComplaintView(
                id=row["id"],
                originUrl=REDACTED if row.get("originUrl") else None,
                title=row.get("title") or None,
                description=row.get("description") or None,
                programme=row.get("programme") or None,
                transmissiondate=row.get("transmissiondate") or None,
                transmissiontime=row.get("transmissiontime") or None,
                sourceurl=row.get("sourceurl") or None,
                timestamp=row.get("timestamp") or None,
                source=row.get("source") or ComplaintSource.BBC.value,
            )
            if view.source == ComplaintSource.IPSO.value:
                fields = await self._complaints.ipso_fields(complaint_id)
                breaches = await self._complaints.code_breaches(complaint_id)
                view.ipsoFields = [IpsoField(**f) for f in fields]
                view.ipsoCodeBreaches = [IpsoCodeBreach(**b) for b in breaches]
        except sqlite3.Error as e:
            logger.error("complaint.fetch.error id=%s err=%s", complaint_id, e)
            raise StorageError.of(ErrorMessage.COMPLAINT_FETCH_FAILED) from e

        logger.info("complaint.accessed id=%s", complaint_id)
        return view

    async def problematic_articles(self) -> List[ProblematicArticle]:
        try:
            rows = await self._complaints.problematic_articles()
        except sqlite3.Error as e:
            logger.error("problematic.fetch.error err=%s", e)
            raise StorageError.of(ErrorMessage.FETCH_FAILED) from e
        return [ProblematicArticle(**r) for r in rows]
