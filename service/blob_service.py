# service/blob_service.py
import logging
import secrets
from typing import Any, Mapping, Optional, Tuple
from config.settings import Settings
from core.access_gate import AccessGate, Credentials
from repository.blob_repository import BlobRepository
from repository.namespaces import Namespace
from util.enums import ErrorMessage
from util.errors import AuthError, NotFoundError, ValidationError
from util.sanitize import safe_name, sanitize_value

logger = logging.getLogger(__name__)

MSG_FOUND = "Data found"
MSG_FOUND_DECOY = "Data found (decoy)"
MSG_SAVED = "Data saved successfully"


class BlobService:
    """
    Write path: api key -> name check -> content sanitize -> store.
    Read path:  name check -> access gate -> REAL, else DECOY, else 404.
    """

    def __init__(self, settings: Settings, blobs: BlobRepository, gate: AccessGate) -> None:
        self._blobs = blobs
        self._gate = gate
        self._api_key = settings.API_KEY

    def check_api_key(self, supplied: Optional[str]) -> None:
        if not isinstance(supplied, str) or not secrets.compare_digest(
            supplied.encode("utf-8"), self._api_key.encode("utf-8")
        ):
            logger.warning("blob.api_key.rejected")
            raise AuthError.of(ErrorMessage.INVALID_API_KEY)

    async def save(
        self,
        namespace: Namespace,
        *,
        api_key: Optional[str],
        name: Optional[str],
        value: Any = None,
        file_bytes: Optional[bytes] = None,
    ) -> Tuple[str, Any]:
        self.check_api_key(api_key)
        if not name:
            raise ValidationError.of(ErrorMessage.MISSING_NAME)
        name = safe_name(name)

        if file_bytes is not None:
            try:
                value = file_bytes.decode("utf-8")
            except UnicodeDecodeError:
                raise ValidationError.of(ErrorMessage.UNREADABLE_FILE)
        elif value is None:
            raise ValidationError.of(ErrorMessage.MISSING_VALUE)

        clean = sanitize_value(value)
        await self._blobs.write(namespace, name, clean)
        return name, clean

    async def fetch(
        self, name: str, credentials: Credentials, cookies: Mapping[str, str]
    ) -> Tuple[str, Any]:
        # A rejected name leaves the token unspent.
        name = safe_name(name)
        await self._gate.evaluate(credentials, cookies)

        found, data = await self._blobs.read(Namespace.REAL, name)
        if found:
            logger.info("blob.fetch.real name=%s", name)
            return MSG_FOUND, data

        found, data = await self._blobs.read(Namespace.DECOY, name)
        if found:
            logger.warning("blob.fetch.decoy_served name=%s", name)
            return MSG_FOUND_DECOY, data

        raise NotFoundError.of(ErrorMessage.DATA_NOT_FOUND)
