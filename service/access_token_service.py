# service/access_token_service.py
import logging
import secrets
import time
from typing import Callable, Optional
from config.settings import Settings
from model.access_token import AccessToken
from repository.access_token_repository import AccessTokenRepository
from service.email_service import EmailService
from util.enums import TokenStatus

logger = logging.getLogger(__name__)


class AccessTokenService:
    """
    Issues single-use, time-limited read tokens and keeps the ledger tidy.

    Flow:
    - issue_token: generate -> persist ACTIVE -> email. A failed email leaves the
      row in place (it simply expires and is swept later).
    - verify: ACTIVE and younger than the validity window.
    - consume: ACTIVE -> USED, exactly once.
    - sweep: delete every row older than the window, whatever its status.
    """

    def __init__(
        self,
        settings: Settings,
        tokens: AccessTokenRepository,
        email: EmailService,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._tokens = tokens
        self._email = email
        self._nbytes = settings.ACCESS_TOKEN_BYTES
        self._validity = settings.ACCESS_TOKEN_VALIDITY_SECONDS
        self._clock = clock

    def generate(self) -> str:
        return secrets.token_hex(self._nbytes)

    async def issue_token(self, email: str) -> None:
        token = self.generate()
        await self._tokens.insert(token, email, created_at=self._clock())
        logger.info("token.issued email=%s", email)
        await self._email.send_access_token(email, token, self._validity)

    async def verify(self, token: Optional[str]) -> Optional[AccessToken]:
        if not token:
            return None
        entry = await self._tokens.get(token)
        if entry is None:
            logger.warning("token.verify.unknown")
            return None
        if entry.status != TokenStatus.ACTIVE:
            logger.warning("token.verify.used email=%s", entry.email)
            return None
        if entry.is_expired(self._clock(), self._validity):
            logger.warning("token.verify.expired email=%s", entry.email)
            return None
        return entry

    async def consume(self, token: str) -> bool:
        ok = await self._tokens.mark_used(token)
        if not ok:
            logger.warning("token.consume.lost_race")
        return ok

    async def sweep(self) -> int:
        cutoff = self._clock() - self._validity
        deleted = await self._tokens.delete_older_than(cutoff)
        logger.info("token.sweep.done deleted=%d", deleted)
        return deleted
