# core/access_gate.py
import logging
import secrets
from typing import Mapping, Optional, Union
from pydantic import BaseModel, StrictBool, StrictInt, StrictStr
from config.settings import Settings
from model.access_token import AccessToken
from service.access_token_service import AccessTokenService
from service.captcha_service import CaptchaService
from util.enums import ErrorMessage
from util.errors import ForbiddenError, SuspiciousRequestError, ValidationError

logger = logging.getLogger(__name__)

SUSPICION_VALUE = "true"


class Credentials(BaseModel):
    accessToken: Optional[str] = None
    recaptchaToken: Optional[str] = None
    bypassCaptcha_password: Optional[str] = None
    # JSON booleans stay bool; the parity stage refuses them.
    randomValue: Optional[Union[StrictInt, StrictStr, StrictBool]] = None


class AccessGate:
    """
    Fixed-order read gate. Each stage passes or raises; nothing after a
    raising stage runs.

      1) suspicion cookie   -> 403, no further checks
      2) access token       -> 400 missing / 403 unknown, used or expired
      3) randomValue parity -> 400 missing or non-numeric / 403 odd
      4) CAPTCHA or bypass  -> 403 and the suspicion cookie on failure

    The token is only consumed after every stage has passed, so a CAPTCHA
    failure does not burn it.
    """

    def __init__(
        self,
        settings: Settings,
        tokens: AccessTokenService,
        captcha: CaptchaService,
    ) -> None:
        self._tokens = tokens
        self._captcha = captcha
        self._cookie_name = settings.SUSPICION_COOKIE_NAME
        self._require_token = settings.GATE_REQUIRE_ACCESS_TOKEN
        self._require_parity = settings.GATE_REQUIRE_PARITY
        self._require_captcha = settings.GATE_REQUIRE_CAPTCHA
        self._bypass_password = settings.BYPASS_CAPTCHA_PASSWORD

    async def evaluate(
        self, credentials: Credentials, cookies: Mapping[str, str]
    ) -> Optional[AccessToken]:
        self._check_suspicion(cookies)
        entry = await self._check_access_token(credentials)
        self._check_parity(credentials)
        await self._check_captcha(credentials)

        if entry is not None and not await self._tokens.consume(entry.token):
            raise ForbiddenError.of(ErrorMessage.INVALID_ACCESS_TOKEN)
        logger.info("gate.passed token=%s", "yes" if entry else "no")
        return entry

    def is_suspicious(self, cookies: Mapping[str, str]) -> bool:
        return cookies.get(self._cookie_name) == SUSPICION_VALUE

    def _check_suspicion(self, cookies: Mapping[str, str]) -> None:
        if self.is_suspicious(cookies):
            logger.warning("gate.suspicious.rejected")
            # Cookie already present; do not extend its lifetime.
            raise SuspiciousRequestError(
                ErrorMessage.SUSPICIOUS.value.message, mark_suspicious=False
            )

    async def _check_access_token(self, credentials: Credentials) -> Optional[AccessToken]:
        if not self._require_token:
            return None
        if not credentials.accessToken:
            raise ValidationError.of(ErrorMessage.MISSING_ACCESS_TOKEN)
        entry = await self._tokens.verify(credentials.accessToken)
        if entry is None:
            raise ForbiddenError.of(ErrorMessage.INVALID_ACCESS_TOKEN)
        return entry

    def _check_parity(self, credentials: Credentials) -> None:
        if not self._require_parity:
            return
        raw = credentials.randomValue
        if raw is None or isinstance(raw, bool):
            raise ValidationError.of(ErrorMessage.MISSING_RANDOM_VALUE)
        try:
            number = int(raw)
        except (TypeError, ValueError):
            raise ValidationError.of(ErrorMessage.MISSING_RANDOM_VALUE)
        if number % 2 != 0:
            logger.warning("gate.parity.odd")
            raise ForbiddenError.of(ErrorMessage.ODD_RANDOM_VALUE)

    def _bypass_matches(self, supplied: Optional[str]) -> bool:
        if not self._bypass_password or not supplied:
            return False
        return secrets.compare_digest(
            supplied.encode("utf-8"), self._bypass_password.encode("utf-8")
        )

    async def _check_captcha(self, credentials: Credentials) -> None:
        if not self._require_captcha:
            return
        if self._bypass_matches(credentials.bypassCaptcha_password):
            logger.info("gate.captcha.bypassed")
            return
        if not credentials.recaptchaToken:
            logger.warning("gate.captcha.missing")
            raise SuspiciousRequestError(ErrorMessage.MISSING_CAPTCHA.value.message)
        assessment = await self._captcha.assess(credentials.recaptchaToken)
        if not self._captcha.passes(assessment):
            raise SuspiciousRequestError(ErrorMessage.CAPTCHA_FAILED.value.message)
