# service/captcha_service.py
import logging
from typing import Optional
import httpx
from pydantic import BaseModel
from config.settings import Settings
from util.enums import ErrorMessage
from util.errors import DependencyError
from util.timing import timed

logger = logging.getLogger(__name__)


class CaptchaAssessment(BaseModel):
    valid: bool
    action: Optional[str] = None
    score: float = 0.0
    invalid_reason: Optional[str] = None


class CaptchaService:
    """
    Client for the reCAPTCHA Enterprise assessment endpoint.

    assess() only talks to the service; passes() applies the local policy
    (valid token, expected action, score >= threshold).
    """

    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._url: str = settings.RECAPTCHA_ASSESSMENT_URL.format(
            project=settings.RECAPTCHA_PROJECT_ID
        )
        self._api_key: str = settings.RECAPTCHA_API_KEY
        self._site_key: str = settings.RECAPTCHA_SITE_KEY
        self._action: str = settings.RECAPTCHA_ACTION
        self._min_score: float = settings.RECAPTCHA_MIN_SCORE
        self._timeout = httpx.Timeout(settings.RECAPTCHA_TIMEOUT_SECONDS, connect=3.0)
        self._transport = transport

    async def assess(self, token: str) -> CaptchaAssessment:
        payload = {
            "event": {
                "token": token,
                "expectedAction": self._action,
                "siteKey": self._site_key,
            }
        }
        try:
            with timed(logger, "captcha.assess", action=self._action):
                async with httpx.AsyncClient(
                    timeout=self._timeout, transport=self._transport
                ) as client:
                    res = await client.post(
                        self._url, params={"key": self._api_key}, json=payload
                    )
        except httpx.RequestError as e:
            logger.error("captcha.request_error err=%s", type(e).__name__)
            raise DependencyError.of(ErrorMessage.CAPTCHA_UNAVAILABLE)

        if res.status_code // 100 != 2:
            logger.error("captcha.bad_status status=%d", res.status_code)
            raise DependencyError.of(ErrorMessage.CAPTCHA_UNAVAILABLE)

        try:
            body = res.json()
        except ValueError:
            logger.error("captcha.bad_body")
            raise DependencyError.of(ErrorMessage.CAPTCHA_UNAVAILABLE)

        props = body.get("tokenProperties") or {}
        risk = body.get("riskAnalysis") or {}
        return CaptchaAssessment(
            valid=bool(props.get("valid")),
            action=props.get("action"),
            score=float(risk.get("score") or 0.0),
            invalid_reason=props.get("invalidReason"),
        )

    def passes(self, assessment: CaptchaAssessment) -> bool:
        if not assessment.valid:
            logger.warning("captcha.invalid reason=%s", assessment.invalid_reason)
            return False
        if assessment.action != self._action:
            logger.warning(
                "captcha.action_mismatch got=%s want=%s", assessment.action, self._action
            )
            return False
        if assessment.score < self._min_score:
            logger.warning(
                "captcha.low_score score=%.2f min=%.2f", assessment.score, self._min_score
            )
            return False
        return True
