# tests/helpers.py
import json
from typing import Dict, List, Optional
import httpx
from fastapi.testclient import TestClient
from config.settings import Settings
from service.email_service import EmailService
from util.enums import ErrorMessage
from util.errors import EmailDeliveryError

API_KEY = "mySecretApiKey"
BYPASS = "letmein"


class RecordingEmailService(EmailService):
    """Captures outbound mail instead of sending it; can be told to fail."""

    def __init__(self, settings: Settings) -> None:
        super().__init__(settings)
        self.sent: List[Dict[str, str]] = []
        self.fail = False

    async def send(self, to_email: str, subject: str, body: str) -> None:
        if self.fail:
            raise EmailDeliveryError.of(ErrorMessage.EMAIL_FAILED)
        self.sent.append({"to": to_email, "subject": subject, "body": body})

    def last_token(self) -> str:
        body = self.sent[-1]["body"]
        return next(line for line in body.splitlines() if len(line) >= 32 and " " not in line)


class FakeRecaptcha:
    """httpx handler standing in for the assessment endpoint."""

    def __init__(self, score: float = 0.9, action: str = "get_data", valid: bool = True):
        self.score = score
        self.action = action
        self.valid = valid
        self.status_code = 200
        self.calls: List[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(json.loads(request.content))
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "nope"})
        return httpx.Response(
            200,
            json={
                "tokenProperties": {
                    "valid": self.valid,
                    "action": self.action,
                    "invalidReason": None if self.valid else "MALFORMED",
                },
                "riskAnalysis": {"score": self.score},
            },
        )

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def build_settings(tmp_path, **overrides) -> Settings:
    values = dict(
        APP_ENV="test",
        RATE_LIMIT_ENABLED=False,
        DATA_DIR=str(tmp_path / "data"),
        DATABASE_PATH=str(tmp_path / "records.sqlite3"),
        FILES_DIR=str(tmp_path / "uploads"),
        API_KEY=API_KEY,
        BYPASS_CAPTCHA_PASSWORD=BYPASS,
        RECAPTCHA_PROJECT_ID="test-project",
        RECAPTCHA_API_KEY="test-key",
        RECAPTCHA_SITE_KEY="test-site",
        RECAPTCHA_ACTION="get_data",
        EMAIL_PROVIDER="mock",
    )
    values.update(overrides)
    return Settings(**values)


def issue_token(client: TestClient, email: str = "reader@example.com") -> str:
    res = client.post("/ask_for_access_token", json={"email": email})
    assert res.status_code == 200, res.text
    return client.email.last_token()  # type: ignore[attr-defined]


def bbc_complaint(**data) -> dict:
    intercepted = {"title": "Biased report", "description": "It was unfair", "programme": "News"}
    intercepted.update(data)
    return {
        "originUrl": "https://www.bbc.co.uk/contact/complaints",
        "interceptedData": intercepted,
        "privacyPolicyAccepted": True,
    }


def submit_complaint(client: TestClient, payload: Optional[dict] = None) -> str:
    res = client.post("/complaint", json=payload or bbc_complaint())
    assert res.status_code == 200, res.text
    return res.json()["id"]
