# tests/test_access_token_service.py
import re
import pytest
from repository.access_token_repository import AccessTokenRepository
from service.access_token_service import AccessTokenService
from tests.helpers import RecordingEmailService, build_settings
from util.enums import TokenStatus
from util.errors import EmailDeliveryError

DAY = 86400


class Clock:
    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> Clock:
    return Clock()


@pytest.fixture
def repo(db) -> AccessTokenRepository:
    return AccessTokenRepository(db)


@pytest.fixture
def email(tmp_path) -> RecordingEmailService:
    return RecordingEmailService(build_settings(tmp_path))


@pytest.fixture
def service(tmp_path, repo, email, clock) -> AccessTokenService:
    return AccessTokenService(build_settings(tmp_path), repo, email, clock=clock)


async def test_generated_tokens_are_64_hex_chars_and_unique(service):
    tokens = {service.generate() for _ in range(50)}
    assert len(tokens) == 50
    assert all(re.fullmatch(r"[0-9a-f]{64}", t) for t in tokens)


async def test_issue_persists_active_row_and_emails_token(service, repo, email):
    await service.issue_token("reader@example.com")
    assert len(email.sent) == 1
    assert email.sent[0]["to"] == "reader@example.com"
    token = email.last_token()
    row = await repo.get(token)
    assert row is not None
    assert row.status == TokenStatus.ACTIVE
    assert row.email == "reader@example.com"


async def test_email_failure_surfaces_and_keeps_the_row(service, repo, email, db):
    email.fail = True
    with pytest.raises(EmailDeliveryError) as exc:
        await service.issue_token("reader@example.com")
    assert exc.value.status_code == 500
    rows = await db.fetch_all("SELECT status FROM access_tokens")
    assert rows == [{"status": "active"}]


async def test_token_verifies_once_then_is_spent(service):
    await service.issue_token("a@example.com")
    token = service._email.last_token()
    assert await service.verify(token) is not None
    assert await service.consume(token) is True
    assert await service.verify(token) is None
    assert await service.consume(token) is False


async def test_unknown_or_empty_tokens_do_not_verify(service):
    assert await service.verify(None) is None
    assert await service.verify("") is None
    assert await service.verify("f" * 64) is None


async def test_token_expires_at_the_end_of_the_window(service, clock):
    await service.issue_token("a@example.com")
    token = service._email.last_token()
    clock.now += DAY - 1
    assert await service.verify(token) is not None
    clock.now += 1
    assert await service.verify(token) is None


async def test_sweep_removes_old_rows_whatever_their_status(service, repo, clock):
    base = clock.now
    await repo.insert("old-active", "a@example.com", created_at=base - DAY - 10)
    await repo.insert("old-used", "b@example.com", created_at=base - DAY - 5)
    await repo.mark_used("old-used")
    await repo.insert("fresh", "c@example.com", created_at=base - 60)

    assert await service.sweep() == 2
    assert await repo.get("old-active") is None
    assert await repo.get("old-used") is None
    assert await repo.get("fresh") is not None
    assert await service.sweep() == 0
