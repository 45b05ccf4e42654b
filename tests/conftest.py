# tests/conftest.py
from typing import Callable, List
import pytest
import pytest_asyncio
from fastapi.testclient import TestClient
from config.database import Database
from config.settings import Settings
from main import create_app
from tests.helpers import FakeRecaptcha, RecordingEmailService, build_settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return build_settings(tmp_path)


@pytest.fixture
def recaptcha() -> FakeRecaptcha:
    return FakeRecaptcha()


@pytest.fixture
def make_client(tmp_path, recaptcha) -> Callable[..., TestClient]:
    """Factory: make_client(**settings_overrides) -> started TestClient."""
    opened: List[TestClient] = []

    def _make(**overrides) -> TestClient:
        s = build_settings(tmp_path, **overrides)
        email = RecordingEmailService(s)
        app = create_app(
            s, captcha_transport=recaptcha.transport, email_service=email, run_sweeper=False
        )
        client = TestClient(app)
        client.__enter__()
        client.email = email  # type: ignore[attr-defined]
        opened.append(client)
        return client

    yield _make
    for c in opened:
        c.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()


@pytest_asyncio.fixture
async def db(tmp_path) -> Database:
    database = Database(str(tmp_path / "unit.sqlite3"))
    await database.connect()
    yield database
    await database.close()
