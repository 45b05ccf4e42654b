# tests/test_settings_and_logging.py
import logging
import pytest
from pydantic import ValidationError as PydanticValidationError
from config.settings import load_settings
from tests.helpers import build_settings
from util.logger import ColoredFormatter, SecretRedactingFilter


def _record(msg: str, *args) -> logging.LogRecord:
    return logging.LogRecord("t", logging.INFO, __file__, 1, msg, args, None)


def test_defaults_match_the_documented_behaviour(tmp_path):
    s = build_settings(tmp_path)
    assert s.SUSPICION_COOKIE_NAME == "sus"
    assert s.SUSPICION_COOKIE_MAX_AGE_SECONDS == 900
    assert s.ACCESS_TOKEN_VALIDITY_SECONDS == 86400
    assert s.GATE_REQUIRE_PARITY is False
    assert s.max_file_bytes == 5 * 1024 * 1024


def test_token_entropy_floor_is_enforced(tmp_path):
    with pytest.raises(PydanticValidationError):
        build_settings(tmp_path, ACCESS_TOKEN_BYTES=8)


def test_load_settings_exits_when_app_env_is_missing(monkeypatch):
    monkeypatch.delenv("APP_ENV", raising=False)
    with pytest.raises(SystemExit) as exc:
        load_settings()
    assert exc.value.code == 1


@pytest.mark.parametrize(
    "msg,args,expected",
    [
        ("read accessToken=%s ok", ("abc123",), "read accessToken=*** ok"),
        ("apiKey: %s", ("mySecretApiKey",), "apiKey: ***"),
        ("url ?bypassCaptcha_password=hunter2&x=1", (), "url ?bypassCaptcha_password=***&x=1"),
    ],
)
def test_secrets_are_masked(msg, args, expected):
    record = _record(msg, *args)
    assert SecretRedactingFilter().filter(record) is True
    assert record.getMessage() == expected


def test_harmless_messages_pass_through_untouched():
    record = _record("blob.write.ok ns=%s name=%s", "real", "x")
    SecretRedactingFilter().filter(record)
    assert record.args == ("real", "x")


def test_colored_formatter_leaves_the_record_plain():
    record = _record("hello")
    out = ColoredFormatter("%(levelname)s %(message)s").format(record)
    assert "\033[32mINFO" in out
    assert record.levelname == "INFO"
