# config/settings.py
import os
import sys
from dotenv import load_dotenv
from pydantic import ValidationError, Field
from pydantic_settings import BaseSettings
from util.constants import ExternalURIs
from util.enums import Environment
import logging


if os.getenv("APP_ENV", Environment.DEV) == Environment.DEV:
    load_dotenv()

_log = logging.getLogger("config.settings")


class Settings(BaseSettings):
    # App
    APP_ENV: str = Field(..., validation_alias="APP_ENV")
    ALLOWED_ORIGIN: str = Field(default="*", validation_alias="ALLOWED_ORIGIN")

    # Rate limiting (Redis-backed)
    RATE_LIMIT_ENABLED: bool = Field(default=True, validation_alias="RATE_LIMIT_ENABLED")
    REDIS_URL: str = Field(
        default="redis://localhost:6379/0", validation_alias="REDIS_URL"
    )
    RATE_LIMIT_TIMES: int = Field(default=60, validation_alias="RATE_LIMIT_TIMES")
    RATE_LIMIT_SECONDS: int = Field(default=60, validation_alias="RATE_LIMIT_SECONDS")
    TRUST_PROXY: bool = Field(default=False, validation_alias="TRUST_PROXY")

    # Blob store
    DATA_DIR: str = Field(default="data", validation_alias="DATA_DIR")
    API_KEY: str = Field(default="mySecretApiKey", validation_alias="API_KEY")
    FILE_UPLOAD_KEY: str = Field(default="file", validation_alias="FILE_UPLOAD_KEY")

    # Record store
    DATABASE_PATH: str = Field(
        default="intercepted_data.db", validation_alias="DATABASE_PATH"
    )

    # Attachments
    FILES_DIR: str = Field(default="uploads", validation_alias="FILES_DIR")
    MAX_FILES_PER_UPLOAD: int = Field(default=5, validation_alias="MAX_FILES_PER_UPLOAD")
    MAX_FILE_MB: int = Field(default=5, validation_alias="MAX_FILE_MB")

    # Access gate stages
    GATE_REQUIRE_ACCESS_TOKEN: bool = Field(
        default=True, validation_alias="GATE_REQUIRE_ACCESS_TOKEN"
    )
    GATE_REQUIRE_PARITY: bool = Field(default=False, validation_alias="GATE_REQUIRE_PARITY")
    GATE_REQUIRE_CAPTCHA: bool = Field(default=True, validation_alias="GATE_REQUIRE_CAPTCHA")

    # CAPTCHA (reCAPTCHA Enterprise)
    BYPASS_CAPTCHA_PASSWORD: str = Field(default="", validation_alias="BYPASS_CAPTCHA_PASSWORD")
    RECAPTCHA_PROJECT_ID: str = Field(default="", validation_alias="RECAPTCHA_PROJECT_ID")
    RECAPTCHA_API_KEY: str = Field(default="", validation_alias="RECAPTCHA_API_KEY")
    RECAPTCHA_SITE_KEY: str = Field(default="", validation_alias="RECAPTCHA_SITE_KEY")
    RECAPTCHA_ACTION: str = Field(default="get_data", validation_alias="RECAPTCHA_ACTION")
    RECAPTCHA_MIN_SCORE: float = Field(default=0.5, validation_alias="RECAPTCHA_MIN_SCORE")
    RECAPTCHA_TIMEOUT_SECONDS: float = Field(
        default=5.0, validation_alias="RECAPTCHA_TIMEOUT_SECONDS"
    )
    RECAPTCHA_ASSESSMENT_URL: str = Field(
        default=ExternalURIs.RECAPTCHA_ASSESSMENT,
        validation_alias="RECAPTCHA_ASSESSMENT_URL",
    )

    # Suspicion cookie
    SUSPICION_COOKIE_NAME: str = Field(default="sus", validation_alias="SUSPICION_COOKIE_NAME")
    SUSPICION_COOKIE_MAX_AGE_SECONDS: int = Field(
        default=15 * 60, validation_alias="SUSPICION_COOKIE_MAX_AGE_SECONDS"
    )

    # Access tokens
    ACCESS_TOKEN_BYTES: int = Field(default=32, ge=16, validation_alias="ACCESS_TOKEN_BYTES")
    ACCESS_TOKEN_VALIDITY_SECONDS: int = Field(
        default=24 * 60 * 60, validation_alias="ACCESS_TOKEN_VALIDITY_SECONDS"
    )
    TOKEN_SWEEP_INTERVAL_SECONDS: int = Field(
        default=24 * 60 * 60, validation_alias="TOKEN_SWEEP_INTERVAL_SECONDS"
    )

    # Email
    EMAIL_PROVIDER: str = Field(default="mock", validation_alias="EMAIL_PROVIDER")
    EMAIL_FROM: str = Field(default="noreply@example.com", validation_alias="EMAIL_FROM")
    SMTP_HOST: str = Field(default="localhost", validation_alias="SMTP_HOST")
    SMTP_PORT: int = Field(default=587, validation_alias="SMTP_PORT")
    SMTP_USERNAME: str = Field(default="", validation_alias="SMTP_USERNAME")
    SMTP_PASSWORD: str = Field(default="", validation_alias="SMTP_PASSWORD")
    SMTP_USE_TLS: bool = Field(default=True, validation_alias="SMTP_USE_TLS")

    # Logging knobs
    LOGGER_NAME: str = "tacc-api"
    LOG_LEVEL: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    LOG_TO_FILE: bool = Field(default=False, validation_alias="LOG_TO_FILE")
    LOG_DIR: str = Field(default="logs", validation_alias="LOG_DIR")
    LOG_FILE_NAME: str = Field(default="app.log", validation_alias="LOG_FILE_NAME")
    LOG_MAX_BYTES: int = Field(
        default=50 * 1024 * 1024, validation_alias="LOG_MAX_BYTES"
    )
    LOG_BACKUP_COUNT: int = Field(default=5, validation_alias="LOG_BACKUP_COUNT")

    @property
    def max_file_bytes(self) -> int:
        return self.MAX_FILE_MB * 1024 * 1024


def load_settings() -> Settings:
    """Build the process-wide Settings once; exit with a readable report when env is broken."""
    try:
        return Settings()
    except ValidationError as e:
        print("❌ Missing/invalid environment variables:", file=sys.stderr)
        for err in e.errors():
            loc = ".".join(str(x) for x in err.get("loc", []))
            msg = err.get("msg", "")
            print(f" - {loc}: {msg}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"❌ Settings initialization failed: {e}", file=sys.stderr)
        sys.exit(1)
