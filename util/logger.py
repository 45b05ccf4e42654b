# util/logger.py
import logging
import os
import re
import sys
from logging.handlers import RotatingFileHandler
from config.settings import Settings

logging.captureWarnings(True)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"
DATE_FORMAT = "%Y-%m-%dT%H:%M:%S%z"


class ColoredFormatter(logging.Formatter):
    COLORS = {
        "DEBUG": "\033[37m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[41m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        # Work on a copy so file handlers still see the plain levelname.
        record = logging.makeLogRecord(record.__dict__)
        lvl = record.levelname
        record.levelname = f"{self.COLORS.get(lvl, self.RESET)}{lvl}{self.RESET}"
        return super().format(record)


class SecretRedactingFilter(logging.Filter):
    """Mask credential-looking key=value pairs before any handler sees them."""

    _PATTERN = re.compile(
        r"(?i)\b(apiKey|accessToken|recaptchaToken|bypassCaptcha_password|token|password)"
        r"(\s*[=:]\s*)([^\s,&]+)"
    )

    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        redacted = self._PATTERN.sub(r"\1\2***", msg)
        if redacted != msg:
            record.msg = redacted
            record.args = None
        return True


def _console_handler(level: int, redactor: logging.Filter) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(ColoredFormatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(redactor)
    return handler


def _file_handler(settings: Settings, level: int, redactor: logging.Filter) -> logging.Handler:
    os.makedirs(settings.LOG_DIR, exist_ok=True)
    handler = RotatingFileHandler(
        os.path.join(settings.LOG_DIR, settings.LOG_FILE_NAME),
        maxBytes=settings.LOG_MAX_BYTES,
        backupCount=settings.LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT))
    handler.addFilter(redactor)
    return handler


def init_logger(settings: Settings) -> logging.Logger:
    """
    Idempotent process-wide logging setup:
    - stdout always, colored levels
    - rotating LOG_DIR/LOG_FILE_NAME only when LOG_TO_FILE is on
    - every handler masks API keys, tokens and passwords
    """
    root = logging.getLogger()
    if getattr(root, "_tacc_inited", False):
        return logging.getLogger(settings.LOGGER_NAME)

    level = getattr(logging, (settings.LOG_LEVEL or "INFO").upper(), logging.INFO)
    root.setLevel(level)
    for h in list(root.handlers):
        root.removeHandler(h)

    redactor = SecretRedactingFilter()
    root.addHandler(_console_handler(level, redactor))
    if settings.LOG_TO_FILE:
        root.addHandler(_file_handler(settings, level, redactor))

    # Quiet noisy libs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("aiosqlite").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.error").setLevel(logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.INFO)

    root._tacc_inited = True  # type: ignore[attr-defined]
    logger = logging.getLogger(settings.LOGGER_NAME)
    logger.debug("logger.ready level=%s file=%s", logging.getLevelName(level), settings.LOG_TO_FILE)
    return logger
