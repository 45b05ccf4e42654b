# main.py
import logging
from contextlib import asynccontextmanager
from typing import Optional
import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
import routes
from config.cache import close_redis, init_rate_limiter
from config.database import Database
from config.settings import Settings, load_settings
from core.access_gate import SUSPICION_VALUE, AccessGate
from core.token_sweeper import TokenSweeper
from repository.access_token_repository import AccessTokenRepository
from repository.blob_repository import BlobRepository
from repository.complaint_repository import ComplaintRepository
from repository.file_repository import FileRepository
from repository.reply_repository import ReplyRepository
from service.access_token_service import AccessTokenService
from service.blob_service import BlobService
from service.captcha_service import CaptchaService
from service.complaint_service import ComplaintService
from service.email_service import EmailService
from service.file_service import FileService
from service.reply_service import ReplyService
from util.constants import InternalURIs
from model.api import HealthResponse
from util.enums import Color, Environment, ErrorMessage
from util.errors import AppError, SuspiciousRequestError
from util.logger import init_logger

logger = logging.getLogger(__name__)


def _wire(
    app: FastAPI,
    settings: Settings,
    captcha_transport: Optional[httpx.AsyncBaseTransport],
    email_service: Optional[EmailService],
) -> None:
    """Build every component once from the one Settings object."""
    db = Database(settings.DATABASE_PATH)
    blobs = BlobRepository(settings.DATA_DIR)
    email = email_service or EmailService(settings)
    tokens = AccessTokenService(settings, AccessTokenRepository(db), email)
    captcha = CaptchaService(settings, transport=captcha_transport)
    gate = AccessGate(settings, tokens, captcha)
    complaints = ComplaintRepository(db)

    app.state.settings = settings
    app.state.db = db
    app.state.blob_repository = blobs
    app.state.access_token_service = tokens
    app.state.blob_service = BlobService(settings, blobs, gate)
    app.state.complaint_service = ComplaintService(complaints)
    app.state.reply_service = ReplyService(ReplyRepository(db), complaints)
    app.state.file_service = FileService(settings, FileRepository(db), complaints)
    app.state.sweeper = TokenSweeper(tokens, settings.TOKEN_SWEEP_INTERVAL_SECONDS)
    app.state.limiter = None


def _register_error_handlers(app: FastAPI, settings: Settings) -> None:
    def _error(status_code: int, message: str, headers=None) -> JSONResponse:
        return JSONResponse(status_code=status_code, content={"error": message}, headers=headers)

    @app.exception_handler(429)
    async def ratelimit_handler(request: Request, exc):
        return JSONResponse(
            status_code=429,
            content={
                "ok": False,
                "error": "rate_limited",
                "message": f"Too many requests. Try again in {settings.RATE_LIMIT_SECONDS}s.",
            },
            headers={"Retry-After": str(settings.RATE_LIMIT_SECONDS)},
        )

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError):
        response = _error(exc.status_code, exc.message)
        if isinstance(exc, SuspiciousRequestError) and exc.mark_suspicious:
            response.set_cookie(
                settings.SUSPICION_COOKIE_NAME,
                SUSPICION_VALUE,
                max_age=settings.SUSPICION_COOKIE_MAX_AGE_SECONDS,
                httponly=True,
                samesite="lax",
            )
        return response

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return _error(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_handler(request: Request, exc: RequestValidationError):
        logger.info("request.invalid path=%s errors=%d", request.url.path, len(exc.errors()))
        return _error(400, ErrorMessage.INVALID_BODY.value.message)

    @app.exception_handler(Exception)
    async def unhandled_handler(request: Request, exc: Exception):
        logger.exception("request.unhandled path=%s", request.url.path)
        return _error(500, ErrorMessage.INTERNAL_ERROR.value.message)


def create_app(
    settings: Settings,
    *,
    captcha_transport: Optional[httpx.AsyncBaseTransport] = None,
    email_service: Optional[EmailService] = None,
    run_sweeper: bool = True,
) -> FastAPI:
    @asynccontextmanager
    async def lifespan(fastApi: FastAPI):
        init_logger(settings)
        print(f"{Color.GREEN}Initializing...{Color.RESET}")
        try:
            fastApi.state.blob_repository.ensure_dirs()
            await fastApi.state.db.connect()
            if settings.RATE_LIMIT_ENABLED:
                fastApi.state.limiter = await init_rate_limiter(settings)
            if run_sweeper:
                fastApi.state.sweeper.start()
            print(f"{Color.BLUE}Server Started{Color.RESET}")
        except Exception as e:
            print("Startup failed:", e)
            raise

        try:
            yield
        finally:
            await fastApi.state.sweeper.stop()
            await fastApi.state.db.close()
            if settings.RATE_LIMIT_ENABLED:
                try:
                    await close_redis()
                except Exception as e:
                    print("Error closing Redis:", e)
            print(f"{Color.RED}Server Shutdown{Color.RESET}")

    app = FastAPI(title="tacc-api", lifespan=lifespan)
    _wire(app, settings, captcha_transport, email_service)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.ALLOWED_ORIGIN],
        allow_credentials=True,  # suspicion cookie travels with requests
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Authorization", "Content-Type", "Accept"],
    )

    @app.get(InternalURIs.HEALTH, response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse()

    _register_error_handlers(app, settings)
    routes.register_routes(app)
    return app


def build_app() -> FastAPI:
    """uvicorn factory entrypoint: `uvicorn main:build_app --factory`."""
    return create_app(load_settings())


if __name__ == "__main__":
    import uvicorn

    _settings = load_settings()
    reload = _settings.APP_ENV == Environment.DEV
    uvicorn.run(
        "main:build_app", factory=True, host="127.0.0.1", port=8000, reload=reload
    )
