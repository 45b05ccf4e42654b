# controller/controller_dependencies.py
from typing import Optional
from fastapi import Path, Request, Response
from fastapi_limiter.depends import RateLimiter
from config.settings import Settings
from service.access_token_service import AccessTokenService
from service.blob_service import BlobService
from service.complaint_service import ComplaintService
from service.file_service import FileService
from service.reply_service import ReplyService
from util.constants import UUID_V4_PATTERN
from util.enums import ErrorMessage
from util.errors import ValidationError


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_blob_service(request: Request) -> BlobService:
    return request.app.state.blob_service


def get_access_token_service(request: Request) -> AccessTokenService:
    return request.app.state.access_token_service


def get_complaint_service(request: Request) -> ComplaintService:
    return request.app.state.complaint_service


def get_reply_service(request: Request) -> ReplyService:
    return request.app.state.reply_service


def get_file_service(request: Request) -> FileService:
    return request.app.state.file_service


async def enforce_rate_limit(request: Request, response: Response) -> None:
    # No limiter is installed when RATE_LIMIT_ENABLED is off (tests, local runs).
    limiter: Optional[RateLimiter] = getattr(request.app.state, "limiter", None)
    if limiter is not None:
        await limiter(request, response)


def validate_uuid(uuid: str = Path(...)) -> str:
    if not UUID_V4_PATTERN.fullmatch(uuid):
        raise ValidationError.of(ErrorMessage.INVALID_UUID)
    return uuid


def validate_file_id(file_id: str = Path(...)) -> str:
    if not UUID_V4_PATTERN.fullmatch(file_id):
        raise ValidationError.of(ErrorMessage.INVALID_UUID)
    return file_id
