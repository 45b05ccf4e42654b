# controller/blob_controller.py
import json
from typing import Any, Optional, Tuple
from fastapi import APIRouter, Body, Depends, Query, Request, status
from starlette.datastructures import UploadFile
from config.settings import Settings
from controller.controller_dependencies import (
    enforce_rate_limit,
    get_blob_service,
    get_settings,
)
from core.access_gate import Credentials
from model.api import DataResponse, SaveDataResponse, SavedData, WriteDataRequest
from repository.namespaces import Namespace
from service.blob_service import MSG_SAVED, BlobService
from util.constants import InternalURIs
from util.enums import ErrorMessage
from util.errors import AppError, ValidationError

blob_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


def query_credentials(
    accessToken: Optional[str] = Query(None),
    recaptchaToken: Optional[str] = Query(None),
    bypassCaptcha_password: Optional[str] = Query(None),
    randomValue: Optional[str] = Query(None),
) -> Credentials:
    return Credentials(
        accessToken=accessToken,
        recaptchaToken=recaptchaToken,
        bypassCaptcha_password=bypassCaptcha_password,
        randomValue=randomValue,
    )


def _text_or_none(raw: Any) -> Optional[str]:
    # Non-string apiKey / name are treated as absent.
    return raw if isinstance(raw, str) else None


async def _read_write_request(
    request: Request, settings: Settings
) -> Tuple[Any, Any, Any, Optional[bytes]]:
    """
    Accept either a JSON body or a multipart form.
    Returns (apiKey, name, value, file_bytes); file_bytes wins over value.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data") or content_type.startswith(
        "application/x-www-form-urlencoded"
    ):
        form = await request.form()
        upload = form.get(settings.FILE_UPLOAD_KEY)
        file_bytes = None
        if isinstance(upload, UploadFile):
            file_bytes = await upload.read(settings.max_file_bytes + 1)
            if len(file_bytes) > settings.max_file_bytes:
                raise AppError.of(ErrorMessage.FILE_TOO_LARGE)
        value = form.get("value")
        if isinstance(value, UploadFile):
            value = None
        return form.get("apiKey"), form.get("name"), value, file_bytes

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError.of(ErrorMessage.INVALID_BODY)
    if not isinstance(body, dict):
        raise ValidationError.of(ErrorMessage.INVALID_BODY)
    parsed = WriteDataRequest(
        apiKey=_text_or_none(body.get("apiKey")),
        name=_text_or_none(body.get("name")),
        value=body.get("value"),
    )
    return parsed.apiKey, parsed.name, parsed.value, None


async def _save(
    namespace: Namespace, request: Request, settings: Settings, service: BlobService
) -> SaveDataResponse:
    api_key, name, value, file_bytes = await _read_write_request(request, settings)
    saved_name, saved_value = await service.save(
        namespace, api_key=api_key, name=name, value=value, file_bytes=file_bytes
    )
    return SaveDataResponse(
        message=MSG_SAVED, data=SavedData(name=saved_name, value=saved_value)
    )


@blob_router.get(InternalURIs.DATA_ITEM, response_model=DataResponse)
async def get_data(
    name: str,
    request: Request,
    credentials: Credentials = Depends(query_credentials),
    service: BlobService = Depends(get_blob_service),
) -> DataResponse:
    message, data = await service.fetch(name, credentials, request.cookies)
    return DataResponse(message=message, data=data)


@blob_router.post(InternalURIs.DATA_ITEM, response_model=DataResponse)
async def post_get_data(
    name: str,
    request: Request,
    credentials: Optional[Credentials] = Body(None),
    service: BlobService = Depends(get_blob_service),
) -> DataResponse:
    message, data = await service.fetch(name, credentials or Credentials(), request.cookies)
    return DataResponse(message=message, data=data)


@blob_router.post(
    InternalURIs.DATA, response_model=SaveDataResponse, status_code=status.HTTP_200_OK
)
async def set_data(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: BlobService = Depends(get_blob_service),
) -> SaveDataResponse:
    return await _save(Namespace.REAL, request, settings, service)


@blob_router.post(
    InternalURIs.FAKE_DATA, response_model=SaveDataResponse, status_code=status.HTTP_200_OK
)
async def set_fake_data(
    request: Request,
    settings: Settings = Depends(get_settings),
    service: BlobService = Depends(get_blob_service),
) -> SaveDataResponse:
    return await _save(Namespace.DECOY, request, settings, service)
