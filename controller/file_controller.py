# controller/file_controller.py
from typing import List
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import FileResponse
from controller.controller_dependencies import (
    enforce_rate_limit,
    get_file_service,
    validate_file_id,
    validate_uuid,
)
from model.api import MessageResponse
from model.complaint import StoredFile
from service.file_service import FileService
from util.constants import InternalURIs

file_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@file_router.post(InternalURIs.UPLOAD_FILES, response_model=List[StoredFile])
async def upload_files(
    uuid: str = Depends(validate_uuid),
    files: List[UploadFile] = File(...),
    service: FileService = Depends(get_file_service),
) -> List[StoredFile]:
    return await service.upload(uuid, files)


@file_router.get(InternalURIs.FILES, response_model=List[StoredFile])
async def list_files(
    uuid: str = Depends(validate_uuid),
    service: FileService = Depends(get_file_service),
) -> List[StoredFile]:
    return await service.list_for(uuid)


@file_router.get(InternalURIs.FILE_ITEM)
async def download_file(
    uuid: str = Depends(validate_uuid),
    file_id: str = Depends(validate_file_id),
    service: FileService = Depends(get_file_service),
) -> FileResponse:
    meta, path = await service.locate(uuid, file_id)
    return FileResponse(
        path,
        media_type=meta.content_type or "application/octet-stream",
        filename=meta.original_name or meta.id,
    )


@file_router.delete(InternalURIs.FILE_ITEM, response_model=MessageResponse)
async def delete_file(
    uuid: str = Depends(validate_uuid),
    file_id: str = Depends(validate_file_id),
    service: FileService = Depends(get_file_service),
) -> MessageResponse:
    await service.delete(uuid, file_id)
    return MessageResponse(message="File deleted successfully.")
