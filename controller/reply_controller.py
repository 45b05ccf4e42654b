# controller/reply_controller.py
from typing import List
from fastapi import APIRouter, Depends
from controller.controller_dependencies import (
    enforce_rate_limit,
    get_reply_service,
    validate_uuid,
)
from model.api import CreatedResponse
from model.complaint import Reply, ReplyRequest
from service.reply_service import ReplyService
from util.constants import InternalURIs

reply_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@reply_router.get(InternalURIs.REPLIES_ITEM, response_model=List[Reply])
async def list_replies(
    uuid: str = Depends(validate_uuid),
    service: ReplyService = Depends(get_reply_service),
) -> List[Reply]:
    return await service.list_for(uuid)


@reply_router.post(InternalURIs.REPLIES, response_model=CreatedResponse)
async def add_reply(
    payload: ReplyRequest,
    service: ReplyService = Depends(get_reply_service),
) -> CreatedResponse:
    reply_id = await service.add(payload)
    return CreatedResponse(message="Reply stored successfully.", id=reply_id)
