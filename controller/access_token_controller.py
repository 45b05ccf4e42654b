# controller/access_token_controller.py
from fastapi import APIRouter, Depends, status
from controller.controller_dependencies import enforce_rate_limit, get_access_token_service
from model.api import AccessTokenRequest, MessageResponse
from service.access_token_service import AccessTokenService
from util.constants import InternalURIs

access_token_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@access_token_router.post(
    InternalURIs.ASK_FOR_ACCESS_TOKEN,
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
)
async def ask_for_access_token(
    payload: AccessTokenRequest,
    service: AccessTokenService = Depends(get_access_token_service),
) -> MessageResponse:
    await service.issue_token(str(payload.email))
    return MessageResponse(message="Access token sent")
