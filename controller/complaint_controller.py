# controller/complaint_controller.py
from typing import List
from fastapi import APIRouter, Depends, status
from controller.controller_dependencies import (
    enforce_rate_limit,
    get_complaint_service,
    validate_uuid,
)
from model.api import CreatedResponse
from model.complaint import ComplaintResponse, InterceptRequest, ProblematicArticle
from service.complaint_service import ComplaintService
from util.constants import InternalURIs

complaint_router = APIRouter(dependencies=[Depends(enforce_rate_limit)])


@complaint_router.post(
    InternalURIs.COMPLAINT, response_model=CreatedResponse, status_code=status.HTTP_200_OK
)
@complaint_router.post(
    InternalURIs.INTERCEPT,
    response_model=CreatedResponse,
    status_code=status.HTTP_200_OK,
    include_in_schema=False,
)
@complaint_router.post(
    InternalURIs.INTERCEPT_V2,
    response_model=CreatedResponse,
    status_code=status.HTTP_200_OK,
    include_in_schema=False,
)
async def submit_complaint(
    payload: InterceptRequest,
    service: ComplaintService = Depends(get_complaint_service),
) -> CreatedResponse:
    complaint_id = await service.submit(payload)
    return CreatedResponse(message="Data stored successfully.", id=complaint_id)


@complaint_router.get(InternalURIs.COMPLAINT_ITEM, response_model=ComplaintResponse)
async def get_complaint(
    uuid: str = Depends(validate_uuid),
    service: ComplaintService = Depends(get_complaint_service),
) -> ComplaintResponse:
    return ComplaintResponse(complaint=await service.view(uuid))


@complaint_router.get(InternalURIs.PROBLEMATIC, response_model=List[ProblematicArticle])
async def list_problematic(
    service: ComplaintService = Depends(get_complaint_service),
) -> List[ProblematicArticle]:
    return await service.problematic_articles()
