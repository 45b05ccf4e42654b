# model/complaint.py
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict


class InterceptRequest(BaseModel):
    # All optional; ComplaintService raises the field-specific 400s.
    originUrl: Optional[str] = None
    interceptedData: Optional[dict] = None
    privacyPolicyAccepted: Any = None
    where: Optional[str] = None


class IpsoField(BaseModel):
    field_order: int
    field_value: Optional[str] = None


class IpsoCodeBreach(BaseModel):
    clause: Optional[str] = None
    details: Optional[str] = None


class ComplaintView(BaseModel):
    id: str
    originUrl: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    programme: Optional[str] = None
    transmissiondate: Optional[str] = None
    transmissiontime: Optional[str] = None
    sourceurl: Optional[str] = None
    timestamp: Optional[str] = None
    source: str = "BBC"
    ipsoFields: Optional[List[IpsoField]] = None
    ipsoCodeBreaches: Optional[List[IpsoCodeBreach]] = None


class ComplaintResponse(BaseModel):
    complaint: ComplaintView


class ReplyRequest(BaseModel):
    bbc_ref_number: Optional[str] = None
    intercept_id: Optional[str] = None
    bbc_reply: Optional[str] = None


class Reply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: int
    bbc_ref_number: Optional[str] = None
    intercept_id: str
    bbc_reply: Optional[str] = None
    timestamp: str


class ProblematicArticle(BaseModel):
    URL: str
    title: Optional[str] = None
    timestamp: str


class StoredFile(BaseModel):
    id: str
    complaint_id: str
    original_name: Optional[str] = None
    content_type: Optional[str] = None
    size_bytes: int
    timestamp: str
