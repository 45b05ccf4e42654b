# model/api.py
from typing import Any, Optional
from pydantic import BaseModel, EmailStr, Field


class WriteDataRequest(BaseModel):
    apiKey: Optional[str] = None
    name: Optional[str] = None
    value: Any = None


class SavedData(BaseModel):
    name: str
    value: Any


class SaveDataResponse(BaseModel):
    message: str
    data: SavedData


class DataResponse(BaseModel):
    message: str
    data: Any


class AccessTokenRequest(BaseModel):
    email: EmailStr


class MessageResponse(BaseModel):
    message: str


class CreatedResponse(BaseModel):
    message: str
    id: Any


class HealthResponse(BaseModel):
    ok: bool = Field(default=True)
