# model/access_token.py
from pydantic import BaseModel
from util.enums import TokenStatus


class AccessToken(BaseModel):
    token: str
    email: str
    status: TokenStatus
    created_at: float

    def is_expired(self, now: float, validity_seconds: int) -> bool:
        return now - self.created_at >= validity_seconds
