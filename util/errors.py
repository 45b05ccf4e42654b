# util/errors.py
from typing import Optional
from fastapi import HTTPException, status
from util.enums import ErrorMessage


class AppError(HTTPException):
    # Flow: raise AppError to short-circuit with a typed status & message.
    default_status: int = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, http_status: Optional[int] = None) -> None:
        super().__init__(
            status_code=http_status or self.default_status, detail=message
        )

    @classmethod
    def of(cls, error: ErrorMessage) -> "AppError":
        return cls(error.value.message, error.value.http_status)

    @property
    def message(self) -> str:
        return str(self.detail)


class ValidationError(AppError):
    default_status = status.HTTP_400_BAD_REQUEST


class InvalidNameError(ValidationError):
    def __init__(self, message: str = ErrorMessage.INVALID_NAME.value.message) -> None:
        super().__init__(message, status.HTTP_400_BAD_REQUEST)


class AuthError(AppError):
    default_status = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(AppError):
    default_status = status.HTTP_403_FORBIDDEN


class SuspiciousRequestError(ForbiddenError):
    """403 that also (re)sets the suspicion cookie on the response."""

    def __init__(self, message: str, *, mark_suspicious: bool = True) -> None:
        super().__init__(message, status.HTTP_403_FORBIDDEN)
        self.mark_suspicious = mark_suspicious


class NotFoundError(AppError):
    default_status = status.HTTP_404_NOT_FOUND


class StorageError(AppError):
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class DependencyError(AppError):
    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR


class EmailDeliveryError(DependencyError):
    pass
