# util/enums.py
from enum import Enum
from typing import NamedTuple
from fastapi import status


class Color(str, Enum):
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    MAGENTA = "\033[35m"
    CYAN = "\033[36m"
    BOLD = "\033[1m"

    def __str__(self):
        return self.value


class Environment(str, Enum):
    DEV = "dev"
    PROD = "prod"
    TEST = "test"


class ComplaintSource(str, Enum):
    BBC = "BBC"
    IPSO = "IPSO"


class TokenStatus(str, Enum):
    ACTIVE = "active"
    USED = "used"


class EmailProvider(str, Enum):
    MOCK = "mock"
    SMTP = "smtp"


class ErrorInfo(NamedTuple):
    message: str
    http_status: int


class ErrorMessage(Enum):
    # Blob store
    INVALID_API_KEY = ErrorInfo("Unauthorized: Invalid API key", status.HTTP_401_UNAUTHORIZED)
    INVALID_NAME = ErrorInfo("Invalid name.", status.HTTP_400_BAD_REQUEST)
    MISSING_NAME = ErrorInfo("Missing name", status.HTTP_400_BAD_REQUEST)
    MISSING_VALUE = ErrorInfo("Missing value or file upload", status.HTTP_400_BAD_REQUEST)
    UNREADABLE_FILE = ErrorInfo("Uploaded file must be UTF-8 text", status.HTTP_400_BAD_REQUEST)
    DATA_NOT_FOUND = ErrorInfo("Data not found", status.HTTP_404_NOT_FOUND)
    SAVE_FAILED = ErrorInfo("Failed to save data", status.HTTP_500_INTERNAL_SERVER_ERROR)
    READ_FAILED = ErrorInfo("Failed to retrieve data", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Access gate
    SUSPICIOUS = ErrorInfo("Access denied.", status.HTTP_403_FORBIDDEN)
    MISSING_ACCESS_TOKEN = ErrorInfo("Access token is required.", status.HTTP_400_BAD_REQUEST)
    INVALID_ACCESS_TOKEN = ErrorInfo("Invalid or expired access token.", status.HTTP_403_FORBIDDEN)
    MISSING_RANDOM_VALUE = ErrorInfo("A numeric randomValue is required.", status.HTTP_400_BAD_REQUEST)
    ODD_RANDOM_VALUE = ErrorInfo("Access denied.", status.HTTP_403_FORBIDDEN)
    MISSING_CAPTCHA = ErrorInfo("reCAPTCHA token is required.", status.HTTP_403_FORBIDDEN)
    CAPTCHA_FAILED = ErrorInfo("reCAPTCHA verification failed.", status.HTTP_403_FORBIDDEN)
    CAPTCHA_UNAVAILABLE = ErrorInfo(
        "reCAPTCHA verification unavailable.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )

    # Access tokens
    EMAIL_FAILED = ErrorInfo("Failed to send access token.", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Records
    INVALID_UUID = ErrorInfo("Invalid UUID format.", status.HTTP_400_BAD_REQUEST)
    INVALID_BODY = ErrorInfo("Invalid request body.", status.HTTP_400_BAD_REQUEST)
    PRIVACY_NOT_ACCEPTED = ErrorInfo("Privacy policy must be accepted.", status.HTTP_400_BAD_REQUEST)
    INVALID_SOURCE = ErrorInfo("Unsupported complaint source.", status.HTTP_400_BAD_REQUEST)
    MISSING_IPSO_DATA = ErrorInfo("Missing required IPSO data.", status.HTTP_400_BAD_REQUEST)
    STORE_FAILED = ErrorInfo("Failed to store data.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    COMPLAINT_NOT_FOUND = ErrorInfo(
        "No data found for the provided UUID.", status.HTTP_404_NOT_FOUND
    )
    COMPLAINT_FETCH_FAILED = ErrorInfo(
        "Failed to fetch complaint data.", status.HTTP_500_INTERNAL_SERVER_ERROR
    )
    MISSING_REPLY_FIELDS = ErrorInfo("Missing required fields.", status.HTTP_400_BAD_REQUEST)
    INVALID_RECORD_ID = ErrorInfo("Invalid TACC Record ID format.", status.HTTP_400_BAD_REQUEST)
    UNKNOWN_INTERCEPT = ErrorInfo(
        "Invalid intercept_id. No matching record found.", status.HTTP_400_BAD_REQUEST
    )
    REPLY_STORE_FAILED = ErrorInfo("Failed to store reply.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    REPLIES_FETCH_FAILED = ErrorInfo("Failed to fetch replies.", status.HTTP_500_INTERNAL_SERVER_ERROR)
    FETCH_FAILED = ErrorInfo("Failed to fetch data.", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Attachments
    NO_FILES = ErrorInfo("No files uploaded.", status.HTTP_400_BAD_REQUEST)
    TOO_MANY_FILES = ErrorInfo("Too many files.", status.HTTP_400_BAD_REQUEST)
    FILE_TOO_LARGE = ErrorInfo("File too large.", status.HTTP_413_REQUEST_ENTITY_TOO_LARGE)
    FILE_NOT_FOUND = ErrorInfo("File not found.", status.HTTP_404_NOT_FOUND)
    UPLOAD_FAILED = ErrorInfo("Failed to store files.", status.HTTP_500_INTERNAL_SERVER_ERROR)

    # Generic
    INTERNAL_ERROR = ErrorInfo("Internal server error.", status.HTTP_500_INTERNAL_SERVER_ERROR)
