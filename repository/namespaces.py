# repository/namespaces.py
from enum import Enum
from typing import Final


class Namespace(str, Enum):
    """Blob partitions; each maps to its own directory under DATA_DIR."""

    REAL = "real"
    DECOY = "decoy"


# Record-store table names
COMPLAINTS: Final[str] = "intercepted_data"
IPSO_FIELDS: Final[str] = "ipso_complaint_fields"
IPSO_BREACHES: Final[str] = "ipso_code_breaches"
REPLIES: Final[str] = "replies"
PROBLEMATIC: Final[str] = "problematic_article"
FILES: Final[str] = "uploaded_files"
ACCESS_TOKENS: Final[str] = "access_tokens"
