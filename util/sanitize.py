# util/sanitize.py
from typing import Any
import bleach
from util.constants import SAFE_NAME_PATTERN
from util.errors import InvalidNameError

_DOT_NAMES = frozenset({".", ".."})


def safe_name(name: str) -> str:
    """
    Gatekeeper for anything that becomes a filesystem key.
    - Must be non-empty and made only of [A-Za-z0-9._-].
    - "." and ".." are refused: they name directories, not entries.
    No case or Unicode normalization is applied.
    """
    if not isinstance(name, str) or not SAFE_NAME_PATTERN.fullmatch(name):
        raise InvalidNameError()
    if name in _DOT_NAMES:
        raise InvalidNameError()
    return name


def sanitize_value(value: Any) -> Any:
    """
    Escape active HTML in every string leaf of a JSON-like value.
    Dict keys and non-string scalars are returned untouched.
    """
    if isinstance(value, str):
        return bleach.clean(value)
    if isinstance(value, dict):
        return {k: sanitize_value(v) for k, v in value.items()}
    if isinstance(value, list):
        return [sanitize_value(v) for v in value]
    return value


def clean_field(value: Any) -> str:
    # Complaint columns: drop markup, keep the text.
    if value is None:
        return ""
    return bleach.clean(str(value), tags=set(), strip=True)
