import re
from typing import Optional, Union

PREVIEW_MAX_LENGTH = 100

_INT_PATTERN = re.compile(r"^\s*[+-]?\d+\s*$", re.ASCII)
_FLOAT_PATTERN = re.compile(
    r"^\s*[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?\s*$|^\s*[+-]?(nan|infinity|inf)\s*$",
    re.IGNORECASE | re.ASCII,
)
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def truncate_preview(value: str, limit: int = PREVIEW_MAX_LENGTH) -> str:
    if len(value) <= limit:
        return value
    return value[: limit - 3] + "..."


# Helpers to interpret XML text content
def _str_to_bool(value: Union[str, bool]) -> Optional[bool]:
    """Parse 'true'/'false'/'1'/'0' (case-insensitive); anything else is None."""
    if isinstance(value, bool):
        return value  # Already a boolean, return as-is
    value = value.strip().lower()
    if value in ("true", "1"):
        return True
    if value in ("false", "0"):
        return False
    return None


def _str_to_int64(value: str) -> Optional[int]:
    if not _INT_PATTERN.match(value):
        return None
    number = int(value)
    if number < _INT64_MIN or number > _INT64_MAX:
        return None
    return number


def _str_to_float(value: str) -> Optional[float]:
    if not _FLOAT_PATTERN.match(value):
        return None
    return float(value)
