import json
from typing import Any

from mapping_validator.mapping.lenient_json import normalize_lenient_json


def _load(text: str) -> Any:
    if not text or not text.strip():
        raise ValueError("Input cannot be empty.")
    return json.loads(normalize_lenient_json(text))


def format_json(text: str, indent: int = 2) -> str:
    """Pretty-print JSON text. Comments and trailing commas are tolerated."""
    try:
        return json.dumps(_load(text), indent=indent, ensure_ascii=False)
    except RecursionError as exc:
        raise ValueError("nesting too deep") from exc


def compress_json(text: str) -> str:
    """Serialize JSON text without insignificant whitespace."""
    try:
        return json.dumps(_load(text), separators=(",", ":"), ensure_ascii=False)
    except RecursionError as exc:
        raise ValueError("nesting too deep") from exc
