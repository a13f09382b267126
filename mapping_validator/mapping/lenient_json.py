"""Lenient JSON pre-normalization.

Real-world payloads pasted into the validator often carry comments,
trailing commas or JavaScript-style single-quoted strings. Each pass below
is a small scanner that tracks whether it is inside a quoted run so that
string contents are never touched.
"""

from __future__ import annotations

import json
import logging
from typing import Any, List, Optional

_log = logging.getLogger(__name__)

# Openings that only appear in already-standard JSON text.
_STANDARD_PREFIXES: tuple[str, ...] = ('{"', '["', "[{", "[[", '"', "true", "false", "null")


class JsonNumber(str):
    """A JSON number kept as its raw source text (e.g. ``"42.0"``)."""

    __slots__ = ()

    @property
    def has_decimal_point(self) -> bool:
        return "." in self


def _reject_constant(token: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {token}")


def _strip_comments(s: str) -> str:
    out: List[str] = []
    in_string = False
    escape = False
    quote = ""
    i = 0
    while i < len(s):
        ch = s[i]
        if in_string:
            out.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                in_string = False
                quote = ""
            i += 1
            continue

        if ch == '"' or ch == "'":
            in_string = True
            quote = ch
            out.append(ch)
            i += 1
            continue

        if ch == "/" and i + 1 < len(s):
            nxt = s[i + 1]
            if nxt == "/":
                end = s.find("\n", i)
                i = len(s) if end == -1 else end
                continue
            if nxt == "*":
                end = s.find("*/", i + 2)
                i = len(s) if end == -1 else end + 2
                out.append(" ")
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _remove_trailing_commas(s: str) -> str:
    out: List[str] = []
    in_string = False
    escape = False
    quote = ""
    i = 0
    while i < len(s):
        ch = s[i]
        if in_string:
            out.append(ch)
            if escape:
                escape = False
            elif ch == "\\":
                escape = True
            elif ch == quote:
                in_string = False
                quote = ""
            i += 1
            continue

        if ch == '"' or ch == "'":
            in_string = True
            quote = ch
            out.append(ch)
            i += 1
            continue

        if ch == ",":
            j = i + 1
            while j < len(s) and s[j] in (" ", "\t", "\r", "\n"):
                j += 1
            if j < len(s) and (s[j] == "}" or s[j] == "]"):
                i += 1
                continue

        out.append(ch)
        i += 1
    return "".join(out)


def _single_quotes_to_double_quotes(s: str) -> str:
    out: List[str] = []
    in_string = False
    escape = False
    quote = ""
    i = 0
    while i < len(s):
        ch = s[i]

        if in_string:
            if escape:
                out.append(ch)
                escape = False
                i += 1
                continue
            if ch == "\\":
                out.append(ch)
                escape = True
                i += 1
                continue
            if ch == quote:
                out.append('"')
                in_string = False
                quote = ""
                i += 1
                continue
            if quote == "'" and ch == '"':
                out.append("\\")
                out.append('"')
                i += 1
                continue
            out.append(ch)
            i += 1
            continue

        if ch == "'" or ch == '"':
            in_string = True
            quote = ch
            out.append('"')
            i += 1
            continue

        out.append(ch)
        i += 1

    if in_string and quote == "'":
        out.append('"')
    return "".join(out)


def _looks_standard(s: str) -> bool:
    stripped = s.lstrip()
    if not stripped:
        return True
    return stripped.startswith(_STANDARD_PREFIXES) or stripped[0] in "-0123456789"


def normalize_lenient_json(text: str) -> str:
    """Rewrite lenient JSON text into standard JSON text."""
    out = _strip_comments(text)
    out = _remove_trailing_commas(out)
    if not _looks_standard(out):
        rewritten = _single_quotes_to_double_quotes(out)
        if rewritten != out:
            _log.debug("Rewrote single-quoted strings in JSON input")
        out = rewritten
    return out


def load_lenient_json(text: str) -> Any:
    """Parse lenient JSON text, keeping numbers as :class:`JsonNumber`.

    Raises ValueError (including json.JSONDecodeError) on malformed input
    and on nesting deeper than the decoder can follow.
    """
    try:
        return json.loads(
            normalize_lenient_json(text),
            parse_int=JsonNumber,
            parse_float=JsonNumber,
            parse_constant=_reject_constant,
        )
    except RecursionError as exc:
        raise ValueError("nesting too deep") from exc


class _Punctuation(str):
    """Structural text queued between values while rendering."""

    __slots__ = ()


def _scalar_text(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, JsonNumber):
        return str(value)
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def render_json_value(value: Any, limit: Optional[int] = None) -> str:
    """Compact JSON text for a value returned by :func:`load_lenient_json`.

    Rendering walks an explicit stack, so nesting depth is unbounded. With
    *limit*, rendering stops once the output is longer than *limit*.
    """
    parts: List[str] = []
    size = 0
    stack: List[Any] = [value]
    while stack:
        item = stack.pop()
        if isinstance(item, _Punctuation):
            text = str(item)
        elif isinstance(item, list):
            stack.append(_Punctuation("]"))
            for index in range(len(item) - 1, -1, -1):
                stack.append(item[index])
                if index:
                    stack.append(_Punctuation(","))
            text = "["
        elif isinstance(item, dict):
            stack.append(_Punctuation("}"))
            entries = list(item.items())
            for index in range(len(entries) - 1, -1, -1):
                key, child = entries[index]
                stack.append(child)
                stack.append(
                    _Punctuation(json.dumps(key, ensure_ascii=False) + ":")
                )
                if index:
                    stack.append(_Punctuation(","))
            text = "{"
        else:
            text = _scalar_text(item)
        parts.append(text)
        size += len(text)
        if limit is not None and size > limit:
            break
    return "".join(parts)
