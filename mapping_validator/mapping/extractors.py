"""Document field extraction.

Both variants select a single node (the root object/element, or the first
element of a collection) and describe its direct fields as
:class:`ExtractedField` values keyed by lower-cased name.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import Any, Optional

from mapping_validator.datamodel.document import (
    DocumentFormat,
    ExtractedDocument,
    ExtractedField,
    NilCause,
    ValueKind,
)
from mapping_validator.helper_functions import PREVIEW_MAX_LENGTH, truncate_preview
from mapping_validator.mapping.lenient_json import (
    JsonNumber,
    load_lenient_json,
    render_json_value,
)

_log = logging.getLogger(__name__)

XSI_NAMESPACE = "http://www.w3.org/2001/XMLSchema-instance"
_XSI_NIL = f"{{{XSI_NAMESPACE}}}nil"


class DocumentError(ValueError):
    """The document cannot be validated at all (malformed or wrong shape)."""


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------
def _json_kind(value: Any) -> ValueKind:
    if value is None:
        return ValueKind.NULL
    if isinstance(value, bool):
        return ValueKind.BOOL
    if isinstance(value, JsonNumber):
        return ValueKind.NUMBER
    if isinstance(value, str):
        return ValueKind.STRING
    if isinstance(value, list):
        return ValueKind.ARRAY
    return ValueKind.OBJECT


def _json_field(name: str, value: Any) -> ExtractedField:
    kind = _json_kind(value)
    if kind is ValueKind.STRING:
        display = value
    else:
        display = render_json_value(value, limit=PREVIEW_MAX_LENGTH)
    return ExtractedField(
        name=name,
        kind=kind,
        raw=value,
        display_value=truncate_preview(display),
        nil_cause=NilCause.EXPLICIT_NULL if kind is ValueKind.NULL else None,
    )


def extract_json_fields(text: str, collection: bool = False) -> ExtractedDocument:
    if not text or not text.strip():
        raise DocumentError("Document is empty")
    try:
        root = load_lenient_json(text)
    except ValueError as exc:
        raise DocumentError(f"Invalid JSON: {exc}") from exc

    if collection:
        if not isinstance(root, list):
            raise DocumentError("Expected a JSON array at the root in collection mode")
        if not root:
            raise DocumentError("JSON array is empty")
        node = root[0]
        if not isinstance(node, dict):
            raise DocumentError("First element of the JSON array is not an object")
        _log.debug("Validating first of %d array elements", len(root))
    else:
        if isinstance(root, list):
            raise DocumentError(
                "Expected a JSON object at the root, got an array "
                "(use collection mode for arrays)"
            )
        if not isinstance(root, dict):
            raise DocumentError("Expected a JSON object at the root")
        node = root

    document = ExtractedDocument(format=DocumentFormat.JSON)
    for key, value in node.items():
        lowered = key.lower()
        if lowered not in document.fields:
            document.names.append(key)
        # Case variants of the same key: the last one wins.
        document.fields[lowered] = _json_field(key, value)
    return document


# ---------------------------------------------------------------------------
# XML
# ---------------------------------------------------------------------------
def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _child_elements(element: ET.Element) -> list[ET.Element]:
    # Comments and processing instructions carry non-string tags.
    return [child for child in element if isinstance(child.tag, str)]


def _markup_preview(element: ET.Element, limit: int = PREVIEW_MAX_LENGTH) -> str:
    """Whitespace-collapsed markup of *element*, cut once past *limit* chars.

    Walks an explicit stack, so element depth is unbounded.
    """
    parts: list[str] = []
    size = 0
    stack: list[tuple[ET.Element, bool]] = [(element, False)]
    while stack and size <= limit:
        node, closing = stack.pop()
        name = _local_name(node.tag)
        if closing:
            text = f"</{name}>"
        else:
            attrs = "".join(
                f' {_local_name(key)}="{value}"' for key, value in node.attrib.items()
            )
            children = _child_elements(node)
            if not children and not node.text:
                text = f"<{name}{attrs}/>"
                closing = True
            else:
                text = f"<{name}{attrs}>{node.text or ''}"
                stack.append((node, True))
                stack.extend((child, False) for child in reversed(children))
        if closing and node is not element and node.tail:
            text += node.tail
        parts.append(text)
        size += len(text)
    return " ".join("".join(parts).split())


def _element_field(element: ET.Element) -> ExtractedField:
    name = _local_name(element.tag)
    if element.get(_XSI_NIL, "").strip().lower() == "true":
        return ExtractedField(
            name=name,
            kind=ValueKind.NULL,
            raw=element,
            display_value="null",
            nil_cause=NilCause.XSI_NIL,
        )

    children = _child_elements(element)
    if children:
        return ExtractedField(
            name=name,
            kind=ValueKind.OBJECT,
            raw=element,
            display_value=truncate_preview(_markup_preview(element)),
        )

    text = (element.text or "").strip()
    return ExtractedField(
        name=name,
        kind=ValueKind.STRING,
        raw=element,
        display_value=truncate_preview(text),
        nil_cause=None if text else NilCause.EMPTY_ELEMENT,
    )


def _attribute_field(name: str, value: str) -> ExtractedField:
    return ExtractedField(
        name=name,
        kind=ValueKind.ATTRIBUTE,
        raw=value,
        display_value=truncate_preview(value),
        nil_cause=None if value.strip() else NilCause.EMPTY_ATTRIBUTE,
    )


def extract_xml_fields(text: str, collection: bool = False) -> ExtractedDocument:
    if not text or not text.strip():
        raise DocumentError("Document is empty")
    try:
        root = ET.fromstring(text.lstrip("\ufeff").strip())
    except ET.ParseError as exc:
        raise DocumentError(f"Invalid XML: {exc}") from exc

    if collection:
        items = _child_elements(root)
        if not items:
            raise DocumentError(
                f"XML root <{_local_name(root.tag)}> has no child elements"
            )
        node = items[0]
        _log.debug(
            "Validating first of %d <%s> children", len(items), _local_name(root.tag)
        )
    else:
        node = root

    document = ExtractedDocument(format=DocumentFormat.XML)
    for child in _child_elements(node):
        name = _local_name(child.tag)
        lowered = name.lower()
        document.groups.setdefault(lowered, []).append(child)
        if lowered in document.fields:
            continue
        document.fields[lowered] = _element_field(child)
        document.names.append(name)

    for key, value in node.attrib.items():
        if key.startswith(f"{{{XSI_NAMESPACE}}}"):
            continue
        name = _local_name(key)
        lowered = name.lower()
        if lowered in document.attributes:
            continue
        document.attributes[lowered] = _attribute_field(name, value)
        if lowered not in document.fields:
            document.names.append(name)
    return document


def _singular_forms(name: str) -> list[str]:
    lowered = name.lower()
    forms: list[str] = []
    if lowered.endswith("ies") and len(lowered) > 3:
        forms.append(lowered[:-3] + "y")
    if lowered.endswith("es") and len(lowered) > 2:
        forms.append(lowered[:-2])
    if lowered.endswith("s") and len(lowered) > 1:
        forms.append(lowered[:-1])
    return forms


def _repeated_field(elements: list[ET.Element]) -> ExtractedField:
    count = len(elements)
    return ExtractedField(
        name=_local_name(elements[0].tag),
        kind=ValueKind.ARRAY,
        raw=list(elements),
        display_value=f"[{count} element{'' if count == 1 else 's'}]",
    )


def probe_repeated_elements(
    document: ExtractedDocument, name: str
) -> Optional[ExtractedField]:
    """Find sibling elements that together form a collection for *name*.

    Matches the exact name repeated at least twice, or a singular form of
    the name (``Items`` -> ``Item``) present at least once.
    """
    if document.format is not DocumentFormat.XML:
        return None
    group = document.groups.get(name.lower())
    if group and len(group) > 1:
        return _repeated_field(group)
    for form in _singular_forms(name):
        group = document.groups.get(form)
        if group:
            return _repeated_field(group)
    return None


def extract_fields(
    text: str, document_format: DocumentFormat, collection: bool = False
) -> ExtractedDocument:
    if document_format is DocumentFormat.XML:
        return extract_xml_fields(text, collection)
    return extract_json_fields(text, collection)
