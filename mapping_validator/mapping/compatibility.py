"""Type compatibility between a declared field and a source value.

Null handling runs first (:func:`check_null`); present values are then
dispatched on the declared base type (:func:`check_compatibility`). JSON
values are judged by their value kind, XML values by their text content.
"""

from __future__ import annotations

import uuid
from typing import Callable, Optional

from dateutil import parser as date_parser
from pydantic import TypeAdapter, ValidationError

from mapping_validator.datamodel.document import (
    DocumentFormat,
    ExtractedField,
    NilCause,
    ValueKind,
)
from mapping_validator.datamodel.shape import (
    INHERENTLY_NULLABLE,
    BaseType,
    TypeDescriptor,
)
from mapping_validator.helper_functions import (
    _str_to_bool,
    _str_to_float,
    _str_to_int64,
)

CheckResult = tuple[bool, Optional[str]]

_OK: CheckResult = (True, None)

_UUID_ADAPTER: TypeAdapter = TypeAdapter(uuid.UUID)


# ---------------------------------------------------------------------------
# Text parsing
# ---------------------------------------------------------------------------
def _parses_as_datetime(text: str) -> bool:
    value = text.strip()
    # Bare numbers are not date/time literals.
    if not value or _str_to_float(value) is not None:
        return False
    try:
        date_parser.parse(value)
    except (ValueError, OverflowError):
        return False
    return True


def _parses_as_guid(text: str) -> bool:
    try:
        _UUID_ADAPTER.validate_python(text.strip())
    except ValidationError:
        return False
    return True


def _field_text(field: ExtractedField) -> Optional[str]:
    """Text content of a scalar source value, or None for structured values."""
    if field.kind is ValueKind.ATTRIBUTE:
        return field.raw
    if field.kind is ValueKind.STRING:
        if isinstance(field.raw, str):
            return field.raw
        return (field.raw.text or "").strip()
    return None


def _describe(field: ExtractedField, document_format: DocumentFormat) -> str:
    """How a mismatched value is named in a failure reason."""
    text = _field_text(field)
    if document_format is DocumentFormat.XML and text is not None:
        return f'"{text}"'
    return field.kind.value


# ---------------------------------------------------------------------------
# Null handling
# ---------------------------------------------------------------------------
def check_null(
    descriptor: TypeDescriptor,
    field: ExtractedField,
    document_format: DocumentFormat,
) -> Optional[CheckResult]:
    """Return a result for null/nil/empty values, or None for present values."""
    if field.nil_cause is None:
        return None
    if descriptor.nullable or descriptor.base_type in INHERENTLY_NULLABLE:
        return _OK
    if (
        document_format is DocumentFormat.XML
        and descriptor.base_type is BaseType.STRING
        and field.nil_cause is NilCause.EMPTY_ELEMENT
    ):
        # An empty string element always passes, whatever its nullability.
        return _OK
    return False, f"{descriptor.type_name} is not nullable (got {field.nil_cause.value})"


# ---------------------------------------------------------------------------
# Per base type checks
# ---------------------------------------------------------------------------
def _check_string(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    if _field_text(field) is not None:
        return _OK
    return False, f"expected string, got {field.kind.value}"


def _check_bool(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    if field.kind is ValueKind.BOOL:
        return _OK
    if document_format is DocumentFormat.XML:
        text = _field_text(field)
        if text is not None and _str_to_bool(text) is not None:
            return _OK
    return False, f"expected bool, got {_describe(field, document_format)}"


def _check_integer(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    type_name = descriptor.type_name
    if document_format is DocumentFormat.JSON:
        if field.kind is ValueKind.NUMBER:
            if field.raw.has_decimal_point:
                return False, f"expected {type_name}, got {field.raw} (has decimal)"
            return _OK
        return False, f"expected {type_name}, got {field.kind.value}"

    text = _field_text(field)
    if text is not None:
        if _str_to_int64(text) is not None:
            return _OK
        if "." in text and _str_to_float(text) is not None:
            return False, f"expected {type_name}, got {text.strip()} (has decimal)"
    return False, f"expected {type_name}, got {_describe(field, document_format)}"


def _check_float(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    if document_format is DocumentFormat.JSON:
        if field.kind is ValueKind.NUMBER:
            return _OK
    else:
        text = _field_text(field)
        if text is not None and _str_to_float(text) is not None:
            return _OK
    return False, f"expected {descriptor.type_name}, got {_describe(field, document_format)}"


def _check_datetime(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    text = _field_text(field)
    if text is None:
        return False, f"expected {descriptor.type_name}, got {field.kind.value}"
    if _parses_as_datetime(text):
        return _OK
    return False, f"invalid DateTime format: {text}"


def _check_guid(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    text = _field_text(field)
    if text is None:
        return False, f"expected {descriptor.type_name}, got {field.kind.value}"
    if _parses_as_guid(text):
        return _OK
    return False, f"invalid Guid format: {text}"


def _check_collection(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    if field.kind is ValueKind.ARRAY:
        return _OK
    # A matching XML element is either a wrapper around the items or a
    # single item of a repeated sequence.
    if document_format is DocumentFormat.XML and field.kind in (
        ValueKind.OBJECT,
        ValueKind.STRING,
    ):
        return _OK
    return False, f"expected array for {descriptor.type_name}, got {field.kind.value}"


def _check_object(
    descriptor: TypeDescriptor, field: ExtractedField, document_format: DocumentFormat
) -> CheckResult:
    return _OK


_CHECKS: dict[
    BaseType,
    Callable[[TypeDescriptor, ExtractedField, DocumentFormat], CheckResult],
] = {
    BaseType.STRING: _check_string,
    BaseType.BOOL: _check_bool,
    BaseType.INTEGER: _check_integer,
    BaseType.FLOAT: _check_float,
    BaseType.DATETIME: _check_datetime,
    BaseType.GUID: _check_guid,
    BaseType.COLLECTION: _check_collection,
    BaseType.OBJECT: _check_object,
}


def check_compatibility(
    descriptor: TypeDescriptor,
    field: ExtractedField,
    document_format: DocumentFormat,
) -> CheckResult:
    """Decide whether *field* can populate a property of *descriptor*."""
    null_result = check_null(descriptor, field, document_format)
    if null_result is not None:
        return null_result
    return _CHECKS[descriptor.base_type](descriptor, field, document_format)
