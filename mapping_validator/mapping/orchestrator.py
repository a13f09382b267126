"""Validate a document against a declared target shape.

The run is a pure function of its inputs: the document is extracted once,
then every declared field produces exactly one :class:`FieldMappingResult`.
Only document-level problems (malformed text, wrong root shape, nothing
declared) abort early, and they are reported through
``EntityMappingResult.error_message`` rather than raised.
"""

import logging
from typing import Iterable, Optional, Union

from mapping_validator.datamodel.document import (
    DocumentFormat,
    ExtractedDocument,
    ExtractedField,
)
from mapping_validator.datamodel.responses import (
    EntityMappingResult,
    FieldMappingResult,
)
from mapping_validator.datamodel.shape import BaseType, TargetField
from mapping_validator.mapping.compatibility import check_compatibility
from mapping_validator.mapping.extractors import (
    DocumentError,
    extract_fields,
    probe_repeated_elements,
)
from mapping_validator.mapping.fuzzy import suggest_field_name
from mapping_validator.mapping.type_resolver import resolve_type_descriptor

_log = logging.getLogger(__name__)

NO_FIELDS_MESSAGE = "No fields declared"
NOT_FOUND_REASON = "field not found in source"


def _lookup(
    document: ExtractedDocument, target: TargetField, base_type: BaseType
) -> Optional[ExtractedField]:
    if base_type is BaseType.COLLECTION:
        repeated = probe_repeated_elements(document, target.name)
        if repeated is not None:
            return repeated
    return document.lookup(target.name)


def _validate_field(
    document: ExtractedDocument, target: TargetField
) -> FieldMappingResult:
    descriptor = resolve_type_descriptor(target.type_name)
    source = _lookup(document, target, descriptor.base_type)

    if source is None:
        suggestion = suggest_field_name(target.name, document.names)
        reason = NOT_FOUND_REASON
        if suggestion is not None:
            reason = f"{reason} (did you mean '{suggestion}'?)"
        return FieldMappingResult(
            property_name=target.name,
            property_type=target.type_name,
            success=False,
            reason=reason,
        )

    success, reason = check_compatibility(descriptor, source, document.format)
    return FieldMappingResult(
        property_name=target.name,
        property_type=target.type_name,
        matched_source_name=source.name,
        source_value_kind=source.kind.value,
        source_value_preview=source.display_value,
        success=success,
        reason=reason,
    )


def validate_mapping(
    document: str,
    target_fields: Iterable[TargetField],
    document_format: Union[DocumentFormat, str] = DocumentFormat.JSON,
    collection: bool = False,
) -> EntityMappingResult:
    """Check that *document* can populate every field of the target shape."""
    targets = list(target_fields)
    if not targets:
        _log.info("Mapping validation aborted: %s", NO_FIELDS_MESSAGE)
        return EntityMappingResult.from_error(NO_FIELDS_MESSAGE)

    document_format = DocumentFormat(document_format)
    try:
        extracted = extract_fields(document, document_format, collection)
    except DocumentError as exc:
        _log.info("Mapping validation aborted: %s", exc)
        return EntityMappingResult.from_error(str(exc))

    results: list[FieldMappingResult] = []
    for target in targets:
        result = _validate_field(extracted, target)
        _log.debug(
            "Field %s (%s): %s%s",
            target.name,
            target.type_name,
            "ok" if result.success else "failed",
            f" - {result.reason}" if result.reason else "",
        )
        results.append(result)

    report = EntityMappingResult.from_fields(results)
    _log.info(
        "Mapping validation finished: %d/%d fields matched (%s)",
        report.success_count,
        report.total_fields,
        document_format.value,
    )
    return report
