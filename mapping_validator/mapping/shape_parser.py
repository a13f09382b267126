import logging
import re

from mapping_validator.datamodel.shape import TargetField

_log = logging.getLogger(__name__)

_COMMENT_PATTERN = re.compile(r"//[^\n]*|/\*.*?\*/", re.DOTALL)

# public [modifiers] <type> <name> { get; set; }
_PROPERTY_PATTERN = re.compile(
    r"\bpublic\s+"
    r"(?:(?:virtual|override|required|new|static|sealed|abstract)\s+)*"
    r"(?P<type>[\w.]+(?:\s*<[^{};=()]*>)?(?:\s*\[\s*\])*\s*\??)"
    r"\s+(?P<name>[A-Za-z_]\w*)\s*"
    r"\{\s*get\s*;\s*(?:(?:private|protected|internal)\s+)?(?:set|init)\s*;\s*\}"
)


def _normalize_type(type_text: str) -> str:
    compact = re.sub(r"\s+", "", type_text)
    return compact.replace(",", ", ")


def parse_target_fields(class_text: str) -> list[TargetField]:
    """Extract declared auto-properties, in declaration order."""
    if not class_text:
        return []
    source = _COMMENT_PATTERN.sub(" ", class_text)
    fields = [
        TargetField(
            name=match.group("name"),
            type_name=_normalize_type(match.group("type")),
        )
        for match in _PROPERTY_PATTERN.finditer(source)
    ]
    _log.debug("Parsed %d properties from class definition", len(fields))
    return fields
