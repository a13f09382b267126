import enum
from dataclasses import dataclass, field
from typing import Any, Optional


class DocumentFormat(str, enum.Enum):
    JSON = "json"
    XML = "xml"


class ValueKind(str, enum.Enum):
    STRING = "string"
    NUMBER = "number"
    BOOL = "bool"
    NULL = "null"
    ARRAY = "array"
    OBJECT = "object"
    ATTRIBUTE = "attribute"


class NilCause(str, enum.Enum):
    EXPLICIT_NULL = "explicit null"
    XSI_NIL = "xsi:nil"
    EMPTY_ELEMENT = "empty element"
    EMPTY_ATTRIBUTE = "empty attribute"


@dataclass(frozen=True)
class ExtractedField:
    """A source field of the selected document node.

    ``raw`` is a handle into the parse tree: the decoded JSON value, an
    ``Element``, a list of sibling elements, or an attribute string.
    """

    name: str
    kind: ValueKind
    raw: Any
    display_value: str
    nil_cause: Optional[NilCause] = None

    @property
    def is_nil(self) -> bool:
        return self.nil_cause is not None


@dataclass
class ExtractedDocument:
    format: DocumentFormat
    # Case-insensitive (lower-cased) name -> field.
    fields: dict[str, ExtractedField] = field(default_factory=dict)
    # XML attributes, consulted only when no element of that name exists.
    attributes: dict[str, ExtractedField] = field(default_factory=dict)
    # XML only: lower-cased element name -> every sibling element with it.
    groups: dict[str, list[Any]] = field(default_factory=dict)
    names: list[str] = field(default_factory=list)

    def lookup(self, name: str) -> Optional[ExtractedField]:
        key = name.lower()
        found = self.fields.get(key)
        if found is None:
            found = self.attributes.get(key)
        return found
