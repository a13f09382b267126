"""Declared type text → TypeDescriptor.

Nullability markers (``int?``, ``Nullable<int>``) are stripped first, then
the remaining token is classified against static alias tables. Anything
unrecognized resolves to ``BaseType.OBJECT`` so an unfamiliar custom type
never blocks validation.
"""

from mapping_validator.datamodel.shape import BaseType, TypeDescriptor

# ---------------------------------------------------------------------------
# Alias tables (keys are lower-cased, without a "System." qualifier)
# ---------------------------------------------------------------------------
_COLLECTION_PREFIXES: tuple[str, ...] = (
    "list<",
    "ilist<",
    "ienumerable<",
    "icollection<",
    "ireadonlylist<",
    "ireadonlycollection<",
)

_TYPE_ALIASES: dict[str, BaseType] = {
    "string": BaseType.STRING,
    "bool": BaseType.BOOL,
    "boolean": BaseType.BOOL,
    # 8/16/32/64-bit signed and unsigned
    "sbyte": BaseType.INTEGER,
    "byte": BaseType.INTEGER,
    "short": BaseType.INTEGER,
    "ushort": BaseType.INTEGER,
    "int": BaseType.INTEGER,
    "uint": BaseType.INTEGER,
    "long": BaseType.INTEGER,
    "ulong": BaseType.INTEGER,
    "int16": BaseType.INTEGER,
    "uint16": BaseType.INTEGER,
    "int32": BaseType.INTEGER,
    "uint32": BaseType.INTEGER,
    "int64": BaseType.INTEGER,
    "uint64": BaseType.INTEGER,
    "float": BaseType.FLOAT,
    "single": BaseType.FLOAT,
    "double": BaseType.FLOAT,
    "decimal": BaseType.FLOAT,
    "datetime": BaseType.DATETIME,
    "datetimeoffset": BaseType.DATETIME,
    "guid": BaseType.GUID,
}

_NULLABLE_WRAPPER = "nullable<"
_NAMESPACE_PREFIX = "system."


def _strip_nullable(text: str) -> tuple[str, bool]:
    """Return (base_text, nullable) for a declared type."""
    if text.endswith("?"):
        return text[:-1].strip(), True
    if text.lower().startswith(_NULLABLE_WRAPPER) and text.endswith(">"):
        return text[len(_NULLABLE_WRAPPER) : -1].strip(), True
    return text, False


def _is_collection(text: str) -> bool:
    if text.endswith("[]"):
        return True
    lowered = text.lower()
    if lowered.startswith(_NAMESPACE_PREFIX + "collections.generic."):
        lowered = lowered[len(_NAMESPACE_PREFIX + "collections.generic.") :]
    return lowered.startswith(_COLLECTION_PREFIXES)


def _classify(text: str) -> BaseType:
    if _is_collection(text):
        return BaseType.COLLECTION
    key = text.lower()
    if key.startswith(_NAMESPACE_PREFIX):
        key = key[len(_NAMESPACE_PREFIX) :]
    return _TYPE_ALIASES.get(key, BaseType.OBJECT)


def resolve_type_descriptor(type_text: str) -> TypeDescriptor:
    type_name = (type_text or "").strip()
    base_text, nullable = _strip_nullable(type_name)
    return TypeDescriptor(
        base_type=_classify(base_text),
        nullable=nullable,
        type_name=type_name,
    )
