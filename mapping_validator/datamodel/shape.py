import enum

from pydantic import BaseModel, ConfigDict, Field


class BaseType(str, enum.Enum):
    STRING = "string"
    BOOL = "bool"
    INTEGER = "integer"
    FLOAT = "float"
    DATETIME = "datetime"
    GUID = "guid"
    COLLECTION = "collection"
    OBJECT = "object"


# Base types that accept null/empty values without a nullable marker.
INHERENTLY_NULLABLE: frozenset[BaseType] = frozenset(
    {BaseType.STRING, BaseType.OBJECT, BaseType.COLLECTION}
)


class TargetField(BaseModel):
    """A declared property of the target shape."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, description="Declared property name")
    type_name: str = Field(description="Declared type text, e.g. 'int?'")


class TypeDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    base_type: BaseType
    nullable: bool = False
    type_name: str = ""
