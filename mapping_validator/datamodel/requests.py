from typing import Annotated, Optional

from pydantic import BaseModel, Field

from mapping_validator.datamodel.document import DocumentFormat
from mapping_validator.datamodel.shape import TargetField


class ValidateMappingRequest(BaseModel):
    document: Annotated[
        str,
        Field(description="JSON or XML document text to validate."),
    ]
    format: Annotated[
        DocumentFormat,
        Field(
            description=(
                "Document format. "
                f"Allowed values: {', '.join(v.value for v in DocumentFormat)}."
            ),
        ),
    ] = DocumentFormat.JSON
    collection: Annotated[
        bool,
        Field(
            description="Treat the root as a list and validate its first element.",
        ),
    ] = False
    class_definition: Annotated[
        Optional[str],
        Field(
            description="Class-like source with 'public <type> <name> { get; set; }' properties.",
        ),
    ] = None
    fields: Annotated[
        list[TargetField],
        Field(
            description="Pre-parsed target fields. Used when class_definition is not given.",
        ),
    ] = []


class ParseShapeRequest(BaseModel):
    class_definition: str


class FormatJsonRequest(BaseModel):
    text: str
    compact: bool = False
    indent: Annotated[int, Field(ge=0, le=8)] = 2
