from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from mapping_validator.datamodel.shape import TargetField


# Status
class HealthCheckResponse(BaseModel):
    status: str = "ok"


class FieldMappingResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    property_name: str
    property_type: str
    matched_source_name: Optional[str] = None
    source_value_kind: Optional[str] = None
    source_value_preview: Optional[str] = None
    success: bool
    reason: Optional[str] = None


class EntityMappingResult(BaseModel):
    success: bool = False
    total_fields: int = 0
    success_count: int = 0
    failed_count: int = 0
    error_message: Optional[str] = Field(
        None, description="Set only when the document could not be validated at all"
    )
    fields: list[FieldMappingResult] = []

    @classmethod
    def from_error(cls, message: str) -> "EntityMappingResult":
        return cls(success=False, error_message=message)

    @classmethod
    def from_fields(cls, fields: list[FieldMappingResult]) -> "EntityMappingResult":
        success_count = sum(1 for item in fields if item.success)
        failed_count = len(fields) - success_count
        return cls(
            success=failed_count == 0,
            total_fields=len(fields),
            success_count=success_count,
            failed_count=failed_count,
            fields=fields,
        )


class ParseShapeResponse(BaseModel):
    fields: list[TargetField] = Field([], description="Declared properties in order")


class FormatJsonResponse(BaseModel):
    result: str
