from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

CODE_PATTERN = r"^[A-Z0-9_-]+$"


class ResponsibleCategory(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: str | None = None


class ResponsibleCategoryCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(None, max_length=500)


class Responsible(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    code_responsible: str
    name: str
    category_responsible_id: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class ResponsibleWithCategory(Responsible):
    category: ResponsibleCategory | None = Field(None, validation_alias="live_category")


class ResponsibleCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=100)
    code_responsible: str = Field(
        ...,
        min_length=1,
        max_length=50,
        pattern=CODE_PATTERN,
        description="Uppercase letters, numbers, hyphen and underscore",
    )
    category_responsible_id: UUID | None = None


class ResponsibleUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    code_responsible: str | None = Field(None, min_length=1, max_length=50, pattern=CODE_PATTERN)
    category_responsible_id: UUID | None = Field(None, description="Set to null to clear")

    @field_validator("name", "code_responsible")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class CategoryCount(BaseModel):
    category_name: str
    count: int


class ResponsibleStatistics(BaseModel):
    total_responsibles: int
    active_responsibles: int
    deleted_responsibles: int
    responsibles_with_category: int
    responsibles_without_category: int
    responsibles_by_category: list[CategoryCount]
