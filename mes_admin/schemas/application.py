from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

NAME_PATTERN = r"^[a-z0-9_-]+$"


class Application(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    display_name: str
    description: str | None = None
    is_active: bool
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class ApplicationCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=100,
        pattern=NAME_PATTERN,
        description="Lowercase letters, numbers, hyphen and underscore",
    )
    display_name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)
    is_active: bool = True


class ApplicationUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str | None = Field(None, min_length=1, max_length=100, pattern=NAME_PATTERN)
    display_name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500, description="Set to null to clear")
    is_active: bool | None = None

    @field_validator("name", "display_name", "is_active")
    @classmethod
    def reject_null(cls, v):
        """These fields may be omitted but never cleared."""
        if v is None:
            raise ValueError("Field cannot be null")
        return v


class ApplicationStatistics(BaseModel):
    total_applications: int
    active_applications: int
    deleted_applications: int
    applications_with_description: int
    applications_without_description: int
