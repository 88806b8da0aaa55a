from datetime import datetime
from enum import Enum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PermissionLevel(str, Enum):
    READ = "read"
    WRITE = "write"
    UPDATE = "update"
    DELETE = "delete"


class Permission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    application_id: str
    function_name: str
    permission_level: str
    display_name: str
    description: str | None = None
    created_at: datetime
    updated_at: datetime | None = None
    deleted_at: datetime | None = None


class PermissionCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    application_id: UUID
    function_name: str = Field(..., min_length=1, max_length=100)
    permission_level: PermissionLevel
    display_name: str = Field(..., min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)

    @field_validator("function_name", mode="before")
    @classmethod
    def normalize_function_name(cls, v):
        """Function names are stored trimmed and lowercased."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class PermissionUpdate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    display_name: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, max_length=500)

    @field_validator("display_name")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("Display name cannot be null")
        return v
