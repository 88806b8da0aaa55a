from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from mes_admin.schemas.permission import PermissionLevel


class UserPermission(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    permission_id: str
    granted: bool
    granted_by: str | None = None
    created_at: datetime
    updated_at: datetime | None = None


class GrantPermissionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    permission_id: UUID


class RevokePermissionRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    permission_id: UUID


class SetUserPermissionsRequest(BaseModel):
    permission_ids: list[UUID]


class PermissionCheck(BaseModel):
    user_id: str
    function_name: str
    permission_level: PermissionLevel
    has_permission: bool
