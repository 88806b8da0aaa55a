from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from mes_admin.api.deps import Principal, get_current_principal, get_db, require_roles
from mes_admin.schemas.permission import PermissionLevel
from mes_admin.schemas.user_permission import (
    GrantPermissionRequest,
    PermissionCheck,
    RevokePermissionRequest,
    SetUserPermissionsRequest,
    UserPermission,
)
from mes_admin.services import user_permission as user_permission_service

router = APIRouter(prefix="/user-permissions", tags=["user-permissions"])


@router.post("/grant", response_model=UserPermission)
def grant_permission(
    request: GrantPermissionRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """
    Grant a permission to a user. Only admin users can grant permissions.

    The granting admin is recorded as ``granted_by``.
    """
    user_permission = user_permission_service.grant_permission(
        db, request.user_id, str(request.permission_id), granted_by=principal.user_id
    )
    return UserPermission.model_validate(user_permission)


@router.post("/revoke", response_model=UserPermission)
def revoke_permission(
    request: RevokePermissionRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    user_permission = user_permission_service.revoke_permission(
        db, request.user_id, str(request.permission_id)
    )
    return UserPermission.model_validate(user_permission)


@router.get("/user/{user_id}", response_model=list[UserPermission])
def get_user_permissions(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Granted, non-deleted permission assignments of a user."""
    user_permissions = user_permission_service.list_user_permissions(db, user_id)
    return [UserPermission.model_validate(up) for up in user_permissions]


@router.get("/user/{user_id}/by-function", response_model=dict[str, list[str]])
def get_user_permissions_by_function(
    user_id: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return user_permission_service.get_user_permissions_by_function(db, user_id)


@router.put("/user/{user_id}/set", response_model=list[UserPermission])
def set_user_permissions(
    user_id: str,
    request: SetUserPermissionsRequest,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """
    Replace every permission assignment of a user.

    If any permission is unknown or deleted, nothing is changed.
    """
    user_permissions = user_permission_service.set_user_permissions(
        db,
        user_id,
        [str(permission_id) for permission_id in request.permission_ids],
        granted_by=principal.user_id,
    )
    return [UserPermission.model_validate(up) for up in user_permissions]


@router.get("/user/{user_id}/check", response_model=PermissionCheck)
def check_user_permission(
    user_id: str,
    function_name: str = Query(..., min_length=1, max_length=100),
    permission_level: PermissionLevel = Query(...),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    has_permission = user_permission_service.check_permission(
        db, user_id, function_name, permission_level.value
    )
    return PermissionCheck(
        user_id=user_id,
        function_name=function_name.strip().lower(),
        permission_level=permission_level,
        has_permission=has_permission,
    )
