from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mes_admin.api.deps import Principal, get_current_principal, get_db, require_roles
from mes_admin.schemas.pagination import PaginatedResponse
from mes_admin.schemas.permission import (
    Permission,
    PermissionCreate,
    PermissionLevel,
    PermissionUpdate,
)
from mes_admin.services import permission as permission_service

router = APIRouter(prefix="/permissions", tags=["permissions"])


@router.post("", response_model=Permission, status_code=status.HTTP_201_CREATED)
def create_new_permission(
    permission_data: PermissionCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """
    Create a permission for an application. Only admin users can create permissions.

    The function name is stored lowercased; (application, function, level)
    must be unique among non-deleted permissions.
    """
    permission = permission_service.create_permission(db, permission_data)
    return Permission.model_validate(permission)


@router.get("", response_model=PaginatedResponse[Permission])
def get_all_permissions(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Number of items per page"),
    application_id: UUID | None = Query(None, description="Filter by application"),
    function_name: str | None = Query(None, min_length=1, max_length=100),
    permission_level: PermissionLevel | None = Query(None),
    search: str | None = Query(None, min_length=1, max_length=100),
    include_deleted: bool = Query(False, description="Include soft-deleted permissions"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    permissions, total = permission_service.list_permissions(
        db,
        page=page,
        limit=limit,
        application_id=str(application_id) if application_id else None,
        function_name=function_name,
        permission_level=permission_level.value if permission_level else None,
        search=search,
        include_deleted=include_deleted,
    )
    return PaginatedResponse.build(
        [Permission.model_validate(p) for p in permissions], total, page, limit
    )


@router.get("/functions", response_model=list[str])
def get_available_functions(
    application_id: UUID = Query(..., description="Application to inspect"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Distinct function names with at least one live permission, sorted."""
    return permission_service.list_available_functions(db, str(application_id))


@router.get("/levels/{function_name}", response_model=list[str])
def get_available_levels(
    function_name: str,
    application_id: UUID = Query(..., description="Application to inspect"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return permission_service.list_available_levels(db, str(application_id), function_name)


@router.get("/grouped", response_model=dict[str, list[Permission]])
def get_permissions_grouped_by_function(
    application_id: UUID = Query(..., description="Application to inspect"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    grouped = permission_service.group_permissions_by_function(db, str(application_id))
    return {
        function_name: [Permission.model_validate(p) for p in permissions]
        for function_name, permissions in grouped.items()
    }


@router.get("/{permission_id}", response_model=Permission)
def get_permission_by_id(
    permission_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    permission = permission_service.get_permission(db, str(permission_id))
    return Permission.model_validate(permission)


@router.put("/{permission_id}", response_model=Permission)
def update_permission_by_id(
    permission_id: UUID,
    permission_data: PermissionUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """Update the display name and/or description of a permission."""
    permission = permission_service.update_permission(db, str(permission_id), permission_data)
    return Permission.model_validate(permission)


@router.delete("/{permission_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_permission_by_id(
    permission_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    permission_service.delete_permission(db, str(permission_id))


@router.patch("/{permission_id}/restore", response_model=Permission)
def restore_permission_by_id(
    permission_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    permission = permission_service.restore_permission(db, str(permission_id))
    return Permission.model_validate(permission)
