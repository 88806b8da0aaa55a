import logging

from sqlalchemy.orm import Session

import mes_admin.repositories.application as application_repo
import mes_admin.repositories.permission as permission_repo
from mes_admin.db.models.permission import Permission as PermissionModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.errors import DomainValidationError, DuplicateResourceError, NotFoundError
from mes_admin.schemas.permission import PermissionCreate, PermissionUpdate

logger = logging.getLogger(__name__)

lifecycle = SoftDeletePolicy(resource="Permission")


def normalize_function_name(function_name: str) -> str:
    """Function names are compared trimmed and lowercased."""
    normalized = function_name.strip().lower()
    if not normalized:
        raise DomainValidationError("Function name cannot be blank")
    return normalized


def _ensure_live_application(db: Session, application_id: str) -> None:
    application = application_repo.get_application_by_id(db, application_id)
    if not application or SoftDeletePolicy.is_deleted(application.deleted_at):
        raise NotFoundError("Application not found")


def _ensure_unique(
    db: Session, application_id: str, function_name: str, permission_level: str
) -> None:
    if permission_repo.get_permission_by_function_and_level(
        db, application_id, function_name, permission_level
    ):
        raise DuplicateResourceError(
            f"Permission already exists for function {function_name} "
            f"with level {permission_level}",
            field="function_name",
        )


def get_permission(db: Session, permission_id: str) -> PermissionModel:
    permission = permission_repo.get_permission_by_id(db, permission_id)
    if not permission:
        raise NotFoundError("Permission not found")
    return permission


def create_permission(db: Session, permission_data: PermissionCreate) -> PermissionModel:
    """
    Create a permission for an application.

    - Validates the application exists and is live
    - Enforces uniqueness of (application, function, level) among live permissions

    Raises:
        NotFoundError: If the application doesn't exist or is deleted
        DuplicateResourceError: If the permission already exists
    """
    application_id = str(permission_data.application_id)
    level = permission_data.permission_level.value
    _ensure_live_application(db, application_id)
    _ensure_unique(db, application_id, permission_data.function_name, level)

    permission = permission_repo.create_permission(
        db,
        application_id=application_id,
        function_name=permission_data.function_name,
        permission_level=level,
        display_name=permission_data.display_name,
        description=permission_data.description,
    )
    logger.info("Created permission %s:%s (%s)", permission.function_name, level, permission.id)
    return permission


def update_permission(
    db: Session, permission_id: str, permission_data: PermissionUpdate
) -> PermissionModel:
    permission = get_permission(db, permission_id)
    changes = permission_data.model_dump(exclude_unset=True)
    return permission_repo.update_permission(db, permission, changes)


def delete_permission(db: Session, permission_id: str) -> None:
    permission = get_permission(db, permission_id)
    lifecycle.ensure_deletable(deleted_at=permission.deleted_at)
    permission_repo.soft_delete_permission(db, permission)
    logger.info("Soft-deleted permission %s", permission.id)


def restore_permission(db: Session, permission_id: str) -> PermissionModel:
    """
    Restore a soft-deleted permission.

    Raises:
        NotFoundError: If the permission or its application doesn't exist or is deleted
        NotDeletedError: If the permission is not deleted
        DuplicateResourceError: If the same permission was recreated while it was deleted
    """
    permission = get_permission(db, permission_id)
    lifecycle.ensure_restorable(deleted_at=permission.deleted_at)
    _ensure_live_application(db, permission.application_id)
    _ensure_unique(
        db, permission.application_id, permission.function_name, permission.permission_level
    )
    permission = permission_repo.restore_permission(db, permission)
    logger.info("Restored permission %s", permission.id)
    return permission


def list_permissions(
    db: Session,
    page: int = 1,
    limit: int = 10,
    application_id: str | None = None,
    function_name: str | None = None,
    permission_level: str | None = None,
    search: str | None = None,
    include_deleted: bool = False,
) -> tuple[list[PermissionModel], int]:
    return permission_repo.get_all_permissions_paginated(
        db,
        page=page,
        limit=limit,
        application_id=application_id,
        function_name=function_name.strip().lower() if function_name else None,
        permission_level=permission_level,
        search=search,
        include_deleted=include_deleted,
    )


def list_available_functions(db: Session, application_id: str) -> list[str]:
    return permission_repo.get_available_functions(db, application_id)


def list_available_levels(db: Session, application_id: str, function_name: str) -> list[str]:
    return permission_repo.get_available_levels(
        db, application_id, normalize_function_name(function_name)
    )


def group_permissions_by_function(
    db: Session, application_id: str
) -> dict[str, list[PermissionModel]]:
    """Live permissions of an application keyed by function name."""
    grouped: dict[str, list[PermissionModel]] = {}
    for permission in permission_repo.get_permissions_by_application(db, application_id):
        grouped.setdefault(permission.function_name, []).append(permission)
    return grouped
