import logging

from sqlalchemy.orm import Session

import mes_admin.repositories.permission as permission_repo
import mes_admin.repositories.user_permission as user_permission_repo
from mes_admin.services.permission import normalize_function_name
from mes_admin.db.models.user_permission import UserPermission as UserPermissionModel
from mes_admin.errors import NotFoundError

logger = logging.getLogger(__name__)


def grant_permission(
    db: Session, user_id: str, permission_id: str, granted_by: str | None = None
) -> UserPermissionModel:
    """
    Grant a permission to a user.

    Re-granting an existing assignment flips it back to granted instead of
    creating a second row.

    Raises:
        NotFoundError: If the permission doesn't exist or is deleted
    """
    if not permission_repo.get_permission_by_id(db, permission_id, live_only=True):
        raise NotFoundError("Permission not found")
    user_permission = user_permission_repo.grant_permission(
        db, user_id, permission_id, granted_by=granted_by
    )
    logger.info("Granted permission %s to user %s by %s", permission_id, user_id, granted_by)
    return user_permission


def revoke_permission(db: Session, user_id: str, permission_id: str) -> UserPermissionModel:
    """
    Revoke a permission from a user, keeping the assignment row.

    Raises:
        NotFoundError: If the user has no assignment for the permission
    """
    user_permission = user_permission_repo.get_user_permission(db, user_id, permission_id)
    if not user_permission:
        raise NotFoundError("User permission not found")
    user_permission = user_permission_repo.revoke_permission(db, user_permission)
    logger.info("Revoked permission %s from user %s", permission_id, user_id)
    return user_permission


def list_user_permissions(db: Session, user_id: str) -> list[UserPermissionModel]:
    return user_permission_repo.get_granted_user_permissions(db, user_id)


def set_user_permissions(
    db: Session, user_id: str, permission_ids: list[str], granted_by: str | None = None
) -> list[UserPermissionModel]:
    """
    Replace every assignment of a user with the given permissions.

    All permissions are validated before anything is written.

    Raises:
        NotFoundError: If any permission doesn't exist or is deleted
    """
    wanted = list(dict.fromkeys(permission_ids))
    found = {p.id for p in permission_repo.get_live_permissions_by_ids(db, wanted)}
    missing = [permission_id for permission_id in wanted if permission_id not in found]
    if missing:
        raise NotFoundError(f"Permission {missing[0]} not found")
    user_permissions = user_permission_repo.replace_user_permissions(
        db, user_id, wanted, granted_by=granted_by
    )
    logger.info("Replaced permissions of user %s (%d granted)", user_id, len(user_permissions))
    return user_permissions


def check_permission(db: Session, user_id: str, function_name: str, permission_level: str) -> bool:
    return user_permission_repo.has_permission(
        db, user_id, normalize_function_name(function_name), permission_level
    )


def get_user_permissions_by_function(db: Session, user_id: str) -> dict[str, list[str]]:
    """Granted permission levels of a user keyed by function name."""
    by_function: dict[str, list[str]] = {}
    for user_permission in list_user_permissions(db, user_id):
        permission = user_permission.permission
        if permission is None or permission.deleted_at is not None:
            continue
        by_function.setdefault(permission.function_name, []).append(permission.permission_level)
    return by_function
