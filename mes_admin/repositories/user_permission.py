from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from mes_admin.db.base import utcnow
from mes_admin.db.models.permission import Permission as PermissionModel
from mes_admin.db.models.user_permission import UserPermission as UserPermissionModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.errors import DuplicateResourceError
from mes_admin.repositories.base import commit_and_refresh

_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=UserPermissionModel.deleted_at)
_permission_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=PermissionModel.deleted_at)

DUPLICATE_MESSAGE = "The permission is already assigned to this user"


def get_user_permission(
    db: Session, user_id: str, permission_id: str
) -> UserPermissionModel | None:
    """Get the live grant row for (user, permission), if any."""
    return (
        db.query(UserPermissionModel)
        .filter(
            UserPermissionModel.user_id == user_id,
            UserPermissionModel.permission_id == permission_id,
            _live,
        )
        .first()
    )


def get_granted_user_permissions(db: Session, user_id: str) -> list[UserPermissionModel]:
    """Live, granted rows for a user, with their permission loaded."""
    return (
        db.query(UserPermissionModel)
        .options(joinedload(UserPermissionModel.permission))
        .filter(
            UserPermissionModel.user_id == user_id,
            UserPermissionModel.granted.is_(True),
            _live,
        )
        .order_by(UserPermissionModel.created_at, UserPermissionModel.id)
        .all()
    )


def has_permission(db: Session, user_id: str, function_name: str, permission_level: str) -> bool:
    match = (
        db.query(UserPermissionModel.id)
        .join(PermissionModel, UserPermissionModel.permission_id == PermissionModel.id)
        .filter(
            UserPermissionModel.user_id == user_id,
            UserPermissionModel.granted.is_(True),
            _live,
            PermissionModel.function_name == function_name,
            PermissionModel.permission_level == permission_level,
            _permission_live,
        )
        .first()
    )
    return match is not None


def _stage_grant(
    db: Session, user_id: str, permission_id: str, granted_by: str | None
) -> UserPermissionModel:
    existing = get_user_permission(db, user_id, permission_id)
    if existing is not None:
        existing.granted = True
        existing.granted_by = granted_by
        existing.updated_at = utcnow()
        return existing
    db_user_permission = UserPermissionModel(
        user_id=user_id,
        permission_id=permission_id,
        granted=True,
        granted_by=granted_by,
        created_at=utcnow(),
    )
    db.add(db_user_permission)
    return db_user_permission


def grant_permission(
    db: Session, user_id: str, permission_id: str, granted_by: str | None = None
) -> UserPermissionModel:
    """Grant a permission, reusing the live row for the pair when one exists."""
    user_permission = _stage_grant(db, user_id, permission_id, granted_by)
    return commit_and_refresh(db, user_permission, duplicate_message=DUPLICATE_MESSAGE)


def revoke_permission(db: Session, user_permission: UserPermissionModel) -> UserPermissionModel:
    user_permission.granted = False
    user_permission.updated_at = utcnow()
    db.commit()
    db.refresh(user_permission)
    return user_permission


def replace_user_permissions(
    db: Session, user_id: str, permission_ids: list[str], granted_by: str | None = None
) -> list[UserPermissionModel]:
    """Soft-delete every live row of the user, then grant the given permissions.

    Both steps are committed together.
    """
    now = utcnow()
    for existing in db.query(UserPermissionModel).filter(
        UserPermissionModel.user_id == user_id, _live
    ):
        existing.deleted_at = now
    # Flush so the re-grants below do not find the rows we just retired
    db.flush()

    staged = [
        _stage_grant(db, user_id, permission_id, granted_by)
        for permission_id in dict.fromkeys(permission_ids)
    ]
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateResourceError(DUPLICATE_MESSAGE) from exc
    for user_permission in staged:
        db.refresh(user_permission)
    return staged
