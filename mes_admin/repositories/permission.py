from sqlalchemy import or_
from sqlalchemy.orm import Session

from mes_admin.db.base import utcnow
from mes_admin.db.models.permission import Permission as PermissionModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.repositories.base import commit_and_refresh, paginate

_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=PermissionModel.deleted_at)

DUPLICATE_MESSAGE = "A permission with this function and level already exists for the application"


def get_permission_by_id(
    db: Session, permission_id: str, live_only: bool = False
) -> PermissionModel | None:
    query = db.query(PermissionModel).filter(PermissionModel.id == permission_id)
    if live_only:
        query = query.filter(_live)
    return query.first()


def get_live_permissions_by_ids(db: Session, permission_ids: list[str]) -> list[PermissionModel]:
    if not permission_ids:
        return []
    return db.query(PermissionModel).filter(PermissionModel.id.in_(permission_ids), _live).all()


def get_permission_by_function_and_level(
    db: Session, application_id: str, function_name: str, permission_level: str
) -> PermissionModel | None:
    """Get the live permission for (application, function, level), if any."""
    return (
        db.query(PermissionModel)
        .filter(
            PermissionModel.application_id == application_id,
            PermissionModel.function_name == function_name,
            PermissionModel.permission_level == permission_level,
            _live,
        )
        .first()
    )


def get_all_permissions_paginated(
    db: Session,
    page: int = 1,
    limit: int = 10,
    application_id: str | None = None,
    function_name: str | None = None,
    permission_level: str | None = None,
    search: str | None = None,
    include_deleted: bool = False,
) -> tuple[list[PermissionModel], int]:
    query = db.query(PermissionModel)
    if not include_deleted:
        query = query.filter(_live)
    if application_id is not None:
        query = query.filter(PermissionModel.application_id == application_id)
    if function_name is not None:
        query = query.filter(PermissionModel.function_name == function_name)
    if permission_level is not None:
        query = query.filter(PermissionModel.permission_level == permission_level)
    if search:
        query = query.filter(
            or_(
                PermissionModel.function_name.icontains(search, autoescape=True),
                PermissionModel.display_name.icontains(search, autoescape=True),
            )
        )
    return paginate(
        query,
        PermissionModel.created_at.desc(),
        PermissionModel.id,
        page=page,
        limit=limit,
    )


def get_permissions_by_application(db: Session, application_id: str) -> list[PermissionModel]:
    return (
        db.query(PermissionModel)
        .filter(PermissionModel.application_id == application_id, _live)
        .order_by(PermissionModel.function_name, PermissionModel.permission_level)
        .all()
    )


def get_available_functions(db: Session, application_id: str) -> list[str]:
    rows = (
        db.query(PermissionModel.function_name)
        .filter(PermissionModel.application_id == application_id, _live)
        .distinct()
        .order_by(PermissionModel.function_name)
        .all()
    )
    return [row[0] for row in rows]


def get_available_levels(db: Session, application_id: str, function_name: str) -> list[str]:
    rows = (
        db.query(PermissionModel.permission_level)
        .filter(
            PermissionModel.application_id == application_id,
            PermissionModel.function_name == function_name,
            _live,
        )
        .distinct()
        .order_by(PermissionModel.permission_level)
        .all()
    )
    return [row[0] for row in rows]


def create_permission(
    db: Session,
    application_id: str,
    function_name: str,
    permission_level: str,
    display_name: str,
    description: str | None = None,
) -> PermissionModel:
    """Create a new permission in the database. Pure data access - no business logic."""
    db_permission = PermissionModel(
        application_id=application_id,
        function_name=function_name,
        permission_level=permission_level,
        display_name=display_name,
        description=description,
        created_at=utcnow(),
    )
    db.add(db_permission)
    return commit_and_refresh(db, db_permission, duplicate_message=DUPLICATE_MESSAGE)


def update_permission(db: Session, permission: PermissionModel, changes: dict) -> PermissionModel:
    for field, value in changes.items():
        setattr(permission, field, value)
    permission.updated_at = utcnow()
    db.commit()
    db.refresh(permission)
    return permission


def soft_delete_permission(db: Session, permission: PermissionModel) -> PermissionModel:
    permission.deleted_at = utcnow()
    db.commit()
    db.refresh(permission)
    return permission


def restore_permission(db: Session, permission: PermissionModel) -> PermissionModel:
    permission.deleted_at = None
    permission.updated_at = utcnow()
    return commit_and_refresh(db, permission, duplicate_message=DUPLICATE_MESSAGE)
