from sqlalchemy import or_
from sqlalchemy.orm import Session

from mes_admin.db.base import utcnow
from mes_admin.db.models.application import Application as ApplicationModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.repositories.base import commit_and_refresh, paginate

_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=ApplicationModel.deleted_at)
_deleted = SoftDeletePolicy.sqlalchemy_deleted_predicate(deleted_col=ApplicationModel.deleted_at)


def get_application_by_id(db: Session, application_id: str) -> ApplicationModel | None:
    """Get an application by ID, whether live or soft-deleted."""
    return db.query(ApplicationModel).filter(ApplicationModel.id == application_id).first()


def get_application_by_name(
    db: Session, name: str, exclude_id: str | None = None
) -> ApplicationModel | None:
    """Get a live application by exact name."""
    query = db.query(ApplicationModel).filter(ApplicationModel.name == name, _live)
    if exclude_id is not None:
        query = query.filter(ApplicationModel.id != exclude_id)
    return query.first()


def get_application_by_display_name(
    db: Session, display_name: str, exclude_id: str | None = None
) -> ApplicationModel | None:
    """Get a live application by exact display name."""
    query = db.query(ApplicationModel).filter(
        ApplicationModel.display_name == display_name, _live
    )
    if exclude_id is not None:
        query = query.filter(ApplicationModel.id != exclude_id)
    return query.first()


def get_all_applications_paginated(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    include_deleted: bool = False,
    is_active: bool | None = None,
) -> tuple[list[ApplicationModel], int]:
    """
    Get applications with pagination, newest first.

    Args:
        page: Page number (1-indexed)
        limit: Number of items per page
        search: Case-insensitive partial match on name, display name or description
        include_deleted: Also return soft-deleted applications
        is_active: Optional filter on the active flag

    Returns:
        Tuple of (list of applications, total count)
    """
    query = db.query(ApplicationModel)
    if not include_deleted:
        query = query.filter(_live)
    if is_active is not None:
        query = query.filter(ApplicationModel.is_active == is_active)
    if search:
        query = query.filter(
            or_(
                ApplicationModel.name.icontains(search, autoescape=True),
                ApplicationModel.display_name.icontains(search, autoescape=True),
                ApplicationModel.description.icontains(search, autoescape=True),
            )
        )
    return paginate(
        query,
        ApplicationModel.created_at.desc(),
        ApplicationModel.id,
        page=page,
        limit=limit,
    )


def search_applications_by_display_name(db: Session, display_name: str) -> list[ApplicationModel]:
    """Live applications whose display name contains the given text."""
    return (
        db.query(ApplicationModel)
        .filter(ApplicationModel.display_name.icontains(display_name, autoescape=True), _live)
        .order_by(ApplicationModel.display_name)
        .all()
    )


def get_applications_by_active_flag(db: Session, is_active: bool) -> list[ApplicationModel]:
    return (
        db.query(ApplicationModel)
        .filter(ApplicationModel.is_active == is_active, _live)
        .order_by(ApplicationModel.display_name)
        .all()
    )


def create_application(
    db: Session,
    name: str,
    display_name: str,
    description: str | None = None,
    is_active: bool = True,
) -> ApplicationModel:
    """Create a new application in the database. Pure data access - no business logic."""
    db_application = ApplicationModel(
        name=name,
        display_name=display_name,
        description=description,
        is_active=is_active,
        created_at=utcnow(),
    )
    db.add(db_application)
    return commit_and_refresh(
        db, db_application, duplicate_message="An application with this name already exists"
    )


def update_application(
    db: Session, application: ApplicationModel, changes: dict
) -> ApplicationModel:
    """Apply the given field changes and refresh updated_at."""
    for field, value in changes.items():
        setattr(application, field, value)
    application.updated_at = utcnow()
    return commit_and_refresh(
        db, application, duplicate_message="An application with this name already exists"
    )


def soft_delete_application(db: Session, application: ApplicationModel) -> ApplicationModel:
    application.deleted_at = utcnow()
    db.commit()
    db.refresh(application)
    return application


def restore_application(db: Session, application: ApplicationModel) -> ApplicationModel:
    application.deleted_at = None
    application.updated_at = utcnow()
    return commit_and_refresh(
        db,
        application,
        duplicate_message="Cannot restore application: its name is already used by another application",
    )


def get_application_statistics(db: Session) -> dict[str, int]:
    query = db.query(ApplicationModel)
    return {
        "total_applications": query.count(),
        "active_applications": query.filter(ApplicationModel.is_active.is_(True), _live).count(),
        "deleted_applications": query.filter(_deleted).count(),
        "applications_with_description": query.filter(
            ApplicationModel.description.isnot(None), _live
        ).count(),
        "applications_without_description": query.filter(
            ApplicationModel.description.is_(None), _live
        ).count(),
    }
