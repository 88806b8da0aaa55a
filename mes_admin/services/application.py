import logging

from sqlalchemy.orm import Session

import mes_admin.repositories.application as application_repo
from mes_admin.db.models.application import Application as ApplicationModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.errors import DuplicateResourceError, NotFoundError
from mes_admin.schemas.application import ApplicationCreate, ApplicationUpdate

logger = logging.getLogger(__name__)

lifecycle = SoftDeletePolicy(resource="Application")


def _ensure_unique(
    db: Session,
    name: str | None,
    display_name: str | None,
    exclude_id: str | None = None,
) -> None:
    if name is not None and application_repo.get_application_by_name(
        db, name, exclude_id=exclude_id
    ):
        raise DuplicateResourceError(
            f"An application with name '{name}' already exists", field="name"
        )
    if display_name is not None and application_repo.get_application_by_display_name(
        db, display_name, exclude_id=exclude_id
    ):
        raise DuplicateResourceError(
            f"An application with display name '{display_name}' already exists",
            field="display_name",
        )


def get_application(db: Session, application_id: str) -> ApplicationModel:
    application = application_repo.get_application_by_id(db, application_id)
    if not application:
        raise NotFoundError("Application not found")
    return application


def create_application(db: Session, application_data: ApplicationCreate) -> ApplicationModel:
    """
    Create an application with domain validation.

    - Enforces uniqueness of name and display name among live applications

    Raises:
        DuplicateResourceError: If name or display name is already in use
    """
    _ensure_unique(db, application_data.name, application_data.display_name)
    application = application_repo.create_application(
        db,
        name=application_data.name,
        display_name=application_data.display_name,
        description=application_data.description,
        is_active=application_data.is_active,
    )
    logger.info("Created application %s (%s)", application.id, application.name)
    return application


def update_application(
    db: Session, application_id: str, application_data: ApplicationUpdate
) -> ApplicationModel:
    """
    Partially update an application.

    Only fields present in the request are written. Name and display name are
    re-checked for uniqueness, ignoring the application itself.

    Raises:
        NotFoundError: If the application doesn't exist
        DuplicateResourceError: If the new name or display name is already in use
    """
    application = get_application(db, application_id)
    changes = application_data.model_dump(exclude_unset=True)
    _ensure_unique(
        db,
        changes.get("name"),
        changes.get("display_name"),
        exclude_id=application.id,
    )
    return application_repo.update_application(db, application, changes)


def delete_application(db: Session, application_id: str) -> None:
    """
    Soft-delete an application.

    Raises:
        NotFoundError: If the application doesn't exist
        AlreadyDeletedError: If the application is already deleted
    """
    application = get_application(db, application_id)
    lifecycle.ensure_deletable(deleted_at=application.deleted_at)
    application_repo.soft_delete_application(db, application)
    logger.info("Soft-deleted application %s", application.id)


def restore_application(db: Session, application_id: str) -> ApplicationModel:
    """
    Restore a soft-deleted application.

    Raises:
        NotFoundError: If the application doesn't exist
        NotDeletedError: If the application is not deleted
        DuplicateResourceError: If its name or display name was taken while it was deleted
    """
    application = get_application(db, application_id)
    lifecycle.ensure_restorable(deleted_at=application.deleted_at)
    _ensure_unique(db, application.name, application.display_name, exclude_id=application.id)
    application = application_repo.restore_application(db, application)
    logger.info("Restored application %s", application.id)
    return application


def list_applications(
    db: Session,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    include_deleted: bool = False,
    is_active: bool | None = None,
) -> tuple[list[ApplicationModel], int]:
    return application_repo.get_all_applications_paginated(
        db,
        page=page,
        limit=limit,
        search=search,
        include_deleted=include_deleted,
        is_active=is_active,
    )


def get_application_by_name(db: Session, name: str) -> ApplicationModel:
    application = application_repo.get_application_by_name(db, name)
    if not application:
        raise NotFoundError("Application not found")
    return application


def search_applications_by_display_name(db: Session, display_name: str) -> list[ApplicationModel]:
    return application_repo.search_applications_by_display_name(db, display_name)


def list_active_applications(db: Session) -> list[ApplicationModel]:
    return application_repo.get_applications_by_active_flag(db, is_active=True)


def list_inactive_applications(db: Session) -> list[ApplicationModel]:
    return application_repo.get_applications_by_active_flag(db, is_active=False)


def get_application_statistics(db: Session) -> dict[str, int]:
    return application_repo.get_application_statistics(db)
