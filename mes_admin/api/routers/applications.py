from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mes_admin.api.deps import Principal, get_current_principal, get_db, require_roles
from mes_admin.schemas.application import (
    Application,
    ApplicationCreate,
    ApplicationStatistics,
    ApplicationUpdate,
)
from mes_admin.schemas.pagination import PaginatedResponse
from mes_admin.services import application as application_service

router = APIRouter(prefix="/applications", tags=["applications"])


@router.post("", response_model=Application, status_code=status.HTTP_201_CREATED)
def create_new_application(
    application_data: ApplicationCreate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """
    Create a new application. Only admin users can create applications.

    Name and display name must be unique among non-deleted applications.
    """
    application = application_service.create_application(db, application_data)
    return Application.model_validate(application)


@router.get("", response_model=PaginatedResponse[Application])
def get_all_applications(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Number of items per page"),
    search: str | None = Query(
        None, min_length=1, max_length=100, description="Case-insensitive partial match"
    ),
    include_deleted: bool = Query(False, description="Include soft-deleted applications"),
    is_active: bool | None = Query(None, description="Filter by active flag"),
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get applications with pagination, newest first."""
    applications, total = application_service.list_applications(
        db,
        page=page,
        limit=limit,
        search=search,
        include_deleted=include_deleted,
        is_active=is_active,
    )
    return PaginatedResponse.build(
        [Application.model_validate(app) for app in applications], total, page, limit
    )


@router.get("/statistics", response_model=ApplicationStatistics)
def get_application_statistics(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    return application_service.get_application_statistics(db)


@router.get("/active", response_model=list[Application])
def get_active_applications(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    applications = application_service.list_active_applications(db)
    return [Application.model_validate(app) for app in applications]


@router.get("/inactive", response_model=list[Application])
def get_inactive_applications(
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    applications = application_service.list_inactive_applications(db)
    return [Application.model_validate(app) for app in applications]


@router.get("/name/{name}", response_model=Application)
def get_application_by_name(
    name: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Get a live application by its exact name."""
    application = application_service.get_application_by_name(db, name)
    return Application.model_validate(application)


@router.get("/display-name/{display_name}", response_model=list[Application])
def get_applications_by_display_name(
    display_name: str,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    """Live applications whose display name contains the given text."""
    applications = application_service.search_applications_by_display_name(db, display_name)
    return [Application.model_validate(app) for app in applications]


@router.get("/{application_id}", response_model=Application)
def get_application_by_id(
    application_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(get_current_principal),
):
    application = application_service.get_application(db, str(application_id))
    return Application.model_validate(application)


@router.put("/{application_id}", response_model=Application)
def update_application_by_id(
    application_id: UUID,
    application_data: ApplicationUpdate,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """
    Update an application. Only admin users can update applications.

    Fields left out of the body are not modified.
    """
    application = application_service.update_application(
        db, str(application_id), application_data
    )
    return Application.model_validate(application)


@router.delete("/{application_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_application_by_id(
    application_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """Soft-delete an application. Deleting an already deleted application fails with 409."""
    application_service.delete_application(db, str(application_id))


@router.patch("/{application_id}/restore", response_model=Application)
def restore_application_by_id(
    application_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require_roles("admin")),
):
    """Restore a soft-deleted application. Restoring a live application fails with 409."""
    application = application_service.restore_application(db, str(application_id))
    return Application.model_validate(application)
