from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from mes_admin.api.deps import get_db, get_tenant_id
from mes_admin.schemas.pagination import PaginatedResponse
from mes_admin.schemas.responsible import (
    Responsible,
    ResponsibleCreate,
    ResponsibleStatistics,
    ResponsibleUpdate,
    ResponsibleWithCategory,
)
from mes_admin.services import responsible as responsible_service

router = APIRouter(prefix="/responsibles", tags=["responsibles"])


@router.post("", response_model=Responsible, status_code=status.HTTP_201_CREATED)
def create_new_responsible(
    responsible_data: ResponsibleCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """
    Create a responsible in the caller's tenant.

    Code and name must be unique among the tenant's non-deleted responsibles.
    """
    responsible = responsible_service.create_responsible(db, responsible_data, tenant_id)
    return Responsible.model_validate(responsible)


@router.get("", response_model=PaginatedResponse[ResponsibleWithCategory])
def get_all_responsibles(
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    limit: int = Query(10, ge=1, le=100, description="Number of items per page"),
    search: str | None = Query(
        None, min_length=1, max_length=100, description="Case-insensitive partial match"
    ),
    include_deleted: bool = Query(False, description="Include soft-deleted responsibles"),
    include_category: bool = Query(False, description="Embed the category of each responsible"),
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """
    Get the tenant's responsibles with pagination, newest first.

    `category` is always present; it is null unless `include_category` is set
    and the responsible belongs to a non-deleted category.
    """
    responsibles, total = responsible_service.list_responsibles(
        db,
        tenant_id,
        page=page,
        limit=limit,
        search=search,
        include_deleted=include_deleted,
        include_category=include_category,
    )
    if include_category:
        items = [ResponsibleWithCategory.model_validate(r) for r in responsibles]
    else:
        items = [
            ResponsibleWithCategory(**Responsible.model_validate(r).model_dump())
            for r in responsibles
        ]
    return PaginatedResponse.build(items, total, page, limit)


@router.get("/statistics", response_model=ResponsibleStatistics)
def get_responsible_statistics(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    return responsible_service.get_responsible_statistics(db, tenant_id)


@router.get("/without-category", response_model=list[Responsible])
def get_responsibles_without_category(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsibles = responsible_service.list_responsibles_without_category(db, tenant_id)
    return [Responsible.model_validate(r) for r in responsibles]


@router.get("/category/{category_id}", response_model=list[Responsible])
def get_responsibles_by_category(
    category_id: UUID,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsibles = responsible_service.list_responsibles_by_category(
        db, str(category_id), tenant_id
    )
    return [Responsible.model_validate(r) for r in responsibles]


@router.get("/code/{code_responsible}", response_model=Responsible)
def get_responsible_by_code(
    code_responsible: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsible = responsible_service.get_responsible_by_code(db, code_responsible, tenant_id)
    return Responsible.model_validate(responsible)


@router.get("/name/{name}", response_model=list[Responsible])
def get_responsibles_by_name(
    name: str,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsibles = responsible_service.search_responsibles_by_name(db, name, tenant_id)
    return [Responsible.model_validate(r) for r in responsibles]


@router.get("/{responsible_id}", response_model=ResponsibleWithCategory)
def get_responsible_by_id(
    responsible_id: UUID,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    """
    Get a responsible by ID.

    Responsibles of other tenants are reported as not found. A soft-deleted
    category is reported as null.
    """
    responsible = responsible_service.get_responsible(db, str(responsible_id), tenant_id)
    return ResponsibleWithCategory.model_validate(responsible)


@router.put("/{responsible_id}", response_model=Responsible)
def update_responsible_by_id(
    responsible_id: UUID,
    responsible_data: ResponsibleUpdate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsible = responsible_service.update_responsible(
        db, str(responsible_id), responsible_data, tenant_id
    )
    return Responsible.model_validate(responsible)


@router.delete("/{responsible_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_responsible_by_id(
    responsible_id: UUID,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsible_service.delete_responsible(db, str(responsible_id), tenant_id)


@router.patch("/{responsible_id}/restore", response_model=Responsible)
def restore_responsible_by_id(
    responsible_id: UUID,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    responsible = responsible_service.restore_responsible(db, str(responsible_id), tenant_id)
    return Responsible.model_validate(responsible)
