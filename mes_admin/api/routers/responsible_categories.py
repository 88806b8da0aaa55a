from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from mes_admin.api.deps import get_db, get_tenant_id
from mes_admin.schemas.responsible import ResponsibleCategory, ResponsibleCategoryCreate
from mes_admin.services import responsible as responsible_service

router = APIRouter(prefix="/responsible-categories", tags=["responsible-categories"])


@router.post("", response_model=ResponsibleCategory, status_code=status.HTTP_201_CREATED)
def create_new_category(
    category_data: ResponsibleCategoryCreate,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    category = responsible_service.create_category(db, category_data, tenant_id)
    return ResponsibleCategory.model_validate(category)


@router.get("", response_model=list[ResponsibleCategory])
def get_all_categories(
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    categories = responsible_service.list_categories(db, tenant_id)
    return [ResponsibleCategory.model_validate(category) for category in categories]


@router.get("/{category_id}", response_model=ResponsibleCategory)
def get_category_by_id(
    category_id: UUID,
    db: Session = Depends(get_db),
    tenant_id: str = Depends(get_tenant_id),
):
    category = responsible_service.get_category(db, str(category_id), tenant_id)
    return ResponsibleCategory.model_validate(category)
