import logging

from sqlalchemy.orm import Session

import mes_admin.repositories.responsible as responsible_repo
import mes_admin.repositories.responsible_category as category_repo
from mes_admin.db.models.responsible import Responsible as ResponsibleModel
from mes_admin.db.models.responsible_category import ResponsibleCategory as CategoryModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.errors import DuplicateResourceError, NotFoundError
from mes_admin.schemas.responsible import (
    ResponsibleCategoryCreate,
    ResponsibleCreate,
    ResponsibleUpdate,
)

logger = logging.getLogger(__name__)

lifecycle = SoftDeletePolicy(resource="Responsible")


def _ensure_unique(
    db: Session,
    tenant_id: str,
    code_responsible: str | None,
    name: str | None,
    exclude_id: str | None = None,
) -> None:
    if code_responsible is not None and responsible_repo.get_responsible_by_code(
        db, code_responsible, tenant_id, exclude_id=exclude_id
    ):
        raise DuplicateResourceError(
            f"A responsible with code '{code_responsible}' already exists",
            field="code_responsible",
        )
    if name is not None and responsible_repo.get_responsible_by_name(
        db, name, tenant_id, exclude_id=exclude_id
    ):
        raise DuplicateResourceError(
            f"A responsible with name '{name}' already exists", field="name"
        )


def _ensure_category(db: Session, category_id: str, tenant_id: str) -> None:
    if not category_repo.get_category_by_id(db, category_id, tenant_id, live_only=True):
        raise NotFoundError("Responsible category not found")


def get_responsible(db: Session, responsible_id: str, tenant_id: str) -> ResponsibleModel:
    """Get a responsible of the given tenant; other tenants' records are reported as missing."""
    responsible = responsible_repo.get_responsible_by_id(db, responsible_id, tenant_id)
    if not responsible:
        raise NotFoundError("Responsible not found")
    return responsible


def create_responsible(
    db: Session, responsible_data: ResponsibleCreate, tenant_id: str
) -> ResponsibleModel:
    """
    Create a responsible inside a tenant.

    - Enforces uniqueness of code and name among the tenant's live responsibles
    - Validates the category belongs to the tenant (if provided)

    Raises:
        DuplicateResourceError: If code or name is already in use in the tenant
        NotFoundError: If the category doesn't exist in the tenant
    """
    _ensure_unique(db, tenant_id, responsible_data.code_responsible, responsible_data.name)
    category_id = (
        str(responsible_data.category_responsible_id)
        if responsible_data.category_responsible_id is not None
        else None
    )
    if category_id is not None:
        _ensure_category(db, category_id, tenant_id)

    responsible = responsible_repo.create_responsible(
        db,
        tenant_id=tenant_id,
        code_responsible=responsible_data.code_responsible,
        name=responsible_data.name,
        category_responsible_id=category_id,
    )
    logger.info(
        "Created responsible %s (%s) in tenant %s",
        responsible.id,
        responsible.code_responsible,
        tenant_id,
    )
    return responsible


def update_responsible(
    db: Session, responsible_id: str, responsible_data: ResponsibleUpdate, tenant_id: str
) -> ResponsibleModel:
    """
    Partially update a responsible.

    Raises:
        NotFoundError: If the responsible (or the new category) doesn't exist in the tenant
        DuplicateResourceError: If the new code or name is already in use in the tenant
    """
    responsible = get_responsible(db, responsible_id, tenant_id)
    changes = responsible_data.model_dump(exclude_unset=True)
    _ensure_unique(
        db,
        tenant_id,
        changes.get("code_responsible"),
        changes.get("name"),
        exclude_id=responsible.id,
    )
    if changes.get("category_responsible_id") is not None:
        changes["category_responsible_id"] = str(changes["category_responsible_id"])
        _ensure_category(db, changes["category_responsible_id"], tenant_id)
    return responsible_repo.update_responsible(db, responsible, changes)


def delete_responsible(db: Session, responsible_id: str, tenant_id: str) -> None:
    """
    Soft-delete a responsible.

    Raises:
        NotFoundError: If the responsible doesn't exist in the tenant
        AlreadyDeletedError: If the responsible is already deleted
    """
    responsible = get_responsible(db, responsible_id, tenant_id)
    lifecycle.ensure_deletable(deleted_at=responsible.deleted_at)
    responsible_repo.soft_delete_responsible(db, responsible)
    logger.info("Soft-deleted responsible %s in tenant %s", responsible.id, tenant_id)


def restore_responsible(db: Session, responsible_id: str, tenant_id: str) -> ResponsibleModel:
    """
    Restore a soft-deleted responsible.

    Raises:
        NotFoundError: If the responsible doesn't exist in the tenant
        NotDeletedError: If the responsible is not deleted
        DuplicateResourceError: If its code or name was taken while it was deleted
    """
    responsible = get_responsible(db, responsible_id, tenant_id)
    lifecycle.ensure_restorable(deleted_at=responsible.deleted_at)
    _ensure_unique(
        db,
        tenant_id,
        responsible.code_responsible,
        responsible.name,
        exclude_id=responsible.id,
    )
    responsible = responsible_repo.restore_responsible(db, responsible)
    logger.info("Restored responsible %s in tenant %s", responsible.id, tenant_id)
    return responsible


def list_responsibles(
    db: Session,
    tenant_id: str,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    include_deleted: bool = False,
    include_category: bool = False,
) -> tuple[list[ResponsibleModel], int]:
    return responsible_repo.get_all_responsibles_paginated(
        db,
        tenant_id,
        page=page,
        limit=limit,
        search=search,
        include_deleted=include_deleted,
        include_category=include_category,
    )


def get_responsible_by_code(db: Session, code_responsible: str, tenant_id: str) -> ResponsibleModel:
    responsible = responsible_repo.get_responsible_by_code(db, code_responsible, tenant_id)
    if not responsible:
        raise NotFoundError("Responsible not found")
    return responsible


def search_responsibles_by_name(db: Session, name: str, tenant_id: str) -> list[ResponsibleModel]:
    return responsible_repo.search_responsibles_by_name(db, name, tenant_id)


def list_responsibles_by_category(
    db: Session, category_id: str, tenant_id: str
) -> list[ResponsibleModel]:
    return responsible_repo.get_responsibles_by_category(db, category_id, tenant_id)


def list_responsibles_without_category(db: Session, tenant_id: str) -> list[ResponsibleModel]:
    return responsible_repo.get_responsibles_by_category(db, None, tenant_id)


def get_responsible_statistics(db: Session, tenant_id: str) -> dict:
    return responsible_repo.get_responsible_statistics(db, tenant_id)


def create_category(
    db: Session, category_data: ResponsibleCategoryCreate, tenant_id: str
) -> CategoryModel:
    """
    Create a responsible category inside a tenant.

    Raises:
        DuplicateResourceError: If the name is already in use in the tenant
    """
    if category_repo.get_category_by_name(db, category_data.name, tenant_id):
        raise DuplicateResourceError(
            f"A category with name '{category_data.name}' already exists", field="name"
        )
    return category_repo.create_category(
        db, tenant_id=tenant_id, name=category_data.name, description=category_data.description
    )


def get_category(db: Session, category_id: str, tenant_id: str) -> CategoryModel:
    category = category_repo.get_category_by_id(db, category_id, tenant_id, live_only=True)
    if not category:
        raise NotFoundError("Responsible category not found")
    return category


def list_categories(db: Session, tenant_id: str) -> list[CategoryModel]:
    return category_repo.get_categories(db, tenant_id)
