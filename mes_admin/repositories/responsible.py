from sqlalchemy import func, or_
from sqlalchemy.orm import Session, joinedload

from mes_admin.db.base import utcnow
from mes_admin.db.models.responsible import Responsible as ResponsibleModel
from mes_admin.db.models.responsible_category import ResponsibleCategory as CategoryModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.repositories.base import commit_and_refresh, paginate

_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=ResponsibleModel.deleted_at)
_deleted = SoftDeletePolicy.sqlalchemy_deleted_predicate(deleted_col=ResponsibleModel.deleted_at)

DUPLICATE_MESSAGE = "A responsible with this code or name already exists"


def _tenant_query(db: Session, tenant_id: str):
    # Every query is scoped to one tenant; other tenants' rows are never visible
    return db.query(ResponsibleModel).filter(ResponsibleModel.tenant_id == tenant_id)


def get_responsible_by_id(
    db: Session, responsible_id: str, tenant_id: str
) -> ResponsibleModel | None:
    """Get a responsible by ID within a tenant, whether live or soft-deleted."""
    return (
        _tenant_query(db, tenant_id)
        .options(joinedload(ResponsibleModel.live_category))
        .filter(ResponsibleModel.id == responsible_id)
        .first()
    )


def get_responsible_by_code(
    db: Session, code_responsible: str, tenant_id: str, exclude_id: str | None = None
) -> ResponsibleModel | None:
    """Get a live responsible by exact code within a tenant."""
    query = _tenant_query(db, tenant_id).filter(
        ResponsibleModel.code_responsible == code_responsible, _live
    )
    if exclude_id is not None:
        query = query.filter(ResponsibleModel.id != exclude_id)
    return query.first()


def get_responsible_by_name(
    db: Session, name: str, tenant_id: str, exclude_id: str | None = None
) -> ResponsibleModel | None:
    """Get a live responsible by exact name within a tenant."""
    query = _tenant_query(db, tenant_id).filter(ResponsibleModel.name == name, _live)
    if exclude_id is not None:
        query = query.filter(ResponsibleModel.id != exclude_id)
    return query.first()


def get_all_responsibles_paginated(
    db: Session,
    tenant_id: str,
    page: int = 1,
    limit: int = 10,
    search: str | None = None,
    include_deleted: bool = False,
    include_category: bool = False,
) -> tuple[list[ResponsibleModel], int]:
    """
    Get a tenant's responsibles with pagination, newest first.

    Args:
        search: Case-insensitive partial match on name or code
        include_deleted: Also return soft-deleted responsibles
        include_category: Eagerly load the category, unless it is soft-deleted

    Returns:
        Tuple of (list of responsibles, total count)
    """
    query = _tenant_query(db, tenant_id)
    if not include_deleted:
        query = query.filter(_live)
    if search:
        query = query.filter(
            or_(
                ResponsibleModel.name.icontains(search, autoescape=True),
                ResponsibleModel.code_responsible.icontains(search, autoescape=True),
            )
        )
    if include_category:
        query = query.options(joinedload(ResponsibleModel.live_category))
    return paginate(
        query,
        ResponsibleModel.created_at.desc(),
        ResponsibleModel.id,
        page=page,
        limit=limit,
    )


def search_responsibles_by_name(db: Session, name: str, tenant_id: str) -> list[ResponsibleModel]:
    return (
        _tenant_query(db, tenant_id)
        .filter(ResponsibleModel.name.icontains(name, autoescape=True), _live)
        .order_by(ResponsibleModel.name)
        .all()
    )


def get_responsibles_by_category(
    db: Session, category_id: str | None, tenant_id: str
) -> list[ResponsibleModel]:
    """Live responsibles in a category, or without any category when category_id is None."""
    query = _tenant_query(db, tenant_id).filter(_live)
    if category_id is None:
        query = query.filter(ResponsibleModel.category_responsible_id.is_(None))
    else:
        query = query.filter(ResponsibleModel.category_responsible_id == category_id)
    return query.order_by(ResponsibleModel.name).all()


def create_responsible(
    db: Session,
    tenant_id: str,
    code_responsible: str,
    name: str,
    category_responsible_id: str | None = None,
) -> ResponsibleModel:
    """Create a new responsible in the database. Pure data access - no business logic."""
    db_responsible = ResponsibleModel(
        tenant_id=tenant_id,
        code_responsible=code_responsible,
        name=name,
        category_responsible_id=category_responsible_id,
        created_at=utcnow(),
    )
    db.add(db_responsible)
    return commit_and_refresh(db, db_responsible, duplicate_message=DUPLICATE_MESSAGE)


def update_responsible(
    db: Session, responsible: ResponsibleModel, changes: dict
) -> ResponsibleModel:
    """Apply the given field changes and refresh updated_at."""
    for field, value in changes.items():
        setattr(responsible, field, value)
    responsible.updated_at = utcnow()
    return commit_and_refresh(db, responsible, duplicate_message=DUPLICATE_MESSAGE)


def soft_delete_responsible(db: Session, responsible: ResponsibleModel) -> ResponsibleModel:
    responsible.deleted_at = utcnow()
    db.commit()
    db.refresh(responsible)
    return responsible


def restore_responsible(db: Session, responsible: ResponsibleModel) -> ResponsibleModel:
    responsible.deleted_at = None
    responsible.updated_at = utcnow()
    return commit_and_refresh(
        db,
        responsible,
        duplicate_message="Cannot restore responsible: its code or name is already in use",
    )


def get_responsible_statistics(db: Session, tenant_id: str) -> dict:
    query = _tenant_query(db, tenant_id)
    by_category = (
        db.query(CategoryModel.name, func.count(ResponsibleModel.id))
        .select_from(ResponsibleModel)
        .join(CategoryModel, ResponsibleModel.category_responsible_id == CategoryModel.id)
        .filter(ResponsibleModel.tenant_id == tenant_id, _live)
        .group_by(CategoryModel.id, CategoryModel.name)
        .order_by(CategoryModel.name)
        .all()
    )
    return {
        "total_responsibles": query.count(),
        "active_responsibles": query.filter(_live).count(),
        "deleted_responsibles": query.filter(_deleted).count(),
        "responsibles_with_category": query.filter(
            ResponsibleModel.category_responsible_id.isnot(None), _live
        ).count(),
        "responsibles_without_category": query.filter(
            ResponsibleModel.category_responsible_id.is_(None), _live
        ).count(),
        "responsibles_by_category": [
            {"category_name": name, "count": count} for name, count in by_category
        ],
    }
