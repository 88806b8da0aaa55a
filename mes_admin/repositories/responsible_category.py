from sqlalchemy.orm import Session

from mes_admin.db.base import utcnow
from mes_admin.db.models.responsible_category import ResponsibleCategory as CategoryModel
from mes_admin.domain.soft_delete import SoftDeletePolicy
from mes_admin.repositories.base import commit_and_refresh

_live = SoftDeletePolicy.sqlalchemy_live_predicate(deleted_col=CategoryModel.deleted_at)


def get_category_by_id(
    db: Session, category_id: str, tenant_id: str, live_only: bool = False
) -> CategoryModel | None:
    """Get a category by ID within a tenant."""
    query = db.query(CategoryModel).filter(
        CategoryModel.id == category_id, CategoryModel.tenant_id == tenant_id
    )
    if live_only:
        query = query.filter(_live)
    return query.first()


def get_category_by_name(db: Session, name: str, tenant_id: str) -> CategoryModel | None:
    return (
        db.query(CategoryModel)
        .filter(CategoryModel.name == name, CategoryModel.tenant_id == tenant_id, _live)
        .first()
    )


def get_categories(db: Session, tenant_id: str) -> list[CategoryModel]:
    return (
        db.query(CategoryModel)
        .filter(CategoryModel.tenant_id == tenant_id, _live)
        .order_by(CategoryModel.name)
        .all()
    )


def create_category(
    db: Session, tenant_id: str, name: str, description: str | None = None
) -> CategoryModel:
    """Create a new responsible category. Pure data access - no business logic."""
    db_category = CategoryModel(
        tenant_id=tenant_id, name=name, description=description, created_at=utcnow()
    )
    db.add(db_category)
    return commit_and_refresh(
        db, db_category, duplicate_message="A category with this name already exists"
    )
