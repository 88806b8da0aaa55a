import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import relationship

from mes_admin.db.base import Base, utcnow


class Responsible(Base):
    __tablename__ = "responsibles"
    __table_args__ = (
        Index(
            "uq_responsibles_tenant_code_live",
            "tenant_id",
            "code_responsible",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        Index(
            "uq_responsibles_tenant_name_live",
            "tenant_id",
            "name",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    tenant_id = Column(String(64), nullable=False, index=True)
    code_responsible = Column(String(50), nullable=False)
    name = Column(String(100), nullable=False)
    category_responsible_id = Column(
        String(36), ForeignKey("responsible_categories.id"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships; soft-deleted categories are not embedded in responses
    live_category = relationship(
        "ResponsibleCategory",
        primaryjoin="and_(Responsible.category_responsible_id == ResponsibleCategory.id, "
        "ResponsibleCategory.deleted_at.is_(None))",
        viewonly=True,
    )
