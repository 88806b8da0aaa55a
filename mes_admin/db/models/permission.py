import uuid

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import relationship

from mes_admin.db.base import Base, utcnow


class Permission(Base):
    __tablename__ = "permissions"
    __table_args__ = (
        Index(
            "uq_permissions_app_function_level_live",
            "application_id",
            "function_name",
            "permission_level",
            unique=True,
            postgresql_where=text("deleted_at IS NULL"),
            sqlite_where=text("deleted_at IS NULL"),
        ),
        CheckConstraint(
            "permission_level IN ('read', 'write', 'update', 'delete')",
            name="ck_permissions_permission_level",
        ),
    )

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    application_id = Column(String(36), ForeignKey("applications.id"), nullable=False, index=True)
    function_name = Column(String(100), nullable=False)
    permission_level = Column(String(20), nullable=False)
    display_name = Column(String(200), nullable=False)
    description = Column(String(500), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    application = relationship("Application", backref="permissions")
