from mes_admin.db.base import Base, Database

__all__ = ["Base", "Database"]
