from mes_admin.db.models.application import Application
from mes_admin.db.models.responsible_category import ResponsibleCategory
from mes_admin.db.models.responsible import Responsible
from mes_admin.db.models.permission import Permission
from mes_admin.db.models.user_permission import UserPermission

__all__ = ["Application", "ResponsibleCategory", "Responsible", "Permission", "UserPermission"]
