from fastapi import APIRouter

from mes_admin.api.routers import (
    applications,
    permissions,
    responsible_categories,
    responsibles,
    user_permissions,
)

api_router = APIRouter()

api_router.include_router(applications.router)
api_router.include_router(responsible_categories.router)
api_router.include_router(responsibles.router)
api_router.include_router(permissions.router)
api_router.include_router(user_permissions.router)
