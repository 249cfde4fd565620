# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .admin import router as admin_router
from .blogs import router as blogs_router
from .staff import router as staff_router
from .meta_management import router as meta_management_router
from .activity_logs import router as activity_logs_router
from .health import router as health_router


api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(admin_router)
api_router.include_router(blogs_router)
api_router.include_router(staff_router)
api_router.include_router(meta_management_router)
api_router.include_router(activity_logs_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
