# === backend/app/api/v1/api.py ===
from fastapi import APIRouter
from .endpoints import authentication, projects, items, backup, dashboard, drive, admin

api_router = APIRouter()
api_router.include_router(authentication.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(dashboard.router, prefix="/dashboard", tags=["Dashboard"])
api_router.include_router(projects.router, prefix="/projects", tags=["Projects"])
api_router.include_router(items.router, prefix="/projects/{project_id}", tags=["Project items"])
api_router.include_router(backup.router, prefix="/projects", tags=["Backups"])
api_router.include_router(drive.router, prefix="/drive", tags=["Google Drive"])
api_router.include_router(admin.router, prefix="/admin", tags=["Admin"])
