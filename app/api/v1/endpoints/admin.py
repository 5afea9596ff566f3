# === backend/app/api/v1/endpoints/admin.py ===
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy import func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.config import settings
from app.core.security import require_admin
from app.db.database import get_db
from app.models.project import Project
from app.models.user import User
from app.schemas.auth import CreateUserRequest, RoleUpdateRequest, UserResponse
from app.services.users import build_user_response, create_user, delete_user, set_user_role
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

async def _get_user(db: AsyncSession, user_id: int) -> User:
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user

@router.get("/users", response_model=List[UserResponse])
async def list_users(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).order_by(User.created_at.desc(), User.id.desc()))
    return [await build_user_response(db, user) for user in result.scalars().all()]

@router.post("/users", response_model=UserResponse, status_code=201)
async def admin_create_user(
    payload: CreateUserRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await create_user(
        db,
        email=payload.email,
        full_name=payload.full_name,
        password=payload.password,
        role=payload.role,
    )
    logger.info(f"Admin {admin.id} created user {user.id}")
    return await build_user_response(db, user)

@router.put("/users/{user_id}/role", response_model=UserResponse)
async def update_user_role(
    user_id: int,
    payload: RoleUpdateRequest,
    admin: User = Depends(require_admin),
    db: AsyncSession = Depends(get_db),
):
    user = await _get_user(db, user_id)
    await set_user_role(db, user, payload.role)
    logger.info(f"Admin {admin.id} set role of user {user.id} to {payload.role}")
    return await build_user_response(db, user)

@router.delete("/users/{user_id}", status_code=204)
async def admin_delete_user(user_id: int, admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    if user_id == admin.id:
        raise HTTPException(status_code=400, detail="You cannot delete your own account")
    user = await _get_user(db, user_id)
    await delete_user(db, user)
    logger.info(f"Admin {admin.id} deleted user {user_id}")
    return Response(status_code=204)

@router.get("/settings")
async def get_settings(admin: User = Depends(require_admin), db: AsyncSession = Depends(get_db)):
    total_users = (await db.execute(select(func.count(User.id)))).scalar() or 0
    total_projects = (await db.execute(select(func.count(Project.id)))).scalar() or 0
    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "google_sign_in_configured": settings.google_configured,
        "google_drive_configured": settings.google_configured and bool(settings.GOOGLE_DRIVE_REDIRECT_URI),
        "drive_root_folder": settings.DRIVE_ROOT_FOLDER,
        "total_users": total_users,
        "total_projects": total_projects,
    }
