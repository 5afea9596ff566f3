# === backend/app/services/users.py ===
from typing import Optional
from fastapi import HTTPException
from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.security import hash_password, get_user_roles
from app.models.user import User, UserRole
from app.models.project import Project
from app.schemas.auth import UserResponse
from app.services.projects import delete_project_rows
import logging

logger = logging.getLogger(__name__)

async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(func.lower(User.email) == email.strip().lower()))
    return result.scalar_one_or_none()

async def create_user(
    db: AsyncSession,
    email: str,
    full_name: str,
    password: Optional[str] = None,
    role: Optional[str] = None,
    google_id: Optional[str] = None,
    picture: Optional[str] = None,
) -> User:
    """Insert a user with one role.

    With no explicit role the very first account becomes ``admin`` and every
    later one ``developer``.
    """
    if await get_user_by_email(db, email):
        raise HTTPException(status_code=409, detail="A user with this email already exists")

    if role is None:
        user_count = (await db.execute(select(func.count(User.id)))).scalar() or 0
        role = "admin" if user_count == 0 else "developer"

    user = User(
        email=email.strip().lower(),
        full_name=full_name,
        password_hash=hash_password(password) if password else None,
        is_active=True,
        google_id=google_id,
        picture=picture,
    )
    db.add(user)
    await db.flush()
    db.add(UserRole(user_id=user.id, role=role))
    await db.commit()
    await db.refresh(user)
    logger.info(f"Created user {user.id} with role {role}")
    return user

async def build_user_response(db: AsyncSession, user: User) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        full_name=user.full_name,
        is_active=user.is_active,
        picture=user.picture,
        created_at=user.created_at,
        roles=await get_user_roles(db, user.id),
    )

async def set_user_role(db: AsyncSession, user: User, role: str) -> None:
    await db.execute(delete(UserRole).where(UserRole.user_id == user.id))
    db.add(UserRole(user_id=user.id, role=role))
    await db.commit()

async def delete_user(db: AsyncSession, user: User) -> None:
    project_ids = (
        await db.execute(select(Project.id).where(Project.user_id == user.id))
    ).scalars().all()
    for project_id in project_ids:
        await delete_project_rows(db, project_id)
    await db.execute(delete(UserRole).where(UserRole.user_id == user.id))
    await db.delete(user)
    await db.commit()
    logger.info(f"Deleted user {user.id} and {len(project_ids)} project(s)")
