# === backend/app/services/projects.py ===
from typing import List
from fastapi import HTTPException
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.models.project import Project
from app.models.items import PROJECT_CHILD_MODELS
from app.models.user import User, utcnow

async def get_owned_project(db: AsyncSession, project_id: int, user: User) -> Project:
    """Load a project of ``user``; anything else is reported as missing."""
    result = await db.execute(
        select(Project).where(Project.id == project_id, Project.user_id == user.id)
    )
    project = result.scalar_one_or_none()
    if not project:
        raise HTTPException(status_code=404, detail="Project not found")
    return project

async def get_project_item(db: AsyncSession, model, item_id: int, project: Project):
    result = await db.execute(
        select(model).where(model.id == item_id, model.project_id == project.id)
    )
    item = result.scalar_one_or_none()
    if not item:
        raise HTTPException(status_code=404, detail=f"{model.__name__} not found")
    return item

async def list_user_projects(db: AsyncSession, user: User) -> List[Project]:
    """The user's projects, most recently updated first."""
    result = await db.execute(
        select(Project)
        .where(Project.user_id == user.id)
        .order_by(Project.updated_at.desc(), Project.id.desc())
    )
    return list(result.scalars().all())

async def list_project_items(db: AsyncSession, model, project_id: int) -> list:
    result = await db.execute(
        select(model)
        .where(model.project_id == project_id)
        .order_by(model.created_at.desc(), model.id.desc())
    )
    return list(result.scalars().all())

def touch(project: Project) -> None:
    project.updated_at = utcnow()

async def delete_project_rows(db: AsyncSession, project_id: int) -> None:
    """Delete a project and its child rows. The caller commits."""
    for model in PROJECT_CHILD_MODELS:
        await db.execute(delete(model).where(model.project_id == project_id))
    await db.execute(delete(Project).where(Project.id == project_id))
