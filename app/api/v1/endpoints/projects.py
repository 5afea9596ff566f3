# === backend/app/api/v1/endpoints/projects.py ===
from typing import List
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import get_current_user
from app.db.database import get_db
from app.models.project import Project
from app.models.user import User
from app.schemas.project import ProjectCreate, ProjectUpdate, ProjectResponse
from app.services.projects import get_owned_project, delete_project_rows, list_user_projects, touch
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("", response_model=List[ProjectResponse])
async def list_projects(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await list_user_projects(db, user)

@router.post("", response_model=ProjectResponse, status_code=201)
async def create_project(
    payload: ProjectCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = Project(user_id=user.id, **payload.model_dump())
    db.add(project)
    await db.commit()
    await db.refresh(project)
    logger.info(f"User {user.id} created project {project.id}")
    return project

@router.get("/{project_id}", response_model=ProjectResponse)
async def get_project(project_id: int, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    return await get_owned_project(db, project_id, user)

@router.patch("/{project_id}", response_model=ProjectResponse)
async def update_project(
    project_id: int,
    payload: ProjectUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = await get_owned_project(db, project_id, user)
    changes = payload.model_dump(exclude_unset=True)
    # project_name and status are required columns
    for field in ("project_name", "status", "technology_stack"):
        if field in changes and changes[field] is None:
            changes.pop(field)
    for field, value in changes.items():
        setattr(project, field, value)
    touch(project)
    await db.commit()
    await db.refresh(project)
    return project

@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: int, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    project = await get_owned_project(db, project_id, user)
    await delete_project_rows(db, project.id)
    await db.commit()
    logger.info(f"User {user.id} deleted project {project_id}")
    return Response(status_code=204)
