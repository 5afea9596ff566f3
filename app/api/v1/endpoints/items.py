# === backend/app/api/v1/endpoints/items.py ===
from typing import List
from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from app.core.security import get_current_user
from app.db.database import get_db
from app.models.items import ProjectNote, ProjectIssue, TeamMember, ProjectGoal, ProjectCredential
from app.models.project import Project
from app.models.user import User
from app.schemas.items import (
    NoteUpdate,
    NoteResponse,
    IssueCreate,
    IssueUpdate,
    IssueResponse,
    TeamMemberCreate,
    TeamMemberResponse,
    GoalCreate,
    GoalResponse,
    CredentialCreate,
    CredentialResponse,
)
from app.services.projects import get_owned_project, get_project_item, list_project_items, touch
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

async def _project(project_id: int, user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)) -> Project:
    return await get_owned_project(db, project_id, user)

async def _add(db: AsyncSession, project: Project, item):
    db.add(item)
    touch(project)
    await db.commit()
    await db.refresh(item)
    return item

async def _remove(db: AsyncSession, project: Project, model, item_id: int) -> Response:
    item = await get_project_item(db, model, item_id, project)
    await db.delete(item)
    touch(project)
    await db.commit()
    return Response(status_code=204)

#notes
@router.get("/notes", response_model=NoteResponse)
async def get_notes(project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    result = await db.execute(
        select(ProjectNote).where(ProjectNote.project_id == project.id).order_by(ProjectNote.id).limit(1)
    )
    note = result.scalar_one_or_none()
    if not note:
        return NoteResponse(project_id=project.id, content="")
    return note

@router.put("/notes", response_model=NoteResponse)
async def save_notes(payload: NoteUpdate, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    """One free-text note per project: created on first save, updated after"""
    result = await db.execute(
        select(ProjectNote).where(ProjectNote.project_id == project.id).order_by(ProjectNote.id).limit(1)
    )
    note = result.scalar_one_or_none()
    if note:
        note.content = payload.content
        touch(project)
        await db.commit()
        await db.refresh(note)
        return note
    return await _add(db, project, ProjectNote(project_id=project.id, content=payload.content))

#issues
@router.get("/issues", response_model=List[IssueResponse])
async def list_issues(project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await list_project_items(db, ProjectIssue, project.id)

@router.post("/issues", response_model=IssueResponse, status_code=201)
async def create_issue(payload: IssueCreate, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _add(db, project, ProjectIssue(project_id=project.id, **payload.model_dump()))

@router.patch("/issues/{issue_id}", response_model=IssueResponse)
async def update_issue(
    issue_id: int,
    payload: IssueUpdate,
    project: Project = Depends(_project),
    db: AsyncSession = Depends(get_db),
):
    issue = await get_project_item(db, ProjectIssue, issue_id, project)
    for field, value in payload.model_dump(exclude_unset=True).items():
        if value is None and field != "description":
            continue
        setattr(issue, field, value)
    touch(project)
    await db.commit()
    await db.refresh(issue)
    return issue

@router.post("/issues/{issue_id}/toggle", response_model=IssueResponse)
async def toggle_issue(issue_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    issue = await get_project_item(db, ProjectIssue, issue_id, project)
    issue.status = "Closed" if issue.status == "Open" else "Open"
    touch(project)
    await db.commit()
    await db.refresh(issue)
    return issue

@router.delete("/issues/{issue_id}", status_code=204)
async def delete_issue(issue_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _remove(db, project, ProjectIssue, issue_id)

#team
@router.get("/team", response_model=List[TeamMemberResponse])
async def list_team(project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await list_project_items(db, TeamMember, project.id)

@router.post("/team", response_model=TeamMemberResponse, status_code=201)
async def add_team_member(payload: TeamMemberCreate, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _add(db, project, TeamMember(project_id=project.id, **payload.model_dump()))

@router.delete("/team/{member_id}", status_code=204)
async def remove_team_member(member_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _remove(db, project, TeamMember, member_id)

#goals
@router.get("/goals", response_model=List[GoalResponse])
async def list_goals(project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await list_project_items(db, ProjectGoal, project.id)

@router.post("/goals", response_model=GoalResponse, status_code=201)
async def create_goal(payload: GoalCreate, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _add(db, project, ProjectGoal(project_id=project.id, goal=payload.goal, completed=False))

@router.post("/goals/{goal_id}/toggle", response_model=GoalResponse)
async def toggle_goal(goal_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    goal = await get_project_item(db, ProjectGoal, goal_id, project)
    goal.completed = not goal.completed
    touch(project)
    await db.commit()
    await db.refresh(goal)
    return goal

@router.delete("/goals/{goal_id}", status_code=204)
async def delete_goal(goal_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _remove(db, project, ProjectGoal, goal_id)

#credentials
@router.get("/credentials", response_model=List[CredentialResponse])
async def list_credentials(project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await list_project_items(db, ProjectCredential, project.id)

@router.post("/credentials", response_model=CredentialResponse, status_code=201)
async def create_credential(payload: CredentialCreate, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    credential = await _add(db, project, ProjectCredential(project_id=project.id, **payload.model_dump()))
    logger.info(f"Credential '{credential.key}' added to project {project.id}")
    return credential

@router.delete("/credentials/{credential_id}", status_code=204)
async def delete_credential(credential_id: int, project: Project = Depends(_project), db: AsyncSession = Depends(get_db)):
    return await _remove(db, project, ProjectCredential, credential_id)
