# === backend/app/api/v1/endpoints/dashboard.py ===
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import get_current_user
from app.db.database import get_db
from app.models.user import User
from app.schemas.project import DashboardResponse, ProjectResponse, StatusCount
from app.services.projects import list_user_projects

router = APIRouter()

RECENT_LIMIT = 5

@router.get("", response_model=DashboardResponse)
async def get_dashboard(user: User = Depends(get_current_user), db: AsyncSession = Depends(get_db)):
    projects = await list_user_projects(db, user)

    # keyed by status in order of first appearance
    counts = {}
    for project in projects:
        counts[project.status] = counts.get(project.status, 0) + 1

    return DashboardResponse(
        total_projects=len(projects),
        status_distribution=[StatusCount(name=name, value=value) for name, value in counts.items()],
        recent_projects=[ProjectResponse.model_validate(p) for p in projects[:RECENT_LIMIT]],
    )
