# === backend/app/schemas/project.py ===
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Union
from datetime import date, datetime
from app.schemas.common import ProjectStatus

def parse_tech_stack(value: Union[str, List[str], None]) -> List[str]:
    """Accept "a, b ,c" or a list; trim entries and drop empty ones."""
    if value is None:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]

def empty_to_none(value):
    if isinstance(value, str) and not value.strip():
        return None
    return value

class ProjectBase(BaseModel):
    description: Optional[str] = None
    start_date: Optional[date] = None
    repo_link: Optional[str] = None
    live_link: Optional[str] = None

    @field_validator("start_date", "repo_link", "live_link", mode="before")
    @classmethod
    def _blank_is_null(cls, value):
        return empty_to_none(value)

class ProjectCreate(ProjectBase):
    project_name: str = Field(min_length=1, max_length=200)
    status: ProjectStatus = "Planning"
    technology_stack: List[str] = []

    @field_validator("technology_stack", mode="before")
    @classmethod
    def _split_stack(cls, value):
        return parse_tech_stack(value)

class ProjectUpdate(ProjectBase):
    project_name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    status: Optional[ProjectStatus] = None
    technology_stack: Optional[List[str]] = None

    @field_validator("technology_stack", mode="before")
    @classmethod
    def _split_stack(cls, value):
        if value is None:
            return None
        return parse_tech_stack(value)

class ProjectResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    project_name: str
    description: Optional[str]
    status: str
    start_date: Optional[date]
    technology_stack: List[str]
    repo_link: Optional[str]
    live_link: Optional[str]
    created_at: datetime
    updated_at: datetime

class StatusCount(BaseModel):
    name: str
    value: int

class DashboardResponse(BaseModel):
    total_projects: int
    status_distribution: List[StatusCount]
    recent_projects: List[ProjectResponse]
