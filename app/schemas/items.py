# === backend/app/schemas/items.py ===
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime
from app.schemas.common import IssuePriority, IssueStatus

class NoteUpdate(BaseModel):
    content: str = ""

class NoteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: Optional[int] = None
    project_id: int
    content: str
    updated_at: Optional[datetime] = None

class IssueCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    priority: IssuePriority = "Medium"
    status: IssueStatus = "Open"

class IssueUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    priority: Optional[IssuePriority] = None
    status: Optional[IssueStatus] = None

class IssueResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    title: str
    description: Optional[str]
    priority: str
    status: str
    created_at: datetime

class TeamMemberCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    role: str = Field(min_length=1, max_length=100)
    contact: Optional[str] = None

class TeamMemberResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    name: str
    role: str
    contact: Optional[str]
    created_at: datetime

class GoalCreate(BaseModel):
    goal: str = Field(min_length=1)

class GoalResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    goal: str
    completed: bool
    created_at: datetime

class CredentialCreate(BaseModel):
    key: str = Field(min_length=1, max_length=200)
    value: str = Field(min_length=1)

class CredentialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    project_id: int
    key: str
    value: str
    created_at: datetime
