# === backend/app/models/items.py ===
from sqlalchemy import Column, Integer, String, Text, Boolean, DateTime, ForeignKey
from app.db.database import Base
from app.models.user import utcnow

class ProjectNote(Base):
    __tablename__ = "project_notes"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False, default="")
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

class ProjectIssue(Base):
    __tablename__ = "project_issues"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    priority = Column(String, nullable=False, default="Medium")
    status = Column(String, nullable=False, default="Open")
    created_at = Column(DateTime(timezone=True), default=utcnow)

class TeamMember(Base):
    __tablename__ = "project_team"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False)
    contact = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

class ProjectGoal(Base):
    __tablename__ = "project_goals"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    goal = Column(Text, nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

class ProjectCredential(Base):
    __tablename__ = "project_credentials"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    key = Column(String, nullable=False)
    value = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow)

# child tables removed together with their project
PROJECT_CHILD_MODELS = (ProjectNote, ProjectIssue, TeamMember, ProjectGoal, ProjectCredential)
