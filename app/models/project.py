# === backend/app/models/project.py ===
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, JSON
from app.db.database import Base
from app.models.user import utcnow

class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    project_name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String, nullable=False, default="Planning")
    start_date = Column(Date, nullable=True)
    technology_stack = Column(JSON, nullable=False, default=list)
    repo_link = Column(String, nullable=True)
    live_link = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, index=True)
