# === backend/app/services/backup.py ===
import json
import re
from datetime import date, datetime, timezone
from typing import Any, Dict, Optional
from urllib.parse import quote
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.project import Project
from app.models.items import ProjectNote, ProjectIssue, TeamMember, ProjectGoal
from app.services.projects import list_project_items
from app.services.report_generator import ProjectReportGenerator

BACKUP_VERSION = "1.0"

MEDIA_TYPES = {
    "json": "application/json",
    "pdf": "application/pdf",
    "text": "text/plain; charset=utf-8",
}

def row_to_dict(row) -> Dict[str, Any]:
    data = {}
    for column in row.__table__.columns:
        value = getattr(row, column.name)
        if isinstance(value, (date, datetime)):
            value = value.isoformat()
        data[column.name] = value
    return data

async def collect_backup_data(db: AsyncSession, project: Project, now: Optional[datetime] = None) -> Dict[str, Any]:
    """Everything a backup holds for one project. Credentials are left out."""
    now = now or datetime.now(timezone.utc)
    notes = await list_project_items(db, ProjectNote, project.id)
    issues = await list_project_items(db, ProjectIssue, project.id)
    team = await list_project_items(db, TeamMember, project.id)
    goals = await list_project_items(db, ProjectGoal, project.id)
    return {
        "project": row_to_dict(project),
        "notes": [row_to_dict(n) for n in notes],
        "issues": [row_to_dict(i) for i in issues],
        "team": [row_to_dict(m) for m in team],
        "goals": [row_to_dict(g) for g in goals],
        "backupDate": now.isoformat(),
        "version": BACKUP_VERSION,
    }

def render_json(data: Dict[str, Any]) -> bytes:
    return json.dumps(data, indent=2, ensure_ascii=False).encode("utf-8")

def slugify_name(name: str) -> str:
    return re.sub(r"\s+", "-", (name or "project").strip())

def backup_filename(project_name: str, fmt: str, today: Optional[date] = None) -> str:
    today = today or datetime.now(timezone.utc).date()
    slug = slugify_name(project_name)
    if fmt == "json":
        return f"{slug}-backup-{today.isoformat()}.json"
    extension = "pdf" if fmt == "pdf" else "txt"
    return f"{slug}-details-{today.isoformat()}.{extension}"

def content_disposition(filename: str) -> str:
    """Attachment header value that survives non-ASCII and quoted names."""
    quoted = quote(filename, safe="")
    if quoted == filename:
        return f'attachment; filename="{filename}"'
    fallback = re.sub(r'[^\x20-\x7e]|["\\]', "", filename)
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quoted}"

def render_backup(data: Dict[str, Any], fmt: str) -> bytes:
    if fmt == "json":
        return render_json(data)
    generator = ProjectReportGenerator()
    if fmt == "pdf":
        return generator.build_pdf(data)
    return generator.build_text(data).encode("utf-8")
