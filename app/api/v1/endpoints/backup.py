# === backend/app/api/v1/endpoints/backup.py ===
from typing import Optional
import httpx
from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.security import get_current_user
from app.db.database import get_db
from app.models.user import User
from app.schemas.common import BackupFormat
from app.schemas.drive import DriveBackupRequest
from app.services.backup import MEDIA_TYPES, backup_filename, collect_backup_data, content_disposition, render_backup
from app.services.google_drive import DriveClient, get_http_transport
from app.services.projects import get_owned_project
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

# reports live in their own folder, JSON backups in the project's folder
REPORT_FOLDER = "Project Details"

@router.get("/{project_id}/backup")
async def download_backup(
    project_id: int,
    format: BackupFormat = Query("json"),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    project = await get_owned_project(db, project_id, user)
    data = await collect_backup_data(db, project)
    content = render_backup(data, format)
    filename = backup_filename(project.project_name, format)
    logger.info(f"Backup of project {project.id} rendered as {format} ({len(content)} bytes)")
    return Response(
        content=content,
        media_type=MEDIA_TYPES[format],
        headers={"Content-Disposition": content_disposition(filename)},
    )

@router.post("/{project_id}/backup/drive")
async def upload_backup_to_drive(
    project_id: int,
    payload: DriveBackupRequest,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
):
    project = await get_owned_project(db, project_id, user)
    data = await collect_backup_data(db, project)
    content = render_backup(data, payload.format)
    filename = backup_filename(project.project_name, payload.format)

    async with DriveClient(payload.access_token, transport=transport) as drive:
        if payload.format == "json":
            folder_id = await drive.resolve_folder(project_name=project.project_name)
        else:
            folder_id = await drive.resolve_folder(folder_name=REPORT_FOLDER)
        uploaded = await drive.upload_file(
            filename, content, folder_id, mime_type=MEDIA_TYPES[payload.format].split(";")[0]
        )

    return {"message": "Backup uploaded to Google Drive", "fileName": filename, "file": uploaded}
