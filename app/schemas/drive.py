# === backend/app/schemas/drive.py ===
from pydantic import BaseModel, Field
from typing import Optional
from app.schemas.common import BackupFormat

class DriveActionRequest(BaseModel):
    """Body of the drive proxy. Field names follow the frontend's camelCase."""
    action: str
    accessToken: Optional[str] = None
    code: Optional[str] = None
    fileId: Optional[str] = None
    fileName: Optional[str] = None
    fileContent: Optional[str] = None  # base64
    mimeType: Optional[str] = None
    projectName: Optional[str] = None
    folderName: Optional[str] = None

class DriveBackupRequest(BaseModel):
    access_token: str = Field(min_length=1)
    format: BackupFormat = "json"
