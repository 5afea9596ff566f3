# === backend/app/api/v1/endpoints/drive.py ===
import base64
import binascii
from typing import Optional
import httpx
from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse
from app.core.security import get_current_user
from app.models.user import User
from app.schemas.drive import DriveActionRequest
from app.services.google_drive import DriveClient, build_auth_url, exchange_code, get_http_transport
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

def _require(payload: DriveActionRequest, *fields: str):
    missing = [f for f in fields if not getattr(payload, f)]
    if missing:
        raise HTTPException(
            status_code=400,
            detail=f"Missing {', '.join(missing)} for action '{payload.action}'",
        )

@router.post("")
async def drive_proxy(
    payload: DriveActionRequest,
    user: User = Depends(get_current_user),
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_http_transport),
):
    """Forward one Google Drive operation on behalf of the signed-in user"""
    action = payload.action
    logger.info(f"Drive action '{action}' for user {user.id}")

    if action == "get-auth-url":
        return {"authUrl": await build_auth_url(transport)}

    if action == "exchange-token":
        _require(payload, "code")
        return await exchange_code(payload.code, transport)

    if action not in ("list", "upload", "download", "delete"):
        return JSONResponse(status_code=400, content={"error": "Invalid action"})

    _require(payload, "accessToken")
    async with DriveClient(payload.accessToken, transport=transport) as drive:
        if action == "list":
            folder_id = await drive.resolve_folder(payload.projectName, payload.folderName)
            return {"files": await drive.list_files(folder_id)}

        if action == "upload":
            _require(payload, "fileName", "fileContent")
            try:
                content = base64.b64decode(payload.fileContent, validate=True)
            except (binascii.Error, ValueError):
                raise HTTPException(status_code=400, detail="fileContent must be base64 encoded")
            folder_id = await drive.resolve_folder(payload.projectName, payload.folderName)
            return await drive.upload_file(
                payload.fileName, content, folder_id, mime_type=payload.mimeType or "application/json"
            )

        _require(payload, "fileId")
        if action == "download":
            content = await drive.download_file(payload.fileId)
            return {"fileId": payload.fileId, "content": base64.b64encode(content).decode("ascii")}

        await drive.delete_file(payload.fileId)
        return {"success": True}
