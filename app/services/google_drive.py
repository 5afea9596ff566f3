# === backend/app/services/google_drive.py ===
import base64
import json
import uuid
from typing import Any, Dict, List, Optional
import httpx
from authlib.integrations.base_client import OAuthError
from authlib.integrations.httpx_client import AsyncOAuth2Client
from fastapi import HTTPException
from app.core.config import settings
import logging

logger = logging.getLogger(__name__)

DRIVE_API = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_API = "https://www.googleapis.com/upload/drive/v3"
AUTHORIZE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
DRIVE_SCOPE = "https://www.googleapis.com/auth/drive.file"
OAUTH_STATE = "google_drive_auth"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
FILE_FIELDS = "files(id,name,size,createdTime,modifiedTime)"

def get_http_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outbound Google calls; None means the real network."""
    return None

def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"

def _error_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    error = payload.get("error")
    if isinstance(error, dict):
        return error.get("message") or json.dumps(error)
    return payload.get("error_description") or str(error or payload)

def _oauth_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> AsyncOAuth2Client:
    if not settings.google_configured:
        raise HTTPException(status_code=503, detail="Google Drive is not configured")
    return AsyncOAuth2Client(
        client_id=settings.GOOGLE_CLIENT_ID,
        client_secret=settings.GOOGLE_CLIENT_SECRET,
        scope=DRIVE_SCOPE,
        redirect_uri=settings.GOOGLE_DRIVE_REDIRECT_URI or None,
        transport=transport,
    )

async def build_auth_url(transport: Optional[httpx.AsyncBaseTransport] = None) -> str:
    async with _oauth_client(transport) as client:
        url, _ = client.create_authorization_url(
            AUTHORIZE_URL,
            state=OAUTH_STATE,
            access_type="offline",
            prompt="consent",
        )
    return url

async def exchange_code(code: str, transport: Optional[httpx.AsyncBaseTransport] = None) -> Dict[str, Any]:
    async with _oauth_client(transport) as client:
        try:
            token = await client.fetch_token(TOKEN_URL, code=code)
        except httpx.RequestError as e:
            logger.error(f"Token exchange failed: {str(e)}")
            raise HTTPException(status_code=502, detail=f"Could not reach Google: {str(e)}")
        except (OAuthError, httpx.HTTPStatusError) as e:
            logger.warning(f"Token exchange rejected: {str(e)}")
            raise HTTPException(status_code=502, detail=f"Token exchange failed: {str(e)}")
    return dict(token)

class DriveClient:
    """Thin wrapper over the Drive v3 REST API for one user's access token"""

    def __init__(self, access_token: str, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._client = httpx.AsyncClient(
            headers={"Authorization": f"Bearer {access_token}"},
            timeout=httpx.Timeout(60.0, connect=10.0),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()

    async def aclose(self):
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"Drive request failed: {method} {url}: {str(e)}")
            raise HTTPException(status_code=502, detail=f"Could not reach Google Drive: {str(e)}")
        if response.status_code >= 400:
            detail = _error_detail(response)
            logger.warning(f"Drive error {response.status_code} on {method} {url}: {detail}")
            raise HTTPException(status_code=502, detail=f"Google Drive error: {detail}")
        return response

    async def find_folder(self, name: str, parent_id: Optional[str] = None) -> Optional[str]:
        query = f"name={_quote(name)} and mimeType='{FOLDER_MIME_TYPE}' and trashed=false"
        if parent_id:
            query += f" and {_quote(parent_id)} in parents"
        response = await self._request(
            "GET", f"{DRIVE_API}/files", params={"q": query, "fields": "files(id,name)"}
        )
        files = response.json().get("files") or []
        return files[0]["id"] if files else None

    async def create_folder(self, name: str, parent_id: Optional[str] = None) -> str:
        metadata = {"name": name, "mimeType": FOLDER_MIME_TYPE}
        if parent_id:
            metadata["parents"] = [parent_id]
        response = await self._request("POST", f"{DRIVE_API}/files", json=metadata)
        folder_id = response.json()["id"]
        logger.info(f"Created Drive folder '{name}' ({folder_id})")
        return folder_id

    async def get_or_create_folder(self, name: str, parent_id: Optional[str] = None) -> str:
        folder_id = await self.find_folder(name, parent_id)
        if folder_id:
            return folder_id
        return await self.create_folder(name, parent_id)

    async def resolve_folder(self, project_name: Optional[str] = None, folder_name: Optional[str] = None) -> str:
        """Root backup folder, or the named sub-folder inside it."""
        root_name = settings.DRIVE_ROOT_FOLDER
        target = folder_name or project_name or root_name
        root_id = await self.get_or_create_folder(root_name)
        if target == root_name:
            return root_id
        return await self.get_or_create_folder(target, root_id)

    async def list_files(self, folder_id: str) -> List[Dict[str, Any]]:
        response = await self._request(
            "GET",
            f"{DRIVE_API}/files",
            params={
                "q": f"{_quote(folder_id)} in parents and trashed=false",
                "fields": FILE_FIELDS,
                "orderBy": "modifiedTime desc",
            },
        )
        return response.json().get("files") or []

    async def upload_file(
        self,
        file_name: str,
        content: bytes,
        folder_id: str,
        mime_type: str = "application/json",
    ) -> Dict[str, Any]:
        boundary = f"-------{uuid.uuid4().hex}"
        metadata = {"name": file_name, "parents": [folder_id]}
        body = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {mime_type}\r\n"
            "Content-Transfer-Encoding: base64\r\n\r\n"
            f"{base64.b64encode(content).decode('ascii')}\r\n"
            f"--{boundary}--"
        )
        response = await self._request(
            "POST",
            f"{DRIVE_UPLOAD_API}/files",
            params={"uploadType": "multipart", "fields": "id,name,size,createdTime,modifiedTime"},
            headers={"Content-Type": f"multipart/related; boundary={boundary}"},
            content=body.encode("utf-8"),
        )
        uploaded = response.json()
        logger.info(f"Uploaded '{file_name}' to Drive folder {folder_id}")
        return uploaded

    async def download_file(self, file_id: str) -> bytes:
        response = await self._request("GET", f"{DRIVE_API}/files/{file_id}", params={"alt": "media"})
        return response.content

    async def delete_file(self, file_id: str) -> None:
        await self._request("DELETE", f"{DRIVE_API}/files/{file_id}")
        logger.info(f"Deleted Drive file {file_id}")
