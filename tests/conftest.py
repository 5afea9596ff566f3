"""Shared fixtures: a fresh SQLite database per test and a fake Google Drive."""

import asyncio
import base64
import json
import os
import re
from urllib.parse import parse_qs

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["GOOGLE_CLIENT_ID"] = "test-client-id"
os.environ["GOOGLE_CLIENT_SECRET"] = "test-client-secret"
os.environ["GOOGLE_DRIVE_REDIRECT_URI"] = "http://localhost:5173/drive"
os.environ["FRONTEND_URL"] = "http://localhost:5173"

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from app.main import app
from app.db.database import Base, get_db
from app.services.google_drive import FOLDER_MIME_TYPE, get_http_transport

API = "/api/v1"


@pytest.fixture
def session_factory(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    async def create_tables():
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    asyncio.run(create_tables())
    yield sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)
    asyncio.run(engine.dispose())


@pytest.fixture
def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield TestClient(app)
    app.dependency_overrides.clear()


def signup(client, email, full_name="Test User", password="secret123"):
    response = client.post(
        f"{API}/auth/signup",
        json={"email": email, "full_name": full_name, "password": password},
    )
    assert response.status_code == 201, response.text
    return response.json()


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers(client):
    """The first account created becomes the admin."""
    return bearer(signup(client, "admin@example.com", "Ada Admin")["access_token"])


@pytest.fixture
def user_headers(client, admin_headers):
    return bearer(signup(client, "dev@example.com", "Dana Developer")["access_token"])


@pytest.fixture
def project(client, user_headers):
    response = client.post(
        f"{API}/projects",
        json={
            "project_name": "Apollo Tracker",
            "description": "Tracks launches",
            "status": "Development",
            "technology_stack": "Python, FastAPI , ,React",
            "repo_link": "https://github.com/example/apollo",
            "live_link": "",
        },
        headers=user_headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


class FakeDrive:
    """In-memory stand-in for the Drive v3 and OAuth token endpoints."""

    def __init__(self):
        self.items = {}
        self.requests = []
        self._next_id = 1

    def _new_id(self, prefix):
        item_id = f"{prefix}{self._next_id}"
        self._next_id += 1
        return item_id

    def add_item(self, name, parent=None, mime_type="application/json", content=b""):
        item_id = self._new_id("folder" if mime_type == FOLDER_MIME_TYPE else "file")
        self.items[item_id] = {
            "id": item_id,
            "name": name,
            "mimeType": mime_type,
            "parents": [parent] if parent else [],
            "content": content,
            "size": str(len(content)),
            "createdTime": "2024-05-01T10:00:00.000Z",
            "modifiedTime": f"2024-05-01T10:00:{self._next_id:02d}.000Z",
        }
        return item_id

    def folders(self):
        return {i["name"]: i for i in self.items.values() if i["mimeType"] == FOLDER_MIME_TYPE}

    def files(self):
        return [i for i in self.items.values() if i["mimeType"] != FOLDER_MIME_TYPE]

    @staticmethod
    def _public(item):
        return {k: v for k, v in item.items() if k not in ("content", "mimeType", "parents")}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = request.url
        if request.headers.get("Authorization") == "Bearer expired-token":
            return httpx.Response(401, json={"error": {"code": 401, "message": "Invalid Credentials"}})

        if url.host == "oauth2.googleapis.com":
            form = parse_qs(request.content.decode())
            if form.get("code") == ["server-error"]:
                return httpx.Response(503, json={"error": "temporarily_unavailable"})
            if form.get("code") != ["good-code"]:
                return httpx.Response(400, json={"error": "invalid_grant", "error_description": "Bad Request"})
            return httpx.Response(200, json={
                "access_token": "drive-access-token",
                "expires_in": 3599,
                "token_type": "Bearer",
                "scope": "https://www.googleapis.com/auth/drive.file",
            })

        if url.path == "/upload/drive/v3/files":
            return self._upload(request)

        if url.path == "/drive/v3/files":
            if request.method == "POST":
                metadata = json.loads(request.content)
                parent = (metadata.get("parents") or [None])[0]
                item_id = self.add_item(metadata["name"], parent, metadata["mimeType"])
                return httpx.Response(200, json={"id": item_id, "name": metadata["name"]})
            return self._search(url.params.get("q", ""))

        file_id = url.path.rsplit("/", 1)[-1]
        if file_id not in self.items:
            return httpx.Response(404, json={"error": {"code": 404, "message": f"File not found: {file_id}"}})
        if request.method == "DELETE":
            del self.items[file_id]
            return httpx.Response(204)
        return httpx.Response(200, content=self.items[file_id]["content"])

    def _search(self, query):
        parent_match = re.search(r"'([^']+)' in parents", query)
        parent = parent_match.group(1) if parent_match else None
        if "mimeType='application/vnd.google-apps.folder'" in query:
            name = re.search(r"name='((?:[^'\\]|\\.)*)'", query).group(1)
            name = name.replace("\\'", "'").replace("\\\\", "\\")
            hits = [
                i for i in self.items.values()
                if i["mimeType"] == FOLDER_MIME_TYPE and i["name"] == name
                and (parent is None or parent in i["parents"])
            ]
        else:
            hits = [i for i in self.items.values() if parent in i["parents"]]
            hits.sort(key=lambda i: i["modifiedTime"], reverse=True)
        return httpx.Response(200, json={"files": [self._public(i) for i in hits]})

    def _upload(self, request):
        boundary = request.headers["Content-Type"].split("boundary=", 1)[1]
        parts = [p for p in request.content.decode().split(f"--{boundary}") if p.strip() not in ("", "--")]
        metadata = json.loads(parts[0].split("\r\n\r\n", 1)[1].strip())
        content = base64.b64decode(parts[1].split("\r\n\r\n", 1)[1].strip())
        mime_type = re.search(r"Content-Type: ([^\r\n]+)", parts[1]).group(1)
        item_id = self.add_item(metadata["name"], metadata["parents"][0], mime_type, content)
        return httpx.Response(200, json=self._public(self.items[item_id]))


@pytest.fixture
def fake_drive(client):
    drive = FakeDrive()
    app.dependency_overrides[get_http_transport] = lambda: httpx.MockTransport(drive.handler)
    return drive
