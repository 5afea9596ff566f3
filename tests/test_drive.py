"""Tests for the Google Drive proxy and Drive backups, against an in-memory Drive."""

import base64
from urllib.parse import parse_qs, urlparse

import pytest

from app.core.config import settings
from conftest import API

DRIVE = f"{API}/drive"


def drive_action(client, headers, action, **fields):
    return client.post(DRIVE, json={"action": action, **fields}, headers=headers)


def b64(content: bytes) -> str:
    return base64.b64encode(content).decode()


class TestOAuth:
    def test_auth_url(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "get-auth-url")

        assert response.status_code == 200
        url = urlparse(response.json()["authUrl"])
        query = parse_qs(url.query)
        assert url.netloc == "accounts.google.com"
        assert query["client_id"] == ["test-client-id"]
        assert query["state"] == ["google_drive_auth"]
        assert query["scope"] == ["https://www.googleapis.com/auth/drive.file"]
        assert query["access_type"] == ["offline"]
        assert query["prompt"] == ["consent"]
        assert query["redirect_uri"] == ["http://localhost:5173/drive"]

    def test_exchange_token(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "exchange-token", code="good-code")

        assert response.status_code == 200
        assert response.json()["access_token"] == "drive-access-token"
        token_request = fake_drive.requests[-1]
        assert token_request.url.host == "oauth2.googleapis.com"
        assert parse_qs(token_request.content.decode())["grant_type"] == ["authorization_code"]

    def test_rejected_code(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "exchange-token", code="stale-code")

        assert response.status_code == 502
        assert "Token exchange failed" in response.json()["detail"]

    def test_token_endpoint_down(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "exchange-token", code="server-error")

        assert response.status_code == 502
        assert response.json()["detail"].startswith("Token exchange failed")

    def test_missing_code(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "exchange-token")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing code for action 'exchange-token'"

    def test_not_configured(self, client, user_headers, fake_drive, monkeypatch):
        monkeypatch.setattr(settings, "GOOGLE_CLIENT_SECRET", "")

        assert drive_action(client, user_headers, "get-auth-url").status_code == 503


class TestProxy:
    def test_requires_sign_in(self, client, fake_drive):
        assert client.post(DRIVE, json={"action": "list", "accessToken": "t"}).status_code == 401

    def test_invalid_action(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "rename", accessToken="drive-access-token")

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid action"}

    def test_missing_access_token(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "list")

        assert response.status_code == 400
        assert "accessToken" in response.json()["detail"]
        assert fake_drive.requests == []

    def test_upload_creates_folders_once(self, client, user_headers, fake_drive):
        for name in ("one.json", "two.json"):
            response = drive_action(
                client, user_headers, "upload",
                accessToken="drive-access-token",
                fileName=name,
                fileContent=b64(b'{"ok": true}'),
                projectName="Apollo Tracker",
            )
            assert response.status_code == 200, response.text
            assert response.json()["name"] == name

        folders = fake_drive.folders()
        assert set(folders) == {"ProjectHub Backups", "Apollo Tracker"}
        assert folders["Apollo Tracker"]["parents"] == [folders["ProjectHub Backups"]["id"]]
        assert {f["name"] for f in fake_drive.files()} == {"one.json", "two.json"}
        assert all(f["mimeType"] == "application/json" for f in fake_drive.files())

    def test_upload_rejects_bad_base64(self, client, user_headers, fake_drive):
        response = drive_action(
            client, user_headers, "upload",
            accessToken="drive-access-token", fileName="x.json", fileContent="***",
        )

        assert response.status_code == 400

    def test_list_newest_first(self, client, user_headers, fake_drive):
        root = fake_drive.add_item("ProjectHub Backups", mime_type="application/vnd.google-apps.folder")
        fake_drive.add_item("old.json", root, content=b"1")
        fake_drive.add_item("new.json", root, content=b"2")

        response = drive_action(client, user_headers, "list", accessToken="drive-access-token")

        assert response.status_code == 200
        assert [f["name"] for f in response.json()["files"]] == ["new.json", "old.json"]

    def test_list_named_folder(self, client, user_headers, fake_drive):
        root = fake_drive.add_item("ProjectHub Backups", mime_type="application/vnd.google-apps.folder")
        reports = fake_drive.add_item("Project Details", root, mime_type="application/vnd.google-apps.folder")
        fake_drive.add_item("report.pdf", reports, content=b"%PDF")
        fake_drive.add_item("backup.json", root, content=b"{}")

        response = drive_action(
            client, user_headers, "list", accessToken="drive-access-token", folderName="Project Details"
        )

        assert [f["name"] for f in response.json()["files"]] == ["report.pdf"]

    def test_download(self, client, user_headers, fake_drive):
        file_id = fake_drive.add_item("backup.json", content=b'{"version": "1.0"}')

        response = drive_action(client, user_headers, "download", accessToken="drive-access-token", fileId=file_id)

        assert response.status_code == 200
        assert base64.b64decode(response.json()["content"]) == b'{"version": "1.0"}'

    def test_download_requires_file_id(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "download", accessToken="drive-access-token")

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing fileId for action 'download'"

    def test_delete(self, client, user_headers, fake_drive):
        file_id = fake_drive.add_item("backup.json", content=b"{}")

        response = drive_action(client, user_headers, "delete", accessToken="drive-access-token", fileId=file_id)

        assert response.json() == {"success": True}
        assert file_id not in fake_drive.items

    def test_unknown_file(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "delete", accessToken="drive-access-token", fileId="nope")

        assert response.status_code == 502
        assert "File not found" in response.json()["detail"]

    def test_expired_access_token(self, client, user_headers, fake_drive):
        response = drive_action(client, user_headers, "list", accessToken="expired-token")

        assert response.status_code == 502
        assert response.json()["detail"] == "Google Drive error: Invalid Credentials"


class TestDriveBackup:
    @pytest.fixture
    def backup_url(self, project):
        return f"{API}/projects/{project['id']}/backup/drive"

    def test_json_backup_goes_to_project_folder(self, client, user_headers, fake_drive, backup_url):
        response = client.post(backup_url, json={"access_token": "drive-access-token"}, headers=user_headers)

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["fileName"].startswith("Apollo-Tracker-backup-")
        [uploaded] = fake_drive.files()
        assert uploaded["name"] == body["fileName"]
        assert uploaded["parents"] == [fake_drive.folders()["Apollo Tracker"]["id"]]
        assert b'"project_name": "Apollo Tracker"' in uploaded["content"]

    def test_pdf_report_goes_to_details_folder(self, client, user_headers, fake_drive, backup_url):
        response = client.post(
            backup_url, json={"access_token": "drive-access-token", "format": "pdf"}, headers=user_headers
        )

        assert response.status_code == 200, response.text
        [uploaded] = fake_drive.files()
        assert uploaded["parents"] == [fake_drive.folders()["Project Details"]["id"]]
        assert uploaded["mimeType"] == "application/pdf"
        assert uploaded["content"].startswith(b"%PDF")

    def test_drive_failure(self, client, user_headers, fake_drive, backup_url):
        response = client.post(backup_url, json={"access_token": "expired-token"}, headers=user_headers)

        assert response.status_code == 502
        assert fake_drive.files() == []
