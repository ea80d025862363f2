# -*- coding: utf-8 -*-

from __future__ import annotations

import json
import unittest
from urllib.parse import parse_qs, urlparse

import httpx

from healthtrack.backup.drive import DriveBackup
from healthtrack.errors import BackupError


def _backup(handler) -> DriveBackup:
    return DriveBackup(
        client_id="cid",
        client_secret="secret",
        redirect_uri="http://localhost/callback",
        folder_id="folder-1",
        timeout=1.0,
        transport=httpx.MockTransport(handler),
    )


class TestDriveBackup(unittest.TestCase):
    def test_auth_url_requests_offline_access(self) -> None:
        url = _backup(lambda request: httpx.Response(500)).auth_url()
        query = parse_qs(urlparse(url).query)
        self.assertEqual(query["client_id"], ["cid"])
        self.assertEqual(query["access_type"], ["offline"])
        self.assertIn("https://www.googleapis.com/auth/drive.file", query["scope"][0])

    def test_unconfigured_raises(self) -> None:
        drive = DriveBackup(client_id="", client_secret="", transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        self.assertFalse(drive.configured)
        with self.assertRaises(BackupError):
            drive.auth_url()

    def test_exchange_code(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            form = parse_qs(request.content.decode("utf-8"))
            self.assertEqual(form["grant_type"], ["authorization_code"])
            self.assertEqual(form["code"], ["abc"])
            return httpx.Response(200, json={"access_token": "at", "refresh_token": "rt"})

        self.assertEqual(_backup(handler).exchange_code("abc"), "rt")

    def test_upload_shares_file(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append((request.method, request.url.path))
            if request.url.host == "oauth2.googleapis.com":
                return httpx.Response(200, json={"access_token": "at"})
            if request.url.path == "/upload/drive/v3/files":
                self.assertEqual(request.headers["authorization"], "Bearer at")
                self.assertTrue(request.headers["content-type"].startswith("multipart/related"))
                self.assertIn(b'"parents": ["folder-1"]', request.content)
                self.assertIn(b"JPEGDATA", request.content)
                return httpx.Response(200, json={"id": "file-9", "webViewLink": "https://drive/view"})
            if request.url.path == "/drive/v3/files/file-9/permissions":
                self.assertEqual(json.loads(request.content), {"role": "reader", "type": "anyone"})
                return httpx.Response(200, json={"id": "perm"})
            return httpx.Response(404)

        result = _backup(handler).upload("rt", "meal.jpg", b"JPEGDATA", "image/jpeg")
        self.assertEqual(result.file_id, "file-9")
        self.assertEqual(result.thumbnail_link, "https://drive.google.com/thumbnail?id=file-9")
        self.assertEqual(
            [path for _, path in seen],
            ["/token", "/upload/drive/v3/files", "/drive/v3/files/file-9/permissions"],
        )

    def test_upload_failure_raises_backup_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "oauth2.googleapis.com":
                return httpx.Response(200, json={"access_token": "at"})
            return httpx.Response(403, json={"error": "forbidden"})

        with self.assertRaises(BackupError):
            _backup(handler).upload("rt", "meal.jpg", b"x")

    def test_delete_ignores_missing_file(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.host == "oauth2.googleapis.com":
                return httpx.Response(200, json={"access_token": "at"})
            self.assertEqual(request.method, "DELETE")
            return httpx.Response(404)

        _backup(handler).delete("rt", "gone")


if __name__ == "__main__":
    unittest.main()
