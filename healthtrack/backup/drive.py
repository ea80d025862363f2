# -*- coding: utf-8 -*-
"""Remote backup — Google Drive v3 REST calls (OAuth refresh-token flow)."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode
from uuid import uuid4

import httpx

from ..config import settings
from ..errors import BackupError

logger = logging.getLogger(__name__)

AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
TOKEN_URL = "https://oauth2.googleapis.com/token"
UPLOAD_URL = "https://www.googleapis.com/upload/drive/v3/files"
FILES_URL = "https://www.googleapis.com/drive/v3/files"
SCOPES = (
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.appdata",
)


@dataclass(frozen=True)
class DriveFile:
    file_id: str
    web_view_link: Optional[str]
    web_content_link: Optional[str]

    @property
    def thumbnail_link(self) -> str:
        return f"https://drive.google.com/thumbnail?id={self.file_id}"


class DriveBackup:
    def __init__(
        self,
        *,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        redirect_uri: Optional[str] = None,
        folder_id: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.client_id = client_id if client_id is not None else settings.google_client_id
        self.client_secret = client_secret if client_secret is not None else settings.google_client_secret
        self.redirect_uri = redirect_uri if redirect_uri is not None else settings.google_redirect_uri
        self.folder_id = folder_id if folder_id is not None else settings.google_drive_folder_id
        self.timeout = timeout if timeout is not None else settings.drive_timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.client_id and self.client_secret)

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.timeout, transport=self._transport)

    def auth_url(self) -> str:
        if not self.configured:
            raise BackupError("Google Drive is not configured")
        query = {
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri or "",
            "response_type": "code",
            "scope": " ".join(SCOPES),
            "access_type": "offline",
            "prompt": "consent",
        }
        return f"{AUTH_URL}?{urlencode(query)}"

    def _token_request(self, form: Dict[str, str]) -> Dict[str, Any]:
        if not self.configured:
            raise BackupError("Google Drive is not configured")
        body = {"client_id": self.client_id or "", "client_secret": self.client_secret or "", **form}
        try:
            with self._client() as client:
                resp = client.post(TOKEN_URL, data=body)
                resp.raise_for_status()
                return resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise BackupError(f"Google token request failed: {exc}") from exc

    def exchange_code(self, code: str) -> str:
        """Trade an OAuth authorization code for a long-lived refresh token."""
        tokens = self._token_request(
            {
                "code": code,
                "redirect_uri": self.redirect_uri or "",
                "grant_type": "authorization_code",
            }
        )
        refresh_token = tokens.get("refresh_token")
        if not refresh_token:
            raise BackupError("Google did not return a refresh token")
        return str(refresh_token)

    def _access_token(self, refresh_token: str) -> str:
        tokens = self._token_request({"refresh_token": refresh_token, "grant_type": "refresh_token"})
        access_token = tokens.get("access_token")
        if not access_token:
            raise BackupError("Google did not return an access token")
        return str(access_token)

    def upload(self, refresh_token: str, filename: str, data: bytes, mime_type: str = "image/jpeg") -> DriveFile:
        access_token = self._access_token(refresh_token)
        metadata: Dict[str, Any] = {"name": filename}
        if self.folder_id:
            metadata["parents"] = [self.folder_id]

        boundary = uuid4().hex
        body = (
            f"--{boundary}\r\n"
            "Content-Type: application/json; charset=UTF-8\r\n\r\n"
            f"{json.dumps(metadata)}\r\n"
            f"--{boundary}\r\n"
            f"Content-Type: {mime_type}\r\n\r\n"
        ).encode("utf-8") + data + f"\r\n--{boundary}--\r\n".encode("utf-8")
        headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": f"multipart/related; boundary={boundary}",
        }
        try:
            with self._client() as client:
                resp = client.post(
                    UPLOAD_URL,
                    params={"uploadType": "multipart", "fields": "id,webViewLink,webContentLink"},
                    headers=headers,
                    content=body,
                )
                resp.raise_for_status()
                created = resp.json()
                file_id = str(created["id"])
                # Make the file link-readable so the thumbnail URL works in the app.
                perm = client.post(
                    f"{FILES_URL}/{file_id}/permissions",
                    headers={"Authorization": f"Bearer {access_token}"},
                    json={"role": "reader", "type": "anyone"},
                )
                perm.raise_for_status()
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            raise BackupError(f"Google Drive upload failed: {exc}") from exc

        logger.info("uploaded %s to Google Drive as %s", filename, file_id)
        return DriveFile(
            file_id=file_id,
            web_view_link=created.get("webViewLink"),
            web_content_link=created.get("webContentLink"),
        )

    def delete(self, refresh_token: str, file_id: str) -> None:
        access_token = self._access_token(refresh_token)
        try:
            with self._client() as client:
                resp = client.delete(
                    f"{FILES_URL}/{file_id}",
                    headers={"Authorization": f"Bearer {access_token}"},
                )
                if resp.status_code == 404:
                    logger.info("Google Drive file %s already gone", file_id)
                    return
                resp.raise_for_status()
        except httpx.HTTPError as exc:
            raise BackupError(f"Google Drive delete failed: {exc}") from exc


def get_drive_backup() -> DriveBackup:
    return DriveBackup()
