# -*- coding: utf-8 -*-
"""Profile — API endpoints (goals, demographics, Google Drive connection)."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from ..auth.security import get_current_user
from ..auth.storage import set_drive_refresh_token
from ..backup.drive import DriveBackup, get_drive_backup
from ..errors import BackupError
from .models import DriveAuthUrlResponse, DriveCallbackRequest, DriveStatusResponse, Profile, ProfileUpdateRequest
from .storage import get_profile, update_profile

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["Profile"])


@router.get("", response_model=Profile, summary="Get my profile and goals")
def read_profile(user: dict = Depends(get_current_user)):
    return get_profile(user["id"])


@router.patch("", response_model=Profile, summary="Update profile fields (partial)")
def patch_profile(request: ProfileUpdateRequest, user: dict = Depends(get_current_user)):
    return update_profile(user["id"], request)


@router.get("/drive/auth-url", response_model=DriveAuthUrlResponse, summary="Google Drive OAuth consent URL")
def drive_auth_url(
    user: dict = Depends(get_current_user),  # noqa: ARG001
    drive: DriveBackup = Depends(get_drive_backup),
):
    try:
        return DriveAuthUrlResponse(auth_url=drive.auth_url())
    except BackupError as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc


@router.post("/drive/callback", response_model=DriveStatusResponse, summary="Store the Google Drive refresh token")
def drive_callback(
    request: DriveCallbackRequest,
    user: dict = Depends(get_current_user),
    drive: DriveBackup = Depends(get_drive_backup),
):
    try:
        refresh_token = drive.exchange_code(request.code)
    except BackupError as exc:
        logger.warning("Google Drive connect failed for user %s: %s", user["id"], exc)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    set_drive_refresh_token(user["id"], refresh_token)
    return DriveStatusResponse(drive_connected=True)


@router.delete("/drive", response_model=DriveStatusResponse, summary="Disconnect Google Drive")
def drive_disconnect(user: dict = Depends(get_current_user)):
    set_drive_refresh_token(user["id"], None)
    return DriveStatusResponse(drive_connected=False)
