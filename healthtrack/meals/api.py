# -*- coding: utf-8 -*-
"""Meals — API endpoints."""

from __future__ import annotations

import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile

from ..auth.security import get_current_user
from ..backup.drive import DriveBackup, get_drive_backup
from ..config import settings
from ..dates import Window, local_now
from ..errors import BackupError
from .models import (
    MealCreateRequest,
    MealDaySummary,
    MealEntry,
    MealsResponse,
    MealType,
    MealUpdateRequest,
    MealUploadResponse,
)
from .storage import create_meal, delete_meal, get_meal, list_meals, summarize_day, update_meal
from .vision import analyze_meal_image

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/meals", tags=["Meals"])

_ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}


def _read_image_or_400(upload: UploadFile) -> bytes:
    content_type = (upload.content_type or "").lower()
    if content_type not in _ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {content_type or 'unknown'}")

    max_bytes = int(settings.max_upload_mb) * 1024 * 1024
    chunks: list[bytes] = []
    size = 0
    while True:
        chunk = upload.file.read(1024 * 256)
        if not chunk:
            break
        size += len(chunk)
        if size > max_bytes:
            raise HTTPException(status_code=400, detail=f"Image too large (> {settings.max_upload_mb} MB)")
        chunks.append(chunk)
    if size == 0:
        raise HTTPException(status_code=400, detail="Empty image upload")
    return b"".join(chunks)


@router.post("/upload", response_model=MealUploadResponse, summary="Upload a meal photo, analyze and save it")
def upload_meal_photo(
    meal_type: MealType = Form(default=MealType.snack),
    eaten_at: datetime | None = Form(default=None),
    notes: str | None = Form(default=None),
    image: UploadFile = File(...),
    user: dict = Depends(get_current_user),
    drive: DriveBackup = Depends(get_drive_backup),
):
    image_bytes = _read_image_or_400(image)
    content_type = (image.content_type or "image/jpeg").lower()
    analysis, analyzed = analyze_meal_image(image_bytes=image_bytes, image_mime=content_type)

    image_url = None
    drive_file_id = None
    refresh_token = user.get("drive_refresh_token")
    if refresh_token and drive.configured:
        filename = f"meal_{local_now().strftime('%Y%m%d_%H%M%S')}_{image.filename or 'photo'}"
        try:
            backup = drive.upload(refresh_token, filename, image_bytes, content_type)
        except BackupError as exc:
            logger.warning("meal photo backup failed for user %s: %s", user["id"], exc)
        else:
            image_url = backup.thumbnail_link
            drive_file_id = backup.file_id

    extra_notes = notes.strip() if notes and notes.strip() else None
    request = MealCreateRequest(
        eaten_at=eaten_at,
        meal_type=meal_type,
        meal_name=analysis.meal_name,
        food_items=analysis.food_items,
        calories=analysis.calories,
        protein=analysis.protein,
        carbs=analysis.carbs,
        fats=analysis.fats,
        fiber=analysis.fiber,
        sugar=analysis.sugar,
        serving_size=analysis.serving_size,
        image_url=image_url,
        notes=extra_notes or analysis.notes or None,
    )
    meal = create_meal(user["id"], request, confidence=analysis.confidence, drive_file_id=drive_file_id)
    return MealUploadResponse(meal=meal, analysis=analysis, analyzed=analyzed, backed_up=drive_file_id is not None)


@router.post("", response_model=MealEntry, summary="Log a meal manually")
def log_meal(request: MealCreateRequest, user: dict = Depends(get_current_user)):
    return create_meal(user["id"], request)


@router.get("", response_model=MealsResponse, summary="List meals, newest first")
def list_my_meals(
    start: date | None = Query(default=None, description="YYYY-MM-DD"),
    end: date | None = Query(default=None, description="YYYY-MM-DD"),
    meal_type: MealType | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    user: dict = Depends(get_current_user),
):
    meals = list_meals(
        user["id"],
        Window.for_days(start, end),
        meal_type=meal_type.value if meal_type else None,
    )
    return MealsResponse(count=len(meals), meals=meals[offset : offset + limit])


@router.get("/today", response_model=MealDaySummary, summary="Today's meal totals")
def today_summary(user: dict = Depends(get_current_user)):
    return summarize_day(user["id"], local_now().date())


@router.get("/{meal_id}", response_model=MealEntry, summary="Get a meal")
def read_meal(meal_id: str, user: dict = Depends(get_current_user)):
    meal = get_meal(user["id"], meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.patch("/{meal_id}", response_model=MealEntry, summary="Correct a meal's nutrition")
def patch_meal(meal_id: str, request: MealUpdateRequest, user: dict = Depends(get_current_user)):
    meal = update_meal(user["id"], meal_id, request)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")
    return meal


@router.delete("/{meal_id}", summary="Delete a meal (and its Drive backup, best effort)")
def remove_meal(
    meal_id: str,
    user: dict = Depends(get_current_user),
    drive: DriveBackup = Depends(get_drive_backup),
):
    meal = get_meal(user["id"], meal_id)
    if meal is None:
        raise HTTPException(status_code=404, detail="Meal not found")

    refresh_token = user.get("drive_refresh_token")
    if meal.drive_file_id and refresh_token and drive.configured:
        try:
            drive.delete(refresh_token, meal.drive_file_id)
        except BackupError as exc:
            logger.warning("could not delete Drive file %s: %s", meal.drive_file_id, exc)

    delete_meal(user["id"], meal_id)
    return {"status": "ok"}
