# -*- coding: utf-8 -*-
"""Profile — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

DEFAULT_CALORIE_GOAL = 2000
DEFAULT_PROTEIN_GOAL = 150.0
DEFAULT_CARBS_GOAL = 200.0
DEFAULT_FATS_GOAL = 65.0
DEFAULT_WATER_GOAL = 8


class Profile(BaseModel):
    user_id: str
    name: Optional[str] = None
    age: Optional[int] = None
    gender: Optional[str] = None
    height_cm: Optional[float] = None
    target_weight: Optional[float] = None
    activity_level: Optional[str] = None
    daily_calorie_goal: Optional[int] = DEFAULT_CALORIE_GOAL
    protein_goal: Optional[float] = DEFAULT_PROTEIN_GOAL
    carbs_goal: Optional[float] = DEFAULT_CARBS_GOAL
    fats_goal: Optional[float] = DEFAULT_FATS_GOAL
    water_goal: Optional[int] = DEFAULT_WATER_GOAL
    drive_connected: bool = False
    created_at: str
    updated_at: str


class ProfileUpdateRequest(BaseModel):
    """Partial merge; fields left out keep their stored value."""

    name: Optional[str] = Field(None, max_length=128)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=32)
    height_cm: Optional[float] = Field(None, gt=0)
    target_weight: Optional[float] = Field(None, gt=0)
    activity_level: Optional[str] = Field(None, max_length=32)
    daily_calorie_goal: Optional[int] = Field(None, gt=0)
    protein_goal: Optional[float] = Field(None, ge=0)
    carbs_goal: Optional[float] = Field(None, ge=0)
    fats_goal: Optional[float] = Field(None, ge=0)
    water_goal: Optional[int] = Field(None, ge=0)


class Goals(BaseModel):
    """Raw goal values as stored; ``None`` means "not set"."""

    daily_calorie_goal: Optional[int] = None
    protein_goal: Optional[float] = None
    carbs_goal: Optional[float] = None
    fats_goal: Optional[float] = None
    water_goal: Optional[int] = None


class DriveAuthUrlResponse(BaseModel):
    auth_url: str


class DriveCallbackRequest(BaseModel):
    code: str = Field(..., min_length=1)


class DriveStatusResponse(BaseModel):
    drive_connected: bool
