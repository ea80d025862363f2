# -*- coding: utf-8 -*-
"""Auth — Pydantic models."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class RegisterRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=8, max_length=128)
    name: str = Field(..., min_length=1, max_length=128)
    age: Optional[int] = Field(None, ge=0, le=150)
    gender: Optional[str] = Field(None, max_length=32)
    height_cm: Optional[float] = Field(None, gt=0)
    target_weight: Optional[float] = Field(None, gt=0)
    daily_calorie_goal: Optional[int] = Field(None, gt=0)


class LoginRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=254)
    password: str = Field(..., min_length=1, max_length=128)


class UserPublic(BaseModel):
    id: str
    email: str
    name: str
    drive_connected: bool = False
    created_at: str


class AuthResponse(BaseModel):
    user: UserPublic
    token: str
