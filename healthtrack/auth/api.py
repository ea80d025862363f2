# -*- coding: utf-8 -*-
"""Auth — API endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config import settings
from ..profile.storage import create_profile
from .models import AuthResponse, LoginRequest, RegisterRequest, UserPublic
from .security import TOKEN_COOKIE_NAME, create_access_token, get_current_user, hash_password, verify_password
from .storage import create_user, get_user_by_email

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Auth"])

_PROFILE_FIELDS_ON_SIGNUP = {"name", "age", "gender", "height_cm", "target_weight", "daily_calorie_goal"}


def _to_public(user: dict) -> UserPublic:
    return UserPublic(
        id=user["id"],
        email=user["email"],
        name=user["name"],
        drive_connected=bool(user.get("drive_refresh_token")),
        created_at=user["created_at"],
    )


def _start_session(response: Response, user: dict) -> AuthResponse:
    """Issue a token and mirror it into an http-only cookie for browser clients."""
    token = create_access_token(user_id=user["id"], email=user["email"])
    response.set_cookie(
        TOKEN_COOKIE_NAME,
        token,
        max_age=int(settings.token_ttl_days) * 86400,
        httponly=True,
        secure=bool(settings.cookie_secure),
        samesite="lax",
        path="/",
    )
    return AuthResponse(user=_to_public(user), token=token)


@router.post("/register", response_model=AuthResponse, summary="Create an account and its profile")
def register(request: RegisterRequest, response: Response):
    if get_user_by_email(request.email) is not None:
        raise HTTPException(status_code=400, detail="Email already registered")

    user = create_user(email=request.email, password_hash=hash_password(request.password), name=request.name)
    create_profile(user["id"], request.model_dump(include=_PROFILE_FIELDS_ON_SIGNUP))
    logger.info("registered user %s", user["id"])
    return _start_session(response, user)


@router.post("/login", response_model=AuthResponse, summary="Login with email and password")
def login(request: LoginRequest, response: Response):
    user = get_user_by_email(request.email)
    if user is None or not verify_password(request.password, user["password_hash"]):
        raise HTTPException(status_code=401, detail="Invalid email or password")
    return _start_session(response, user)


@router.post("/logout", summary="Clear the session cookie")
def logout(response: Response):
    response.delete_cookie(TOKEN_COOKIE_NAME, path="/")
    return {"status": "ok"}


@router.get("/me", response_model=UserPublic, summary="Current user")
def me(user: dict = Depends(get_current_user)):
    return _to_public(user)
