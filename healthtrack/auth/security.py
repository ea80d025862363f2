# -*- coding: utf-8 -*-
"""Auth — PBKDF2 password hashes, signed session tokens and the current-user dependency."""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import os
import time
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, Request

from ..config import settings
from .storage import get_user_by_id

TOKEN_COOKIE_NAME = "healthtrack_token"

_HASH_NAME = "sha256"
_HASH_ROUNDS = 200_000
_TOKEN_HEADER = {"alg": "HS256", "typ": "JWT"}


def _urlsafe(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _unurlsafe(text: str) -> bytes:
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def _compact_json(obj: Dict[str, Any]) -> str:
    return _urlsafe(json.dumps(obj, separators=(",", ":")).encode("utf-8"))


def hash_password(password: str) -> str:
    """Return ``pbkdf2_sha256$rounds$salt$digest`` with url-safe base64 parts."""
    salt = os.urandom(16)
    digest = hashlib.pbkdf2_hmac(_HASH_NAME, password.encode("utf-8"), salt, _HASH_ROUNDS)
    return "$".join([f"pbkdf2_{_HASH_NAME}", str(_HASH_ROUNDS), _urlsafe(salt), _urlsafe(digest)])


def verify_password(password: str, stored: str) -> bool:
    parts = stored.split("$")
    if len(parts) != 4 or not parts[0].startswith("pbkdf2_"):
        return False
    scheme, rounds, salt, digest = parts
    try:
        candidate = hashlib.pbkdf2_hmac(
            scheme[len("pbkdf2_"):], password.encode("utf-8"), _unurlsafe(salt), int(rounds)
        )
        return hmac.compare_digest(candidate, _unurlsafe(digest))
    except ValueError:
        return False


def _signature(message: str) -> str:
    mac = hmac.new(settings.jwt_secret.encode("utf-8"), message.encode("ascii"), hashlib.sha256)
    return _urlsafe(mac.digest())


def create_access_token(*, user_id: str, email: str) -> str:
    issued = int(time.time())
    claims = {
        "sub": user_id,
        "email": email,
        "iat": issued,
        "exp": issued + int(settings.token_ttl_days) * 86400,
    }
    message = f"{_compact_json(_TOKEN_HEADER)}.{_compact_json(claims)}"
    return f"{message}.{_signature(message)}"


def decode_token(token: str) -> Dict[str, Any]:
    """Verify signature and expiry; any failure is a 401."""
    message, _, signature = token.rpartition(".")
    if not message or message.count(".") != 1:
        raise HTTPException(status_code=401, detail="Invalid token")
    try:
        valid = hmac.compare_digest(_signature(message), signature)
        claims = json.loads(_unurlsafe(message.split(".", 1)[1])) if valid else None
    except (TypeError, ValueError) as exc:
        raise HTTPException(status_code=401, detail="Invalid token") from exc
    if not valid or not isinstance(claims, dict):
        raise HTTPException(status_code=401, detail="Invalid token")
    if int(claims.get("exp") or 0) < int(time.time()):
        raise HTTPException(status_code=401, detail="Token expired")
    return claims


def get_token_from_request(request: Request) -> Optional[str]:
    scheme, _, value = (request.headers.get("authorization") or "").partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(TOKEN_COOKIE_NAME) or None


def get_current_user_from_request(request: Request) -> Dict[str, Any]:
    cached = getattr(request.state, "user", None)
    if cached:
        return cached

    token = get_token_from_request(request)
    if token is None:
        raise HTTPException(status_code=401, detail="Not authenticated")

    user_id = str(decode_token(token).get("sub") or "")
    user = get_user_by_id(user_id) if user_id else None
    if user is None:
        raise HTTPException(status_code=401, detail="Unknown user")

    request.state.user = user
    return user


def get_current_user(user: Dict[str, Any] = Depends(get_current_user_from_request)) -> Dict[str, Any]:
    return user
