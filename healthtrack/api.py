# -*- coding: utf-8 -*-
"""
healthtrack API

Meal logging with photo analysis, exercise/water/weight tracking and
nutrition statistics.
"""

from __future__ import annotations

import logging
import os

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .app_db import init_app_db
from .auth.api import router as auth_router
from .auth.security import get_current_user_from_request
from .config import settings
from .errors import StoreUnavailable
from .exercise.api import router as exercise_router
from .meals.api import router as meals_router
from .profile.api import router as profile_router
from .stats.api import router as stats_router
from .water.api import router as water_router
from .weight.api import router as weight_router

logger = logging.getLogger(__name__)

app = FastAPI(
    title="healthtrack",
    description="Meal, exercise, water and weight tracking with nutrition statistics",
    version=__version__,
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _startup_init_db() -> None:
    init_app_db(settings.db_path)


# Ensure the DB exists even when lifespan events are not triggered (e.g. some test clients).
init_app_db(settings.db_path)


_AUTH_EXEMPT_PREFIXES = (
    "/api/auth/login",
    "/api/auth/register",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
)


@app.middleware("http")
async def _auth_gate(request: Request, call_next):
    path = request.url.path
    if path.startswith("/api") and path != "/api/health" and not any(path.startswith(p) for p in _AUTH_EXEMPT_PREFIXES):
        try:
            request.state.user = get_current_user_from_request(request)
        except HTTPException as exc:
            return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
        except StoreUnavailable as exc:
            return JSONResponse(status_code=503, content={"detail": str(exc)})
    return await call_next(request)


@app.exception_handler(StoreUnavailable)
async def _store_unavailable(request: Request, exc: StoreUnavailable):
    logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=503, content={"detail": "Record store unavailable"})


app.include_router(auth_router)
app.include_router(profile_router)
app.include_router(meals_router)
app.include_router(exercise_router)
app.include_router(water_router)
app.include_router(weight_router)
app.include_router(stats_router)


@app.get("/api/health", summary="Liveness check")
def health():
    return {"status": "ok", "version": __version__, "drive_enabled": settings.drive_enabled}


def run() -> None:
    """Console entry point (`healthtrack-server`)."""
    import uvicorn

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    host = os.environ.get("HEALTHTRACK_HOST") or os.environ.get("HOST") or "127.0.0.1"
    port_raw = os.environ.get("HEALTHTRACK_PORT") or os.environ.get("PORT") or "8000"
    try:
        port = int(port_raw)
    except ValueError:
        logger.warning("invalid port %r, falling back to 8000", port_raw)
        port = 8000

    uvicorn.run("healthtrack.api:app", host=host, port=port, reload=False)
