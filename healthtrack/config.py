from __future__ import annotations

import os
from pathlib import Path
from typing import List


class Settings:
    """Centralized configuration for the health tracker backend."""

    def __init__(self) -> None:
        base_dir = Path(__file__).resolve().parent
        repo_root = base_dir.parent
        data_root_default = repo_root / "data"

        self.data_root: Path = Path(
            os.environ.get("HEALTHTRACK_DATA_ROOT") or data_root_default
        ).expanduser()
        self.db_path: Path = Path(
            os.environ.get("HEALTHTRACK_DB_PATH") or (self.data_root / "health_tracker.db")
        ).expanduser()
        self.log_level: str = (os.environ.get("LOG_LEVEL") or "INFO").upper()

        # In production you MUST set HEALTHTRACK_JWT_SECRET. The dev secret only keeps local demos easy.
        self.jwt_secret: str = os.environ.get("HEALTHTRACK_JWT_SECRET") or "dev-secret-change-me"
        self.token_ttl_days: int = int(os.environ.get("HEALTHTRACK_TOKEN_TTL_DAYS") or "7")
        self.cookie_secure: bool = (os.environ.get("HEALTHTRACK_COOKIE_SECURE") or "").strip() in {"1", "true", "True"}
        self.max_upload_mb: int = int(os.environ.get("HEALTHTRACK_MAX_UPLOAD_MB") or "10")

        # ---- Vision analyzer (Anthropic Messages API) ----
        self.anthropic_api_key: str | None = os.environ.get("ANTHROPIC_API_KEY")
        self.anthropic_base_url: str = os.environ.get(
            "ANTHROPIC_BASE_URL", "https://api.anthropic.com"
        )
        self.vision_model: str = os.environ.get("VISION_MODEL", "claude-3-5-sonnet-20241022")
        self.vision_timeout: float = float(os.environ.get("VISION_TIMEOUT", "30"))
        self.vision_max_tokens: int = int(os.environ.get("VISION_MAX_TOKENS", "1024"))

        # ---- Remote backup (Google Drive) ----
        self.google_client_id: str | None = os.environ.get("GOOGLE_CLIENT_ID")
        self.google_client_secret: str | None = os.environ.get("GOOGLE_CLIENT_SECRET")
        self.google_redirect_uri: str | None = os.environ.get("GOOGLE_REDIRECT_URI")
        self.google_drive_folder_id: str | None = os.environ.get("GOOGLE_DRIVE_FOLDER_ID")
        self.drive_timeout: float = float(os.environ.get("GOOGLE_DRIVE_TIMEOUT", "30"))

        cors = os.environ.get("HEALTHTRACK_CORS_ORIGINS", "*")
        if cors.strip() == "*":
            self.cors_origins: List[str] = ["*"]
        else:
            self.cors_origins = [
                origin.strip() for origin in cors.split(",") if origin.strip()
            ]

    @property
    def drive_enabled(self) -> bool:
        return bool(self.google_client_id and self.google_client_secret)


settings = Settings()
