"""Simplified configuration management."""

import os
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field


def _load_env_file() -> None:
    """Load .env from root directory if present."""
    env_path = Path(__file__).parent.parent / ".env"
    if not env_path.is_file():
        return
    try:
        lines = env_path.read_text(encoding="utf-8").splitlines()
    except OSError:
        return
    for line in lines:
        stripped = line.strip()
        if stripped and not stripped.startswith("#") and "=" in stripped:
            key, value = stripped.split("=", 1)
            key, value = key.strip(), value.strip().strip("'\"")
            if key and value and key not in os.environ:
                os.environ[key] = value


_load_env_file()


DEFAULT_APP_NAME = "Request Log Feed"
DEFAULT_APP_VERSION = "0.1.0"


def _env_int(name: str, fallback: int) -> int:
    try:
        return int(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _env_float(name: str, fallback: float) -> float:
    try:
        return float(os.getenv(name, str(fallback)))
    except (TypeError, ValueError):
        return fallback


def _get_port() -> int:
    """Get server port, checking PORT first, then LOGFEED_PORT."""
    port = os.getenv("PORT") or os.getenv("LOGFEED_PORT")
    if port:
        try:
            return int(port)
        except ValueError:
            pass
    return 8002


class Settings(BaseModel):
    """Application settings with lightweight env fallbacks."""

    # App metadata
    app_name: str = Field(default=DEFAULT_APP_NAME)
    app_version: str = Field(default=DEFAULT_APP_VERSION)

    # Server runtime
    server_host: str = Field(default=os.getenv("LOGFEED_HOST", "0.0.0.0"))
    server_port: int = Field(default_factory=_get_port)

    # Gateway dashboard API
    gateway_base_url: str = Field(
        default=os.getenv("LOGFEED_GATEWAY_URL", "http://127.0.0.1:8080/api/dashboard")
    )
    gateway_token: Optional[str] = Field(default=os.getenv("LOGFEED_GATEWAY_TOKEN"))
    gateway_timeout_seconds: float = Field(default=_env_float("LOGFEED_GATEWAY_TIMEOUT", 15.0))

    # Feed behaviour
    page_size: int = Field(default=_env_int("LOGFEED_PAGE_SIZE", 100), ge=1, le=200)
    head_poll_interval_seconds: float = Field(default=_env_float("LOGFEED_HEAD_POLL_INTERVAL", 2.0), gt=0)
    pause_head_poll_while_interacting: bool = Field(default=os.getenv("LOGFEED_PAUSE_HEAD_POLL", "1") != "0")
    display_timezone: str = Field(default=os.getenv("LOGFEED_DISPLAY_TIMEZONE", "UTC"))

    # HTTP behaviour
    cors_allow_origins_raw: str = Field(default=os.getenv("LOGFEED_CORS_ALLOW_ORIGINS", "*"))
    enable_docs: bool = Field(default=os.getenv("LOGFEED_ENABLE_DOCS", "1") != "0")
    docs_url: Optional[str] = Field(default=os.getenv("LOGFEED_DOCS_URL", "/docs"))

    @property
    def cors_allow_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string."""
        if self.cors_allow_origins_raw.strip() in {"", "*"}:
            return ["*"]
        return [origin.strip() for origin in self.cors_allow_origins_raw.split(",") if origin.strip()]

    @property
    def resolved_docs_url(self) -> Optional[str]:
        """Return documentation URL when docs are enabled."""
        return (self.docs_url or "/docs") if self.enable_docs else None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
