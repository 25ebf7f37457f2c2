"""
Configuration helpers for the shipment API.

Exposes a frozen Settings object read from environment variables so that
routers/services do not fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
import os

PROJECT_ROOT = Path(__file__).resolve().parents[2]
DEFAULT_DATA_FILE = PROJECT_ROOT / "data" / "shipments.json"
DEFAULT_PORT = 3000


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    host: str
    port: int
    data_file: Path
    log_level: str
    log_file: str | None
    cors_origins: tuple[str, ...]


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str | None, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    def _csv(value: str | None, default: tuple[str, ...]) -> tuple[str, ...]:
        if not value:
            return default
        items = tuple(item.strip() for item in value.split(",") if item.strip())
        return items or default

    data_file = (os.getenv("DATA_FILE") or "").strip()
    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").lower(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT"), DEFAULT_PORT) or DEFAULT_PORT,
        data_file=Path(data_file) if data_file else DEFAULT_DATA_FILE,
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        log_file=(os.getenv("LOG_FILE") or "").strip() or None,
        cors_origins=_csv(os.getenv("CORS_ORIGINS"), ("*",)),
    )
