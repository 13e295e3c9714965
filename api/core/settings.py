"""
Environment-driven settings.

Values are read once at startup (see `api/main.py`) and passed to the code
that needs them. Unparsable numbers fall back to their defaults.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_ANALYTICS_LIMIT = 500
MAX_ANALYTICS_LIMIT = 10000


def _env_str(name: str, default: str) -> str:
    return os.environ.get(name, "").strip() or default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_bool(name: str, default: bool) -> bool:
    raw = os.environ.get(name, "").strip().lower()
    if not raw:
        return default
    return raw not in {"0", "false", "no", "off"}


@dataclass(frozen=True)
class S3Settings:
    endpoint: str
    region: str
    access_key_id: str
    secret_access_key: str
    bucket: str


@dataclass(frozen=True)
class FilerSettings:
    base_url: str
    bucket: str


@dataclass(frozen=True)
class ImageSettings:
    strategy: str
    s3: S3Settings
    filer: FilerSettings
    url_expiration_s: int
    key_prefix_length: int
    file_extension: str
    resolve_concurrency: int


@dataclass(frozen=True)
class AnalyticsDefaults:
    metric: str
    limit: int
    include_zero: bool


def image_settings() -> ImageSettings:
    extension = _env_str("IMAGE_FILE_EXTENSION", ".jpg")
    if not extension.startswith("."):
        extension = "." + extension

    return ImageSettings(
        strategy=_env_str("IMAGE_STRATEGY", "s3").lower(),
        s3=S3Settings(
            endpoint=_env_str("S3_ENDPOINT", "http://localhost:8333"),
            region=_env_str("S3_REGION", "us-east-1"),
            access_key_id=_env_str("S3_ACCESS_KEY_ID", "admin"),
            secret_access_key=_env_str("S3_SECRET_ACCESS_KEY", "admin"),
            bucket=_env_str("S3_BUCKET", "images"),
        ),
        filer=FilerSettings(
            base_url=_env_str("FILER_BASE_URL", "http://localhost:8888").rstrip("/"),
            bucket=_env_str("FILER_BUCKET", "images").strip("/"),
        ),
        url_expiration_s=max(1, _env_int("IMAGE_URL_EXPIRATION", 3600)),
        key_prefix_length=max(1, _env_int("IMAGE_KEY_PREFIX_LENGTH", 2)),
        file_extension=extension,
        resolve_concurrency=max(0, _env_int("IMAGE_RESOLVE_CONCURRENCY", 64)),
    )


def analytics_defaults() -> AnalyticsDefaults:
    metric = _env_str("ANALYTICS_DEFAULT_METRIC", "units").lower()
    if metric not in {"units", "revenue"}:
        metric = "units"
    limit = _env_int("ANALYTICS_DEFAULT_LIMIT", DEFAULT_ANALYTICS_LIMIT)
    return AnalyticsDefaults(
        metric=metric,
        limit=min(max(limit, 1), MAX_ANALYTICS_LIMIT),
        include_zero=_env_bool("ANALYTICS_DEFAULT_INCLUDE_ZERO", True),
    )


def log_level() -> str:
    return _env_str("LOG_LEVEL", "INFO").upper()


def cors_origins() -> list[str]:
    raw = _env_str("CORS_ORIGINS", "http://localhost:5173,http://127.0.0.1:5173")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]
