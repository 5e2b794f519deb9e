"""
Simple configuration management.

The ``Settings`` dataclass reads configuration directly from
environment variables.  Defaults are provided for every field except
the token signing secret, which has to be injected via ``SECRET_KEY``
(see ``core.security.ensure_secret_key`` for what happens when it is
missing).  Relative filesystem paths are resolved against the project
root by ``resolve_path``.
"""

import os
from dataclasses import dataclass
from pathlib import Path


PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent.parent


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    project_name: str = os.getenv("PROJECT_NAME", "MovieMania API")
    api_version: str = os.getenv("API_VERSION", "1.0.0")
    debug: bool = os.getenv("DEBUG", "false").lower() in {"1", "true", "yes"}
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # Token signing.  An empty secret is replaced by a random
    # per-process value at startup.
    secret_key: str = os.getenv("SECRET_KEY", "")
    access_token_expire_minutes: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "120"))
    algorithm: str = "HS256"

    # Storage backend: ``json`` keeps every collection in a file under
    # ``data_dir``; ``mongo`` keeps one document per record in MongoDB.
    storage_backend: str = os.getenv("STORAGE_BACKEND", "json")
    data_dir: str = os.getenv("DATA_DIR", "data")
    mongo_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "moviemania")

    # The notification log is always a plain text file, whatever the
    # storage backend.  A relative path is taken relative to ``data_dir``.
    notifications_log: str = os.getenv("NOTIFICATIONS_LOG", "notifications.log")
    images_dir: str = os.getenv("IMAGES_DIR", "images")

    recent_login_days: int = int(os.getenv("RECENT_LOGIN_DAYS", "7"))
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")

    # When both are set and no admin exists yet, an owner account is
    # created at startup so that somebody can log in.
    bootstrap_owner_username: str = os.getenv("BOOTSTRAP_OWNER_USERNAME", "")
    bootstrap_owner_password: str = os.getenv("BOOTSTRAP_OWNER_PASSWORD", "")


def resolve_path(value: str, base: Path = PROJECT_ROOT) -> Path:
    """Return ``value`` as an absolute path, relative ones joined to ``base``."""
    path = Path(value)
    if path.is_absolute():
        return path
    return (base / path).resolve()


# Instantiate settings once so other modules can import it without
# repeatedly reading environment variables.  Tests mutate attributes of
# this instance directly.
settings = Settings()
