"""
Storage wiring.

``get_store`` returns the record store selected by
``settings.storage_backend``.  Like a database connection it is cheap
to build and is created per call, so tests can repoint
``settings.data_dir`` between cases.  The MongoDB client is the one
exception: it owns a connection pool and is created once per URI.
"""

from functools import lru_cache
from pathlib import Path

from pymongo import MongoClient

from .config import resolve_path, settings
from .store import JsonFileStore, MongoStore, RecordStore


# Collection names and their empty values.
MOVIES = "movies"
SERIES = "series"
ADMINS = "admins"
SESSIONS = "sessions"

DEFAULTS = {
    MOVIES: [],
    SERIES: {},
    ADMINS: {},
    SESSIONS: [],
}


def get_data_dir() -> Path:
    return resolve_path(settings.data_dir)


def get_notifications_path() -> Path:
    """Notification log path; relative values live inside the data directory."""
    return resolve_path(settings.notifications_log, base=get_data_dir())


def get_images_dir() -> Path:
    return resolve_path(settings.images_dir)


@lru_cache(maxsize=None)
def get_mongo_client(uri: str) -> MongoClient:
    return MongoClient(uri)


def get_store() -> RecordStore:
    """Return the configured record store."""
    backend = settings.storage_backend.lower()
    if backend == "mongo":
        return MongoStore(get_mongo_client(settings.mongo_uri)[settings.mongo_db])
    if backend == "json":
        return JsonFileStore(get_data_dir())
    raise ValueError(f"Unknown storage backend {settings.storage_backend!r}")


def load(name: str):
    """Load a known collection with its default empty value."""
    return get_store().load(name, DEFAULTS[name])


def save(name: str, data) -> None:
    get_store().save(name, data)


def get(name: str, key: str):
    """One record by key, or ``None``."""
    return get_store().get(name, key)


def insert(name: str, key: str, record) -> None:
    get_store().insert(name, key, record)


def update(name: str, key: str, fields, new_key=None) -> bool:
    return get_store().update(name, key, fields, new_key=new_key)


def delete(name: str, key: str) -> bool:
    return get_store().delete(name, key)


def init_db() -> None:
    """Prepare the storage backend.

    Creates the data directory for the JSON backend (the notification
    log lives there for both backends) and unique indexes on record keys
    for MongoDB.
    """
    get_data_dir().mkdir(parents=True, exist_ok=True)
    get_notifications_path().parent.mkdir(parents=True, exist_ok=True)
    store = get_store()
    if isinstance(store, MongoStore):
        store.ensure_indexes()
