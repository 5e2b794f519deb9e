"""
Pytest configuration for the MovieMania API.

Provides fixtures for:
- Pointing storage, notification log and images at a temporary directory
- Switching the record store to an in-process MongoDB (mongomock)
- A running test client and ready-made admin accounts with tokens
"""

from __future__ import annotations

import asyncio
from typing import Dict, Iterator

import pytest
from fastapi.testclient import TestClient

from moviemania_api.app.core import db
from moviemania_api.app.core.config import settings
from moviemania_api.app.core.security import create_access_token
from moviemania_api.app.main import create_app
from moviemania_api.app.schemas.admin import AdminCreate
from moviemania_api.app.services.admin_service import AdminService


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Every test gets its own data directory and a known secret."""
    monkeypatch.setattr(settings, "storage_backend", "json")
    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "data"))
    monkeypatch.setattr(settings, "notifications_log", "notifications.log")
    monkeypatch.setattr(settings, "images_dir", str(tmp_path / "images"))
    monkeypatch.setattr(settings, "secret_key", "test-secret")
    monkeypatch.setattr(settings, "access_token_expire_minutes", 120)
    monkeypatch.setattr(settings, "recent_login_days", 7)
    monkeypatch.setattr(settings, "bootstrap_owner_username", "")
    monkeypatch.setattr(settings, "bootstrap_owner_password", "")
    return settings


@pytest.fixture
def mongo_database(monkeypatch):
    """Route the record store to a fresh mongomock database."""
    mongomock = pytest.importorskip("mongomock")
    client = mongomock.MongoClient()
    monkeypatch.setattr(settings, "storage_backend", "mongo")
    monkeypatch.setattr(db, "get_mongo_client", lambda uri: client)
    return client[settings.mongo_db]


@pytest.fixture(params=["json", "mongo"])
def backend(request) -> str:
    """Run a test once per storage backend."""
    if request.param == "mongo":
        request.getfixturevalue("mongo_database")
    return request.param


@pytest.fixture
def client() -> Iterator[TestClient]:
    with TestClient(create_app()) as test_client:
        yield test_client


def make_admin(username: str, password: str, role: str) -> str:
    asyncio.run(AdminService.create_admin(AdminCreate(username=username, password=password, role=role)))
    return username


def bearer(username: str, role: str) -> Dict[str, str]:
    token = create_access_token({"username": username, "role": role})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def owner() -> str:
    return make_admin("owner", "owner-pass", "owner")


@pytest.fixture
def editor() -> str:
    return make_admin("editor", "editor-pass", "editor")


@pytest.fixture
def owner_headers(owner) -> Dict[str, str]:
    return bearer(owner, "owner")


@pytest.fixture
def editor_headers(editor) -> Dict[str, str]:
    return bearer(editor, "editor")
