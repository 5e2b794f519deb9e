import asyncio
import json

import pytest

import create_token
import normalize_series
import reset_password
from moviemania_api.app.core import db
from moviemania_api.app.core.security import decode_access_token
from moviemania_api.app.services.admin_service import AdminService


def test_reset_password(owner, capsys):
    assert reset_password.main(["--username", "owner", "--password", "fresh"]) == 0
    assert "Password updated for admin: owner" in capsys.readouterr().out
    assert asyncio.run(AdminService.authenticate("owner", "fresh")) is not None
    assert asyncio.run(AdminService.authenticate("owner", "owner-pass")) is None


def test_reset_password_unknown_admin(capsys):
    assert reset_password.main(["--username", "ghost", "--password", "fresh"]) == 2
    assert "ghost" in capsys.readouterr().err


def test_reset_password_upgrades_plaintext_record(capsys):
    db.save(db.ADMINS, {"legacy": {"password": "plain", "role": "owner"}})
    assert asyncio.run(AdminService.authenticate("legacy", "plain")) is None

    assert reset_password.main(["--username", "legacy", "--password", "plain"]) == 0
    assert asyncio.run(AdminService.authenticate("legacy", "plain")) is not None


def test_create_token(owner, monkeypatch, capsys):
    monkeypatch.setenv("SECRET_KEY", "test-secret")
    assert create_token.main(["--username", "owner", "--days", "30"]) == 0

    claims = decode_access_token(capsys.readouterr().out.strip())
    assert claims["username"] == "owner"
    assert claims["role"] == "owner"
    assert claims["exp"] - claims["iat"] == 30 * 24 * 60 * 60


def test_create_token_needs_secret_and_admin(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    assert create_token.main(["--username", "owner"]) == 1

    monkeypatch.setenv("SECRET_KEY", "test-secret")
    assert create_token.main(["--username", "ghost"]) == 2


@pytest.fixture
def legacy_export(tmp_path):
    path = tmp_path / "old-series.json"
    path.write_text(
        json.dumps(
            [
                {
                    "hells-paradise": {"title": "Hell's Paradise", "episodes": {"s1": ["e1"]}},
                    "dark": {"title": "Dark", "description": None},
                    "broken": {"description": "no title"},
                }
            ]
        ),
        encoding="utf-8",
    )
    return path


def test_normalize_series_imports_new_slugs(legacy_export, capsys):
    db.save(db.SERIES, {"dark": {"title": "Dark (kept)", "description": "", "episodes": {}, "addedBy": "bob"}})

    assert normalize_series.main(["--source", str(legacy_export)]) == 0
    assert "Imported 1 series" in capsys.readouterr().out

    catalog = db.load(db.SERIES)
    assert catalog["dark"]["title"] == "Dark (kept)"
    assert catalog["hells-paradise"] == {
        "title": "Hell's Paradise",
        "description": "",
        "episodes": {"s1": ["e1"]},
        "addedBy": "unknown",
    }
    assert "broken" not in catalog


def test_normalize_series_bad_source(tmp_path):
    assert normalize_series.main(["--source", str(tmp_path / "missing.json")]) == 1
    bad = tmp_path / "bad.json"
    bad.write_text("{nope", encoding="utf-8")
    assert normalize_series.main(["--source", str(bad)]) == 1


def test_normalize_accepts_unwrapped_object():
    assert list(normalize_series.normalize({"x": {"title": "X"}})) == ["x"]
    assert normalize_series.normalize("garbage") == {}
