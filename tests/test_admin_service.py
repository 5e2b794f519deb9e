import asyncio

import pytest

from moviemania_api.app.core import db
from moviemania_api.app.core.errors import Conflict, InvalidInput, NotFound
from moviemania_api.app.schemas.admin import AdminCreate, AdminUpdate
from moviemania_api.app.services.admin_service import AdminService
from moviemania_api.app.services.notification_service import NotificationService
from moviemania_api.app.services.session_service import DAY_MS, SessionService
from moviemania_api.app.services.statistics_service import StatisticsService


def run(coro):
    return asyncio.run(coro)


def create(username="alice", password="s3cret", role="owner", actor=None):
    return run(AdminService.create_admin(AdminCreate(username=username, password=password, role=role), actor=actor))


def messages():
    return [entry["message"] for entry in run(NotificationService.list_entries())]


def test_authenticate_checks_password(backend):
    create()

    admin = run(AdminService.authenticate("alice", "s3cret"))
    assert admin.username == "alice"
    assert admin.role == "owner"
    assert run(AdminService.authenticate("alice", "wrong")) is None
    assert run(AdminService.authenticate("ghost", "s3cret")) is None


def test_create_stores_hash_not_password(backend):
    created = create(actor="root")

    record = db.load(db.ADMINS)["alice"]
    assert record["password"] != "s3cret"
    assert "$" in record["password"]
    assert created.createdAt.endswith("Z")
    assert "password" not in created.model_dump()
    assert messages() == ["Admin added: alice (by root)"]


def test_duplicate_username_conflicts(backend):
    create()
    with pytest.raises(Conflict) as exc:
        create(password="other", role="editor")
    assert exc.value.status_code == 409
    assert db.load(db.ADMINS)["alice"]["role"] == "owner"


def test_blank_username_is_invalid(backend):
    with pytest.raises(InvalidInput):
        create(username="   ")


def test_update_merges_and_keeps_created_at(backend):
    created = create(role="editor")
    run(AdminService.record_login("alice", "10.0.0.1"))

    updated = run(AdminService.update_admin("alice", AdminUpdate(role="owner")))

    assert updated.role == "owner"
    assert updated.createdAt == created.createdAt
    assert updated.lastLogin.ip == "10.0.0.1"
    assert run(AdminService.authenticate("alice", "s3cret")) is not None


def test_update_password_rehashes(backend):
    create()
    run(AdminService.update_admin("alice", AdminUpdate(password="n3w")))
    assert run(AdminService.authenticate("alice", "s3cret")) is None
    assert run(AdminService.authenticate("alice", "n3w")) is not None


def test_rename_moves_the_account(backend):
    created = create()
    create(username="bob", role="editor")

    renamed = run(AdminService.update_admin("alice", AdminUpdate(username="carol")))

    admins = db.load(db.ADMINS)
    assert list(admins) == ["carol", "bob"]
    assert renamed.createdAt == created.createdAt
    assert run(AdminService.get_role("carol")) == "owner"
    assert run(AdminService.get_role("alice")) == "unknown"


def test_rename_onto_existing_username_conflicts(backend):
    create()
    create(username="bob", role="editor")
    with pytest.raises(Conflict):
        run(AdminService.update_admin("alice", AdminUpdate(username="bob")))
    assert run(AdminService.get_role("bob")) == "editor"


def test_update_unknown_admin_is_not_found(backend):
    with pytest.raises(NotFound):
        run(AdminService.update_admin("ghost", AdminUpdate(role="owner")))


def test_delete_is_idempotent(backend):
    create()
    assert run(AdminService.delete_admin("alice", actor="root")) is True
    assert run(AdminService.delete_admin("alice", actor="root")) is False
    assert db.load(db.ADMINS) == {}
    assert messages() == ["Admin added: alice", "Admin deleted: alice (by root)"]


def test_get_role_of_missing_or_empty_name(backend):
    assert run(AdminService.get_role("ghost")) == "unknown"
    assert run(AdminService.get_role(None)) == "unknown"


def test_set_password(backend):
    create()
    run(AdminService.set_password("alice", "reset"))
    assert run(AdminService.authenticate("alice", "reset")) is not None
    with pytest.raises(NotFound):
        run(AdminService.set_password("ghost", "reset"))
    with pytest.raises(InvalidInput):
        run(AdminService.set_password("alice", ""))


def test_ensure_owner_only_on_empty_directory(backend):
    assert run(AdminService.ensure_owner("", "")) is False
    assert run(AdminService.ensure_owner("boss", "pw")) is True
    assert run(AdminService.get_role("boss")) == "owner"
    assert run(AdminService.ensure_owner("other", "pw")) is False
    assert list(db.load(db.ADMINS)) == ["boss"]


def test_recent_logins_window(backend):
    create()
    now = 1_700_000_000_000
    db.save(
        db.SESSIONS,
        [
            {"username": "alice", "token": "t1", "ip": None, "timestamp": now - 8 * DAY_MS},
            {"username": "alice", "token": "t2", "ip": None, "timestamp": now - 7 * DAY_MS},
            {"username": "alice", "token": "t3", "ip": "1.2.3.4", "timestamp": now - 1000},
        ],
    )

    assert run(SessionService.count_recent(7, now=now)) == 2
    stats = run(StatisticsService.overview(now=now))
    assert stats == {"totalMovies": 0, "totalSeries": 0, "totalAdmins": 1, "recentLogins": 2}
