import json

import pytest

from moviemania_api.app.core import db
from moviemania_api.app.core.config import settings
from moviemania_api.app.core.errors import CorruptData, DuplicateRecord
from moviemania_api.app.core.store import SEQ_FIELD, JsonFileStore, MongoStore


def test_json_store_missing_file_returns_fresh_default(tmp_path):
    store = JsonFileStore(tmp_path)
    default = []
    loaded = store.load("movies", default)
    loaded.append({"id": "m1"})
    assert default == []
    assert store.load("series", {}) == {}


def test_json_store_round_trip_is_pretty_printed(tmp_path):
    store = JsonFileStore(tmp_path / "nested")
    movies = [{"id": "m2", "title": "Second"}, {"id": "m1", "title": "Fïrst"}]
    store.save("movies", movies)

    text = store.path_for("movies").read_text(encoding="utf-8")
    assert text.startswith("[\n  {")
    assert "Fïrst" in text
    assert store.load("movies", []) == movies


def test_json_store_unparsable_file_is_corrupt(tmp_path):
    (tmp_path / "movies.json").write_text("[{\"id\": ", encoding="utf-8")
    with pytest.raises(CorruptData):
        JsonFileStore(tmp_path).load("movies", [])


def test_json_store_wrong_top_level_type_is_corrupt(tmp_path):
    (tmp_path / "series.json").write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(CorruptData):
        JsonFileStore(tmp_path).load("series", {})


def test_mongo_store_keeps_list_order_and_drops_removed(mongo_database):
    store = MongoStore(mongo_database)
    store.save("movies", [{"id": "b", "title": "B"}, {"id": "a", "title": "A"}])
    store.save("movies", [{"id": "c", "title": "C"}, {"id": "a", "title": "A2"}])

    assert store.load("movies", []) == [{"id": "c", "title": "C"}, {"id": "a", "title": "A2"}]
    assert mongo_database["movies"].count_documents({}) == 2


def test_mongo_store_mapping_uses_explicit_key_field(mongo_database):
    store = MongoStore(mongo_database)
    series = {"dark": {"title": "Dark", "episodes": {}}, "lost": {"title": "Lost", "episodes": {}}}
    store.save("series", series)

    doc = mongo_database["series"].find_one({"id": "dark"})
    assert doc["title"] == "Dark"
    assert store.load("series", {}) == series


def test_mongo_store_empty_collection_returns_default(mongo_database):
    assert MongoStore(mongo_database).load("sessions", []) == []


def test_get_store_follows_configuration(mongo_database):
    assert isinstance(db.get_store(), MongoStore)
    settings.storage_backend = "json"
    assert isinstance(db.get_store(), JsonFileStore)
    settings.storage_backend = "sqlite"
    with pytest.raises(ValueError):
        db.get_store()


def test_collection_defaults():
    assert db.load(db.MOVIES) == []
    assert db.load(db.SERIES) == {}
    assert db.load(db.ADMINS) == {}
    assert db.load(db.SESSIONS) == []


@pytest.fixture(params=["json", "mongo"])
def store(request, tmp_path):
    if request.param == "mongo":
        return MongoStore(request.getfixturevalue("mongo_database"))
    return JsonFileStore(tmp_path / "records")


def test_insert_puts_movies_first_and_sessions_last(store):
    store.insert("movies", "m1", {"id": "m1", "title": "One"})
    store.insert("movies", "m2", {"title": "Two"})
    store.insert("sessions", "t1", {"username": "a", "token": "t1"})
    store.insert("sessions", "t2", {"username": "b", "token": "t2"})

    assert [movie["id"] for movie in store.load("movies", [])] == ["m2", "m1"]
    assert store.get("movies", "m2") == {"id": "m2", "title": "Two"}
    assert [session["token"] for session in store.load("sessions", [])] == ["t1", "t2"]


def test_insert_rejects_taken_key(store):
    store.insert("series", "dark", {"title": "Dark"})
    with pytest.raises(DuplicateRecord):
        store.insert("series", "dark", {"title": "Other"})
    assert store.get("series", "dark") == {"title": "Dark"}


def test_update_merges_and_renames_in_place(store):
    for name in ("alice", "bob", "carol"):
        store.insert("admins", name, {"role": "editor", "createdAt": name})

    assert store.update("admins", "bob", {"role": "owner"}, new_key="bert") is True

    admins = store.load("admins", {})
    assert list(admins) == ["alice", "bert", "carol"]
    assert admins["bert"] == {"role": "owner", "createdAt": "bob"}
    assert store.update("admins", "bob", {"role": "x"}) is False
    with pytest.raises(DuplicateRecord):
        store.update("admins", "alice", {}, new_key="carol")


def test_delete_reports_whether_something_went(store):
    store.insert("movies", "m1", {"title": "One"})
    assert store.delete("movies", "m1") is True
    assert store.delete("movies", "m1") is False
    assert store.get("movies", "m1") is None


def test_mongo_writers_on_different_records_keep_each_other(mongo_database):
    first, second = MongoStore(mongo_database), MongoStore(mongo_database)
    first.insert("admins", "alice", {"role": "owner"})

    # Both writers read before either writes.
    assert first.load("movies", []) == second.load("movies", []) == []
    first.insert("movies", "a", {"title": "A"})
    second.insert("movies", "b", {"title": "B"})
    second.update("admins", "alice", {"lastLogin": {"timestamp": 1, "ip": None}})
    first.insert("admins", "bob", {"role": "editor"})

    assert [movie["id"] for movie in first.load("movies", [])] == ["b", "a"]
    admins = second.load("admins", {})
    assert admins["alice"]["lastLogin"] == {"timestamp": 1, "ip": None}
    assert admins["bob"] == {"role": "editor"}


def test_mongo_insert_leaves_existing_documents_alone(mongo_database):
    store = MongoStore(mongo_database)
    for n in range(5):
        store.insert("movies", f"m{n}", {"title": str(n)})
    before = {doc["id"]: doc[SEQ_FIELD] for doc in mongo_database["movies"].find()}

    store.insert("movies", "new", {"title": "New"})

    after = {doc["id"]: doc[SEQ_FIELD] for doc in mongo_database["movies"].find()}
    assert {key: after[key] for key in before} == before
    assert after["new"] > max(before.values())


def test_mongo_insert_after_bulk_save_goes_first(mongo_database):
    store = MongoStore(mongo_database)
    store.save("movies", [{"id": "b", "title": "B"}, {"id": "a", "title": "A"}])
    store.insert("movies", "c", {"title": "C"})
    assert [movie["id"] for movie in store.load("movies", [])] == ["c", "b", "a"]
