"""
Record stores: named collections of keyed records.

Every collection the API manages (movies, series, admins, sessions) is
reached through the ``RecordStore`` interface.  Services change single
records with ``insert``, ``update`` and ``delete``; ``load`` returns a
whole collection for listing and ``save`` replaces a whole collection
(imports and tests).  Two implementations exist:

* ``JsonFileStore`` keeps each collection as a pretty-printed JSON
  file named ``<collection>.json``.  Record operations read the file,
  change it in memory and write it back.  Writes overwrite the file in
  place; a crash in the middle of a write can truncate it.
* ``MongoStore`` keeps one MongoDB document per record.  Record
  operations touch exactly one document, so concurrent writers working
  on different records never undo each other.  Insertion order is kept
  in a ``_seq`` field drawn from a per-collection counter.

Collections come in two shapes, described by ``COLLECTIONS``.  Lists
(movies, sessions) keep the key inside each record and preserve their
order; movies are listed newest first.  Mappings (series keyed by slug,
admins keyed by username) map a key to the rest of the record.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.database import Database
from pymongo.errors import DuplicateKeyError, PyMongoError

from .errors import CorruptData, DuplicateRecord, StoreError


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CollectionLayout:
    key: str
    mapping: bool
    newest_first: bool = False

    def empty(self) -> Any:
        return {} if self.mapping else []


COLLECTIONS: Dict[str, CollectionLayout] = {
    "movies": CollectionLayout("id", mapping=False, newest_first=True),
    "sessions": CollectionLayout("token", mapping=False),
    "series": CollectionLayout("id", mapping=True),
    "admins": CollectionLayout("username", mapping=True),
}

# Hidden field holding a record's position in its collection.
SEQ_FIELD = "_seq"
COUNTERS = "_counters"


def layout_for(name: str) -> CollectionLayout:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise StoreError(f"Unknown collection {name!r}") from None


class RecordStore(Protocol):
    """Defines the operations services need from persistent storage."""

    def load(self, name: str, default: Any) -> Any:
        ...

    def save(self, name: str, data: Any) -> None:
        ...

    def get(self, name: str, key: str) -> Optional[Dict[str, Any]]:
        ...

    def insert(self, name: str, key: str, record: Dict[str, Any]) -> None:
        ...

    def update(self, name: str, key: str, fields: Dict[str, Any], new_key: Optional[str] = None) -> bool:
        ...

    def delete(self, name: str, key: str) -> bool:
        ...


class JsonFileStore:
    """Collections as JSON files inside one directory."""

    def __init__(self, base_dir: Path) -> None:
        self.base_dir = Path(base_dir)

    def path_for(self, name: str) -> Path:
        return self.base_dir / f"{name}.json"

    def load(self, name: str, default: Any) -> Any:
        """Return the collection stored under ``name``.

        A missing file yields a copy of ``default``.  Content that is
        not valid JSON, or whose top-level type differs from the type
        of ``default``, raises ``CorruptData``.
        """
        path = self.path_for(name)
        if not path.exists():
            return copy.deepcopy(default)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise CorruptData(f"{path} is not valid JSON: {exc}") from exc
        if default is not None and not isinstance(data, type(default)):
            raise CorruptData(
                f"{path} holds {type(data).__name__}, expected {type(default).__name__}"
            )
        return data

    def save(self, name: str, data: Any) -> None:
        path = self.path_for(name)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"Cannot write {path}: {exc}") from exc
        logger.debug("Saved %s to %s", name, path)

    def _find(self, layout: CollectionLayout, records: List[Dict[str, Any]], key: str) -> Optional[int]:
        for index, record in enumerate(records):
            if record.get(layout.key) == key:
                return index
        return None

    def get(self, name: str, key: str) -> Optional[Dict[str, Any]]:
        layout = layout_for(name)
        data = self.load(name, layout.empty())
        if layout.mapping:
            return data.get(key)
        index = self._find(layout, data, key)
        return None if index is None else data[index]

    def insert(self, name: str, key: str, record: Dict[str, Any]) -> None:
        layout = layout_for(name)
        data = self.load(name, layout.empty())
        if layout.mapping:
            if key in data:
                raise DuplicateRecord(f"{name} already holds {key!r}")
            data[key] = record
        else:
            if self._find(layout, data, key) is not None:
                raise DuplicateRecord(f"{name} already holds {key!r}")
            stored = {**record, layout.key: key}
            if layout.newest_first:
                data.insert(0, stored)
            else:
                data.append(stored)
        self.save(name, data)

    def update(self, name: str, key: str, fields: Dict[str, Any], new_key: Optional[str] = None) -> bool:
        """Merge ``fields`` into one record; ``new_key`` renames it in place."""
        layout = layout_for(name)
        data = self.load(name, layout.empty())
        target = new_key or key
        if layout.mapping:
            if key not in data:
                return False
            if target != key and target in data:
                raise DuplicateRecord(f"{name} already holds {target!r}")
            merged = {**data[key], **fields}
            data = {
                (target if existing == key else existing): (merged if existing == key else value)
                for existing, value in data.items()
            }
        else:
            index = self._find(layout, data, key)
            if index is None:
                return False
            if target != key and self._find(layout, data, target) is not None:
                raise DuplicateRecord(f"{name} already holds {target!r}")
            data[index] = {**data[index], **fields, layout.key: target}
        self.save(name, data)
        return True

    def delete(self, name: str, key: str) -> bool:
        layout = layout_for(name)
        data = self.load(name, layout.empty())
        if layout.mapping:
            if data.pop(key, None) is None:
                return False
        else:
            index = self._find(layout, data, key)
            if index is None:
                return False
            del data[index]
        self.save(name, data)
        return True


class MongoStore:
    """Collections as MongoDB collections, one document per record."""

    def __init__(self, database: Database) -> None:
        self.database = database

    def ensure_indexes(self) -> None:
        try:
            for name, layout in COLLECTIONS.items():
                self.database[name].create_index(layout.key, unique=True)
                self.database[name].create_index(SEQ_FIELD)
        except PyMongoError as exc:
            raise StoreError(f"Cannot create indexes: {exc}") from exc

    def _next_seq(self, name: str) -> int:
        counter = self.database[COUNTERS].find_one_and_update(
            {"_id": name},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    def _to_record(self, layout: CollectionLayout, doc: Dict[str, Any]) -> Dict[str, Any]:
        doc.pop("_id", None)
        doc.pop(SEQ_FIELD, None)
        if layout.mapping:
            doc.pop(layout.key, None)
        return doc

    def load(self, name: str, default: Any) -> Any:
        layout = layout_for(name)
        direction = DESCENDING if layout.newest_first else ASCENDING
        try:
            docs = list(self.database[name].find({}).sort(SEQ_FIELD, direction))
        except PyMongoError as exc:
            raise StoreError(f"Cannot query {name}: {exc}") from exc
        if not docs:
            return copy.deepcopy(default)
        if not layout.mapping:
            return [self._to_record(layout, doc) for doc in docs]
        mapping: Dict[str, Any] = {}
        for doc in docs:
            record_key = doc.get(layout.key)
            if record_key is None:
                logger.warning("Skipping %s document without %r", name, layout.key)
                continue
            mapping[record_key] = self._to_record(layout, doc)
        return mapping

    def save(self, name: str, data: Any) -> None:
        """Replace the whole collection with ``data``, keeping its order.

        Meant for imports and restores; services use the record
        operations below.
        """
        layout = layout_for(name)
        if layout.mapping:
            records = [{**value, layout.key: record_key} for record_key, value in data.items()]
        else:
            records = [dict(record) for record in data]
        total = len(records)
        collection = self.database[name]
        kept = []
        try:
            for index, record in enumerate(records):
                if record.get(layout.key) is None:
                    raise StoreError(f"{name} record without {layout.key!r} cannot be stored")
                record.pop("_id", None)
                record[SEQ_FIELD] = total - index if layout.newest_first else index + 1
                collection.replace_one({layout.key: record[layout.key]}, record, upsert=True)
                kept.append(record[layout.key])
            collection.delete_many({layout.key: {"$nin": kept}})
            self.database[COUNTERS].update_one({"_id": name}, {"$max": {"seq": total}}, upsert=True)
        except PyMongoError as exc:
            raise StoreError(f"Cannot write {name}: {exc}") from exc
        logger.debug("Replaced %s with %d documents", name, total)

    def get(self, name: str, key: str) -> Optional[Dict[str, Any]]:
        layout = layout_for(name)
        try:
            doc = self.database[name].find_one({layout.key: key})
        except PyMongoError as exc:
            raise StoreError(f"Cannot query {name}: {exc}") from exc
        return None if doc is None else self._to_record(layout, doc)

    def insert(self, name: str, key: str, record: Dict[str, Any]) -> None:
        """Add one document; ``DuplicateRecord`` when ``key`` is taken."""
        layout = layout_for(name)
        # The key itself comes from the upsert filter.
        doc = {field: value for field, value in record.items() if field not in {"_id", SEQ_FIELD, layout.key}}
        try:
            doc[SEQ_FIELD] = self._next_seq(name)
            result = self.database[name].update_one({layout.key: key}, {"$setOnInsert": doc}, upsert=True)
        except DuplicateKeyError as exc:
            raise DuplicateRecord(f"{name} already holds {key!r}") from exc
        except PyMongoError as exc:
            raise StoreError(f"Cannot write {name}: {exc}") from exc
        if result.upserted_id is None:
            raise DuplicateRecord(f"{name} already holds {key!r}")

    def update(self, name: str, key: str, fields: Dict[str, Any], new_key: Optional[str] = None) -> bool:
        """``$set`` the given fields on one document; ``False`` if absent."""
        layout = layout_for(name)
        changes = {field: value for field, value in fields.items() if field not in {"_id", SEQ_FIELD, layout.key}}
        if new_key and new_key != key:
            changes[layout.key] = new_key
        try:
            if layout.key in changes and self.database[name].find_one({layout.key: new_key}) is not None:
                raise DuplicateRecord(f"{name} already holds {new_key!r}")
            if not changes:
                return self.database[name].find_one({layout.key: key}) is not None
            result = self.database[name].update_one({layout.key: key}, {"$set": changes})
        except DuplicateKeyError as exc:
            raise DuplicateRecord(f"{name} already holds {new_key!r}") from exc
        except PyMongoError as exc:
            raise StoreError(f"Cannot write {name}: {exc}") from exc
        return result.matched_count == 1

    def delete(self, name: str, key: str) -> bool:
        layout = layout_for(name)
        try:
            result = self.database[name].delete_one({layout.key: key})
        except PyMongoError as exc:
            raise StoreError(f"Cannot write {name}: {exc}") from exc
        return result.deleted_count == 1
