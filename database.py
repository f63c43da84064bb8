"""
Record store binding.

The content layer talks to the database only through the primitives of
``Store``. ``MongoStore`` implements them over a pymongo database; each
MongoDB collection is one table. Read order comes from a per-table
sequence number handed out by the server (the ``counters`` collection), so
inserts from several app processes still list in the order the database
accepted them.
"""

import logging
from typing import Any, Dict, List, Optional, Protocol

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING, MongoClient, ReturnDocument
from pymongo.database import Database
from pymongo.errors import PyMongoError

from config import Settings

logger = logging.getLogger(__name__)

COUNTERS = "counters"


class StoreError(Exception):
    """The store could not complete an insert or read."""


class Store(Protocol):
    def insert(self, table: str, fields: Dict[str, Any]) -> str: ...

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]: ...

    def scan(self, table: str, order: str = "desc", limit: Optional[int] = None) -> List[Dict[str, Any]]: ...

    def patch(self, table: str, record_id: str, fields: Dict[str, Any]) -> bool: ...

    def delete(self, table: str, record_id: str) -> bool: ...

    def tables(self) -> List[str]: ...

    def close(self) -> None: ...


def _object_id(record_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(record_id)
    except (InvalidId, TypeError):
        return None


def _normalize(doc: Dict[str, Any]) -> Dict[str, Any]:
    # expose _id as a plain string id; the sequence number stays internal
    doc["id"] = str(doc.pop("_id"))
    doc.pop("seq", None)
    return doc


class MongoStore:
    """Store backed by a pymongo ``Database``. Insertion order is ``seq`` order."""

    def __init__(self, db: Database, client: Optional[MongoClient] = None):
        self.db = db
        self.client = client

    def _next_seq(self, table: str) -> int:
        counter = self.db[COUNTERS].find_one_and_update(
            {"_id": table},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    def insert(self, table: str, fields: Dict[str, Any]) -> str:
        try:
            doc = dict(fields)
            doc["seq"] = self._next_seq(table)
            result = self.db[table].insert_one(doc)
        except PyMongoError as e:
            raise StoreError(f"insert into {table} failed: {e}") from e
        return str(result.inserted_id)

    def get(self, table: str, record_id: str) -> Optional[Dict[str, Any]]:
        oid = _object_id(record_id)
        if oid is None:
            return None
        try:
            doc = self.db[table].find_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError(f"read from {table} failed: {e}") from e
        return _normalize(doc) if doc else None

    def scan(self, table: str, order: str = "desc", limit: Optional[int] = None) -> List[Dict[str, Any]]:
        if order not in ("asc", "desc"):
            raise ValueError(f"order must be 'asc' or 'desc', got {order!r}")
        direction = DESCENDING if order == "desc" else ASCENDING
        try:
            cursor = self.db[table].find({}).sort([("seq", direction), ("_id", direction)])
            if limit:
                cursor = cursor.limit(limit)
            return [_normalize(doc) for doc in cursor]
        except PyMongoError as e:
            raise StoreError(f"scan of {table} failed: {e}") from e

    def patch(self, table: str, record_id: str, fields: Dict[str, Any]) -> bool:
        oid = _object_id(record_id)
        if oid is None:
            return False
        try:
            res = self.db[table].update_one({"_id": oid}, {"$set": dict(fields)})
        except PyMongoError as e:
            raise StoreError(f"update of {table} failed: {e}") from e
        return res.matched_count > 0

    def delete(self, table: str, record_id: str) -> bool:
        oid = _object_id(record_id)
        if oid is None:
            return False
        try:
            res = self.db[table].delete_one({"_id": oid})
        except PyMongoError as e:
            raise StoreError(f"delete from {table} failed: {e}") from e
        return res.deleted_count > 0

    def tables(self) -> List[str]:
        try:
            names = self.db.list_collection_names()
        except PyMongoError as e:
            raise StoreError(f"listing tables failed: {e}") from e
        return [name for name in names if name != COUNTERS]

    def close(self) -> None:
        if self.client is not None:
            self.client.close()


def connect(settings: Settings) -> Optional[MongoStore]:
    """Build a store from settings, or None when no DATABASE_URL is configured."""
    if not settings.DATABASE_URL:
        logger.warning("DATABASE_URL not set, running without a database")
        return None
    client = MongoClient(settings.DATABASE_URL)
    logger.info("Using MongoDB database %r", settings.DATABASE_NAME)
    return MongoStore(client[settings.DATABASE_NAME], client=client)
