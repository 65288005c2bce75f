"""
Database Helper Functions

MongoDB helpers used by the catalog and the order service.
Driver failures are re-raised as PersistenceError so callers never see pymongo types.
"""

import logging
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Union, Optional, Dict, Any, List

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pymongo import MongoClient
from pymongo.errors import PyMongoError

import config
from errors import PersistenceError

logger = logging.getLogger(__name__)

_client = None
db = None

if config.DATABASE_URL and config.DATABASE_NAME:
    _client = MongoClient(config.DATABASE_URL, tz_aware=True)
    db = _client[config.DATABASE_NAME]


def use_database(handle) -> None:
    """Point every helper at another database handle (tests, scripts)."""
    global db
    db = handle


def get_db():
    _ensure_db()
    return db


def _ensure_db():
    if db is None:
        raise PersistenceError("Database not available. Check DATABASE_URL and DATABASE_NAME environment variables.")


@contextmanager
def _driver_errors(action: str, collection_name: str):
    try:
        yield
    except PyMongoError as e:
        logger.error(f"MongoDB {action} on '{collection_name}' failed: {e}")
        raise PersistenceError(f"Failed to {action} {collection_name}") from e


def _to_dict(data: Union[BaseModel, dict]) -> dict:
    if isinstance(data, BaseModel):
        return data.model_dump()
    return dict(data)


def _object_id(_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(_id)
    except (InvalidId, TypeError):
        return None


# CRUD helpers

def create_document(collection_name: str, data: Union[BaseModel, dict]) -> str:
    _ensure_db()
    payload = _to_dict(data)
    now = datetime.now(timezone.utc)
    payload['created_at'] = now
    payload['updated_at'] = now
    with _driver_errors("insert into", collection_name):
        result = db[collection_name].insert_one(payload)
    return str(result.inserted_id)


def get_documents(collection_name: str, filter_dict: Optional[dict] = None, limit: Optional[int] = None, sort: Optional[list] = None) -> List[dict]:
    _ensure_db()
    with _driver_errors("read", collection_name):
        cursor = db[collection_name].find(filter_dict or {})
        if sort:
            cursor = cursor.sort(sort)
        if limit:
            cursor = cursor.limit(int(limit))
        return [serialize_doc(doc) for doc in cursor]


def get_documents_by_ids(collection_name: str, ids: List[str]) -> Dict[str, dict]:
    """Fetch several documents at once, keyed by their string id. Unparseable ids are skipped."""
    object_ids = [oid for oid in (_object_id(i) for i in set(ids)) if oid is not None]
    if not object_ids:
        return {}
    docs = get_documents(collection_name, {"_id": {"$in": object_ids}})
    return {doc["_id"]: doc for doc in docs}


def get_document_by_id(collection_name: str, _id: str) -> Optional[dict]:
    _ensure_db()
    oid = _object_id(_id)
    if oid is None:
        return None
    with _driver_errors("read", collection_name):
        doc = db[collection_name].find_one({"_id": oid})
    return serialize_doc(doc) if doc else None


def update_document(collection_name: str, _id: str, update_data: Dict[str, Any]) -> bool:
    """Apply a single $set to one document. Returns False when no document has that id."""
    _ensure_db()
    oid = _object_id(_id)
    if oid is None:
        return False
    update = {"$set": _to_dict(update_data)}
    update["$set"]["updated_at"] = datetime.now(timezone.utc)
    with _driver_errors("update", collection_name):
        result = db[collection_name].update_one({"_id": oid}, update)
    return result.matched_count > 0


def delete_documents(collection_name: str, filter_dict: Optional[dict] = None) -> int:
    _ensure_db()
    with _driver_errors("delete from", collection_name):
        result = db[collection_name].delete_many(filter_dict or {})
    return result.deleted_count


# Utility

def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    if not doc:
        return None
    d = dict(doc)
    if "_id" in d:
        d["_id"] = str(d["_id"])  # convert ObjectId to string
    return d
