"""
Item catalog accessor.

Read-only view over the "item" collection. Items are seeded out of band (see seed.py).
"""
from typing import Dict, Iterable, List

from database import get_documents, get_document_by_id, get_documents_by_ids
from errors import NotFoundError, UnknownItemError

COLLECTION = "item"
DEFAULT_COURSE = "General"


def list_items() -> List[dict]:
    return get_documents(COLLECTION, sort=[("course", 1), ("name", 1)])


def get_item(item_id: str) -> dict:
    item = get_document_by_id(COLLECTION, item_id)
    if not item:
        raise NotFoundError("Item not found")
    return item


def resolve_items(item_ids: Iterable[str]) -> Dict[str, dict]:
    """Map every requested id to its catalog item, or raise UnknownItemError naming the missing ones."""
    wanted = list(item_ids)
    found = get_documents_by_ids(COLLECTION, wanted)
    missing = [i for i in dict.fromkeys(wanted) if i not in found]
    if missing:
        raise UnknownItemError(missing)
    return found


def categorize(items: Iterable[dict]) -> Dict[str, List[dict]]:
    """Group items by course, keeping first-seen course order."""
    grouped: Dict[str, List[dict]] = {}
    for item in items:
        grouped.setdefault(item.get("course") or DEFAULT_COURSE, []).append(item)
    return grouped
