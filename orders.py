"""
Order service.

Creates orders, recomputes their totals, replaces their line sets and moves them
through the status workflow. Status changes are unrestricted: any status may
follow any other, the only rule is that the value belongs to ORDER_STATUSES.
"""
import logging
from datetime import datetime, timezone
from typing import Iterable, List, Union

import pydantic

import catalog
from database import create_document, get_documents, get_documents_by_ids, get_document_by_id, update_document
from errors import NotFoundError, ValidationError
from schemas import LineRequest, Order, OrderLine, ORDER_STATUSES

logger = logging.getLogger(__name__)

COLLECTION = "order"

LineInput = Union[LineRequest, dict]


def _parse_lines(items: Iterable[LineInput]) -> List[LineRequest]:
    if items is None:
        raise ValidationError("Items array is required")
    try:
        lines = [i if isinstance(i, LineRequest) else LineRequest.model_validate(i) for i in items]
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid order items: {e.errors()[0]['msg']}") from e
    if not lines:
        raise ValidationError("Items array must not be empty")
    return lines


def _price_lines(lines: List[LineRequest]):
    """Resolve every line against the catalog and return (order lines, total)."""
    items = catalog.resolve_items(line.item_id for line in lines)
    total = sum(items[line.item_id]["price"] * line.quantity for line in lines)
    order_lines = [OrderLine(item_id=line.item_id, quantity=line.quantity) for line in lines]
    return order_lines, round(total, 2)


def _attach_items(orders: List[dict]) -> List[dict]:
    """Attach the catalog item to each line of each order (item is None if it vanished)."""
    ids = [line["item_id"] for order in orders for line in order.get("lines", [])]
    items = get_documents_by_ids(catalog.COLLECTION, ids) if ids else {}
    for order in orders:
        order["lines"] = [dict(line, item=items.get(line["item_id"])) for line in order.get("lines", [])]
    return orders


def _load(order_id: str) -> dict:
    order = get_document_by_id(COLLECTION, order_id)
    if not order:
        raise NotFoundError("Order not found")
    return order


def _timestamp(value: datetime) -> str:
    """ISO-8601 UTC with a Z suffix; the driver hands back naive datetimes unless tz_aware."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# ===================== Operations =====================

def create_order(room_number: str, items: Iterable[LineInput]) -> dict:
    if not room_number or not str(room_number).strip():
        raise ValidationError("Room number is required")
    lines = _parse_lines(items)
    order_lines, total = _price_lines(lines)
    order = Order(room_number=str(room_number), status="pending", total_price=total, lines=order_lines)
    order_id = create_document(COLLECTION, order)
    logger.info(f"Created order {order_id} for room {order.room_number} ({len(order_lines)} lines, total {total:.2f})")
    return get_order(order_id)


def get_order(order_id: str) -> dict:
    return _attach_items([_load(order_id)])[0]


def get_order_status(order_id: str) -> dict:
    order = _load(order_id)
    return {"status": order["status"], "updatedAt": _timestamp(order["updated_at"])}


def update_order_status(order_id: str, status: str) -> dict:
    if status not in ORDER_STATUSES:
        raise ValidationError("Invalid status value")
    if not update_document(COLLECTION, order_id, {"status": status}):
        raise NotFoundError("Order not found")
    logger.info(f"Order {order_id} status set to {status}")
    return get_order(order_id)


def replace_order_items(order_id: str, items: Iterable[LineInput]) -> dict:
    lines = _parse_lines(items)
    _load(order_id)
    order_lines, total = _price_lines(lines)
    # lines and total live in one document, so this single $set is all-or-nothing
    update = {"lines": [line.model_dump() for line in order_lines], "total_price": total}
    if not update_document(COLLECTION, order_id, update):
        raise NotFoundError("Order not found")
    logger.info(f"Order {order_id} lines replaced ({len(order_lines)} lines, total {total:.2f})")
    return get_order(order_id)


def list_orders() -> List[dict]:
    return _attach_items(get_documents(COLLECTION, sort=[("created_at", 1), ("_id", 1)]))
