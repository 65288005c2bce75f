"""
Staff dashboard state: order filters and per-row status submissions.
"""
import logging
import threading
from typing import Dict, Iterable, List, Optional, Set

from errors import ApiError

logger = logging.getLogger(__name__)

ALL_LEVELS = "all"
# Room numbers start with their floor digit
LEVELS = ("1", "2", "3")


def filter_orders(orders: Iterable[dict], level: str = ALL_LEVELS, completed_only: bool = False) -> List[dict]:
    """
    Completed-only shows exactly the completed orders and ignores the level.
    Otherwise completed orders are hidden and, unless level is "all", only rooms
    on that level are kept.
    """
    if completed_only:
        return [o for o in orders if o["status"] == "completed"]
    active = [o for o in orders if o["status"] != "completed"]
    if not level or level == ALL_LEVELS:
        return active
    return [o for o in active if str(o["room_number"]).startswith(level)]


class Dashboard:
    """
    Local view of all orders. Each row can have a pending status selection and at most
    one in-flight update; a busy row does not block the other rows.
    """

    def __init__(self, client, orders: Optional[List[dict]] = None):
        self.client = client
        self.orders: List[dict] = list(orders or [])
        self.level = ALL_LEVELS
        self.completed_only = False
        self.error: Optional[str] = None
        self._selected: Dict[str, str] = {}
        self._busy: Set[str] = set()
        self._lock = threading.Lock()

    def refresh(self) -> List[dict]:
        try:
            self.orders = self.client.list_orders()
            self.error = None
        except ApiError as e:
            self.error = e.message
        return self.orders

    @property
    def visible_orders(self) -> List[dict]:
        return filter_orders(self.orders, level=self.level, completed_only=self.completed_only)

    def select_status(self, order_id: str, status: str) -> None:
        self._selected[order_id] = status

    def selected_status(self, order_id: str) -> Optional[str]:
        return self._selected.get(order_id)

    def is_busy(self, order_id: str) -> bool:
        return order_id in self._busy

    def submit_status(self, order_id: str) -> bool:
        """Send the selected status for one row. Returns True when the row was updated."""
        status = self._selected.get(order_id)
        if not status:
            return False
        with self._lock:
            if order_id in self._busy:
                return False
            self._busy.add(order_id)
        self.error = None
        try:
            updated = self.client.update_order_status(order_id, status)
        except ApiError as e:
            logger.error(f"Error updating status of order {order_id}: {e.message}")
            self.error = e.message or "Failed to update order status"
            return False
        finally:
            with self._lock:
                self._busy.discard(order_id)

        self.orders = [updated if o["_id"] == order_id else o for o in self.orders]
        self._selected.pop(order_id, None)
        return True
