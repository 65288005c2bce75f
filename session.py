"""
Guest ordering session.

Drives one room's cart through the ordering workflow:

    IDLE --submit()--> AWAITING_ORDER_ID --(order id)--> EDITING --(poll sees a locked status)--> LOCKED

While EDITING the guest may keep changing the cart and call save_edits() to replace
the order's lines, or cancel_edit() to go back to the last confirmed cart. Cart edits,
submit() and save_edits() raise OrderLockedError while the order is locked or still
awaiting its id; every other failure is stored in `message` for display.
"""
import logging
import threading
from typing import List, Optional

import config
import cart
from cart import EMPTY_CART, Cart
from client import OrderingClient
from errors import ApiError, OrderLockedError
from poller import StatusPoller

logger = logging.getLogger(__name__)

IDLE = "idle"
AWAITING_ORDER_ID = "awaiting-order-id"
EDITING = "editing"
LOCKED = "locked"

# Statuses after which the guest can no longer change the order
LOCKED_STATUSES = ("in-progress", "completed", "canceled")


class OrderingSession:

    def __init__(self, room_number: str, client: OrderingClient = None, poll_interval: float = None):
        self.room_number = room_number
        self.client = client or OrderingClient()
        self.poll_interval = poll_interval if poll_interval is not None else config.POLL_INTERVAL_SECONDS

        self.state = IDLE
        self.cart: Cart = EMPTY_CART
        self.confirmed: Cart = EMPTY_CART
        self.order_id: Optional[str] = None
        self.order_status: Optional[str] = None
        self.message: Optional[str] = None
        self.menu: List[dict] = []

        self._poller: Optional[StatusPoller] = None
        self._lock = threading.RLock()

    # -------------------- menu / cart --------------------

    def load_menu(self) -> List[dict]:
        try:
            self.menu = self.client.list_menu(self.room_number)
        except ApiError as e:
            logger.error(f"Error fetching menu items for room {self.room_number}: {e.message}")
            self.message = e.message
        return self.menu

    def _check_editable(self) -> None:
        if self.state in (LOCKED, AWAITING_ORDER_ID):
            raise OrderLockedError(f"Order can no longer be modified ({self.order_status or self.state})")

    def add_item(self, item: dict) -> Cart:
        with self._lock:
            self._check_editable()
            self.cart = cart.add_item(self.cart, item)
            return self.cart

    def remove_item(self, item: dict) -> Cart:
        with self._lock:
            self._check_editable()
            self.cart = cart.remove_item(self.cart, item)
            return self.cart

    @property
    def total(self) -> float:
        return self.cart.total

    # -------------------- order workflow --------------------

    def submit(self) -> Optional[str]:
        """Place the current cart as a new order. Returns the order id, or None on failure."""
        with self._lock:
            if self.state != IDLE:
                self._check_editable()
                self.message = "Order already placed, save your edits instead"
                return None
            if not self.cart.lines:
                self.message = "Cannot place empty order"
                return None
            self.state = AWAITING_ORDER_ID

        try:
            order_id = self.client.create_order(self.room_number, cart.to_order_items(self.cart))
        except ApiError as e:
            with self._lock:
                self.state = IDLE
                self.message = e.message
            return None

        with self._lock:
            self.order_id = order_id
            self.confirmed = self.cart
            self.state = EDITING
            self.message = "Order placed successfully! You can modify your order until it's in progress."
        logger.info(f"Room {self.room_number} placed order {order_id}")
        self._start_polling()
        return order_id

    def save_edits(self) -> bool:
        """Replace the order's lines with the current cart."""
        with self._lock:
            self._check_editable()
            if not self.order_id or not self.cart.lines:
                self.message = "Cannot update with empty order"
                return False
            order_id, items = self.order_id, cart.to_order_items(self.cart)

        try:
            order = self.client.replace_order_items(order_id, items)
        except ApiError as e:
            self.message = e.message
            return False

        with self._lock:
            # accepted by the server, so kept even if the order locked meanwhile
            self.cart = cart.from_order(order)
            self.confirmed = self.cart
            if self.state != LOCKED:
                self.message = "Order updated successfully! You can continue modifying until it's in progress."
        return True

    def cancel_edit(self) -> Cart:
        """Drop unsaved changes and restore the last confirmed cart."""
        with self._lock:
            self._check_editable()
            self.cart = self.confirmed
            self.message = "Edit cancelled. Restored original order."
            return self.cart

    @property
    def has_unsaved_changes(self) -> bool:
        return self.cart != self.confirmed

    # -------------------- polling --------------------

    def _start_polling(self) -> None:
        with self._lock:
            if self._poller is not None or self.order_id is None:
                return
            order_id = self.order_id
            self._poller = StatusPoller(
                fetch=lambda: self.client.get_order_status(order_id),
                on_status=self.handle_status,
                interval=self.poll_interval,
                on_error=self._poll_failed,
                name=f"StatusPoller-{order_id}",
            )
        self._poller.start()

    def handle_status(self, payload: dict) -> bool:
        """Apply one status check result. Returns True when polling should stop."""
        status = str(payload.get("status", "")).lower()
        updated_at = payload.get("updatedAt")
        with self._lock:
            self.order_status = status
            if status in LOCKED_STATUSES:
                self.state = LOCKED
                self.message = f"Order Status: {status} (Last Updated: {updated_at})"
                if self._poller is not None:
                    self._poller.stop()
                return True
            self.message = f"Order Status: {status} - You can still modify your order (Last Updated: {updated_at})"
            return False

    def _poll_failed(self, error: Exception) -> None:
        with self._lock:
            self.message = getattr(error, "message", str(error))

    @property
    def polling(self) -> bool:
        return self._poller is not None and self._poller.is_alive() and not self._poller.stopped

    def close(self) -> None:
        """End the session; the status poller is always stopped."""
        poller = self._poller
        if poller is not None:
            poller.stop(join=True)
