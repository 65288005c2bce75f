import logging
from typing import Any, Dict, List, Optional

import requests

import config
from errors import ApiError

logger = logging.getLogger(__name__)


class OrderingClient:
    """
    HTTP client for the ordering API, shared by the guest session and the staff dashboard.
    Every request carries a bounded timeout; failures surface as ApiError.
    """

    def __init__(self, base_url: str = None, timeout: float = None, session: requests.Session = None):
        self.base_url = (base_url or config.ORDER_API_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else config.REQUEST_TIMEOUT_SECONDS
        self.session = session or requests.Session()

    def _make_request(
        self, method: str, endpoint: str, data: Dict[str, Any] = None, params: Dict[str, Any] = None
    ) -> Any:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Ordering API request failed: {method} {url} - {e}")
            raise ApiError(f"Request failed: {e}") from e

        if response.status_code >= 400:
            try:
                message = response.json().get("error")
            except ValueError:
                message = None
            raise ApiError(message or f"{method} {endpoint} failed with {response.status_code}", response.status_code)
        return response.json()

    # Menu

    def list_menu(self, room_number: str) -> List[dict]:
        return self._make_request("GET", f"/menu/{room_number}")

    # Orders

    def create_order(self, room_number: str, items: List[dict]) -> str:
        """Place an order and return its id."""
        result = self._make_request("POST", "/order", {"roomNumber": room_number, "items": items})
        order_id = result.get("orderId")
        if not order_id:
            raise ApiError("Order ID not received from server")
        return str(order_id)

    def get_order_status(self, order_id: str) -> dict:
        return self._make_request("GET", "/order", params={"id": order_id})

    def update_order_status(self, order_id: str, status: str) -> dict:
        return self._make_request("PATCH", "/order", {"status": status}, params={"id": order_id})

    def replace_order_items(self, order_id: str, items: List[dict]) -> dict:
        return self._make_request("PATCH", "/order", {"items": items}, params={"id": order_id})

    def list_orders(self, level: Optional[str] = None, completed_only: bool = False) -> List[dict]:
        params = {"completed_only": completed_only}
        if level:
            params["level"] = level
        return self._make_request("GET", "/orders", params=params)
