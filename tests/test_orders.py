"""
Order service tests

Totals, all-or-nothing line resolution, line-set replacement and the status workflow,
exercised directly against the service functions.
"""
from datetime import datetime, timedelta

import pytest

import orders
import seed
from errors import NotFoundError, UnknownItemError, ValidationError

MISSING_ID = "000000000000000000000000"


PRICES = {item.name: item.price for item in seed.MENU}


class TestOrderCreation:

    def test_room_101_order_total_and_status(self, caesar_and_salmon):
        """2 x Caesar Salad (7.99) + 1 x Grilled Salmon (18.99) = 34.97"""
        order = orders.create_order("101", caesar_and_salmon)

        assert order["total_price"] == 34.97
        assert order["status"] == "pending"
        assert order["room_number"] == "101"
        assert [line["quantity"] for line in order["lines"]] == [2, 1]
        assert order["lines"][0]["item"]["name"] == "Caesar Salad"

    @pytest.mark.parametrize("lines", [
        [("Coffee", 1)],
        [("Cheesecake", 3), ("Soft Drink", 4)],
        [("Tomato Soup", 1), ("Chicken Parmesan", 2), ("Ice Cream Sundae", 5), ("Coffee", 2)],
    ])
    def test_total_matches_catalog_prices(self, menu, lines):
        order = orders.create_order("205", [{"item_id": menu[name], "quantity": qty} for name, qty in lines])

        expected = round(sum(PRICES[name] * qty for name, qty in lines), 2)
        assert order["total_price"] == expected, f"Total incorrect: {order['total_price']} != {expected}"

    def test_duplicate_items_are_not_merged(self, menu):
        coffee = menu["Coffee"]
        order = orders.create_order("301", [{"item_id": coffee, "quantity": 1}, {"item_id": coffee, "quantity": 2}])

        assert len(order["lines"]) == 2
        assert order["total_price"] == 9.0

    def test_unknown_item_persists_nothing(self, db, menu):
        with pytest.raises(UnknownItemError) as exc:
            orders.create_order("101", [
                {"item_id": menu["Coffee"], "quantity": 1},
                {"item_id": MISSING_ID, "quantity": 1},
            ])

        assert exc.value.item_ids == [MISSING_ID]
        assert db[orders.COLLECTION].count_documents({}) == 0
        assert orders.list_orders() == []

    def test_unparseable_item_id_is_unknown(self, db, menu):
        with pytest.raises(NotFoundError):
            orders.create_order("101", [{"item_id": "not-an-object-id", "quantity": 1}])
        assert db[orders.COLLECTION].count_documents({}) == 0

    @pytest.mark.parametrize("room_number, items", [
        ("", [{"item_id": "x", "quantity": 1}]),
        ("101", []),
        ("101", None),
        ("101", [{"item_id": "x", "quantity": 0}]),
        ("101", [{"quantity": 1}]),
    ])
    def test_invalid_requests_are_rejected(self, db, menu, room_number, items):
        with pytest.raises(ValidationError):
            orders.create_order(room_number, items)
        assert db[orders.COLLECTION].count_documents({}) == 0


class TestOrderStatus:

    def test_new_order_status(self, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)

        status = orders.get_order_status(order["_id"])
        assert status["status"] == "pending"
        assert status["updatedAt"]

    def test_updated_at_is_utc_with_zone_suffix(self, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)
        created = orders.get_order_status(order["_id"])["updatedAt"]

        orders.update_order_status(order["_id"], "in-progress")
        updated = orders.get_order_status(order["_id"])["updatedAt"]

        assert created.endswith("Z") and updated.endswith("Z")
        assert datetime.fromisoformat(updated.replace("Z", "+00:00")).utcoffset() == timedelta(0)
        assert updated >= created

    def test_complete_order(self, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)

        updated = orders.update_order_status(order["_id"], "completed")

        assert updated["status"] == "completed"
        assert updated["lines"][0]["item"]["name"] == "Caesar Salad"
        assert orders.get_order_status(order["_id"])["status"] == "completed"

    @pytest.mark.parametrize("bad_status", ["cancelled", "delivered", "PENDING", "", "done"])
    def test_status_outside_enum_is_rejected(self, caesar_and_salmon, bad_status):
        order = orders.create_order("101", caesar_and_salmon)
        orders.update_order_status(order["_id"], "in-progress")

        with pytest.raises(ValidationError):
            orders.update_order_status(order["_id"], bad_status)

        assert orders.get_order_status(order["_id"])["status"] == "in-progress"

    def test_any_status_may_follow_any_other(self, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)

        for status in ["completed", "pending", "canceled", "in-progress", "pending"]:
            assert orders.update_order_status(order["_id"], status)["status"] == status

    def test_unknown_order(self, menu):
        with pytest.raises(NotFoundError):
            orders.get_order_status(MISSING_ID)
        with pytest.raises(NotFoundError):
            orders.update_order_status(MISSING_ID, "completed")
        with pytest.raises(NotFoundError):
            orders.get_order("garbage")


class TestReplaceOrderItems:

    def test_new_lines_fully_supersede_old_ones(self, menu, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)
        new_lines = [{"item_id": menu["Coffee"], "quantity": 3}, {"item_id": menu["Cheesecake"], "quantity": 1}]

        updated = orders.replace_order_items(order["_id"], new_lines)
        read_back = orders.get_order(order["_id"])

        for result in (updated, read_back):
            assert [(line["item_id"], line["quantity"]) for line in result["lines"]] == [
                (menu["Coffee"], 3), (menu["Cheesecake"], 1)
            ]
            assert result["total_price"] == 15.75

    def test_unknown_item_leaves_order_untouched(self, menu, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)

        with pytest.raises(UnknownItemError):
            orders.replace_order_items(order["_id"], [
                {"item_id": menu["Coffee"], "quantity": 1},
                {"item_id": MISSING_ID, "quantity": 1},
            ])

        unchanged = orders.get_order(order["_id"])
        assert unchanged["total_price"] == 34.97
        assert len(unchanged["lines"]) == 2

    def test_replace_on_unknown_order(self, menu):
        with pytest.raises(NotFoundError):
            orders.replace_order_items(MISSING_ID, [{"item_id": menu["Coffee"], "quantity": 1}])

    def test_empty_line_set_is_rejected(self, caesar_and_salmon):
        order = orders.create_order("101", caesar_and_salmon)
        with pytest.raises(ValidationError):
            orders.replace_order_items(order["_id"], [])


class TestListOrders:

    def test_lists_in_creation_order_with_items(self, menu):
        for room in ("101", "210", "305"):
            orders.create_order(room, [{"item_id": menu["Coffee"], "quantity": 1}])

        listed = orders.list_orders()

        assert [o["room_number"] for o in listed] == ["101", "210", "305"]
        assert all(o["lines"][0]["item"]["name"] == "Coffee" for o in listed)

    def test_seed_orders(self, menu):
        created = seed.seed_orders(menu)

        assert [o["total_price"] for o in created] == [34.97, 23.99, 20.99, 49.97]
        assert [o["status"] for o in orders.list_orders()] == ["pending", "completed", "pending", "completed"]
