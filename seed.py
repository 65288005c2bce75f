"""
Seed the catalog (and a few sample orders) into the configured database.

    python seed.py            # items and sample orders
    python seed.py --items    # items only
"""
import argparse
import logging

import catalog
import orders
from database import create_document, delete_documents
from schemas import Item

logger = logging.getLogger(__name__)

MENU = [
    Item(name="Caesar Salad", description="Romaine lettuce with Caesar dressing, croutons, and parmesan.", price=7.99, course="appetizer", image_path="/images/items/caesar-salad.jpg"),
    Item(name="Tomato Soup", description="Creamy tomato soup garnished with basil.", price=5.50, course="appetizer", image_path="/images/items/tomato-soup.jpg"),
    Item(name="Grilled Salmon", description="Salmon with seasonal vegetables and lemon butter sauce.", price=18.99, course="main", image_path="/images/items/grilled-salmon.jpg"),
    Item(name="Spaghetti Bolognese", description="Classic spaghetti with rich Bolognese sauce.", price=12.99, course="main", image_path="/images/items/spaghetti-bolognese.jpg"),
    Item(name="Chicken Parmesan", description="Breaded chicken with marinara and mozzarella.", price=15.99, course="main", image_path="/images/items/chicken-parmesan.jpg"),
    Item(name="Chocolate Cake", description="Rich chocolate cake with dark chocolate ganache.", price=6.50, course="dessert", image_path="/images/items/chocolate-cake.jpg"),
    Item(name="Cheesecake", description="Creamy cheesecake with berry compote.", price=6.75, course="dessert", image_path="/images/items/cheesecake.jpg"),
    Item(name="Ice Cream Sundae", description="Vanilla ice cream with chocolate sauce, nuts, and a cherry.", price=4.99, course="dessert", image_path="/images/items/ice-cream-sundae.jpg"),
    Item(name="Soft Drink", description="Choice of cola, lemon-lime, or ginger ale.", price=2.50, course="beverage", image_path="/images/items/soft-drink.jpg"),
    Item(name="Coffee", description="Freshly brewed coffee.", price=3.00, course="beverage", image_path="/images/items/coffee.jpg"),
]

# room, status, [(item name, quantity)]
SAMPLE_ORDERS = [
    ("101", "pending", [("Caesar Salad", 2), ("Grilled Salmon", 1)]),
    ("102", "completed", [("Tomato Soup", 1), ("Chicken Parmesan", 1), ("Soft Drink", 1)]),
    ("103", "pending", [("Chocolate Cake", 2), ("Ice Cream Sundae", 1), ("Coffee", 1)]),
    ("104", "completed", [("Spaghetti Bolognese", 1), ("Chicken Parmesan", 2), ("Soft Drink", 2)]),
]


def seed_items() -> dict:
    """Replace the catalog with MENU. Returns name -> item id."""
    delete_documents(catalog.COLLECTION)
    return {item.name: create_document(catalog.COLLECTION, item) for item in MENU}


def seed_orders(item_ids: dict) -> list:
    delete_documents(orders.COLLECTION)
    created = []
    for room_number, status, lines in SAMPLE_ORDERS:
        order = orders.create_order(room_number, [{"item_id": item_ids[name], "quantity": qty} for name, qty in lines])
        if status != "pending":
            order = orders.update_order_status(order["_id"], status)
        created.append(order)
    return created


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Seed the room service database")
    parser.add_argument("--items", action="store_true", help="seed the catalog only")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    item_ids = seed_items()
    logger.info(f"Seeded {len(item_ids)} items")
    if not args.items:
        created = seed_orders(item_ids)
        logger.info(f"Seeded {len(created)} orders")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
