"""
Guest cart state.

A Cart is immutable; every change goes through one of the reducer functions below
and yields a new Cart. The running amount is kept incrementally as an exact Decimal
and always agrees with computed_total(); it is only rounded to cents when read.
A line keeps the price it was first added at.
"""
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal
from typing import Iterable, List, Mapping, Tuple

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def _decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _money(value: Decimal) -> float:
    return float(value.quantize(CENTS))


@dataclass(frozen=True)
class CartLine:
    item_id: str
    name: str
    price: float
    quantity: int

    @property
    def subtotal(self) -> Decimal:
        return _decimal(self.price) * self.quantity


@dataclass(frozen=True)
class Cart:
    lines: Tuple[CartLine, ...] = field(default_factory=tuple)
    amount: Decimal = Decimal("0")

    @property
    def total(self) -> float:
        return _money(self.amount)

    def __len__(self) -> int:
        return len(self.lines)

    def quantity_of(self, item_id: str) -> int:
        line = self.line_for(item_id)
        return line.quantity if line else 0

    def line_for(self, item_id: str):
        for line in self.lines:
            if line.item_id == item_id:
                return line
        return None


EMPTY_CART = Cart()


def _item_id(item: Mapping) -> str:
    return str(item.get("_id", item.get("id")))


def add_item(cart: Cart, item: Mapping) -> Cart:
    """Add one unit of a catalog item. An existing line is charged at its own price."""
    item_id = _item_id(item)
    existing = cart.line_for(item_id)
    if existing:
        lines = tuple(replace(line, quantity=line.quantity + 1) if line.item_id == item_id else line for line in cart.lines)
        price = existing.price
    else:
        price = float(item["price"])
        lines = cart.lines + (CartLine(item_id=item_id, name=item.get("name", ""), price=price, quantity=1),)
    return Cart(lines=lines, amount=cart.amount + _decimal(price))


def remove_item(cart: Cart, item: Mapping) -> Cart:
    """Remove one unit of a catalog item; the line disappears at quantity 0."""
    item_id = _item_id(item)
    existing = cart.line_for(item_id)
    if not existing:
        return cart
    if existing.quantity > 1:
        lines = tuple(replace(line, quantity=line.quantity - 1) if line.item_id == item_id else line for line in cart.lines)
    else:
        lines = tuple(line for line in cart.lines if line.item_id != item_id)
    return Cart(lines=lines, amount=cart.amount - _decimal(existing.price))


def replace_lines(cart: Cart, lines: Iterable[CartLine]) -> Cart:
    new_lines = tuple(lines)
    return Cart(lines=new_lines, amount=sum((line.subtotal for line in new_lines), Decimal("0")))


def from_order(order: Mapping) -> Cart:
    """
    Rebuild a cart from a full order as returned by the API (lines carry their item).
    Lines whose catalog item no longer exists are dropped rather than priced at zero.
    """
    lines = []
    for line in order.get("lines", []):
        item = line.get("item")
        if not item or item.get("price") is None:
            logger.warning(f"Order {order.get('_id')}: item {line.get('item_id')} is no longer on the menu, line dropped")
            continue
        lines.append(CartLine(
            item_id=str(line["item_id"]),
            name=item.get("name", ""),
            price=float(item["price"]),
            quantity=int(line["quantity"]),
        ))
    return replace_lines(EMPTY_CART, lines)


def computed_total(cart: Cart) -> float:
    return _money(sum((line.subtotal for line in cart.lines), Decimal("0")))


def to_order_items(cart: Cart) -> List[dict]:
    return [{"itemId": line.item_id, "quantity": line.quantity} for line in cart.lines]
