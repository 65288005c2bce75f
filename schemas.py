"""
Database Schemas for the Room Service Ordering System

Each document model below corresponds to a MongoDB collection.
The collection name is the lowercase class name (e.g., Item -> "item").
Request models accept both the camelCase names sent by the guest pages and snake_case.
"""
from typing import List, Optional, Literal, get_args
from pydantic import BaseModel, ConfigDict, Field


OrderStatus = Literal["pending", "in-progress", "completed", "canceled"]
ORDER_STATUSES = get_args(OrderStatus)


class Item(BaseModel):
    name: str = Field(..., description="Dish name")
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    course: Optional[str] = Field(None, description="appetizer, main, dessert, beverage, ...")
    image_path: Optional[str] = None


class OrderLine(BaseModel):
    item_id: str = Field(..., description="Reference to item _id")
    quantity: int = Field(..., ge=1)


class Order(BaseModel):
    room_number: str = Field(..., min_length=1, description="Room the order is delivered to")
    status: OrderStatus = "pending"
    total_price: float = Field(0.0, ge=0)
    lines: List[OrderLine] = Field(default_factory=list)


# ===================== Request bodies =====================
class _RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)


class LineRequest(_RequestModel):
    item_id: str = Field(..., alias="itemId")
    quantity: int = Field(..., ge=1)


class CreateOrderRequest(_RequestModel):
    room_number: str = Field(..., alias="roomNumber", min_length=1)
    items: List[LineRequest] = Field(..., min_length=1)


class StatusCheckRequest(_RequestModel):
    action: Literal["getStatus"]
    order_id: str = Field(..., alias="orderId", min_length=1)
    room_number: Optional[str] = Field(None, alias="roomNumber")


class UpdateStatusRequest(_RequestModel):
    status: str


class ReplaceItemsRequest(_RequestModel):
    items: List[LineRequest] = Field(..., min_length=1)


"""
Notes:
- ORDER_STATUSES is the only status vocabulary; clients must not invent others.
- Lines are embedded in the order document, so replacing them together with
  total_price is a single-document (atomic) update.
"""
