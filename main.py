import logging
from typing import Any, Dict, Optional

import pydantic
from fastapi import FastAPI, Body, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import catalog
import config
import orders
from dashboard import filter_orders
from database import get_db
from errors import NotFoundError, PersistenceError, ValidationError
from schemas import (
    CreateOrderRequest,
    ReplaceItemsRequest,
    StatusCheckRequest,
    UpdateStatusRequest,
    ORDER_STATUSES,
)

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Room Service Ordering API", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ===================== Error mapping =====================
@app.exception_handler(ValidationError)
def validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request data"})


@app.exception_handler(NotFoundError)
def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"error": exc.message})


@app.exception_handler(PersistenceError)
def persistence_error_handler(request: Request, exc: PersistenceError):
    logger.exception(f"{request.method} {request.url.path} failed: {exc.message}", exc_info=exc)
    return JSONResponse(status_code=500, content={"error": "Failed to process order"})


def _parse(model, data: Dict[str, Any], message: str = "Invalid request data"):
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as e:
        raise ValidationError(message) from e


def _require_id(order_id: Optional[str]) -> str:
    if not order_id:
        raise ValidationError("Order ID is required")
    return order_id


# ===================== Public Endpoints =====================
@app.get("/")
def root():
    return {"message": "Room Service Ordering API running"}


@app.get("/test")
def test_database():
    response = {
        "backend": "✅ Running",
        "database": "❌ Not Available",
        "collections": [],
    }
    try:
        db = get_db()
        response["database"] = "✅ Available"
        response["collections"] = db.list_collection_names()
    except PersistenceError as e:
        response["database"] = f"❌ Error: {e.message[:80]}"
    return response


@app.get("/schema")
def get_schema():
    return {
        "collections": [catalog.COLLECTION, orders.COLLECTION],
        "statuses": list(ORDER_STATUSES),
    }


# ===================== Menu =====================
@app.get("/menu/{room_number}")
def room_menu(room_number: str, grouped: bool = False):
    # every room sees the same menu
    items = catalog.list_items()
    return catalog.categorize(items) if grouped else items


@app.get("/dishes")
def list_dishes():
    return catalog.list_items()


@app.get("/items/{item_id}")
def get_item(item_id: str):
    return catalog.get_item(item_id)


# ===================== Orders =====================
@app.post("/order", status_code=201)
def create_order_or_status(payload: Dict[str, Any] = Body(...)):
    if payload.get("action") == "getStatus":
        if not payload.get("orderId") and not payload.get("order_id"):
            raise ValidationError("Order ID is required for status check")
        check = _parse(StatusCheckRequest, payload)
        return JSONResponse(status_code=200, content=orders.get_order_status(check.order_id))

    request = _parse(CreateOrderRequest, payload, "Invalid request data. Room number and items array are required.")
    order = orders.create_order(request.room_number, request.items)
    return {"orderId": order["_id"], "message": "Order created successfully"}


@app.get("/order")
def order_status(id: Optional[str] = None):
    return orders.get_order_status(_require_id(id))


@app.patch("/order")
def update_order(id: Optional[str] = None, payload: Dict[str, Any] = Body(...)):
    order_id = _require_id(id)
    if "status" in payload:
        request = _parse(UpdateStatusRequest, payload)
        return orders.update_order_status(order_id, request.status)
    if "items" in payload:
        request = _parse(ReplaceItemsRequest, payload)
        return orders.replace_order_items(order_id, request.items)
    raise ValidationError("Invalid update request")


@app.get("/orders/{order_id}")
def get_order(order_id: str):
    return orders.get_order(order_id)


@app.get("/orders")
def list_orders(level: str = "all", completed_only: bool = False):
    return filter_orders(orders.list_orders(), level=level, completed_only=completed_only)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
