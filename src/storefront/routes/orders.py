import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException
from ..auth import Caller
from ..db import get_client
from ..models import CheckoutRequest, Order, StatusUpdate
from ..store import BackendError, DuplicateRow, get_user_orders, place_order, update_order_status
from .deps import admin_caller, current_caller, require_owner, user_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["orders"])

"""
Place an order from the client-side cart.

Process:
    1. Only the signed-in customer may order for themselves.
    2. Number the order after the ones already stored (ORD-001, ...).
       A clash on the unique order number is retried; if it keeps
       clashing the caller gets a 409 and can resubmit.
    3. Write header + line items through the customer's own session.
"""
@router.post("/orders", response_model=Order)
def create(req: CheckoutRequest, caller: Caller = Depends(current_caller)):
    require_owner(caller, req.user_id)
    try:
        order = place_order(user_client(caller), get_client(), req.user_id, req.items, req.shipping_address)
    except DuplicateRow:
        raise HTTPException(409, "Order number clash, please retry")
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if order is None:
        raise HTTPException(400, "Cart is empty")
    return order


@router.get("/orders/{user_id}")
def list_orders(user_id: str, caller: Caller = Depends(current_caller)) -> List[Dict[str, Any]]:
    require_owner(caller, user_id)
    try:
        return get_user_orders(user_client(caller), user_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))


# Back-office only: moves an order along pending -> ... -> delivered
@router.patch("/orders/{order_id}/status")
def change_status(order_id: str, update: StatusUpdate, caller: Caller = Depends(admin_caller)):
    try:
        row = update_order_status(get_client(), order_id, update.status)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if row is None:
        raise HTTPException(404, "Order not found")
    logger.info("Order %s -> %s (by %s)", order_id, update.status, caller.id)
    return row
