import logging
from typing import Any, Dict, List
from fastapi import APIRouter, Depends, HTTPException
from ..auth import Caller
from ..models import CartLineRequest, CartQuantityUpdate
from ..store import BackendError, add_cart_item, clear_cart, get_cart_items, remove_cart_item, update_cart_item
from .deps import current_caller, require_owner, user_client

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["cart"])

"""
Server-side cart for signed-in customers (the `cart_items` table).
Every route works on the caller's own cart only; rows come back with
their product joined in.
"""
@router.get("/{user_id}")
def read_cart(user_id: str, caller: Caller = Depends(current_caller)) -> List[Dict[str, Any]]:
    require_owner(caller, user_id)
    try:
        return get_cart_items(user_client(caller), user_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))


@router.post("/{user_id}")
def add_line(user_id: str, line: CartLineRequest, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        return add_cart_item(user_client(caller), user_id, line.product_id, line.selected_size, line.quantity)
    except BackendError as exc:
        raise HTTPException(500, str(exc))


@router.patch("/{user_id}/items/{item_id}")
def change_quantity(user_id: str, item_id: str, update: CartQuantityUpdate, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        row = update_cart_item(user_client(caller), user_id, item_id, update.quantity)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if row is None and update.quantity > 0:
        raise HTTPException(404, "Cart item not found")
    return row or {"removed": item_id}


@router.delete("/{user_id}/items/{item_id}")
def remove_line(user_id: str, item_id: str, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        remove_cart_item(user_client(caller), user_id, item_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    return {"ok": True}


@router.delete("/{user_id}")
def empty_cart(user_id: str, caller: Caller = Depends(current_caller)):
    require_owner(caller, user_id)
    try:
        clear_cart(user_client(caller), user_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    logger.info("Cleared cart for %s", user_id)
    return {"ok": True}
