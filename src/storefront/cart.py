"""
Cart, favourites and order assembly.

These work on plain values handed in by the caller (the client keeps the
cart); every helper returns a new list/set/model and leaves its input alone.
"""
from datetime import datetime, timezone
from typing import Dict, List, Optional, Set

from .models import Address, CartItem, Order, Product


def add_to_cart(items: List[CartItem], product: Product, size: str, quantity: int = 1) -> List[CartItem]:
    # Same product in the same size stacks onto the existing line
    for i, item in enumerate(items):
        if item.product_id == product.id and item.selected_size == size:
            merged = item.model_copy(update={"quantity": item.quantity + quantity})
            return items[:i] + [merged] + items[i + 1:]
    line = CartItem(
        product_id=product.id,
        name=product.name,
        price=product.price,
        selected_size=size,
        quantity=quantity,
    )
    return items + [line]


def remove_from_cart(items: List[CartItem], product_id: str) -> List[CartItem]:
    """Drop every line for `product_id`, whatever the size."""
    return [item for item in items if item.product_id != product_id]


def update_cart_quantity(items: List[CartItem], product_id: str, quantity: int) -> List[CartItem]:
    if quantity <= 0:
        return remove_from_cart(items, product_id)
    return [
        item.model_copy(update={"quantity": quantity}) if item.product_id == product_id else item
        for item in items
    ]


def cart_total(items: List[CartItem]) -> float:
    return sum(item.price * item.quantity for item in items)


def toggle_favorite(favorites: Set[str], product_id: str) -> Set[str]:
    updated = set(favorites)
    if product_id in updated:
        updated.discard(product_id)
    else:
        updated.add(product_id)
    return updated


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def build_order(
    user_id: Optional[str],
    items: List[CartItem],
    existing_order_count: int,
    address: Optional[Address] = None,
    now: Optional[datetime] = None,
) -> Optional[Order]:
    """
    Turn the cart into a pending order.
    Returns None when nobody is signed in or the cart is empty.
    """
    if not user_id or not items:
        return None
    created = now or _utc_now()
    return Order(
        id=f"ORD-{existing_order_count + 1:03d}",
        user_id=user_id,
        items=list(items),
        total=cart_total(items),
        status="pending",
        created_at=created.isoformat(),
        shipping_address=address or Address(),
    )


def order_status_updates(status: str, now: Optional[datetime] = None) -> Dict[str, str]:
    """Column updates for a status change; shipping/delivery get a timestamp."""
    stamp = (now or _utc_now()).isoformat()
    updates = {"status": status}
    if status == "shipped":
        updates["shipped_at"] = stamp
    elif status == "delivered":
        updates["delivered_at"] = stamp
    return updates
