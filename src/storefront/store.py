"""
Thin wrappers over the Supabase tables the storefront reads and writes.

Each helper takes a client (see `db`) so routes and tests can hand in
whatever they have. Customer data goes through a user-scoped client so
row-level security applies; the service-role client is kept for the
catalogue and back-office calls.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from postgrest.exceptions import APIError
from pydantic import ValidationError
from supabase import Client
from .cart import build_order, order_status_updates
from .models import Address, CartItem, FitProfile, Order, Product, UserProfile

logger = logging.getLogger(__name__)

# Postgres unique_violation
UNIQUE_VIOLATION = "23505"


class BackendError(RuntimeError):
    """The hosted backend rejected or failed a request."""


class DuplicateRow(BackendError):
    """A unique constraint refused the write."""


def _rows(res: Any, what: str) -> List[Dict[str, Any]]:
    # Older clients report failures on the response instead of raising
    error = getattr(res, "error", None)
    if error:
        logger.error("Supabase %s failed: %s", what, error.message)
        if getattr(error, "code", None) == UNIQUE_VIOLATION:
            raise DuplicateRow(error.message)
        raise BackendError(error.message)
    return res.data or []


def _execute(query: Any, what: str) -> Any:
    """Run a query builder, turning postgrest errors into BackendError."""
    try:
        return query.execute()
    except APIError as exc:
        logger.error("Supabase %s failed: %s", what, exc.message)
        if exc.code == UNIQUE_VIOLATION:
            raise DuplicateRow(exc.message or "duplicate") from exc
        raise BackendError(exc.message or what) from exc


def _fetch(query: Any, what: str) -> List[Dict[str, Any]]:
    return _rows(_execute(query, what), what)


def _product_or_none(row: Dict[str, Any]) -> Optional[Product]:
    if not row.get("id"):
        return None  # nothing to key on
    try:
        return Product.from_row(row)
    except (ValidationError, TypeError, ValueError) as exc:
        logger.warning("Skipping product row %s: %s", row.get("id"), exc)
        return None


# ---------- catalogue ----------

def fetch_active_products(sb: Client) -> List[Product]:
    rows = _fetch(sb.table("products").select("*").eq("is_active", True), "products select")
    products: List[Product] = []
    for row in rows:
        product = _product_or_none(row)
        if product is not None:
            products.append(product)
    logger.info("Loaded %d active products (%d rows)", len(products), len(rows))
    return products


def get_product(sb: Client, product_id: str) -> Optional[Product]:
    query = sb.table("products").select("*").eq("id", product_id).eq("is_active", True).limit(1)
    rows = _fetch(query, "product select")
    return _product_or_none(rows[0]) if rows else None


# ---------- fit profiles ----------

def get_fit_profile(sb: Client, user_id: str) -> Optional[FitProfile]:
    rows = _fetch(sb.table("fit_profiles").select("*").eq("user_id", user_id).limit(1), "fit_profiles select")
    if not rows:
        return None
    return FitProfile(**{k: v for k, v in rows[0].items() if k in FitProfile.model_fields})


def save_fit_profile(sb: Client, user_id: str, profile: FitProfile) -> FitProfile:
    payload = profile.model_dump(exclude={"user_id"})
    payload["user_id"] = user_id
    rows = _fetch(sb.table("fit_profiles").upsert(payload, on_conflict="user_id"), "fit_profiles upsert")
    saved = rows[0] if rows else payload
    return FitProfile(**{k: v for k, v in saved.items() if k in FitProfile.model_fields})


# ---------- orders ----------

def create_order(sb: Client, order: Order) -> Dict[str, Any]:
    """
    Insert the order header, then one order_items row per cart line.
    If the lines fail the header is deleted again so no empty order is left.
    """
    address = order.shipping_address
    header = {
        "user_id": order.user_id,
        "order_number": order.id,
        "status": order.status,
        "subtotal": order.total,
        "total_amount": order.total,
        "tax_amount": 0,
        "shipping_amount": 0,
        "shipping_street": address.street,
        "shipping_city": address.city,
        "shipping_postcode": address.postcode,
        "shipping_country": address.country,
    }
    rows = _fetch(sb.table("orders").insert(header), "orders insert")
    if not rows:
        raise BackendError("Order insert returned no row")
    saved = rows[0]

    items = [
        {
            "order_id": saved["id"],
            "product_id": item.product_id,
            "product_name": item.name,
            "quantity": item.quantity,
            "price": item.price,
            "selected_size": item.selected_size,
        }
        for item in order.items
    ]
    try:
        _fetch(sb.table("order_items").insert(items), "order_items insert")
    except BackendError:
        logger.warning("Rolling back order header %s", saved["id"])
        _fetch(sb.table("orders").delete().eq("id", saved["id"]), "orders rollback")
        raise
    logger.info("Created order %s with %d lines", order.id, len(items))
    return saved


def count_orders(sb: Client) -> int:
    res = _execute(sb.table("orders").select("id", count="exact").limit(1), "orders count")
    rows = _rows(res, "orders count")
    count = getattr(res, "count", None)
    return count if count is not None else len(rows)


def place_order(
    sb: Client,
    numbering: Client,
    user_id: str,
    items: List[CartItem],
    address: Optional[Address] = None,
    attempts: int = 3,
) -> Optional[Order]:
    """
    Number and store an order. `numbering` must see every order (service
    role); `sb` writes as the customer. A clash on the unique order_number
    re-counts and tries again; the last clash is re-raised as DuplicateRow.
    Returns None for an empty cart.
    """
    for attempt in range(1, attempts + 1):
        order = build_order(user_id, items, count_orders(numbering), address)
        if order is None:
            return None
        try:
            create_order(sb, order)
            return order
        except DuplicateRow:
            logger.warning("Order number %s taken (attempt %d/%d)", order.id, attempt, attempts)
            if attempt == attempts:
                raise
    return None


def get_user_orders(sb: Client, user_id: str) -> List[Dict[str, Any]]:
    query = (
        sb.table("orders")
        .select("*, order_items(*)")
        .eq("user_id", user_id)
        .order("created_at", desc=True)
    )
    return _fetch(query, "orders select")


def update_order_status(sb: Client, order_id: str, status: str) -> Optional[Dict[str, Any]]:
    rows = _fetch(sb.table("orders").update(order_status_updates(status)).eq("id", order_id), "orders update")
    return rows[0] if rows else None


# ---------- persisted cart ----------

def get_cart_items(sb: Client, user_id: str) -> List[Dict[str, Any]]:
    return _fetch(sb.table("cart_items").select("*, products(*)").eq("user_id", user_id), "cart_items select")


def add_cart_item(sb: Client, user_id: str, product_id: str, size: str, quantity: int) -> Dict[str, Any]:
    # Same product in the same size stacks onto the existing line
    existing = _fetch(
        sb.table("cart_items").select("*")
        .eq("user_id", user_id).eq("product_id", product_id).eq("selected_size", size).limit(1),
        "cart_items lookup",
    )
    if existing:
        line = existing[0]
        rows = _fetch(
            sb.table("cart_items").update({"quantity": line["quantity"] + quantity}).eq("id", line["id"]),
            "cart_items update",
        )
        return rows[0] if rows else {**line, "quantity": line["quantity"] + quantity}

    row = {"user_id": user_id, "product_id": product_id, "quantity": quantity, "selected_size": size}
    rows = _fetch(sb.table("cart_items").insert(row), "cart_items insert")
    return rows[0] if rows else row


def remove_cart_item(sb: Client, user_id: str, cart_item_id: str) -> None:
    _fetch(sb.table("cart_items").delete().eq("id", cart_item_id).eq("user_id", user_id), "cart_items delete")


def update_cart_item(sb: Client, user_id: str, cart_item_id: str, quantity: int) -> Optional[Dict[str, Any]]:
    """Set a line's quantity; 0 or less removes it (returns None)."""
    if quantity <= 0:
        remove_cart_item(sb, user_id, cart_item_id)
        return None
    rows = _fetch(
        sb.table("cart_items").update({"quantity": quantity}).eq("id", cart_item_id).eq("user_id", user_id),
        "cart_items update",
    )
    return rows[0] if rows else None


def clear_cart(sb: Client, user_id: str) -> None:
    _fetch(sb.table("cart_items").delete().eq("user_id", user_id), "cart_items clear")


# ---------- user profiles ----------

def get_user_profile(sb: Client, user_id: str) -> Optional[UserProfile]:
    rows = _fetch(sb.table("users").select("*").eq("id", user_id).limit(1), "users select")
    if not rows:
        return None
    return UserProfile(**{k: v for k, v in rows[0].items() if k in UserProfile.model_fields})


def update_user_profile(sb: Client, user_id: str, updates: Dict[str, Any]) -> Optional[UserProfile]:
    rows = _fetch(sb.table("users").update(updates).eq("id", user_id), "users update")
    if not rows:
        return None
    return UserProfile(**{k: v for k, v in rows[0].items() if k in UserProfile.model_fields})


# ---------- newsletter ----------

def subscribe_newsletter(sb: Client, email: str) -> Dict[str, Any]:
    """Raises DuplicateRow when the address is already subscribed."""
    row = {
        "email": email,
        "subscribed_at": datetime.now(timezone.utc).isoformat(),
        "is_active": True,
    }
    rows = _fetch(sb.table("newsletter_subscribers").insert(row), "newsletter insert")
    return rows[0] if rows else row
