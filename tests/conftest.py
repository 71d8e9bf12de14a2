"""
Pytest configuration and shared fixtures for the storefront tests.
"""
import os
import sys
from types import SimpleNamespace
from typing import Any, List
from unittest.mock import MagicMock

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(os.path.dirname(__file__)), "src"))

from storefront.models import Product  # noqa: E402


def make_response(data: Any = None, error: Any = None, count: Any = None) -> SimpleNamespace:
    """Stand-in for a postgrest APIResponse."""
    return SimpleNamespace(data=data, error=error, count=count)


def auth_user(user_id: str = "user-1", role: Any = None) -> SimpleNamespace:
    """What `sb.auth.get_user(token)` hands back for a valid token."""
    app_metadata = {"role": role} if role else {}
    user = SimpleNamespace(id=user_id, email=f"{user_id}@example.com", app_metadata=app_metadata)
    return SimpleNamespace(user=user)


AUTH = {"Authorization": "Bearer token-user-1"}


# ============================================================================
# Fixtures: Test Data Factories
# ============================================================================

@pytest.fixture
def product_rows() -> List[dict]:
    """Rows as they come back from the Supabase `products` table."""
    return [
        {
            "id": "p-001", "name": "Cotton Oxford Shirt", "price": 145, "image_url": "https://example.com/1.jpg",
            "category": "Shirts", "fabric": "Cotton", "fit": "Slim Fit", "gender": "Men",
            "sizes": ["S", "M", "L"], "is_essential": True, "is_highlight": False,
            "offer_percentage": 10, "festival": "Diwali", "created_at": "2026-10-18T09:30:00",
        },
        {
            "id": "p-002", "name": "Silk Evening Dress", "price": 675, "image_url": "https://example.com/2.jpg",
            "category": "Dresses", "fabric": "Silk", "fit": "Slim Fit", "gender": "Women",
            "sizes": ["XS", "S", "M"], "is_essential": False, "is_highlight": True,
            "offer_percentage": 0, "festival": "Eid", "created_at": "2026-10-17T22:00:00",
        },
        {
            "id": "p-003", "name": "Cashmere Roll Neck", "price": 385, "image_url": "https://example.com/3.jpg",
            "category": "Knitwear", "fabric": "Cashmere", "fit": "Regular Fit", "gender": "Unisex",
            "sizes": ["M", "L", "XL"], "is_essential": True, "is_highlight": False,
            "offer_percentage": 0, "festival": None, "created_at": "2026-10-18T01:00:00",
        },
        {
            "id": "p-004", "name": "Wool Dress Trousers", "price": 200, "image_url": None,
            "category": "Trousers", "fabric": "Wool", "fit": "Regular Fit", "gender": "men",
            "sizes": ["L", "XL"], "is_essential": False, "is_highlight": False,
            "offer_percentage": 0, "festival": "diwali", "created_at": None,
        },
        {
            "id": "p-005", "name": "Linen Blazer", "price": 425,
            "fabric": "Linen", "fit": "Relaxed Fit",
            "sizes": ["M"],
        },
    ]


@pytest.fixture
def products(product_rows) -> List[Product]:
    return [Product.from_row(r) for r in product_rows]


# ============================================================================
# Fixtures: Mock Services
# ============================================================================

@pytest.fixture
def mock_supabase_client(product_rows):
    """Mock Supabase client for unit tests."""
    client = MagicMock()
    table = client.table.return_value
    select = table.select.return_value

    # products / fit_profiles / orders / users / cart reads
    select.eq.return_value.execute.return_value = make_response(product_rows)
    select.eq.return_value.limit.return_value.execute.return_value = make_response([])
    select.eq.return_value.eq.return_value.limit.return_value.execute.return_value = make_response([])
    select.eq.return_value.eq.return_value.eq.return_value.limit.return_value.execute.return_value = make_response([])
    select.eq.return_value.order.return_value.execute.return_value = make_response([])
    # order numbering: exact count, one row fetched
    select.limit.return_value.execute.return_value = make_response([{"id": "o-1"}], count=2)

    # writes
    table.insert.return_value.execute.return_value = make_response([{"id": "o-3"}])
    table.upsert.return_value.execute.return_value = make_response([])
    table.update.return_value.eq.return_value.execute.return_value = make_response([])
    table.update.return_value.eq.return_value.eq.return_value.execute.return_value = make_response([])
    table.delete.return_value.eq.return_value.execute.return_value = make_response([])
    table.delete.return_value.eq.return_value.eq.return_value.execute.return_value = make_response([])

    # every bearer token belongs to user-1 unless a test says otherwise
    client.auth.get_user.return_value = auth_user()
    return client


@pytest.fixture
def test_client(mock_supabase_client, monkeypatch):
    """FastAPI client with every route pointed at the mock Supabase client."""
    from fastapi.testclient import TestClient
    from storefront.main import app
    from storefront.routes import account, deps, newsletter, orders, products

    for module in (products, orders, account, deps):
        monkeypatch.setattr(module, "get_client", lambda: mock_supabase_client)
    monkeypatch.setattr(deps, "get_user_client", lambda token: mock_supabase_client)
    monkeypatch.setattr(account, "get_auth_client", lambda: mock_supabase_client)
    monkeypatch.setattr(newsletter, "get_auth_client", lambda: mock_supabase_client)

    with TestClient(app) as client:
        yield client
