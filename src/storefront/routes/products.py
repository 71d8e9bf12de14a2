import logging
from datetime import datetime
from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from ..catalog import (
    UnknownFacetError,
    active_filter_count,
    facet_counts,
    filter_and_sort,
    filter_state_from_navigation,
)
from ..db import get_client
from ..models import FilterState, Product, ProductListResponse
from ..store import BackendError, fetch_active_products, get_product

logger = logging.getLogger(__name__)

router = APIRouter(tags=["catalog"])

"""
Filter and sort the live catalogue.

Purpose:
    Loads the active product snapshot from Supabase, then runs the
    in-process filter engine over it. The engine itself never touches
    the database.

Parameters:
    filters (FilterState):
        Facet selections, boolean toggles and sort order, as held by the
        listing view.

Returns:
    ProductListResponse:
        Matching products, catalogue size, match count, facet counts and
        the number of active selections.
"""
@router.post("/products/search", response_model=ProductListResponse)
def search_products(filters: FilterState):
    # --- 1) Snapshot the catalogue ---
    try:
        products = fetch_active_products(get_client())
    except BackendError as exc:
        raise HTTPException(500, str(exc))

    # --- 2) Filter + sort + counts against one "now" ---
    now = datetime.now()
    items = filter_and_sort(products, filters, now=now)

    return ProductListResponse(
        items=items,
        total=len(products),
        matched=len(items),
        counts=facet_counts(products, filters, now=now),
        active_filters=active_filter_count(filters),
    )


"""
Decode a navigation link ("Women / Essentials", "Slim" fit, ...) into
the FilterState the listing should start from. Unknown facets -> 400.
"""
@router.get("/products/navigation", response_model=FilterState)
def navigation_filter(
    type: str = Query(...),
    value: str = Query(""),
    gender: Optional[str] = Query(default=None),
):
    try:
        return filter_state_from_navigation(type, value, gender)
    except UnknownFacetError as exc:
        logger.info("Rejected navigation filter %r", type)
        raise HTTPException(400, str(exc))


# Declared after /products/navigation so that path isn't read as an id
@router.get("/products/{product_id}", response_model=Product)
def product_detail(product_id: str):
    try:
        product = get_product(get_client(), product_id)
    except BackendError as exc:
        raise HTTPException(500, str(exc))
    if product is None:
        raise HTTPException(404, "Product not found")
    return product
