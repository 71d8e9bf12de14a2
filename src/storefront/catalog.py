"""
Catalogue filter engine: facet matching, sorting and facet counts.

Everything here is a pure function of its arguments. Inputs are never
mutated; every call hands back a fresh list / FilterState.
"""
from datetime import datetime, date
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Set

from .models import FilterState, Product
from .rules import FILTER_OPTIONS, FIT_SUFFIX, UNISEX, price_in_bracket

MULTI_SELECT_FACETS = ("gender", "category", "fabric", "fit", "size", "price", "festival")


class FacetType(str, Enum):
    """Facet keys a navigation link is allowed to preset."""
    GENDER = "gender"
    ESSENTIALS = "essentials"
    NEW_IN = "newIn"
    CATEGORY = "category"
    FABRIC = "fabric"
    FIT = "fit"


class UnknownFacetError(ValueError):
    """Raised when a navigation signal names a facet we don't filter on."""


# ---------- matching helpers ----------

def _local_date(value: datetime) -> date:
    # Aware timestamps are shifted into the local zone before taking the date
    if value.tzinfo is not None:
        value = value.astimezone()
    return value.date()


def _parse_timestamp(raw: Optional[str]) -> Optional[datetime]:
    if not raw:
        return None
    text = raw.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def is_new_arrival(product: Product, now: datetime) -> bool:
    """Same local calendar day as `now`; no timestamp never counts as new."""
    created = _parse_timestamp(product.created_at)
    if created is None:
        return False
    return _local_date(created) == _local_date(now)


def _matches_gender(product: Product, selected: Set[str]) -> bool:
    if not product.gender:
        return False
    gender = product.gender.lower()
    if gender == UNISEX:
        return True
    return gender in {g.lower() for g in selected}


def _matches_festival(product: Product, selected: Set[str], quick: str) -> bool:
    sidebar_on = bool(selected)
    quick_on = bool(quick) and quick.lower() != "all"
    if not (sidebar_on or quick_on):
        return True
    if not product.festival:
        return False
    tag = product.festival.lower()
    if sidebar_on and tag not in {f.lower() for f in selected}:
        return False
    if quick_on and tag != quick.lower():
        return False
    return True


def matches(
    product: Product,
    filters: FilterState,
    now: datetime,
    skip: Optional[str] = None,
) -> bool:
    """
    True when `product` passes every active facet.
    `skip` leaves one facet out (used for facet counts).
    """
    if filters.essentials and not product.is_essential:
        return False
    if filters.new_in and not is_new_arrival(product, now):
        return False
    if skip != "category" and filters.category and product.category not in filters.category:
        return False
    if skip != "gender" and filters.gender and not _matches_gender(product, filters.gender):
        return False
    if skip != "fabric" and filters.fabric and product.fabric not in filters.fabric:
        return False
    if skip != "fit" and filters.fit and product.fit not in filters.fit:
        return False
    if skip != "size" and filters.size and not filters.size.intersection(product.sizes):
        return False
    if skip != "price" and filters.price:
        if not any(price_in_bracket(product.price, label) for label in filters.price):
            return False
    if skip != "festival" and not _matches_festival(product, filters.festival, filters.festival_quick):
        return False
    return True


# ---------- sorting ----------

def sort_products(products: Sequence[Product], sort_by: str) -> List[Product]:
    """
    Stable sort into a new list.
    "new" and "popular" keep the incoming order.
    """
    if sort_by == "price-asc":
        return sorted(products, key=lambda p: p.price)
    if sort_by == "price-desc":
        return sorted(products, key=lambda p: p.price, reverse=True)
    return list(products)


def filter_and_sort(
    products: Sequence[Product],
    filters: FilterState,
    now: Optional[datetime] = None,
) -> List[Product]:
    """Products that pass every active facet, ordered by `filters.sort_by`."""
    now = now or datetime.now()
    kept = [p for p in products if matches(p, filters, now)]
    return sort_products(kept, filters.sort_by)


# ---------- facet counts ----------

def _option_hit(product: Product, facet: str, option: str) -> bool:
    if facet == "gender":
        return _matches_gender(product, {option})
    if facet == "size":
        return option in product.sizes
    if facet == "price":
        return price_in_bracket(product.price, option)
    if facet == "festival":
        return bool(product.festival) and product.festival.lower() == option.lower()
    return getattr(product, facet) == option


def facet_counts(
    products: Sequence[Product],
    filters: FilterState,
    now: Optional[datetime] = None,
) -> Dict[str, Dict[str, int]]:
    """
    For each facet option: how many products would match if that option
    were the only one picked in its facet, other facets left as they are.
    """
    now = now or datetime.now()
    counts: Dict[str, Dict[str, int]] = {}
    for facet in MULTI_SELECT_FACETS:
        pool = [p for p in products if matches(p, filters, now, skip=facet)]
        if facet == "festival":
            options = festivals_in(products)
        else:
            options = FILTER_OPTIONS[facet]
        counts[facet] = {opt: sum(1 for p in pool if _option_hit(p, facet, opt)) for opt in options}
    return counts


# ---------- state helpers ----------

def toggle_filter(filters: FilterState, facet: str, value: str) -> FilterState:
    """Add `value` to the facet set, or drop it if already selected."""
    if facet not in MULTI_SELECT_FACETS:
        raise UnknownFacetError(f"Unknown facet: {facet}")
    current: Set[str] = set(getattr(filters, facet))
    if value in current:
        current.discard(value)
    else:
        current.add(value)
    return filters.model_copy(update={facet: current})


def clear_filters(filters: FilterState) -> FilterState:
    """Reset every facet but keep the chosen sort order."""
    return FilterState(sort_by=filters.sort_by)


def active_filter_count(filters: FilterState) -> int:
    total = sum(len(getattr(filters, facet)) for facet in MULTI_SELECT_FACETS)
    total += int(filters.essentials) + int(filters.new_in)
    if filters.festival_quick and filters.festival_quick.lower() != "all":
        total += 1
    return total


def _with_fit_suffix(value: str) -> str:
    # "Slim", "Slim fit" and "Slim FIT" all become "Slim Fit"
    suffix = FIT_SUFFIX.strip()
    base = value.strip()
    if base.lower().endswith(" " + suffix.lower()):
        base = base[: -len(suffix)].rstrip()
    return base + FIT_SUFFIX


def filter_state_from_navigation(
    facet: str,
    value: str,
    gender: Optional[str] = None,
) -> FilterState:
    """
    Decode a navigation signal (e.g. "Women / Essentials") into a fresh
    FilterState. Unknown facet keys are rejected.
    """
    try:
        kind = FacetType(facet)
    except ValueError:
        raise UnknownFacetError(f"Unknown facet: {facet}") from None

    update: Dict[str, object] = {}
    if kind is FacetType.ESSENTIALS:
        update["essentials"] = True
    elif kind is FacetType.NEW_IN:
        update["new_in"] = True
    elif kind is FacetType.FIT:
        update["fit"] = {_with_fit_suffix(value)}
    else:
        update[kind.value] = {value}

    if gender:
        update["gender"] = set(update.get("gender", set())) | {gender}
    return FilterState(**update)


def festivals_in(products: Iterable[Product]) -> List[str]:
    """Distinct festival tags present in the catalogue, for the quick-filter bar."""
    seen: Dict[str, str] = {}
    for p in products:
        if p.festival:
            # first spelling wins; matching is case-insensitive anyway
            seen.setdefault(p.festival.lower(), p.festival)
    return [seen[key] for key in sorted(seen)]
