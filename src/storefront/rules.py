from typing import Dict, List, Optional, Tuple

# Small, explicit rule tables shared by the catalogue and the fit wizard

# Options the listing sidebar offers for each facet
FILTER_OPTIONS: Dict[str, List[str]] = {
    "gender": ["Men", "Women", "Unisex"],
    "category": ["Shirts", "Trousers", "Knitwear", "Outerwear", "Dresses"],
    "fabric": ["Cotton", "Wool", "Linen", "Cashmere", "Silk"],
    "fit": ["Slim Fit", "Regular Fit", "Relaxed Fit"],
    "size": ["XS", "S", "M", "L", "XL", "XXL"],
    "price": ["Under 200", "200-400", "400-600", "Over 600"],
}

FIT_SUFFIX = " Fit"
UNISEX = "unisex"

# (lower, lower_inclusive, upper, upper_inclusive); None = unbounded
PriceBracket = Tuple[Optional[float], bool, Optional[float], bool]

PRICE_BRACKETS: Dict[str, PriceBracket] = {
    "Under 200": (None, False, 200, False),
    "200-400": (200, True, 400, True),
    "400-600": (400, False, 600, True),
    "Over 600": (600, False, None, False),
}

# Ladders are (upper_bound_exclusive, size); the last entry catches the rest
CHEST_LADDER: List[Tuple[float, str]] = [
    (88, "XS"),
    (94, "S"),
    (100, "M"),
    (106, "L"),
    (112, "XL"),
    (float("inf"), "XXL"),
]

HEIGHT_LADDER: List[Tuple[float, str]] = [
    (160, "XS"),
    (170, "S"),
    (180, "M"),
    (190, "L"),
    (float("inf"), "XL"),
]

WAIST_LADDER: List[Tuple[float, str]] = [
    (72, "XS"),
    (78, "S"),
    (84, "M"),
    (90, "L"),
    (96, "XL"),
    (float("inf"), "XXL"),
]

SIZE_ORDER: List[str] = ["XS", "S", "M", "L", "XL", "XXL"]

CHEST_CONFIDENCE: Dict[str, int] = {"XS": 85, "S": 88, "M": 90, "L": 88, "XL": 85, "XXL": 82}
FIT_BONUS: Dict[str, int] = {"slim": 5, "regular": 0, "relaxed": 3}
HEIGHT_ONLY_CONFIDENCE = 65
DETAILED_CONFIDENCE = 92
MAX_CONFIDENCE = 95


def normalise_bracket(label: str) -> str:
    """Accept en/em-dash and spaced spellings of the bracket labels."""
    return label.replace("–", "-").replace("—", "-").replace(" - ", "-").strip()


def price_in_bracket(price: float, label: str) -> bool:
    """True when `price` falls inside the named bracket; unknown labels never match."""
    bracket = PRICE_BRACKETS.get(normalise_bracket(label))
    if bracket is None:
        return False
    lower, lower_incl, upper, upper_incl = bracket
    if lower is not None:
        if price < lower or (price == lower and not lower_incl):
            return False
    if upper is not None:
        if price > upper or (price == upper and not upper_incl):
            return False
    return True


def ladder_size(value: float, ladder: List[Tuple[float, str]]) -> str:
    """Return the first rung whose exclusive upper bound is above `value`."""
    for upper, size in ladder:
        if value < upper:
            return size
    return ladder[-1][1]
