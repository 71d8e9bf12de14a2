import logging
from typing import Optional
from .models import Measurements, SizeRecommendation
from .rules import (
    CHEST_CONFIDENCE,
    CHEST_LADDER,
    DETAILED_CONFIDENCE,
    FIT_BONUS,
    HEIGHT_LADDER,
    HEIGHT_ONLY_CONFIDENCE,
    MAX_CONFIDENCE,
    SIZE_ORDER,
    WAIST_LADDER,
    ladder_size,
)
from .config import DEFAULT_SIZE

logger = logging.getLogger(__name__)


def recommend_size(
    height_cm: Optional[float],
    chest_cm: Optional[float],
    fit_preference: str,
    default: str = DEFAULT_SIZE,
) -> SizeRecommendation:
    """
    Quick-mode size pick.

    Chest + height  -> chest ladder, base confidence per band plus the
                       fit-preference bonus, capped at 95.
    Height only     -> coarser height ladder, flat 65.
    Anything else   -> `default` with confidence 0 (placeholder, not a result).

    Never raises: out-of-range or negative values just fall into the
    nearest rung.
    """
    if chest_cm and height_cm:
        size = ladder_size(chest_cm, CHEST_LADDER)
        confidence = CHEST_CONFIDENCE[size] + FIT_BONUS.get(fit_preference, 0)
        return SizeRecommendation(size=size, confidence=min(confidence, MAX_CONFIDENCE))

    if height_cm:
        size = ladder_size(height_cm, HEIGHT_LADDER)
        return SizeRecommendation(size=size, confidence=HEIGHT_ONLY_CONFIDENCE)

    logger.debug("No usable measurements; returning default size %s", default)
    return SizeRecommendation(size=default, confidence=0)


def recommend_size_detailed(
    chest_cm: Optional[float],
    waist_cm: Optional[float],
    default: str = DEFAULT_SIZE,
) -> SizeRecommendation:
    """
    Detailed-mode size pick from chest and waist ladders, flat 92.
    With both measurements the larger of the two sizes wins.
    """
    picks = []
    if chest_cm:
        picks.append(ladder_size(chest_cm, CHEST_LADDER))
    if waist_cm:
        picks.append(ladder_size(waist_cm, WAIST_LADDER))

    if not picks:
        logger.debug("Detailed mode without chest or waist; returning default size %s", default)
        return SizeRecommendation(size=default, confidence=0)

    size = max(picks, key=SIZE_ORDER.index)
    return SizeRecommendation(size=size, confidence=DETAILED_CONFIDENCE)


def recommend(measurements: Measurements, default: str = DEFAULT_SIZE) -> SizeRecommendation:
    """Route a wizard submission to the quick or detailed calculator."""
    if measurements.mode == "detailed":
        return recommend_size_detailed(measurements.chest_cm, measurements.waist_cm, default)
    return recommend_size(
        measurements.height_cm,
        measurements.chest_cm,
        measurements.fit_preference,
        default,
    )
