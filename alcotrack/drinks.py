"""Drink records and alcohol unit conversion.

One standard unit = 10 g of pure ethanol; ethanol density is taken as 0.8 g/mL.
"""

import logging
import math
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional

from alcotrack.coerce import finite_nonnegative, parse_bool, parse_timestamp

logger = logging.getLogger(__name__)

UNIT_GRAMS = 10.0

# Ethanol density (g/mL) for volume x strength -> grams.
ETHANOL_DENSITY = 0.8

DRINK_CATEGORIES = ("beer", "wine", "cocktail", "shot", "champagne", "soft", "other")


def compute_units(volume_cl: Any, strength_percent: Any) -> float:
    """Standard units in a serving of volume_cl centiliters at strength_percent ABV.

    Invalid input (None, NaN, infinite, negative) yields 0.
    """
    volume = finite_nonnegative(volume_cl, default=-1.0)
    strength = finite_nonnegative(strength_percent, default=-1.0)
    if volume < 0 or strength < 0:
        return 0.0
    # cl -> mL is x10, grams -> units is /10: they cancel.
    units = (volume * strength * ETHANOL_DENSITY) / 100.0
    if not math.isfinite(units):
        logger.debug("Unit overflow for volume=%s strength=%s", volume_cl, strength_percent)
        return 0.0
    return round(units, 2)


@dataclass(frozen=True)
class DrinkEvent:
    """A consumed drink. units is fixed at creation from volume and strength."""

    id: str
    user_id: str
    category: str
    volume_cl: float
    strength_percent: float
    units: float
    timestamp: Any
    is_template: bool = False
    drink_type: str = ""


def new_drink(
    user_id: str,
    category: str,
    volume_cl: float,
    strength_percent: float,
    timestamp: datetime,
    *,
    drink_type: str = "",
    is_template: bool = False,
    drink_id: Optional[str] = None,
) -> DrinkEvent:
    """Create a DrinkEvent, computing its units once."""
    if category not in DRINK_CATEGORIES:
        category = "other"
    return DrinkEvent(
        id=drink_id or uuid.uuid4().hex,
        user_id=user_id,
        category=category,
        volume_cl=finite_nonnegative(volume_cl),
        strength_percent=finite_nonnegative(strength_percent),
        units=compute_units(volume_cl, strength_percent),
        timestamp=timestamp,
        is_template=is_template,
        drink_type=drink_type,
    )


def drink_from_dict(raw: Mapping[str, Any]) -> DrinkEvent:
    """Build a DrinkEvent from a JSON-style mapping.

    A supplied "units" value is ignored: units always derive from volume and strength.
    """
    timestamp = parse_timestamp(raw.get("timestamp"))
    if timestamp is None:
        logger.debug("Drink %s has an unusable timestamp", raw.get("id"))
    return new_drink(
        user_id=str(raw.get("user_id", "")),
        category=str(raw.get("category", "other")),
        volume_cl=raw.get("volume_cl"),
        strength_percent=raw.get("strength_percent"),
        timestamp=timestamp,
        drink_type=str(raw.get("drink_type", "")),
        is_template=parse_bool(raw.get("is_template"), default=False),
        drink_id=str(raw["id"]) if raw.get("id") is not None else None,
    )


def drink_to_dict(drink: DrinkEvent) -> dict:
    timestamp = drink.timestamp.isoformat() if isinstance(drink.timestamp, datetime) else drink.timestamp
    return {
        "id": drink.id,
        "user_id": drink.user_id,
        "category": drink.category,
        "drink_type": drink.drink_type,
        "volume_cl": drink.volume_cl,
        "strength_percent": drink.strength_percent,
        "units": drink.units,
        "timestamp": timestamp,
        "is_template": drink.is_template,
    }
