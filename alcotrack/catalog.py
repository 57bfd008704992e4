"""
Drink presets: category, serving size (cl) and typical strength (% ABV).
Values are typical European servings; actual drinks vary by venue.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional

from alcotrack.drinks import DrinkEvent, compute_units, new_drink


@dataclass
class Preset:
    id: str
    name: str
    category: str  # beer, wine, cocktail, shot, champagne, soft, other
    volume_cl: float
    strength_percent: float

    @property
    def units(self) -> float:
        return compute_units(self.volume_cl, self.strength_percent)


def _p(cat: str, pid: str, name: str, volume_cl: float, strength: float) -> Preset:
    return Preset(id=pid, name=name, category=cat, volume_cl=volume_cl, strength_percent=strength)


PRESETS: List[Preset] = [
    # Beer
    _p("beer", "half-pint", "Half pint", 25, 5),
    _p("beer", "pint", "Pint", 40, 5),
    _p("beer", "bottle", "Bottle", 33, 5),
    _p("beer", "can", "Can", 50, 5),
    _p("beer", "ipa", "IPA", 33, 6),
    _p("beer", "craft", "Craft beer", 33, 7),
    _p("beer", "strong", "Strong beer", 33, 9),
    _p("beer", "alcohol-free", "Alcohol-free beer", 33, 0),
    # Wine
    _p("wine", "glass", "Glass of wine", 10, 12),
    _p("wine", "red", "Red wine", 10, 13),
    _p("wine", "white", "White wine", 10, 12),
    _p("wine", "rose", "Rosé", 10, 12),
    _p("wine", "carafe", "Carafe", 25, 12),
    _p("wine", "wine-bottle", "Bottle of wine", 75, 12),
    # Cocktails
    _p("cocktail", "mojito", "Mojito", 15, 8),
    _p("cocktail", "caipirinha", "Caipirinha", 12, 15),
    _p("cocktail", "pina-colada", "Piña Colada", 20, 6),
    _p("cocktail", "cosmopolitan", "Cosmopolitan", 12, 12),
    _p("cocktail", "long-island", "Long Island", 15, 18),
    _p("cocktail", "cuba-libre", "Cuba Libre", 18, 8),
    _p("cocktail", "margarita", "Margarita", 12, 14),
    # Shots
    _p("shot", "shot", "Shot", 3, 40),
    _p("shot", "double-shot", "Double shot", 6, 40),
    _p("shot", "whisky", "Whisky", 4, 40),
    _p("shot", "vodka", "Vodka", 4, 40),
    _p("shot", "rum", "Rum", 4, 40),
    _p("shot", "gin", "Gin", 4, 40),
    # Champagne and sparkling
    _p("champagne", "flute", "Flute", 10, 12),
    _p("champagne", "coupe", "Coupe", 12, 12),
    _p("champagne", "prosecco", "Prosecco", 10, 11),
    # Soft drinks
    _p("soft", "water", "Water", 50, 0),
    _p("soft", "soda", "Soda", 33, 0),
    _p("soft", "juice", "Fruit juice", 25, 0),
    # Other
    _p("other", "spritz", "Spritz", 15, 6),
    _p("other", "port", "Port", 6, 20),
    _p("other", "martini", "Martini", 8, 15),
    _p("other", "liqueur", "Liqueur", 4, 25),
]

_PRESETS_BY_ID: Dict[str, Preset] = {p.id: p for p in PRESETS}


def get_preset(preset_id: str) -> Optional[Preset]:
    return _PRESETS_BY_ID.get(preset_id)


def drink_from_preset(preset_id: str, user_id: str, timestamp: datetime) -> Optional[DrinkEvent]:
    """A consumed DrinkEvent for a preset, or None for an unknown id."""
    preset = get_preset(preset_id)
    if preset is None:
        return None
    return new_drink(
        user_id,
        preset.category,
        preset.volume_cl,
        preset.strength_percent,
        timestamp,
        drink_type=preset.id,
    )


def list_by_category() -> Dict[str, List[dict]]:
    """Group presets by category for UI pickers."""
    out: Dict[str, List[dict]] = {}
    for p in PRESETS:
        out.setdefault(p.category, []).append({
            "id": p.id,
            "name": p.name,
            "volume_cl": p.volume_cl,
            "strength_percent": p.strength_percent,
            "units": p.units,
        })
    return out
