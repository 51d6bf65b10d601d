"""
Unit tables for ingredient weight estimation.

Every unit resolves to grams. Volume units are stored as their
water-equivalent weight (1 ml = 1 g, 1 cup = 240 g) and corrected through
DENSITY_DB when the ingredient is known to be lighter or heavier than water.
"""

import re
from typing import Optional, Tuple, Literal

# --- Types ---

UnitKind = Literal["mass", "volume", "count"]

# --- Data Tables ---

# Normalized unit -> (kind, grams per unit)
UNITS_DB: dict[str, Tuple[UnitKind, float]] = {
    # Mass
    "g": ("mass", 1.0),
    "kg": ("mass", 1000.0),
    "mg": ("mass", 0.001),
    "oz": ("mass", 28.35),
    "lb": ("mass", 453.592),

    # Volume (water-equivalent)
    "ml": ("volume", 1.0),
    "l": ("volume", 1000.0),
    "tsp": ("volume", 5.0),
    "tbsp": ("volume", 15.0),
    "fl oz": ("volume", 29.57),
    "cup": ("volume", 240.0),
    "pint": ("volume", 473.0),
    "quart": ("volume", 946.0),
    "gallon": ("volume", 3785.0),

    # Count (typical weight of one item)
    "piece": ("count", 50.0),
    "clove": ("count", 5.0),
    "slice": ("count", 30.0),
    "stick": ("count", 113.0),  # butter
    "pinch": ("count", 0.4),
    "dash": ("count", 0.6),
    "can": ("count", 400.0),
    "jar": ("count", 450.0),
    "bottle": ("count", 500.0),
    "package": ("count", 450.0),
    "bunch": ("count", 100.0),
    "head": ("count", 500.0),
    "sprig": ("count", 1.0),
    "handful": ("count", 30.0),
}

# Spellings seen in the wild -> key in UNITS_DB
SYNONYMS = {
    "gram": "g", "grams": "g", "gr": "g",
    "kilogram": "kg", "kilograms": "kg", "kilo": "kg", "kilos": "kg",
    "milligram": "mg", "milligrams": "mg",
    "ounce": "oz", "ounces": "oz",
    "pound": "lb", "pounds": "lb", "lbs": "lb",
    "milliliter": "ml", "milliliters": "ml", "millilitre": "ml", "millilitres": "ml",
    "liter": "l", "liters": "l", "litre": "l", "litres": "l",
    "teaspoon": "tsp", "teaspoons": "tsp", "tsps": "tsp",
    "tablespoon": "tbsp", "tablespoons": "tbsp", "tbsps": "tbsp", "tbs": "tbsp", "tbl": "tbsp",
    "fluid ounce": "fl oz", "fluid ounces": "fl oz", "fl. oz": "fl oz",
    "cups": "cup", "c": "cup",
    "pints": "pint", "pt": "pint",
    "quarts": "quart", "qt": "quart",
    "gallons": "gallon", "gal": "gallon",
    "pieces": "piece", "pc": "piece", "pcs": "piece",
    "cloves": "clove",
    "slices": "slice",
    "sticks": "stick",
    "pinches": "pinch",
    "dashes": "dash",
    "cans": "can",
    "jars": "jar",
    "bottles": "bottle",
    "packages": "package", "pkg": "package", "packet": "package", "packets": "package",
    "bunches": "bunch",
    "heads": "head",
    "sprigs": "sprig",
    "handfuls": "handful",
}

# Case-sensitive cookbook shorthand ("1 T sugar" vs "1 t salt")
CASE_SENSITIVE = {
    "T": "tbsp",
    "t": "tsp",
}

# Ingredient -> grams per US cup. Order matters: first match wins, so
# specific names sit above the generic word they contain.
DENSITY_DB: dict[str, float] = {
    # Flours
    "almond flour": 96.0,
    "coconut flour": 112.0,
    "whole wheat flour": 120.0,
    "bread flour": 127.0,
    "cake flour": 114.0,
    "all-purpose flour": 125.0,
    "all purpose flour": 125.0,
    "flour": 125.0,
    "cornstarch": 128.0,
    "cocoa": 85.0,
    # Sugars
    "powdered sugar": 120.0,
    "confectioners sugar": 120.0,
    "brown sugar": 213.0,
    "sugar": 200.0,
    # Fats
    "butter": 227.0,
    "shortening": 205.0,
    "olive oil": 216.0,
    "coconut oil": 218.0,
    "oil": 218.0,
    # Sweeteners
    "honey": 340.0,
    "maple syrup": 322.0,
    "molasses": 337.0,
    "corn syrup": 328.0,
    # Grains
    "rolled oats": 90.0,
    "oats": 90.0,
    "quinoa": 170.0,
    "rice": 185.0,
    "breadcrumbs": 108.0,
    # Dairy
    "heavy cream": 238.0,
    "sour cream": 230.0,
    "cream cheese": 232.0,
    "yogurt": 245.0,
    "milk": 245.0,
    "parmesan": 100.0,
    "cheese": 113.0,
}

_DENSITY_PATTERNS = [
    (re.compile(r"\b" + re.escape(key) + r"\b"), grams)
    for key, grams in DENSITY_DB.items()
]

# --- Core Functions ---

def normalize_unit(unit: str) -> Optional[str]:
    """Normalize a unit token to a key in UNITS_DB, or None if it isn't a unit."""
    if not unit:
        return None

    raw_clean = unit.strip().rstrip('.')
    if raw_clean in CASE_SENSITIVE:
        return CASE_SENSITIVE[raw_clean]

    u = raw_clean.lower()
    if u in UNITS_DB:
        return u
    if u in SYNONYMS:
        return SYNONYMS[u]
    return None


def get_unit_info(unit: str) -> Tuple[UnitKind, float]:
    """Get kind and grams-per-unit for a normalized unit."""
    return UNITS_DB.get(unit, ("count", UNITS_DB["piece"][1]))


def density_grams_per_cup(food_name: str) -> Optional[float]:
    """Grams per cup for a known ingredient; matches whole words only."""
    name = food_name.lower()
    for pattern, grams in _DENSITY_PATTERNS:
        if pattern.search(name):
            return grams
    return None


def grams_for(qty: float, unit: str, food_name: str = "") -> float:
    """
    Weight in grams of `qty` `unit` of an ingredient.
    Volume units use the ingredient's density when known, water otherwise.
    """
    kind, factor = get_unit_info(unit)
    if kind == "volume":
        per_cup = density_grams_per_cup(food_name)
        if per_cup is not None:
            cups = qty * factor / UNITS_DB["cup"][1]
            return cups * per_cup
    return qty * factor
