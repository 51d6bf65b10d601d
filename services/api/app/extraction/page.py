import re
import html as html_lib
from dataclasses import dataclass
from functools import cached_property
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

from ..schemas import NutritionFacts, RecipeDraft


@dataclass
class Page:
    """A fetched page. The DOM is only built the first time `soup` is read."""
    url: str
    html: str

    @cached_property
    def soup(self) -> BeautifulSoup:
        return BeautifulSoup(self.html, "lxml")

    @property
    def dom_parsed(self) -> bool:
        return "soup" in self.__dict__


def is_usable(draft: Optional[RecipeDraft]) -> bool:
    """A draft counts only with a title and at least one ingredient or instruction."""
    if draft is None:
        return False
    if not (draft.title or "").strip():
        return False
    return bool(draft.ingredients or draft.instructions)


# --- Text helpers ---

def clean_text(value: Any) -> str:
    """Plain single-line text from a JSON string or scraped fragment."""
    if value is None:
        return ""
    s = html_lib.unescape(str(value))
    s = re.sub(r'<[^>]+>', ' ', s)
    return re.sub(r'\s+', ' ', s).strip()


def node_text(node: Optional[Tag]) -> str:
    if node is None:
        return ""
    return re.sub(r'\s+', ' ', node.get_text(" ", strip=True)).strip()


def clean_lines(values: list[Any]) -> list[str]:
    """Order-preserving list of non-empty cleaned strings."""
    return [s for s in (clean_text(v) for v in values) if s]


def image_src(node: Optional[Tag]) -> Optional[str]:
    """Image URL from an <img> (or the first one inside `node`), lazy-load aware."""
    if node is None:
        return None
    img = node if node.name == "img" else node.find("img")
    if img is None:
        return node.get("content") or node.get("href") or None
    for attr in ("src", "data-src", "data-lazy-src"):
        if img.get(attr):
            return img[attr]
    return None


def best_title(soup: BeautifulSoup) -> str:
    """Page title guess: og:title, then the first <h1>, then <title>."""
    og = soup.find("meta", attrs={"property": "og:title"})
    if og and og.get("content", "").strip():
        return clean_text(og["content"])
    h1 = soup.find("h1")
    if h1 and node_text(h1):
        return node_text(h1)
    if soup.title and soup.title.string:
        return clean_text(soup.title.string)
    return ""


# --- Nutrition coercion ---

_NUMBER_RE = re.compile(r'\d[\d,]*(?:\.\d+)?|\.\d+')


def _first_number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value) if value >= 0 else None
    m = _NUMBER_RE.search(str(value))
    if not m:
        return None
    try:
        return float(m.group(0).replace(",", ""))
    except ValueError:
        return None


def to_int(value: Any) -> Optional[int]:
    """'240 kcal' -> 240, '1,200 mg' -> 1200."""
    number = _first_number(value)
    return round(number) if number is not None else None


def to_float(value: Any) -> Optional[float]:
    """'2.5 g' -> 2.5"""
    number = _first_number(value)
    return round(number, 1) if number is not None else None


# schema.org NutritionInformation property -> (our field, coercion)
SCHEMA_NUTRIENTS = {
    "calories": ("calories", to_int),
    "proteinContent": ("protein_g", to_int),
    "carbohydrateContent": ("carbs_g", to_int),
    "fatContent": ("fat_g", to_int),
    "fiberContent": ("fiber_g", to_float),
    "sugarContent": ("sugar_g", to_float),
    "sodiumContent": ("sodium_mg", to_int),
    "saturatedFatContent": ("saturated_fat_g", to_float),
}


def nutrition_from_values(values: dict[str, Any]) -> Optional[NutritionFacts]:
    """NutritionFacts from schema.org-named values, or None if nothing parsed."""
    facts = {}
    for schema_key, (field, coerce) in SCHEMA_NUTRIENTS.items():
        parsed = coerce(values.get(schema_key))
        if parsed is not None:
            facts[field] = parsed
    return NutritionFacts(**facts) if facts else None
