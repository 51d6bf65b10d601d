import re
from typing import Optional, Tuple

from pydantic import BaseModel

from ..services.unit_conversion import normalize_unit, grams_for


class ParsedIngredient(BaseModel):
    gram_weight: float
    food_name: str


# Lines carrying these are seasoning/garnish with no measurable amount
EXCLUDED_PHRASES = ("to taste", "as needed", "optional")

UNICODE_FRACTIONS = {
    "½": "1/2", "⅓": "1/3", "⅔": "2/3", "¼": "1/4", "¾": "3/4",
    "⅕": "1/5", "⅖": "2/5", "⅗": "3/5", "⅘": "4/5", "⅙": "1/6",
    "⅚": "5/6", "⅛": "1/8", "⅜": "3/8", "⅝": "5/8", "⅞": "7/8",
}

_NUM = r"\d+(?:\.\d+)?"
_FRAC = r"\d+/\d+"
_END = r"(?=\s|$|[a-zA-Z])"

# "1 (15 oz) can black beans", "2 (8-ounce) packages cream cheese"
CONTAINER_RE = re.compile(
    rf"^({_NUM})\s*\(\s*({_NUM})\s*-?\s*([a-zA-Z][a-zA-Z. ]*?)\s*\)\s*"
    r"(?:cans?|jars?|bottles?|packages?|boxes|box|bags?|containers?)\b\s*(.*)$",
    re.IGNORECASE,
)
RANGE_RE = re.compile(rf"^({_FRAC}|{_NUM})\s*(?:-|–|—|\bto\b)\s*({_FRAC}|{_NUM}){_END}", re.IGNORECASE)
MIXED_RE = re.compile(rf"^(\d+)(?:\s+|-)(\d+)/(\d+){_END}")
FRACTION_RE = re.compile(rf"^(\d+)/(\d+){_END}")
DECIMAL_RE = re.compile(rf"^({_NUM}){_END}")


def sanitize_ingredient_text(text: str) -> str:
    """Strip markdown, normalize fractions and whitespace."""
    if not text:
        return ""

    s = text
    # Remove markdown bold/italic markers
    s = s.replace("**", "").replace("__", "").replace("*", "")

    # Remove leading bullets
    s = re.sub(r'^[\s\-\#•▢]+', '', s)

    # "1½" -> "1 1/2", "½" -> "1/2"
    s = s.replace("⁄", "/")
    for char, ascii_frac in UNICODE_FRACTIONS.items():
        s = re.sub(rf"(?:(\d)\s*)?{char}", lambda m, f=ascii_frac: f"{m.group(1)} {f}" if m.group(1) else f, s)

    # Collapse whitespace
    s = re.sub(r'\s+', ' ', s).strip()

    return s


def _to_number(token: str) -> float:
    if "/" in token:
        n, d = token.split("/")
        return float(n) / float(d)
    return float(token)


def _is_excluded(text: str) -> bool:
    lower = text.lower()
    return any(phrase in lower for phrase in EXCLUDED_PHRASES)


def _match_quantity(text: str) -> Optional[Tuple[float, int]]:
    """Leading quantity of `text` as (value, end offset), or None."""
    try:
        m = RANGE_RE.match(text)
        if m:
            low, high = _to_number(m.group(1)), _to_number(m.group(2))
            # "1-1/2" is a hyphenated mixed number, not a range
            if high > low:
                return (low + high) / 2, m.end()

        m = MIXED_RE.match(text)
        if m:
            whole, num, den = (int(g) for g in m.groups())
            return whole + num / den, m.end()

        m = FRACTION_RE.match(text)
        if m:
            return int(m.group(1)) / int(m.group(2)), m.end()

        m = DECIMAL_RE.match(text)
        if m:
            return float(m.group(1)), m.end()
    except ZeroDivisionError:
        return None

    return None


def parse_quantity(text: str) -> Optional[float]:
    """Numeric value of the quantity a line starts with ("1 1/2" -> 1.5)."""
    clean = sanitize_ingredient_text(text)
    if _is_excluded(clean):
        return None
    match = _match_quantity(clean)
    return match[0] if match else None


def _clean_food_name(text: str) -> str:
    name = re.split(r"[,;]", text, maxsplit=1)[0]
    name = re.sub(r'\([^)]*\)', '', name)
    name = re.sub(r'^\s*of\s+', '', name, flags=re.IGNORECASE)
    return re.sub(r'\s+', ' ', name).strip().lower()


def _split_unit(rest: str) -> Tuple[str, str]:
    """Split the text after a quantity into (unit, remainder)."""
    words = rest.split()
    if len(words) >= 2:
        unit = normalize_unit(" ".join(words[:2]).strip(",;"))
        if unit:
            return unit, " ".join(words[2:])
    if words:
        unit = normalize_unit(words[0].strip(",;"))
        if unit:
            return unit, " ".join(words[1:])
    return "piece", rest


def parse_ingredient(line: str) -> Optional[ParsedIngredient]:
    """
    Parse a free-text ingredient line into a gram weight and food name.
    Returns None for lines that can't be measured; callers skip those.
    """
    clean_line = sanitize_ingredient_text(line)
    if not clean_line:
        return None

    if _is_excluded(clean_line):
        return None

    container = CONTAINER_RE.match(clean_line)
    if container:
        count, size, size_unit, rest = container.groups()
        unit = normalize_unit(size_unit)
        food_name = _clean_food_name(rest)
        if not unit or not food_name:
            return None
        grams = grams_for(float(count) * float(size), unit, food_name)
        return ParsedIngredient(gram_weight=grams, food_name=food_name) if grams > 0 else None

    quantity = _match_quantity(clean_line)
    if not quantity:
        return None
    qty, end = quantity
    if qty <= 0:
        return None

    unit, rest = _split_unit(clean_line[end:].strip())
    food_name = _clean_food_name(rest)
    if not food_name:
        return None

    return ParsedIngredient(gram_weight=grams_for(qty, unit, food_name), food_name=food_name)
