"""
Strategy 1: schema.org Recipe objects embedded as JSON in <script> blocks.

Works on the raw markup with a regex so the common case never pays for a
DOM parse.
"""

import re
import json
import logging
from typing import Any, Iterator, Optional

from ..parsing import format_duration
from ..schemas import RecipeDraft
from .page import Page, clean_text, clean_lines, nutrition_from_values

logger = logging.getLogger(__name__)

SCRIPT_RE = re.compile(r'<script\b([^>]*)>(.*?)</script\s*>', re.IGNORECASE | re.DOTALL)
TYPE_ATTR_RE = re.compile(r'\btype\s*=\s*["\']?([^"\'\s>]+)', re.IGNORECASE)

JSON_SCRIPT_TYPES = {"application/ld+json", "application/json", ""}


def iter_json_blocks(html: str) -> Iterator[Any]:
    """Yield every JSON document found in typed or untyped script blocks."""
    for match in SCRIPT_RE.finditer(html):
        attrs, body = match.group(1), match.group(2).strip()
        type_match = TYPE_ATTR_RE.search(attrs)
        # Media-type parameters such as ";charset=utf-8" do not change the payload
        script_type = type_match.group(1).split(";")[0].strip().lower() if type_match else ""
        if script_type not in JSON_SCRIPT_TYPES:
            continue

        # Some CMSs wrap the payload in HTML comments or CDATA
        body = re.sub(r'^(<!--|//\s*<!\[CDATA\[)|(-->|//\s*\]\]>)$', '', body).strip()
        if not body or body[0] not in "{[":
            continue

        try:
            yield json.loads(body)
        except ValueError:
            logger.debug("Skipping malformed JSON script block")


def _is_recipe_type(value: Any) -> bool:
    types = value if isinstance(value, list) else [value]
    for t in types:
        if isinstance(t, str) and (t == "Recipe" or t.endswith("/Recipe") or t.endswith(":Recipe")):
            return True
    return False


def find_recipe_node(data: Any) -> Optional[dict]:
    """Depth-first search for the first object typed Recipe."""
    if isinstance(data, list):
        for item in data:
            found = find_recipe_node(item)
            if found is not None:
                return found
        return None

    if not isinstance(data, dict):
        return None

    if _is_recipe_type(data.get("@type")):
        return data

    for key in ("@graph", "mainEntity"):
        if key in data:
            found = find_recipe_node(data[key])
            if found is not None:
                return found
    return None


def resolve_image(image: Any) -> Optional[str]:
    """Image URL from a string, a list, or an ImageObject."""
    if not image:
        return None
    if isinstance(image, str):
        return image.strip() or None
    if isinstance(image, list):
        for item in image:
            url = resolve_image(item)
            if url:
                return url
        return None
    if isinstance(image, dict):
        return resolve_image(image.get("url") or image.get("contentUrl"))
    return None


def _step_text(step: Any) -> str:
    if isinstance(step, str):
        return clean_text(step)
    if isinstance(step, dict):
        return clean_text(step.get("text") or step.get("name") or "")
    return ""


def flatten_instructions(raw: Any) -> list[str]:
    """
    Instruction strings from recipeInstructions.
    HowToSection groups collapse into one string per section.
    """
    if not raw:
        return []
    if isinstance(raw, str):
        return clean_lines(raw.splitlines())
    if isinstance(raw, dict):
        raw = [raw]
    if not isinstance(raw, list):
        return []

    steps: list[str] = []
    for item in raw:
        if isinstance(item, dict) and _is_section(item):
            elements = item.get("itemListElement") or []
            if isinstance(elements, dict):
                elements = [elements]
            text = " ".join(t for t in (_step_text(e) for e in elements) if t)
        else:
            text = _step_text(item)
        if text:
            steps.append(text)
    return steps


def _is_section(item: dict) -> bool:
    t = item.get("@type")
    types = t if isinstance(t, list) else [t]
    return "HowToSection" in types or (
        "itemListElement" in item and not item.get("text")
    )


def _servings(raw: Any) -> Optional[str]:
    if isinstance(raw, list):
        raw = raw[0] if raw else None
    if raw is None or raw == "":
        return None
    return clean_text(raw) or None


def _duration(raw: Any) -> Optional[str]:
    if not raw or not isinstance(raw, str):
        return None
    return format_duration(raw.strip()) or None


def recipe_to_draft(node: dict) -> RecipeDraft:
    ingredients = node.get("recipeIngredient") or node.get("ingredients") or []
    if isinstance(ingredients, str):
        ingredients = [ingredients]

    nutrition = node.get("nutrition")
    return RecipeDraft(
        title=clean_text(node.get("name")) or None,
        description=clean_text(node.get("description")) or None,
        image_url=resolve_image(node.get("image")),
        servings=_servings(node.get("recipeYield")),
        prep_time=_duration(node.get("prepTime")),
        cook_time=_duration(node.get("cookTime")),
        ingredients=clean_lines(ingredients) if isinstance(ingredients, list) else [],
        instructions=flatten_instructions(node.get("recipeInstructions")),
        nutrition=nutrition_from_values(nutrition) if isinstance(nutrition, dict) else None,
    )


def extract(page: Page) -> Optional[RecipeDraft]:
    for data in iter_json_blocks(page.html):
        node = find_recipe_node(data)
        if node is not None:
            return recipe_to_draft(node)
    return None
