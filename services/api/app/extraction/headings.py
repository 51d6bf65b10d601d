"""
Strategy 4: plain pages with "Ingredients" / "Instructions" headings
followed by lists.
"""

import re
from typing import Optional

from bs4 import Tag

from ..schemas import RecipeDraft
from .page import Page, best_title, node_text

HEADING_TAGS = ["h1", "h2", "h3", "h4"]
INGREDIENT_RE = re.compile(r'ingredient', re.IGNORECASE)
INSTRUCTION_RE = re.compile(r'instruction|direction|step|method|how to', re.IGNORECASE)

# How far past a heading we look for its list
MAX_SIBLING_HOPS = 10

MIN_INGREDIENTS = 2
MIN_INSTRUCTIONS = 1


def list_items(list_tag: Tag) -> list[str]:
    items = list_tag.find_all("li", recursive=False) or list_tag.find_all("li")
    return [t for t in (node_text(li) for li in items) if t]


def list_after(heading: Tag) -> list[str]:
    """Items of the first list that follows `heading`, directly or nested in a sibling."""
    sibling = heading
    for _ in range(MAX_SIBLING_HOPS):
        sibling = sibling.find_next_sibling()
        if sibling is None or sibling.name in HEADING_TAGS:
            return []
        if sibling.name in ("ul", "ol"):
            return list_items(sibling)
        nested = sibling.find(["ul", "ol"])
        if nested is not None:
            return list_items(nested)
    return []


def extract(page: Page) -> Optional[RecipeDraft]:
    soup = page.soup
    ingredients: list[str] = []
    instructions: list[str] = []

    for heading in soup.find_all(HEADING_TAGS):
        text = node_text(heading)
        if INGREDIENT_RE.search(text):
            ingredients.extend(list_after(heading))
        elif INSTRUCTION_RE.search(text):
            instructions.extend(list_after(heading))

    if len(ingredients) < MIN_INGREDIENTS and len(instructions) < MIN_INSTRUCTIONS:
        return None

    return RecipeDraft(
        title=best_title(soup) or None,
        ingredients=ingredients,
        instructions=instructions,
    )
