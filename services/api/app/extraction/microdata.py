"""
Strategy 2: schema.org Recipe microdata (itemscope / itemprop attributes).
"""

import re
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..parsing import format_duration
from ..schemas import RecipeDraft
from .page import Page, clean_text, node_text, nutrition_from_values, SCHEMA_NUTRIENTS

RECIPE_TYPE_RE = re.compile(r'schema\.org/Recipe\b', re.IGNORECASE)


def _is_scope(tag: Tag) -> bool:
    return tag.has_attr("itemscope") or tag.has_attr("itemtype")


def find_recipe_scope(soup: BeautifulSoup) -> Optional[Tag]:
    return soup.find(attrs={"itemtype": RECIPE_TYPE_RE})


def own_props(scope: Tag, name: str) -> list[Tag]:
    """Elements carrying itemprop `name` that belong to `scope` itself, not to a nested item."""
    found = []
    for el in scope.find_all(attrs={"itemprop": True}):
        if name not in el.get("itemprop", "").split():
            continue
        if el.find_parent(_is_scope) is scope:
            found.append(el)
    return found


def prop_value(el: Tag) -> str:
    """Microdata value: content attribute first, then the element's natural value."""
    if el.has_attr("content"):
        return clean_text(el["content"])
    if el.name == "img":
        return el.get("src", "")
    if el.name == "time" and el.has_attr("datetime"):
        return el["datetime"]
    if el.name in ("a", "link") and el.has_attr("href") and "image" in el.get("itemprop", ""):
        return el["href"]
    return node_text(el)


def first_value(scope: Tag, name: str) -> Optional[str]:
    for el in own_props(scope, name):
        value = prop_value(el)
        if value:
            return value
    return None


def _instruction_lines(el: Tag) -> list[str]:
    items = el.find_all("li")
    if not items:
        items = el.find_all(attrs={"itemprop": "text"})
    if items:
        return [t for t in (node_text(i) for i in items) if t]
    text = prop_value(el)
    return [text] if text else []


def _nutrition(scope: Tag):
    nutrition_scopes = own_props(scope, "nutrition")
    source = nutrition_scopes[0] if nutrition_scopes else scope
    values = {key: first_value(source, key) for key in SCHEMA_NUTRIENTS}
    return nutrition_from_values(values)


def extract(page: Page) -> Optional[RecipeDraft]:
    scope = find_recipe_scope(page.soup)
    if scope is None:
        return None

    ingredients = [
        value
        for name in ("recipeIngredient", "ingredients")
        for value in (prop_value(el) for el in own_props(scope, name))
        if value
    ]

    instructions: list[str] = []
    for el in own_props(scope, "recipeInstructions"):
        instructions.extend(_instruction_lines(el))

    prep = first_value(scope, "prepTime")
    cook = first_value(scope, "cookTime")

    return RecipeDraft(
        title=first_value(scope, "name"),
        description=first_value(scope, "description"),
        image_url=first_value(scope, "image"),
        servings=first_value(scope, "recipeYield"),
        prep_time=format_duration(prep) if prep else None,
        cook_time=format_duration(cook) if cook else None,
        ingredients=ingredients,
        instructions=instructions,
        nutrition=_nutrition(scope),
    )
