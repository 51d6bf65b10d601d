"""
Strategy 3: markup from popular recipe-card plugins.

Each selector set describes one plugin's card. They are tried in order and
the first usable result wins.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from bs4 import BeautifulSoup, Tag

from ..parsing import format_duration
from ..schemas import RecipeDraft
from .page import Page, best_title, image_src, is_usable, node_text

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginSelectors:
    name: str
    container: str
    title: str
    ingredients: str
    instructions: str
    servings: str = ""
    prep_time: str = ""
    cook_time: str = ""
    image: str = ""
    description: str = ""
    # Per-line parts joined with spaces, for plugins that split ingredients up
    ingredient_parts: tuple[str, ...] = ()
    # Appended after a comma so it never reaches the food name
    ingredient_notes: str = ""


PLUGINS = (
    PluginSelectors(
        name="wp-recipe-maker",
        container=".wprm-recipe-container, .wprm-recipe",
        title=".wprm-recipe-name",
        ingredients="li.wprm-recipe-ingredient",
        instructions=".wprm-recipe-instruction-text",
        servings=".wprm-recipe-servings",
        prep_time=".wprm-recipe-prep_time-container .wprm-recipe-time, .wprm-recipe-prep_time",
        cook_time=".wprm-recipe-cook_time-container .wprm-recipe-time, .wprm-recipe-cook_time",
        image=".wprm-recipe-image",
        description=".wprm-recipe-summary",
        ingredient_parts=(
            ".wprm-recipe-ingredient-amount",
            ".wprm-recipe-ingredient-unit",
            ".wprm-recipe-ingredient-name",
        ),
        ingredient_notes=".wprm-recipe-ingredient-notes",
    ),
    PluginSelectors(
        name="tasty-recipes",
        container=".tasty-recipes",
        title=".tasty-recipes-title",
        ingredients=".tasty-recipes-ingredients li",
        instructions=".tasty-recipes-instructions li",
        servings=".tasty-recipes-yield",
        prep_time=".tasty-recipes-prep-time",
        cook_time=".tasty-recipes-cook-time",
        image=".tasty-recipes-image",
        description=".tasty-recipes-description",
    ),
    PluginSelectors(
        name="mediavine-create",
        container=".mv-create-card",
        title=".mv-create-title",
        ingredients=".mv-create-ingredients li",
        instructions=".mv-create-instructions li",
        servings=".mv-create-yield",
        image=".mv-create-image",
        description=".mv-create-description",
    ),
    PluginSelectors(
        name="hrecipe",
        container=".hrecipe",
        title=".fn",
        ingredients=".ingredient",
        instructions=".instructions li, .instructions p, .instruction",
        servings=".yield",
        prep_time=".prepTime, .preptime",
        cook_time=".cookTime, .cooktime",
        image=".photo",
        description=".summary",
    ),
)


def _first_text(container: Tag, selector: str) -> Optional[str]:
    if not selector:
        return None
    node = container.select_one(selector)
    if node is None:
        return None
    value = node.get("content") or node.get("title") or node_text(node)
    return value.strip() or None


def _ingredient_line(li: Tag, plugin: PluginSelectors) -> str:
    if not plugin.ingredient_parts:
        return node_text(li)

    pieces = [node_text(li.select_one(sel)) for sel in plugin.ingredient_parts]
    line = " ".join(p for p in pieces if p)
    if not line:
        return node_text(li)

    notes = node_text(li.select_one(plugin.ingredient_notes)) if plugin.ingredient_notes else ""
    return f"{line}, {notes}" if notes else line


def extract_with(soup: BeautifulSoup, plugin: PluginSelectors) -> Optional[RecipeDraft]:
    container = soup.select_one(plugin.container)
    if container is None:
        return None

    ingredients = [
        line for line in (_ingredient_line(li, plugin) for li in container.select(plugin.ingredients))
        if line
    ]
    instructions = [t for t in (node_text(n) for n in container.select(plugin.instructions)) if t]

    prep = _first_text(container, plugin.prep_time)
    cook = _first_text(container, plugin.cook_time)
    image = container.select_one(plugin.image) if plugin.image else None

    return RecipeDraft(
        title=_first_text(container, plugin.title) or best_title(soup) or None,
        description=_first_text(container, plugin.description),
        image_url=image_src(image),
        servings=_first_text(container, plugin.servings),
        prep_time=format_duration(prep) if prep else None,
        cook_time=format_duration(cook) if cook else None,
        ingredients=ingredients,
        instructions=instructions,
    )


def extract(page: Page) -> Optional[RecipeDraft]:
    for plugin in PLUGINS:
        draft = extract_with(page.soup, plugin)
        if is_usable(draft):
            logger.info(f"Matched {plugin.name} markup on {page.url}")
            return draft
    return None
