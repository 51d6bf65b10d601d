import re
import logging
from typing import Optional, Iterable, Tuple

from ..parsing import ParsedIngredient, parse_ingredient
from ..schemas import NutritionFacts, NutritionTotals, PlannedMeal, RecipeNutrition
from ..settings import settings
from . import nutrition_lookup

logger = logging.getLogger(__name__)

INTEGER_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "sodium_mg")
TENTH_FIELDS = ("fiber_g", "sugar_g", "saturated_fat_g")


def parse_servings(text: Optional[str]) -> float:
    """
    Servings count from free text.
    "4-6" -> 5, "Serves 8" -> 8, anything else -> 1.
    """
    if not text:
        return 1.0

    s = str(text)
    m = re.search(r'(\d+)\s*(?:-|–|to)\s*(\d+)', s)
    if m:
        value = (int(m.group(1)) + int(m.group(2))) / 2
    else:
        m = re.search(r'\d+', s)
        value = float(m.group(0)) if m else 1.0

    return value if value > 0 else 1.0


def aggregate_nutrition(
    items: Iterable[Tuple[ParsedIngredient, Optional[dict[str, float]]]],
    servings: float,
) -> NutritionFacts:
    """
    Sum per-100g nutrient values scaled by each ingredient's weight, then
    divide by servings. Nutrients no ingredient reported stay absent.
    """
    totals: dict[str, float] = {}
    contributors: dict[str, int] = {}

    for ingredient, per_100g in items:
        if not per_100g:
            continue
        scale = ingredient.gram_weight / 100
        for key, value in per_100g.items():
            if key not in INTEGER_FIELDS and key not in TENTH_FIELDS:
                continue
            totals[key] = totals.get(key, 0.0) + value * scale
            contributors[key] = contributors.get(key, 0) + 1

    servings = servings if servings > 0 else 1.0
    facts: dict[str, float] = {}
    for key in INTEGER_FIELDS:
        if contributors.get(key):
            facts[key] = max(0, round(totals[key] / servings))
    for key in TENTH_FIELDS:
        if contributors.get(key):
            facts[key] = max(0.0, round(totals[key] / servings, 1))

    return NutritionFacts(**facts)


async def estimate_nutrition(ingredients: list[str], servings_text: Optional[str]) -> NutritionFacts:
    """Per-serving estimate computed from the ingredient lines via FDC lookups."""
    parsed = [p for p in (parse_ingredient(line) for line in ingredients) if p is not None]
    if not parsed:
        logger.info("No measurable ingredients, skipping nutrition estimate")
        return NutritionFacts()

    if not settings.fdc_api_key:
        logger.warning("FDC_API_KEY is not set, skipping nutrition estimate")
        return NutritionFacts()

    lookups = await nutrition_lookup.lookup_foods([p.food_name for p in parsed], settings.fdc_api_key)
    matched = sum(1 for r in lookups if r)
    logger.info(f"Nutrition estimate: {matched}/{len(parsed)} ingredients matched")

    return aggregate_nutrition(zip(parsed, lookups), parse_servings(servings_text))


def sum_day_nutrition(meals: dict[str, PlannedMeal], recipes: list[RecipeNutrition]) -> NutritionTotals:
    """
    Total nutrition for a day's planned meals.
    Meals without a recipe, or pointing at an unknown recipe, are skipped;
    missing values count as zero.
    """
    recipe_map = {r.id: r for r in recipes}
    totals = NutritionTotals()

    for meal in meals.values():
        if not meal.recipe_id:
            continue
        recipe = recipe_map.get(meal.recipe_id)
        if not recipe:
            continue
        for key in NutritionTotals.model_fields:
            value = getattr(recipe, key) or 0
            setattr(totals, key, getattr(totals, key) + value)

    return totals
