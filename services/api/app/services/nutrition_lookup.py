"""
USDA FoodData Central lookups.

Resolves a food name to nutrient values per 100 g. Every failure (network,
HTTP status, malformed payload, no match) resolves to None so a single bad
ingredient never sinks the whole recipe.
"""

import asyncio
import logging
from typing import Optional

import httpx

from ..settings import settings

logger = logging.getLogger(__name__)

# FDC nutrient id -> our key. Energy falls back to the Atwater ids that
# Foundation foods report instead of 1008.
NUTRIENT_IDS = {
    1008: "calories",
    1003: "protein_g",
    1004: "fat_g",
    1005: "carbs_g",
    1079: "fiber_g",
    2000: "sugar_g",
    1093: "sodium_mg",
    1258: "saturated_fat_g",
}
ENERGY_FALLBACK_IDS = (2047, 2048)

# Reference data first; branded products only when reference data has no match
REFERENCE_DATA_TYPES = "Foundation,SR Legacy"
BRANDED_DATA_TYPES = "Branded"


def extract_nutrients(food: dict) -> dict[str, float]:
    """Map one FDC search hit to {nutrient key: value per 100 g}."""
    values: dict[str, float] = {}
    fallback_energy: Optional[float] = None

    for nutrient in food.get("foodNutrients") or []:
        nutrient_id = nutrient.get("nutrientId")
        value = nutrient.get("value")
        if not isinstance(value, (int, float)):
            continue
        if nutrient_id in NUTRIENT_IDS:
            values[NUTRIENT_IDS[nutrient_id]] = float(value)
        elif nutrient_id in ENERGY_FALLBACK_IDS and fallback_energy is None:
            fallback_energy = float(value)

    if "calories" not in values and fallback_energy is not None:
        values["calories"] = fallback_energy
    return values


async def search_foods(
    client: httpx.AsyncClient,
    food_name: str,
    api_key: str,
    data_type: str,
) -> Optional[list[dict]]:
    """
    Raw FDC search hits for one data-type filter.
    Returns [] when FDC answered with no match and None when the call failed.
    """
    params = {
        "query": food_name,
        "api_key": api_key,
        "dataType": data_type,
        "pageSize": settings.fdc_page_size,
    }
    try:
        # httpx timeouts are per step; wait_for bounds the whole call
        response = await asyncio.wait_for(
            client.get(f"{settings.fdc_base_url}/foods/search", params=params),
            settings.fdc_timeout_seconds,
        )
    except asyncio.TimeoutError:
        logger.warning(f"FDC lookup for '{food_name}' timed out")
        return None
    except httpx.HTTPError as e:
        logger.warning(f"FDC lookup failed for '{food_name}': {e.__class__.__name__}: {e}")
        return None

    if response.status_code != 200:
        logger.warning(f"FDC lookup for '{food_name}' returned HTTP {response.status_code}")
        return None

    try:
        return response.json().get("foods") or []
    except (ValueError, AttributeError):
        logger.warning(f"FDC lookup for '{food_name}' returned malformed JSON")
        return None


async def lookup_food(
    client: httpx.AsyncClient,
    food_name: str,
    api_key: str,
) -> Optional[dict[str, float]]:
    """Per-100g nutrients for the best match of `food_name`, or None."""
    foods = await search_foods(client, food_name, api_key, REFERENCE_DATA_TYPES)
    if foods == []:
        foods = await search_foods(client, food_name, api_key, BRANDED_DATA_TYPES)

    if not foods:
        logger.info(f"No FDC match for '{food_name}'")
        return None

    nutrients = extract_nutrients(foods[0])
    return nutrients or None


async def lookup_foods(
    food_names: list[str],
    api_key: str,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> list[Optional[dict[str, float]]]:
    """
    Look up every name concurrently; results line up with `food_names`.
    Each lookup is individually bounded, so the batch is too.
    """
    if not food_names:
        return []

    timeout = httpx.Timeout(settings.fdc_timeout_seconds)
    async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
        return await asyncio.gather(
            *(lookup_food(client, name, api_key) for name in food_names)
        )
