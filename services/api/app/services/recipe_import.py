import logging
from typing import Any, Callable, Optional, Sequence, Tuple

import httpx

from ..extraction import STRATEGIES, Page, ai_fallback, is_usable
from ..schemas import ExtractedRecipe, NutritionFacts, RecipeDraft
from .nutrition_service import estimate_nutrition
from .page_fetch import PageFetchError, fetch_page

logger = logging.getLogger(__name__)

NO_RECIPE_MESSAGE = (
    "No recipe found on this page. Try a different URL, ideally the recipe's own page on a site "
    "that publishes recipe markup (AllRecipes, BBC Good Food, Food Network, etc.)."
)

Strategy = Tuple[str, Callable[[Page], Optional[RecipeDraft]]]


class RecipeImportService:
    """URL in, recipe record (or an error body) out. Holds no state between calls."""

    def __init__(
        self,
        strategies: Optional[Sequence[Strategy]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.strategies = list(strategies) if strategies is not None else STRATEGIES
        self.transport = transport

    async def import_url(self, url: Optional[str]) -> dict[str, Any]:
        """
        Returns either the full recipe or {"error": message}, never both.
        Nothing raised in here escapes to the caller.
        """
        try:
            if not url or not url.strip():
                return {"error": "URL is required"}
            url = url.strip()

            try:
                html = await fetch_page(url, transport=self.transport)
            except PageFetchError as e:
                return {"error": str(e)}

            page = Page(url=url, html=html)
            draft = await self.extract(page)
            if draft is None:
                logger.info(f"No recipe found on {url}")
                return {"error": NO_RECIPE_MESSAGE}

            nutrition = await self.resolve_nutrition(draft)
            return ExtractedRecipe.from_draft(draft, url, nutrition).to_response()

        except Exception as e:
            logger.error(f"Recipe import failed for {url}: {e}", exc_info=True)
            return {"error": str(e) or e.__class__.__name__}

    async def extract(self, page: Page) -> Optional[RecipeDraft]:
        """First usable draft from the strategy table, then the AI fallback."""
        for name, strategy in self.strategies:
            try:
                draft = strategy(page)
            except Exception as e:
                logger.warning(f"Strategy {name} failed on {page.url}: {e.__class__.__name__}: {e}")
                continue
            if is_usable(draft):
                logger.info(f"Strategy {name} matched {page.url} (dom_parsed={page.dom_parsed})")
                return draft

        try:
            draft = await ai_fallback.extract(page)
        except Exception as e:
            logger.warning(f"AI fallback failed on {page.url}: {e.__class__.__name__}: {e}")
            return None
        if is_usable(draft):
            logger.info(f"AI fallback matched {page.url}")
            return draft
        return None

    async def resolve_nutrition(self, draft: RecipeDraft) -> NutritionFacts:
        """Page-supplied facts when plausible, otherwise an estimate from the ingredients."""
        if draft.nutrition is not None and draft.nutrition.has_core_values():
            return draft.nutrition
        try:
            return await estimate_nutrition(draft.ingredients, draft.servings)
        except Exception as e:
            logger.warning(f"Nutrition estimate failed: {e.__class__.__name__}: {e}")
            return NutritionFacts()
