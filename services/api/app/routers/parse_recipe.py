"""
Router for recipe URL parsing.

Logical failures still answer HTTP 200: callers read the body, which holds
either the recipe or an "error" string.
"""

import logging

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from slowapi import Limiter
from slowapi.util import get_remote_address

from ..schemas import ParseRecipeRequest
from ..services.recipe_import import RecipeImportService
from ..settings import settings

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address)


@router.post("/parse-recipe")
@limiter.limit(settings.parse_rate_limit)
async def parse_recipe(request: Request):  # request is required by the rate limiter
    """Fetch a recipe page and return structured recipe + nutrition data."""
    try:
        payload = ParseRecipeRequest.model_validate(await request.json())
    except (ValueError, ValidationError):
        # Unreadable bodies are treated as a missing URL
        payload = ParseRecipeRequest()

    service = RecipeImportService()
    body = await service.import_url(payload.url)
    if "error" in body:
        logger.info(f"parse-recipe error for {payload.url!r}: {body['error']}")
    return JSONResponse(content=body)
