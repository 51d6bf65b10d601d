"""
Router for nutrition totals.
"""

from fastapi import APIRouter

from ..schemas import DayNutritionRequest, NutritionTotals
from ..services.nutrition_service import sum_day_nutrition

router = APIRouter()


@router.post("/nutrition/day", response_model=NutritionTotals)
def day_nutrition(req: DayNutritionRequest):
    """Sum a day's planned meals against their recipes' per-serving nutrition."""
    return sum_day_nutrition(req.meals, req.recipes)
