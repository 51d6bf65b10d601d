"""Pydantic schemas for the recipe import API.

Request/response models for:
- Recipe extraction (drafts, final recipe, response body)
- Nutrition facts
- Day nutrition totals
"""

from typing import Optional, Any

from pydantic import BaseModel, Field


# --- Nutrition ---

class NutritionFacts(BaseModel):
    """Per-serving estimate. A missing field means unknown, not zero."""
    calories: Optional[int] = Field(None, ge=0)
    protein_g: Optional[int] = Field(None, ge=0)
    carbs_g: Optional[int] = Field(None, ge=0)
    fat_g: Optional[int] = Field(None, ge=0)
    fiber_g: Optional[float] = Field(None, ge=0)
    sugar_g: Optional[float] = Field(None, ge=0)
    sodium_mg: Optional[int] = Field(None, ge=0)
    saturated_fat_g: Optional[float] = Field(None, ge=0)

    def has_core_values(self) -> bool:
        return any(v is not None for v in (self.calories, self.protein_g, self.carbs_g))


class NutritionTotals(BaseModel):
    calories: float = 0
    protein_g: float = 0
    carbs_g: float = 0
    fat_g: float = 0
    fiber_g: float = 0
    sugar_g: float = 0
    sodium_mg: float = 0
    saturated_fat_g: float = 0


# --- Recipe extraction ---

class RecipeDraft(BaseModel):
    """What a single extraction strategy managed to pull from a page."""
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    servings: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    ingredients: list[str] = []
    instructions: list[str] = []
    nutrition: Optional[NutritionFacts] = None


class ExtractedRecipe(BaseModel):
    title: str = "Untitled Recipe"
    description: Optional[str] = None
    image_url: Optional[str] = None
    source_url: str
    servings: Optional[str] = None
    prep_time: Optional[str] = None
    cook_time: Optional[str] = None
    ingredients: list[str] = []
    instructions: list[str] = []
    nutrition: NutritionFacts = Field(default_factory=NutritionFacts)

    @classmethod
    def from_draft(cls, draft: RecipeDraft, source_url: str, nutrition: NutritionFacts) -> "ExtractedRecipe":
        return cls(
            title=(draft.title or "").strip() or "Untitled Recipe",
            description=(draft.description or "").strip() or None,
            image_url=draft.image_url or None,
            source_url=source_url,
            servings=draft.servings or None,
            prep_time=draft.prep_time or None,
            cook_time=draft.cook_time or None,
            ingredients=draft.ingredients,
            instructions=draft.instructions,
            nutrition=nutrition,
        )

    def to_response(self) -> dict[str, Any]:
        """Flat response body: recipe fields followed by nutrition fields."""
        body = self.model_dump(exclude={"nutrition"})
        body.update(self.nutrition.model_dump())
        return body


class ParseRecipeRequest(BaseModel):
    url: Optional[str] = None


# --- Day totals ---

class PlannedMeal(BaseModel):
    id: Optional[str] = None
    name: Optional[str] = None
    recipe_id: Optional[str] = None


class RecipeNutrition(BaseModel):
    id: str
    calories: Optional[float] = None
    protein_g: Optional[float] = None
    carbs_g: Optional[float] = None
    fat_g: Optional[float] = None
    fiber_g: Optional[float] = None
    sugar_g: Optional[float] = None
    sodium_mg: Optional[float] = None
    saturated_fat_g: Optional[float] = None


class DayNutritionRequest(BaseModel):
    meals: dict[str, PlannedMeal] = {}
    recipes: list[RecipeNutrition] = []
