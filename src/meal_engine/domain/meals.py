"""Domain models for catalog meals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from meal_engine.domain.ingredients import MealIngredientLink


@dataclass(frozen=True)
class MealCandidate:
    """A public, approved catalog meal considered for suggestions."""

    id: UUID
    title_en: str
    title_ar: str | None
    kitchen_id: UUID
    kitchen_name_en: str | None
    meal_type: str
    servings: int
    prep_time_min: int | None = None
    cook_time_min: int | None = None
    image_url: str | None = None
    created_by_user_id: UUID | None = None
    created_at: datetime | None = None
    ingredients: tuple[MealIngredientLink, ...] = ()
