"""Ingredient domain models."""

from dataclasses import dataclass, field
from enum import StrEnum
from uuid import UUID


class IngredientStatus(StrEnum):
    """How essential an ingredient is to a meal."""

    MANDATORY = "mandatory"
    RECOMMENDED = "recommended"
    OPTIONAL = "optional"


@dataclass(frozen=True)
class NutrientProfile:
    """Nutrient amounts per 100 grams of an ingredient."""

    calories: float
    protein: float
    carbs: float
    fat: float
    minerals: dict[str, float] = field(default_factory=dict)

    @classmethod
    def empty(cls) -> "NutrientProfile":
        """Return a profile with every nutrient at zero."""
        return cls(calories=0.0, protein=0.0, carbs=0.0, fat=0.0)


@dataclass(frozen=True)
class Ingredient:
    """An approved catalog ingredient."""

    id: UUID
    name_en: str
    name_ar: str | None
    category: str
    default_unit: str | None
    profile: NutrientProfile


@dataclass(frozen=True)
class MealIngredientLink:
    """An ingredient as used by one meal."""

    meal_id: UUID
    ingredient_id: UUID
    ingredient_name: str
    quantity: float
    unit: str
    status: IngredientStatus
