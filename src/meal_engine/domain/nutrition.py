"""Nutrition domain models."""

from dataclasses import dataclass, field
from uuid import UUID

from meal_engine.domain.ingredients import IngredientStatus


@dataclass(frozen=True)
class NutritionContribution:
    """Nutrients attributable to one ingredient at a given quantity."""

    ingredient_id: UUID | None
    name: str
    quantity: float
    unit: str
    status: IngredientStatus | None
    grams: float
    calories: float
    protein: float
    carbs: float
    fat: float
    minerals: dict[str, float] = field(default_factory=dict)
    percentage_of_total_calories: float = 0.0


@dataclass(frozen=True)
class ServingNutrition:
    """Nutrient values for a single serving."""

    calories: float
    protein: float
    carbs: float
    fat: float
    minerals: dict[str, float]


@dataclass(frozen=True)
class MealNutrition:
    """Meal totals, per-serving values and the per-ingredient breakdown."""

    total_calories: float
    total_protein: float
    total_carbs: float
    total_fat: float
    total_minerals: dict[str, float]
    servings: int
    per_serving: ServingNutrition
    contributions: list[NutritionContribution]
