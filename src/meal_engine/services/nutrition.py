"""Nutrition calculation for ingredients and meals."""

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Protocol
from uuid import UUID

from meal_engine.domain.ingredients import (
    Ingredient,
    IngredientStatus,
    MealIngredientLink,
    NutrientProfile,
)
from meal_engine.domain.meals import MealCandidate
from meal_engine.domain.nutrition import (
    MealNutrition,
    NutritionContribution,
    ServingNutrition,
)
from meal_engine.errors import InvalidInputError, NotFoundError, collaborator_call
from meal_engine.services.catalog import CatalogRepository
from meal_engine.services.quality import (
    DataQualityWarning,
    WarningKind,
    WarningSink,
    log_data_quality_warning,
)
from meal_engine.services.rounding import round_half_up, round_to_int
from meal_engine.services.units import UnitNormalizer

# Reference intakes: macros in grams, minerals in mg, vitamin A and folate in mcg.
DAILY_VALUES: dict[str, float] = {
    "calories": 2000,
    "protein": 50,
    "carbs": 300,
    "fat": 65,
    "calcium": 1000,
    "iron": 18,
    "magnesium": 400,
    "phosphorus": 1000,
    "potassium": 3500,
    "sodium": 2300,
    "zinc": 11,
    "vitamin_c": 90,
    "vitamin_a": 900,
    "folate": 400,
}

_logger = logging.getLogger(__name__)


def compute_contribution(  # noqa: PLR0913
    profile: NutrientProfile,
    quantity: float,
    unit: str,
    ingredient_name: str | None = None,
    *,
    ingredient_id: UUID | None = None,
    status: IngredientStatus | None = None,
    normalizer: UnitNormalizer | None = None,
) -> NutritionContribution:
    """Scale a per-100g profile to the given quantity."""
    grams = (normalizer or UnitNormalizer()).to_grams(quantity, unit, ingredient_name)
    factor = grams / 100
    return NutritionContribution(
        ingredient_id=ingredient_id,
        name=ingredient_name or "",
        quantity=quantity,
        unit=unit,
        status=status,
        grams=grams,
        calories=round_half_up(profile.calories * factor),
        protein=round_half_up(profile.protein * factor),
        carbs=round_half_up(profile.carbs * factor),
        fat=round_half_up(profile.fat * factor),
        minerals={
            name: round_half_up(amount * factor)
            for name, amount in profile.minerals.items()
        },
    )


def contribution_for_link(
    link: MealIngredientLink,
    profile: NutrientProfile,
    normalizer: UnitNormalizer | None = None,
) -> NutritionContribution:
    """Compute the contribution of one meal ingredient."""
    return compute_contribution(
        profile,
        link.quantity,
        link.unit,
        link.ingredient_name,
        ingredient_id=link.ingredient_id,
        status=link.status,
        normalizer=normalizer,
    )


def compute_meal_totals(
    contributions: Sequence[NutritionContribution], servings: int = 1
) -> MealNutrition:
    """Sum contributions into meal totals and per-serving values."""
    if servings <= 0:
        raise InvalidInputError(f"Servings must be at least 1, got {servings}")

    calories = sum(item.calories for item in contributions)
    protein = sum(item.protein for item in contributions)
    carbs = sum(item.carbs for item in contributions)
    fat = sum(item.fat for item in contributions)
    minerals: dict[str, float] = {}
    for item in contributions:
        for name, amount in item.minerals.items():
            minerals[name] = minerals.get(name, 0.0) + amount

    breakdown = [
        replace(
            item,
            percentage_of_total_calories=(
                round_half_up(item.calories / calories * 100) if calories > 0 else 0.0
            ),
        )
        for item in contributions
    ]
    total_minerals = {name: round_half_up(value) for name, value in minerals.items()}

    return MealNutrition(
        total_calories=round_half_up(calories),
        total_protein=round_half_up(protein),
        total_carbs=round_half_up(carbs),
        total_fat=round_half_up(fat),
        total_minerals=total_minerals,
        servings=servings,
        per_serving=ServingNutrition(
            calories=round_half_up(calories / servings),
            protein=round_half_up(protein / servings),
            carbs=round_half_up(carbs / servings),
            fat=round_half_up(fat / servings),
            minerals={
                name: round_half_up(value / servings)
                for name, value in total_minerals.items()
            },
        ),
        contributions=breakdown,
    )


def compute_daily_value_percentages(
    nutrition: MealNutrition,
    reference: Mapping[str, float] = DAILY_VALUES,
    warning_sink: WarningSink = log_data_quality_warning,
) -> dict[str, int]:
    """Express per-serving nutrients as a percentage of daily reference values."""
    serving = nutrition.per_serving
    values: dict[str, float] = {
        "calories": serving.calories,
        "protein": serving.protein,
        "carbs": serving.carbs,
        "fat": serving.fat,
    }
    values.update(serving.minerals)

    percentages: dict[str, int] = {}
    for name, amount in values.items():
        daily_value = reference.get(name)
        if not daily_value:
            warning_sink(
                DataQualityWarning(
                    kind=WarningKind.UNKNOWN_NUTRIENT,
                    subject=name,
                    detail="no daily reference value",
                )
            )
            continue
        percentages[name] = round_to_int(amount / daily_value * 100)
    return percentages


def nutrition_density(profile: NutrientProfile) -> float:
    """Score protein per calorie plus mineral diversity."""
    calories = profile.calories or 1
    protein_score = profile.protein / calories * 100
    mineral_score = len(profile.minerals) * 2
    return round_half_up(protein_score + mineral_score)


class IngredientProfileRepository(Protocol):
    """Lookup interface for approved ingredient profiles."""

    def get_profiles(self, ingredient_ids: Iterable[UUID]) -> dict[UUID, Ingredient]:
        """Return ingredients keyed by id; unknown ids are absent."""


@dataclass
class MealNutritionService:
    """Fetches ingredient profiles and computes meal nutrition."""

    ingredients: IngredientProfileRepository
    catalog: CatalogRepository
    normalizer: UnitNormalizer = field(default_factory=UnitNormalizer)
    warning_sink: WarningSink = log_data_quality_warning

    def compute_for_links(
        self, links: Sequence[MealIngredientLink], servings: int = 1
    ) -> MealNutrition:
        """Compute totals for a list of meal ingredients."""
        if servings <= 0:
            raise InvalidInputError(f"Servings must be at least 1, got {servings}")
        for link in links:
            if link.quantity <= 0:
                raise InvalidInputError(
                    f"Meal {link.meal_id} lists ingredient {link.ingredient_id} "
                    f"with non-positive quantity {link.quantity}"
                )
        ingredient_ids = list(dict.fromkeys(link.ingredient_id for link in links))
        with collaborator_call("ingredient profiles"):
            profiles = self.ingredients.get_profiles(ingredient_ids)

        contributions = []
        for link in links:
            ingredient = profiles.get(link.ingredient_id)
            if ingredient is None:
                self.warning_sink(
                    DataQualityWarning(
                        kind=WarningKind.MISSING_PROFILE,
                        subject=str(link.ingredient_id),
                        detail=f"treating {link.ingredient_name} as zero nutrients",
                    )
                )
                profile = NutrientProfile.empty()
                name = link.ingredient_name
            else:
                profile = ingredient.profile
                name = link.ingredient_name or ingredient.name_en
            contributions.append(
                contribution_for_link(
                    replace(link, ingredient_name=name), profile, self.normalizer
                )
            )
        nutrition = compute_meal_totals(contributions, servings)
        _logger.debug(
            "Computed nutrition for %s ingredients: %s kcal",
            len(contributions),
            nutrition.total_calories,
        )
        return nutrition

    def compute_for_meal(self, meal_id: UUID) -> MealNutrition:
        """Compute nutrition for a catalog meal using its serving count."""
        meal = self._load_meal(meal_id)
        return self.compute_for_links(meal.ingredients, meal.servings)

    def daily_values_for_meal(self, meal_id: UUID) -> dict[str, int]:
        """Return per-serving daily value percentages for a catalog meal."""
        nutrition = self.compute_for_meal(meal_id)
        return compute_daily_value_percentages(
            nutrition, warning_sink=self.warning_sink
        )

    def _load_meal(self, meal_id: UUID) -> MealCandidate:
        with collaborator_call("catalog"):
            meal = self.catalog.get_meal(meal_id)
        if meal is None:
            raise NotFoundError("Meal", meal_id)
        return meal
