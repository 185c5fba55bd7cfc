"""Catalog lookup interface."""

from collections.abc import Collection
from typing import Protocol
from uuid import UUID

from meal_engine.domain.ingredients import MealIngredientLink
from meal_engine.domain.meals import MealCandidate


class CatalogRepository(Protocol):
    """Read interface for approved public meals."""

    def list_candidates(
        self,
        meal_type: str | None,
        kitchen_ids: Collection[UUID],
        exclude_ids: Collection[UUID],
    ) -> list[MealCandidate]:
        """Return candidate meals, newest first; ingredient links may be omitted."""

    def list_meal_ingredients(self, meal_id: UUID) -> list[MealIngredientLink]:
        """Return the approved ingredient links of a meal."""

    def get_meal(self, meal_id: UUID) -> MealCandidate | None:
        """Return a meal with its ingredient links, if present."""
