"""Pantry and favorites services."""

import logging
from collections.abc import Collection
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from meal_engine.errors import InvalidInputError, collaborator_call
from meal_engine.services.cache import Cache, invalidate_user_cache
from meal_engine.services.nutrition import IngredientProfileRepository

_logger = logging.getLogger(__name__)


class PantryRepository(Protocol):
    """Persistence interface for user pantries."""

    def list_ingredient_ids(self, user_id: UUID) -> set[UUID]:
        """Return the ids of ingredients the user owns."""

    def add_ingredient(self, user_id: UUID, ingredient_id: UUID) -> None:
        """Add an ingredient to the pantry."""

    def remove_ingredient(self, user_id: UUID, ingredient_id: UUID) -> bool:
        """Remove an ingredient; return False when it was not present."""

    def replace_ingredients(self, user_id: UUID, ingredient_ids: list[UUID]) -> None:
        """Replace the pantry contents."""


class FavoritesRepository(Protocol):
    """Persistence interface for favorite meals."""

    def list_favorite_ids(self, user_id: UUID) -> set[UUID]:
        """Return the ids of the user's favorite meals."""

    def is_favorite(self, user_id: UUID, meal_id: UUID) -> bool:
        """Return True when the meal is a favorite."""

    def add_favorite(self, user_id: UUID, meal_id: UUID) -> None:
        """Mark a meal as favorite."""

    def remove_favorite(self, user_id: UUID, meal_id: UUID) -> bool:
        """Unmark a favorite; return False when it was not present."""


@dataclass
class PantryService:
    """Pantry mutations that keep suggestion caches honest."""

    repository: PantryRepository
    ingredients: IngredientProfileRepository
    cache: Cache

    def list_items(self, user_id: UUID) -> set[UUID]:
        """Return the user's pantry."""
        with collaborator_call("pantry"):
            return self.repository.list_ingredient_ids(user_id)

    def add(self, user_id: UUID, ingredient_id: UUID) -> None:
        """Add an approved ingredient to the pantry."""
        self._ensure_known([ingredient_id])
        with collaborator_call("pantry"):
            self.repository.add_ingredient(user_id, ingredient_id)
        invalidate_user_cache(self.cache, user_id)

    def remove(self, user_id: UUID, ingredient_id: UUID) -> bool:
        """Remove an ingredient from the pantry."""
        with collaborator_call("pantry"):
            removed = self.repository.remove_ingredient(user_id, ingredient_id)
        if removed:
            invalidate_user_cache(self.cache, user_id)
        return removed

    def replace(self, user_id: UUID, ingredient_ids: Collection[UUID]) -> None:
        """Replace the pantry with the given approved ingredients."""
        unique_ids = list(dict.fromkeys(ingredient_ids))
        self._ensure_known(unique_ids)
        try:
            with collaborator_call("pantry"):
                self.repository.replace_ingredients(user_id, unique_ids)
        finally:
            invalidate_user_cache(self.cache, user_id)
        _logger.info("Pantry replaced: user=%s items=%s", user_id, len(unique_ids))

    def _ensure_known(self, ingredient_ids: list[UUID]) -> None:
        if not ingredient_ids:
            return
        with collaborator_call("ingredient profiles"):
            known = self.ingredients.get_profiles(ingredient_ids)
        unknown = [str(item) for item in ingredient_ids if item not in known]
        if unknown:
            raise InvalidInputError(
                f"Ingredients not found or not approved: {', '.join(unknown)}"
            )


@dataclass
class FavoritesService:
    """Favorite toggles that keep suggestion caches honest."""

    repository: FavoritesRepository
    cache: Cache

    def is_favorite(self, user_id: UUID, meal_id: UUID) -> bool:
        """Return True when the meal is one of the user's favorites."""
        with collaborator_call("favorites"):
            return self.repository.is_favorite(user_id, meal_id)

    def add(self, user_id: UUID, meal_id: UUID) -> None:
        """Mark a meal as favorite."""
        with collaborator_call("favorites"):
            self.repository.add_favorite(user_id, meal_id)
        invalidate_user_cache(self.cache, user_id)

    def remove(self, user_id: UUID, meal_id: UUID) -> bool:
        """Unmark a favorite meal."""
        with collaborator_call("favorites"):
            removed = self.repository.remove_favorite(user_id, meal_id)
        if removed:
            invalidate_user_cache(self.cache, user_id)
        return removed
