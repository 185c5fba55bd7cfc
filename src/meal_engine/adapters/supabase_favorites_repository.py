"""Supabase repository for favorite meals."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_engine.services.pantry import FavoritesRepository


@dataclass
class SupabaseFavoritesRepository(FavoritesRepository):
    """Supabase implementation for user favorites."""

    client: Client

    def list_favorite_ids(self, user_id: UUID) -> set[UUID]:
        """Return the ids of the user's favorite meals."""
        response = (
            self.client.table("user_favorites")
            .select("meal_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        return {UUID(str(row["meal_id"])) for row in response.data or []}

    def is_favorite(self, user_id: UUID, meal_id: UUID) -> bool:
        """Return True when the meal is marked as favorite."""
        response = (
            self.client.table("user_favorites")
            .select("meal_id")
            .eq("user_id", str(user_id))
            .eq("meal_id", str(meal_id))
            .limit(1)
            .execute()
        )
        return bool(response.data)

    def add_favorite(self, user_id: UUID, meal_id: UUID) -> None:
        """Mark a meal as favorite unless it already is."""
        if self.is_favorite(user_id, meal_id):
            return
        response = (
            self.client.table("user_favorites")
            .insert({"user_id": str(user_id), "meal_id": str(meal_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add favorite")

    def remove_favorite(self, user_id: UUID, meal_id: UUID) -> bool:
        """Remove a favorite and report whether a row was deleted."""
        response = (
            self.client.table("user_favorites")
            .delete()
            .eq("user_id", str(user_id))
            .eq("meal_id", str(meal_id))
            .execute()
        )
        return bool(response.data)
