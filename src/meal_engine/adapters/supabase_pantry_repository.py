"""Supabase repository for user pantries."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_engine.services.pantry import PantryRepository


@dataclass
class SupabasePantryRepository(PantryRepository):
    """Supabase implementation for pantry contents."""

    client: Client

    def list_ingredient_ids(self, user_id: UUID) -> set[UUID]:
        """Return the ids of ingredients in the user's pantry."""
        response = (
            self.client.table("user_pantry")
            .select("ingredient_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        return {UUID(str(row["ingredient_id"])) for row in response.data or []}

    def add_ingredient(self, user_id: UUID, ingredient_id: UUID) -> None:
        """Add an ingredient unless it is already in the pantry."""
        existing = (
            self.client.table("user_pantry")
            .select("ingredient_id")
            .eq("user_id", str(user_id))
            .eq("ingredient_id", str(ingredient_id))
            .limit(1)
            .execute()
        )
        if existing.data:
            return
        response = (
            self.client.table("user_pantry")
            .insert({"user_id": str(user_id), "ingredient_id": str(ingredient_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to add pantry item")

    def remove_ingredient(self, user_id: UUID, ingredient_id: UUID) -> bool:
        """Remove an ingredient and report whether a row was deleted."""
        response = (
            self.client.table("user_pantry")
            .delete()
            .eq("user_id", str(user_id))
            .eq("ingredient_id", str(ingredient_id))
            .execute()
        )
        return bool(response.data)

    def replace_ingredients(self, user_id: UUID, ingredient_ids: list[UUID]) -> None:
        """Replace the pantry with the given ingredients.

        New rows are upserted before stale rows are deleted; a failed upsert leaves
        the previous pantry in place.
        """
        if ingredient_ids:
            response = (
                self.client.table("user_pantry")
                .upsert(
                    [
                        {"user_id": str(user_id), "ingredient_id": str(item)}
                        for item in ingredient_ids
                    ],
                    on_conflict="user_id,ingredient_id",
                )
                .execute()
            )
            if not response.data:
                raise RuntimeError("Failed to replace pantry items")

        query = self.client.table("user_pantry").delete().eq("user_id", str(user_id))
        if ingredient_ids:
            query = query.not_.in_(
                "ingredient_id", [str(item) for item in ingredient_ids]
            )
        query.execute()
