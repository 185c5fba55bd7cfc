"""Supabase repository for kitchen preferences."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_engine.services.suggestions import PreferencesRepository


@dataclass
class SupabasePreferencesRepository(PreferencesRepository):
    """Supabase implementation for a user's preferred kitchens."""

    client: Client

    def list_kitchen_ids(self, user_id: UUID) -> list[UUID]:
        """Return preferred kitchens followed by the primary kitchen."""
        preferences = (
            self.client.table("user_kitchen_preferences")
            .select("kitchen_id")
            .eq("user_id", str(user_id))
            .execute()
        )
        kitchen_ids = [UUID(str(row["kitchen_id"])) for row in preferences.data or []]

        user = (
            self.client.table("users")
            .select("primary_kitchen_id")
            .eq("id", str(user_id))
            .limit(1)
            .execute()
        )
        if user.data and user.data[0].get("primary_kitchen_id"):
            kitchen_ids.append(UUID(str(user.data[0]["primary_kitchen_id"])))
        return list(dict.fromkeys(kitchen_ids))
