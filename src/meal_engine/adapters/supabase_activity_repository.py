"""Supabase repository for scheduled calendar meals."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import date, timedelta
from uuid import UUID

from supabase import Client

from meal_engine.errors import InvalidInputError
from meal_engine.services.suggestions import ActivityRepository


@dataclass
class SupabaseActivityRepository(ActivityRepository):
    """Reads recently scheduled meals from the calendar."""

    client: Client
    clock: Callable[[], date] = field(default=date.today)

    def list_recent_meal_ids(self, user_id: UUID, days: int) -> set[UUID]:
        """Return meals scheduled between days-1 days ago and today."""
        if days < 1:
            raise InvalidInputError(f"Recent window must be at least 1 day: {days}")
        today = self.clock()
        start = today - timedelta(days=days - 1)
        response = (
            self.client.table("calendar_entries")
            .select("meal_id")
            .eq("user_id", str(user_id))
            .gte("scheduled_date", start.isoformat())
            .lte("scheduled_date", today.isoformat())
            .execute()
        )
        return {
            UUID(str(row["meal_id"]))
            for row in response.data or []
            if row.get("meal_id")
        }
