"""Supabase repository for approved ingredient profiles."""

from collections.abc import Iterable
from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_engine.domain.ingredients import Ingredient, NutrientProfile
from meal_engine.services.nutrition import IngredientProfileRepository

_INGREDIENT_COLUMNS = (
    "id, name_en, name_ar, category, default_unit, calories_per_100g, "
    "protein_per_100g, carbs_per_100g, fat_per_100g, minerals"
)


@dataclass
class SupabaseIngredientRepository(IngredientProfileRepository):
    """Supabase implementation for ingredient profile lookups."""

    client: Client

    def get_profiles(self, ingredient_ids: Iterable[UUID]) -> dict[UUID, Ingredient]:
        """Return approved ingredients keyed by id."""
        ids = [str(item) for item in dict.fromkeys(ingredient_ids)]
        if not ids:
            return {}
        response = (
            self.client.table("ingredients")
            .select(_INGREDIENT_COLUMNS)
            .in_("id", ids)
            .eq("is_approved", True)
            .execute()
        )
        ingredients = [_parse_ingredient(row) for row in response.data or []]
        return {ingredient.id: ingredient for ingredient in ingredients}


def _parse_ingredient(row: dict[str, object]) -> Ingredient:
    minerals = row.get("minerals")
    return Ingredient(
        id=UUID(str(row["id"])),
        name_en=str(row.get("name_en") or ""),
        name_ar=row.get("name_ar"),
        category=str(row.get("category") or "other"),
        default_unit=row.get("default_unit"),
        profile=NutrientProfile(
            calories=float(row.get("calories_per_100g") or 0.0),
            protein=float(row.get("protein_per_100g") or 0.0),
            carbs=float(row.get("carbs_per_100g") or 0.0),
            fat=float(row.get("fat_per_100g") or 0.0),
            minerals=(
                {str(name): float(value) for name, value in minerals.items()}
                if isinstance(minerals, dict)
                else {}
            ),
        ),
    )
