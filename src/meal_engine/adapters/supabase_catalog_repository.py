"""Supabase repository for catalog meals."""

from collections.abc import Collection
from dataclasses import dataclass, replace
from datetime import datetime
from uuid import UUID

from supabase import Client

from meal_engine.domain.ingredients import MealIngredientLink
from meal_engine.domain.meals import MealCandidate
from meal_engine.services.catalog import CatalogRepository
from meal_engine.services.eligibility import parse_status
from meal_engine.services.quality import (
    DataQualityWarning,
    WarningKind,
    WarningSink,
    log_data_quality_warning,
)

_MEAL_COLUMNS = (
    "id, title_en, title_ar, kitchen_id, meal_type, servings, prep_time_min, "
    "cook_time_min, image_url, created_by_user_id, created_at, "
    "kitchens(name_en, is_active)"
)
_LINK_COLUMNS = (
    "meal_id, ingredient_id, quantity, unit, status, ingredients(name_en, is_approved)"
)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation for meal catalog reads."""

    client: Client
    warning_sink: WarningSink = log_data_quality_warning

    def list_candidates(
        self,
        meal_type: str | None,
        kitchen_ids: Collection[UUID],
        exclude_ids: Collection[UUID],
    ) -> list[MealCandidate]:
        """Return approved public meals from active kitchens, newest first."""
        query = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("is_approved", True)
            .eq("is_public", True)
        )
        if meal_type:
            query = query.eq("meal_type", meal_type)
        if kitchen_ids:
            query = query.in_("kitchen_id", [str(item) for item in kitchen_ids])
        if exclude_ids:
            query = query.not_.in_("id", [str(item) for item in exclude_ids])
        response = query.order("created_at", desc=True).execute()
        return [
            _parse_meal(row) for row in response.data or [] if _kitchen_active(row)
        ]

    def list_meal_ingredients(self, meal_id: UUID) -> list[MealIngredientLink]:
        """Return the approved ingredient links of a meal."""
        response = (
            self.client.table("meal_ingredients")
            .select(_LINK_COLUMNS)
            .eq("meal_id", str(meal_id))
            .execute()
        )
        links = []
        for row in response.data or []:
            ingredient = row.get("ingredients") or {}
            if not ingredient.get("is_approved", True):
                continue
            link_meal_id = UUID(str(row["meal_id"]))
            ingredient_id = UUID(str(row["ingredient_id"]))
            links.append(
                MealIngredientLink(
                    meal_id=link_meal_id,
                    ingredient_id=ingredient_id,
                    ingredient_name=str(ingredient.get("name_en") or ""),
                    quantity=self._quantity(
                        row.get("quantity"), link_meal_id, ingredient_id
                    ),
                    unit=str(row.get("unit") or ""),
                    status=parse_status(row.get("status"), self.warning_sink),
                )
            )
        return links

    def get_meal(self, meal_id: UUID) -> MealCandidate | None:
        """Return a meal with its ingredient links, if present."""
        response = (
            self.client.table("meals")
            .select(_MEAL_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        meal = _parse_meal(response.data[0])
        return replace(meal, ingredients=tuple(self.list_meal_ingredients(meal_id)))

    def _quantity(self, raw: object, meal_id: UUID, ingredient_id: UUID) -> float:
        quantity = float(raw) if raw is not None else 0.0  # type: ignore[arg-type]
        if quantity <= 0:
            self.warning_sink(
                DataQualityWarning(
                    kind=WarningKind.INVALID_QUANTITY,
                    subject=f"{meal_id}/{ingredient_id}",
                    detail=f"quantity {raw!r} is not positive",
                )
            )
        return quantity


def _kitchen_active(row: dict[str, object]) -> bool:
    kitchen = row.get("kitchens")
    if not isinstance(kitchen, dict):
        return True
    return kitchen.get("is_active", True) is not False


def _parse_meal(row: dict[str, object]) -> MealCandidate:
    kitchen = row.get("kitchens")
    kitchen_name = kitchen.get("name_en") if isinstance(kitchen, dict) else None
    created_raw = row.get("created_at")
    creator = row.get("created_by_user_id")
    servings = row.get("servings")
    return MealCandidate(
        id=UUID(str(row["id"])),
        title_en=str(row.get("title_en") or ""),
        title_ar=row.get("title_ar"),
        kitchen_id=UUID(str(row["kitchen_id"])),
        kitchen_name_en=kitchen_name,
        meal_type=str(row.get("meal_type") or ""),
        servings=1 if servings is None else int(servings),
        prep_time_min=row.get("prep_time_min"),
        cook_time_min=row.get("cook_time_min"),
        image_url=row.get("image_url"),
        created_by_user_id=UUID(str(creator)) if creator else None,
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else None
        ),
    )
