"""Domain models for meal suggestions."""

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from meal_engine.domain.meals import MealCandidate

MealType = Literal["breakfast", "lunch", "dinner", "snack"]


class SuggestionOptions(BaseModel):
    """Caller-supplied filters and paging for a suggestion request."""

    model_config = ConfigDict(frozen=True)

    meal_type: MealType | None = None
    kitchen_ids: tuple[UUID, ...] | None = None
    exclude_recent: bool = True
    strict_mode: bool = True
    favorite_boost: bool = True
    recent_days: int | None = Field(default=None, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)

    @field_validator("kitchen_ids")
    @classmethod
    def _normalize_kitchens(
        cls, value: tuple[UUID, ...] | None
    ) -> tuple[UUID, ...] | None:
        if value is None:
            return None
        return tuple(sorted(set(value), key=str))

    def cache_key(self) -> str:
        """Return a stable string for use in cache keys."""
        return self.model_dump_json()


@dataclass(frozen=True)
class RankOptions:
    """Options that influence scoring and filtering."""

    exclude_ids: frozenset[UUID] = frozenset()
    strict_mode: bool = True
    favorite_boost: bool = True


@dataclass(frozen=True)
class MealSuggestion:
    """A scored meal with the reason it was suggested."""

    meal: MealCandidate
    is_favorite: bool
    is_eligible: bool
    availability_score: int
    missing_mandatory_count: int
    missing_recommended_count: int
    total_ingredients: int
    weight_score: int
    suggestion_reason: str
    missing_mandatory_ingredients: tuple[str, ...] = ()
    missing_recommended_ingredients: tuple[str, ...] = ()

    @property
    def meal_id(self) -> UUID:
        """Return the suggested meal's id."""
        return self.meal.id


@dataclass(frozen=True)
class RankedSuggestions:
    """Ranked suggestions plus near misses."""

    suggestions: list[MealSuggestion]
    partial_matches: list[MealSuggestion]


@dataclass(frozen=True)
class SuggestionMetadata:
    """Counters describing how a suggestion page was built."""

    eligible_meals_count: int
    partial_matches_count: int
    excluded_recent_count: int
    favorite_boost_applied: bool


@dataclass(frozen=True)
class SuggestionPage:
    """A page of ranked suggestions."""

    suggestions: tuple[MealSuggestion, ...]
    total_count: int
    applied_options: SuggestionOptions
    metadata: SuggestionMetadata


@dataclass(frozen=True)
class RandomPick:
    """Meals chosen by weighted random selection."""

    meals: tuple[MealSuggestion, ...]
    total_eligible: int
    applied_options: SuggestionOptions
    selection_method: str = "weighted_random"


@dataclass(frozen=True)
class PantryMatches:
    """Meals a user can cook now and meals that are close."""

    eligible_meals: tuple[MealSuggestion, ...]
    partial_matches: tuple[MealSuggestion, ...]
