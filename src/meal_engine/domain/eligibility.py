"""Domain models for pantry eligibility."""

from dataclasses import dataclass, field
from uuid import UUID

from meal_engine.domain.ingredients import IngredientStatus


@dataclass(frozen=True)
class EligibilityResult:
    """Whether a user can cook a meal with the ingredients they own."""

    meal_id: UUID
    is_eligible: bool
    missing_mandatory_count: int
    missing_recommended_count: int
    total_ingredients: int
    availability_score: int
    missing_mandatory_ingredients: list[str]
    missing_recommended_ingredients: list[str]
    missing_mandatory_ids: list[UUID] = field(default_factory=list)
    missing_recommended_ids: list[UUID] = field(default_factory=list)


@dataclass(frozen=True)
class IngredientAvailability:
    """Pantry availability of a single meal ingredient."""

    ingredient_id: UUID
    name: str
    status: IngredientStatus
    available_in_pantry: bool


@dataclass(frozen=True)
class StatusDisplay:
    """Presentation details for an ingredient status."""

    label_en: str
    label_ar: str
    color: str
    background_color: str
    description_en: str
    description_ar: str


@dataclass(frozen=True)
class StatusStatistics:
    """Ingredient counts per status for a meal."""

    mandatory_count: int
    recommended_count: int
    optional_count: int
    total_count: int
