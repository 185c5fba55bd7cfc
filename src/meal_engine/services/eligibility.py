"""Pantry-based meal eligibility.

A meal is eligible when the user owns every mandatory ingredient. The
availability score weights coverage of each status tier 70/20/10 so that
recommended and optional shortfalls depress the score without blocking
the meal.
"""

from collections.abc import Collection, Sequence
from dataclasses import dataclass
from uuid import UUID

from meal_engine.domain.eligibility import (
    EligibilityResult,
    IngredientAvailability,
    StatusDisplay,
    StatusStatistics,
)
from meal_engine.domain.ingredients import IngredientStatus, MealIngredientLink
from meal_engine.errors import InvalidInputError, NotFoundError, collaborator_call
from meal_engine.services.catalog import CatalogRepository
from meal_engine.services.pantry import PantryRepository
from meal_engine.services.quality import (
    DataQualityWarning,
    WarningKind,
    WarningSink,
    log_data_quality_warning,
)
from meal_engine.services.rounding import round_to_int

STATUS_WEIGHTS: dict[IngredientStatus, float] = {
    IngredientStatus.MANDATORY: 0.7,
    IngredientStatus.RECOMMENDED: 0.2,
    IngredientStatus.OPTIONAL: 0.1,
}

_STATUS_PRIORITY: dict[IngredientStatus, int] = {
    IngredientStatus.MANDATORY: 3,
    IngredientStatus.RECOMMENDED: 2,
    IngredientStatus.OPTIONAL: 1,
}

_STATUS_DISPLAY: dict[IngredientStatus, StatusDisplay] = {
    IngredientStatus.MANDATORY: StatusDisplay(
        label_en="Required",
        label_ar="مطلوب",
        color="#ffffff",
        background_color="#22c55e",
        description_en="This ingredient is essential for the recipe",
        description_ar="هذا المكون ضروري للوصفة",
    ),
    IngredientStatus.RECOMMENDED: StatusDisplay(
        label_en="Recommended",
        label_ar="مُوصى به",
        color="#ffffff",
        background_color="#f97316",
        description_en="This ingredient significantly enhances the dish",
        description_ar="هذا المكون يحسن الطبق بشكل كبير",
    ),
    IngredientStatus.OPTIONAL: StatusDisplay(
        label_en="Optional",
        label_ar="اختياري",
        color="#ffffff",
        background_color="#6b7280",
        description_en="This ingredient can be omitted or substituted",
        description_ar="يمكن حذف هذا المكون أو استبداله",
    ),
}


def parse_status(
    raw: str | None, warning_sink: WarningSink = log_data_quality_warning
) -> IngredientStatus:
    """Parse a stored status, falling back to OPTIONAL for unknown values."""
    normalized = (raw or "").strip().lower()
    try:
        return IngredientStatus(normalized)
    except ValueError:
        warning_sink(
            DataQualityWarning(
                kind=WarningKind.UNKNOWN_STATUS,
                subject=repr(raw),
                detail="treated as optional",
            )
        )
        return IngredientStatus.OPTIONAL


def status_priority(status: IngredientStatus) -> int:
    """Return the sort priority of a status (higher is more essential)."""
    return _STATUS_PRIORITY[status]


def status_display(status: IngredientStatus) -> StatusDisplay:
    """Return labels and colours for a status."""
    return _STATUS_DISPLAY[status]


def status_statistics(links: Sequence[MealIngredientLink]) -> StatusStatistics:
    """Count a meal's ingredients per status."""
    counts = dict.fromkeys(IngredientStatus, 0)
    for link in links:
        counts[link.status] += 1
    return StatusStatistics(
        mandatory_count=counts[IngredientStatus.MANDATORY],
        recommended_count=counts[IngredientStatus.RECOMMENDED],
        optional_count=counts[IngredientStatus.OPTIONAL],
        total_count=len(links),
    )


def ingredient_availability(
    links: Sequence[MealIngredientLink], pantry: Collection[UUID]
) -> list[IngredientAvailability]:
    """List each ingredient's availability, most essential first then by name."""
    ordered = sorted(
        links,
        key=lambda link: (-status_priority(link.status), link.ingredient_name.lower()),
    )
    return [
        IngredientAvailability(
            ingredient_id=link.ingredient_id,
            name=link.ingredient_name,
            status=link.status,
            available_in_pantry=link.ingredient_id in pantry,
        )
        for link in ordered
    ]


def evaluate_eligibility(
    links: Sequence[MealIngredientLink], pantry: Collection[UUID]
) -> EligibilityResult:
    """Score how much of a meal the pantry covers and decide eligibility."""
    if not links:
        raise InvalidInputError("A meal needs at least one ingredient to evaluate")

    group_sizes = dict.fromkeys(IngredientStatus, 0)
    missing: dict[IngredientStatus, list[MealIngredientLink]] = {
        status: [] for status in IngredientStatus
    }
    for link in links:
        group_sizes[link.status] += 1
        if link.ingredient_id not in pantry:
            missing[link.status].append(link)

    weighted = 0.0
    for status, weight in STATUS_WEIGHTS.items():
        size = group_sizes[status]
        available = size - len(missing[status])
        group_score = 100.0 if size == 0 else 100 * available / size
        weighted += weight * group_score

    missing_mandatory = missing[IngredientStatus.MANDATORY]
    missing_recommended = missing[IngredientStatus.RECOMMENDED]
    return EligibilityResult(
        meal_id=links[0].meal_id,
        is_eligible=not missing_mandatory,
        missing_mandatory_count=len(missing_mandatory),
        missing_recommended_count=len(missing_recommended),
        total_ingredients=len(links),
        availability_score=round_to_int(weighted),
        missing_mandatory_ingredients=[
            item.ingredient_name for item in missing_mandatory
        ],
        missing_recommended_ingredients=[
            item.ingredient_name for item in missing_recommended
        ],
        missing_mandatory_ids=[item.ingredient_id for item in missing_mandatory],
        missing_recommended_ids=[item.ingredient_id for item in missing_recommended],
    )


@dataclass
class EligibilityService:
    """Checks a single meal against a user's pantry."""

    catalog: CatalogRepository
    pantry: PantryRepository

    def check_meal(self, user_id: UUID, meal_id: UUID) -> EligibilityResult:
        """Return the eligibility of one meal for one user."""
        links = self._links(meal_id)
        with collaborator_call("pantry"):
            owned = self.pantry.list_ingredient_ids(user_id)
        return evaluate_eligibility(links, owned)

    def availability(
        self, user_id: UUID, meal_id: UUID
    ) -> list[IngredientAvailability]:
        """Return per-ingredient availability for one meal."""
        links = self._links(meal_id)
        with collaborator_call("pantry"):
            owned = self.pantry.list_ingredient_ids(user_id)
        return ingredient_availability(links, owned)

    def _links(self, meal_id: UUID) -> list[MealIngredientLink]:
        with collaborator_call("catalog"):
            meal = self.catalog.get_meal(meal_id)
        if meal is None:
            raise NotFoundError("Meal", meal_id)
        return list(meal.ingredients)
