"""Scoring and ordering of meal suggestions."""

import logging
from collections.abc import Collection, Iterable, Sequence
from typing import Protocol
from uuid import UUID

from meal_engine.domain.eligibility import EligibilityResult
from meal_engine.domain.meals import MealCandidate
from meal_engine.domain.suggestions import (
    MealSuggestion,
    RankedSuggestions,
    RankOptions,
)
from meal_engine.errors import SuggestionCancelledError
from meal_engine.services.eligibility import evaluate_eligibility
from meal_engine.services.quality import (
    DataQualityWarning,
    WarningKind,
    WarningSink,
    log_data_quality_warning,
)

FAVORITE_BOOST = 20
COMPLETE_BOOST = 10
MISSING_RECOMMENDED_PENALTY = 2
MAX_PARTIAL_MISSING = 2

_logger = logging.getLogger(__name__)


class CancelSignal(Protocol):
    """A flag checked between evaluations, e.g. threading.Event."""

    def is_set(self) -> bool:
        """Return True once cancellation was requested."""


def raise_if_cancelled(cancel_event: CancelSignal | None) -> None:
    """Abort the current suggestion request if it was cancelled."""
    if cancel_event is not None and cancel_event.is_set():
        raise SuggestionCancelledError("Suggestion request cancelled")


def report_empty_meal(meal_id: UUID, warning_sink: WarningSink) -> None:
    """Report a meal that cannot be evaluated because it has no ingredients."""
    warning_sink(
        DataQualityWarning(
            kind=WarningKind.EMPTY_MEAL,
            subject=str(meal_id),
            detail="meal has no ingredients; skipped",
        )
    )


def suggestion_reason(eligibility: EligibilityResult, is_favorite: bool) -> str:
    """Describe why a meal is suggested."""
    if is_favorite and eligibility.is_eligible:
        return "Perfect match from your favorites"
    if eligibility.is_eligible:
        return "All required ingredients available"
    if eligibility.missing_mandatory_count == 1:
        return "Missing 1 required ingredient"
    if eligibility.missing_mandatory_count <= 3:  # noqa: PLR2004
        return f"Missing {eligibility.missing_mandatory_count} required ingredients"
    return "Partial ingredient match"


def weight_score(
    eligibility: EligibilityResult, is_favorite: bool, favorite_boost: bool
) -> int:
    """Combine availability with favorite and completeness boosts."""
    score = eligibility.availability_score
    if favorite_boost and is_favorite:
        score += FAVORITE_BOOST
    if eligibility.missing_mandatory_count == 0:
        score += COMPLETE_BOOST
    score -= eligibility.missing_recommended_count * MISSING_RECOMMENDED_PENALTY
    return score


def score_candidate(
    meal: MealCandidate,
    eligibility: EligibilityResult,
    is_favorite: bool,
    favorite_boost: bool,
) -> MealSuggestion:
    """Build a suggestion from a meal and its eligibility."""
    return MealSuggestion(
        meal=meal,
        is_favorite=is_favorite,
        is_eligible=eligibility.is_eligible,
        availability_score=eligibility.availability_score,
        missing_mandatory_count=eligibility.missing_mandatory_count,
        missing_recommended_count=eligibility.missing_recommended_count,
        total_ingredients=eligibility.total_ingredients,
        weight_score=weight_score(eligibility, is_favorite, favorite_boost),
        suggestion_reason=suggestion_reason(eligibility, is_favorite),
        missing_mandatory_ingredients=tuple(eligibility.missing_mandatory_ingredients),
        missing_recommended_ingredients=tuple(
            eligibility.missing_recommended_ingredients
        ),
    )


def order_suggestions(
    scored: Iterable[MealSuggestion], strict_mode: bool
) -> RankedSuggestions:
    """Filter and sort scored meals; ties keep their input order."""
    scored = list(scored)
    kept = (
        [item for item in scored if item.missing_mandatory_count == 0]
        if strict_mode
        else scored
    )
    suggestions = sorted(kept, key=lambda item: item.weight_score, reverse=True)
    if strict_mode:
        partial: list[MealSuggestion] = []
    else:
        partial = sorted(
            (
                item
                for item in scored
                if 0 < item.missing_mandatory_count <= MAX_PARTIAL_MISSING
            ),
            key=lambda item: (item.missing_mandatory_count, -item.availability_score),
        )
    return RankedSuggestions(suggestions=suggestions, partial_matches=partial)


def rank_suggestions(
    candidates: Sequence[MealCandidate],
    pantry: Collection[UUID],
    options: RankOptions | None = None,
    favorites: Collection[UUID] = frozenset(),
    cancel_event: CancelSignal | None = None,
    warning_sink: WarningSink = log_data_quality_warning,
) -> RankedSuggestions:
    """Evaluate each candidate against the pantry and rank the results.

    Candidates must carry their ingredient links. Meals without ingredients
    cannot be evaluated and are skipped with a data quality warning.
    """
    options = options or RankOptions()
    scored: list[MealSuggestion] = []
    for meal in candidates:
        raise_if_cancelled(cancel_event)
        if meal.id in options.exclude_ids:
            continue
        if not meal.ingredients:
            report_empty_meal(meal.id, warning_sink)
            continue
        eligibility = evaluate_eligibility(meal.ingredients, pantry)
        scored.append(
            score_candidate(
                meal, eligibility, meal.id in favorites, options.favorite_boost
            )
        )
    _logger.debug("Scored %s of %s candidates", len(scored), len(candidates))
    return order_suggestions(scored, options.strict_mode)


def paginate(
    suggestions: Sequence[MealSuggestion], limit: int, offset: int = 0
) -> tuple[MealSuggestion, ...]:
    """Return one page of suggestions."""
    return tuple(suggestions[offset : offset + limit])
