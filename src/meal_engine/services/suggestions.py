"""Personalized meal suggestions built from catalog, pantry and favorites."""

import asyncio
import logging
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass, replace
from typing import Protocol, TypeVar
from uuid import UUID

from meal_engine.domain.meals import MealCandidate
from meal_engine.domain.suggestions import (
    MealSuggestion,
    PantryMatches,
    RandomPick,
    RankedSuggestions,
    SuggestionMetadata,
    SuggestionOptions,
    SuggestionPage,
)
from meal_engine.errors import collaborator_call
from meal_engine.services.cache import (
    PANTRY_FILTER_PREFIX,
    SUGGESTIONS_PREFIX,
    Cache,
    invalidate_user_cache,
    user_cache_key,
)
from meal_engine.services.catalog import CatalogRepository
from meal_engine.services.eligibility import evaluate_eligibility
from meal_engine.services.pantry import FavoritesRepository, PantryRepository
from meal_engine.services.quality import WarningSink, log_data_quality_warning
from meal_engine.services.ranking import (
    CancelSignal,
    order_suggestions,
    paginate,
    raise_if_cancelled,
    report_empty_meal,
    score_candidate,
)
from meal_engine.services.sampling import RandomSource, sample_without_replacement

T = TypeVar("T")

_logger = logging.getLogger(__name__)


class ActivityRepository(Protocol):
    """Read interface for a user's scheduled meals."""

    def list_recent_meal_ids(self, user_id: UUID, days: int) -> set[UUID]:
        """Return meals scheduled in the trailing window of days ending today."""


class PreferencesRepository(Protocol):
    """Read interface for a user's kitchen preferences."""

    def list_kitchen_ids(self, user_id: UUID) -> list[UUID]:
        """Return preferred kitchens, including the user's primary kitchen."""


@dataclass(frozen=True)
class _RankingRun:
    ranked: RankedSuggestions
    applied_options: SuggestionOptions
    metadata: SuggestionMetadata


@dataclass
class SuggestionService:
    """Ranks catalog meals for a user and caches the results."""

    catalog: CatalogRepository
    pantry: PantryRepository
    favorites: FavoritesRepository
    activity: ActivityRepository
    preferences: PreferencesRepository
    cache: Cache
    suggestion_ttl_seconds: int = 900
    pantry_filter_ttl_seconds: int = 1800
    concurrency: int = 8
    recent_days: int = 1
    default_page_size: int = 10
    random_pool_size: int = 100
    random_count: int = 3
    rng: RandomSource | None = None
    warning_sink: WarningSink = log_data_quality_warning
    debug: bool = False

    async def get_suggestions(
        self,
        user_id: UUID,
        options: SuggestionOptions | None = None,
        cancel_event: CancelSignal | None = None,
    ) -> SuggestionPage:
        """Return a ranked, paginated page of suggestions."""
        options = options or self._default_options()
        cache_key = user_cache_key(SUGGESTIONS_PREFIX, user_id, options.cache_key())
        cached = self._cache_get(cache_key)
        if isinstance(cached, SuggestionPage):
            return cached

        run = await self._rank_for_user(user_id, options, cancel_event)
        page = SuggestionPage(
            suggestions=paginate(run.ranked.suggestions, options.limit, options.offset),
            total_count=len(run.ranked.suggestions),
            applied_options=run.applied_options,
            metadata=run.metadata,
        )
        self._cache_set(cache_key, page, self.suggestion_ttl_seconds)
        return page

    async def get_random_suggestions(
        self,
        user_id: UUID,
        options: SuggestionOptions | None = None,
        count: int | None = None,
        cancel_event: CancelSignal | None = None,
    ) -> RandomPick:
        """Pick meals at random, favouring higher weight scores. Never cached."""
        options = options or self._default_options()
        run = await self._rank_for_user(user_id, options, cancel_event)
        pool = run.ranked.suggestions[: self.random_pool_size]
        meals = sample_without_replacement(
            pool,
            self.random_count if count is None else count,
            rng=self.rng,
        )
        return RandomPick(
            meals=tuple(meals),
            total_eligible=len(pool),
            applied_options=run.applied_options,
        )

    async def filter_by_pantry(
        self,
        user_id: UUID,
        options: SuggestionOptions | None = None,
        cancel_event: CancelSignal | None = None,
    ) -> PantryMatches:
        """Split meals into cookable now and missing one or two essentials."""
        options = (options or self._default_options()).model_copy(
            update={"strict_mode": False}
        )
        cache_key = user_cache_key(PANTRY_FILTER_PREFIX, user_id, options.cache_key())
        cached = self._cache_get(cache_key)
        if isinstance(cached, PantryMatches):
            return cached

        run = await self._rank_for_user(user_id, options, cancel_event)
        eligible = [item for item in run.ranked.suggestions if item.is_eligible]
        matches = PantryMatches(
            eligible_meals=tuple(eligible[: options.limit]),
            partial_matches=tuple(run.ranked.partial_matches[: options.limit]),
        )
        self._cache_set(cache_key, matches, self.pantry_filter_ttl_seconds)
        return matches

    def invalidate_user(self, user_id: UUID) -> int:
        """Drop cached suggestions after pantry or favorite changes."""
        return invalidate_user_cache(self.cache, user_id)

    def _default_options(self) -> SuggestionOptions:
        return SuggestionOptions(limit=self.default_page_size)

    async def _rank_for_user(
        self,
        user_id: UUID,
        options: SuggestionOptions,
        cancel_event: CancelSignal | None,
    ) -> _RankingRun:
        if options.kitchen_ids is not None:
            kitchens = tuple(options.kitchen_ids)
        else:
            kitchens = tuple(
                await self._fetch(
                    "preferences", self.preferences.list_kitchen_ids, user_id
                )
            )
        recent_days = options.recent_days or self.recent_days
        recent: set[UUID] = set()
        if options.exclude_recent:
            recent = await self._fetch(
                "recent activity",
                self.activity.list_recent_meal_ids,
                user_id,
                recent_days,
            )

        candidates = await self._fetch(
            "catalog",
            self.catalog.list_candidates,
            options.meal_type,
            kitchens,
            recent,
        )
        pantry = await self._fetch("pantry", self.pantry.list_ingredient_ids, user_id)
        favorites = await self._fetch(
            "favorites", self.favorites.list_favorite_ids, user_id
        )
        scored = await self._score_candidates(
            [meal for meal in candidates if meal.id not in recent],
            pantry,
            favorites,
            options.favorite_boost,
            cancel_event,
        )
        ranked = order_suggestions(scored, options.strict_mode)
        eligible_count = sum(1 for item in scored if item.is_eligible)
        if self.debug:
            _logger.info(
                "Suggestions ranked: user=%s candidates=%s eligible=%s recent=%s",
                user_id,
                len(candidates),
                eligible_count,
                len(recent),
            )
        return _RankingRun(
            ranked=ranked,
            applied_options=options.model_copy(
                update={"kitchen_ids": kitchens, "recent_days": recent_days}
            ),
            metadata=SuggestionMetadata(
                eligible_meals_count=eligible_count,
                partial_matches_count=len(scored) - eligible_count,
                excluded_recent_count=len(recent),
                favorite_boost_applied=options.favorite_boost,
            ),
        )

    async def _score_candidates(
        self,
        candidates: Sequence[MealCandidate],
        pantry: Collection[UUID],
        favorites: Collection[UUID],
        favorite_boost: bool,
        cancel_event: CancelSignal | None,
    ) -> list[MealSuggestion]:
        """Evaluate candidates concurrently and return them in input order."""
        semaphore = asyncio.Semaphore(self.concurrency)

        async def score(meal: MealCandidate) -> MealSuggestion | None:
            async with semaphore:
                raise_if_cancelled(cancel_event)
                links = meal.ingredients or tuple(
                    await self._fetch(
                        "catalog", self.catalog.list_meal_ingredients, meal.id
                    )
                )
            if not links:
                report_empty_meal(meal.id, self.warning_sink)
                return None
            eligibility = evaluate_eligibility(links, pantry)
            return score_candidate(
                replace(meal, ingredients=links),
                eligibility,
                meal.id in favorites,
                favorite_boost,
            )

        tasks = [asyncio.create_task(score(meal)) for meal in candidates]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return [item for item in results if item is not None]

    async def _fetch(
        self, collaborator: str, func: Callable[..., T], *args: object
    ) -> T:
        with collaborator_call(collaborator):
            return await asyncio.to_thread(func, *args)

    def _cache_get(self, key: str) -> object | None:
        try:
            return self.cache.get(key)
        except Exception:
            _logger.warning("Cache read failed for %s", key, exc_info=True)
            return None

    def _cache_set(self, key: str, value: object, ttl_seconds: int) -> None:
        try:
            self.cache.set(key, value, ttl_seconds=ttl_seconds)
        except Exception:
            _logger.warning("Cache write failed for %s", key, exc_info=True)
