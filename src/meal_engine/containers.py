"""Dependency container wiring for the engine."""

from dataclasses import dataclass

from supabase import create_client

from meal_engine.adapters.supabase_activity_repository import (
    SupabaseActivityRepository,
)
from meal_engine.adapters.supabase_catalog_repository import SupabaseCatalogRepository
from meal_engine.adapters.supabase_favorites_repository import (
    SupabaseFavoritesRepository,
)
from meal_engine.adapters.supabase_ingredient_repository import (
    SupabaseIngredientRepository,
)
from meal_engine.adapters.supabase_pantry_repository import SupabasePantryRepository
from meal_engine.adapters.supabase_preferences_repository import (
    SupabasePreferencesRepository,
)
from meal_engine.config import Settings
from meal_engine.services.cache import Cache, InMemoryCache
from meal_engine.services.eligibility import EligibilityService
from meal_engine.services.nutrition import MealNutritionService
from meal_engine.services.pantry import FavoritesService, PantryService
from meal_engine.services.suggestions import SuggestionService


@dataclass
class AppContainer:
    """Holds engine-wide dependencies."""

    settings: Settings
    cache: Cache
    suggestion_service: SuggestionService
    eligibility_service: EligibilityService
    nutrition_service: MealNutritionService
    pantry_service: PantryService
    favorites_service: FavoritesService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    catalog_repository = SupabaseCatalogRepository(supabase_client)
    ingredient_repository = SupabaseIngredientRepository(supabase_client)
    pantry_repository = SupabasePantryRepository(supabase_client)
    favorites_repository = SupabaseFavoritesRepository(supabase_client)
    activity_repository = SupabaseActivityRepository(supabase_client)
    preferences_repository = SupabasePreferencesRepository(supabase_client)
    cache = InMemoryCache()

    suggestion_service = SuggestionService(
        catalog=catalog_repository,
        pantry=pantry_repository,
        favorites=favorites_repository,
        activity=activity_repository,
        preferences=preferences_repository,
        cache=cache,
        suggestion_ttl_seconds=resolved_settings.suggestion_cache_ttl_seconds,
        pantry_filter_ttl_seconds=resolved_settings.pantry_filter_cache_ttl_seconds,
        concurrency=resolved_settings.eligibility_concurrency,
        recent_days=resolved_settings.recent_days,
        default_page_size=resolved_settings.default_page_size,
        random_pool_size=resolved_settings.random_pool_size,
        random_count=resolved_settings.random_count,
        debug=resolved_settings.debug,
    )
    return AppContainer(
        settings=resolved_settings,
        cache=cache,
        suggestion_service=suggestion_service,
        eligibility_service=EligibilityService(catalog_repository, pantry_repository),
        nutrition_service=MealNutritionService(
            ingredients=ingredient_repository, catalog=catalog_repository
        ),
        pantry_service=PantryService(
            repository=pantry_repository,
            ingredients=ingredient_repository,
            cache=cache,
        ),
        favorites_service=FavoritesService(
            repository=favorites_repository, cache=cache
        ),
    )
