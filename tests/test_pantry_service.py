"""Tests for pantry and favorites services."""

from uuid import uuid4

import pytest

from meal_engine.errors import CollaboratorError, InvalidInputError
from meal_engine.services.cache import user_cache_key
from meal_engine.services.pantry import FavoritesService, PantryService
from tests.conftest import FailingCache, make_ingredient


@pytest.fixture
def pantry_service(pantry_repository, ingredient_repository, cache) -> PantryService:
    return PantryService(
        repository=pantry_repository, ingredients=ingredient_repository, cache=cache
    )


@pytest.fixture
def favorites_service(favorites_repository, cache) -> FavoritesService:
    return FavoritesService(repository=favorites_repository, cache=cache)


def _prime(cache, user_id) -> list[str]:
    keys = [
        user_cache_key("suggestions", user_id, "{}"),
        user_cache_key("pantry-filter", user_id, "{}"),
    ]
    for key in keys:
        cache.set(key, "cached", ttl_seconds=60)
    return keys


def test_add_ingredient_invalidates_cache(
    pantry_service, ingredient_repository, cache, user_id
) -> None:
    rice = ingredient_repository.add(make_ingredient("Rice", 130))
    other_user = uuid4()
    keys = _prime(cache, user_id)
    other_key = user_cache_key("suggestions", other_user, "{}")
    cache.set(other_key, "cached", ttl_seconds=60)

    pantry_service.add(user_id, rice.id)

    assert pantry_service.list_items(user_id) == {rice.id}
    assert [cache.get(key) for key in keys] == [None, None]
    assert cache.get(other_key) == "cached"


def test_add_unknown_ingredient_is_rejected(pantry_service, cache, user_id) -> None:
    keys = _prime(cache, user_id)

    with pytest.raises(InvalidInputError):
        pantry_service.add(user_id, uuid4())

    assert pantry_service.list_items(user_id) == set()
    assert cache.get(keys[0]) == "cached"


def test_remove_missing_ingredient_keeps_cache(
    pantry_service, cache, user_id
) -> None:
    keys = _prime(cache, user_id)

    assert pantry_service.remove(user_id, uuid4()) is False
    assert cache.get(keys[0]) == "cached"


def test_replace_deduplicates_and_invalidates(
    pantry_service, ingredient_repository, cache, user_id
) -> None:
    rice = ingredient_repository.add(make_ingredient("Rice", 130))
    onion = ingredient_repository.add(make_ingredient("Onion", 40))
    keys = _prime(cache, user_id)

    pantry_service.replace(user_id, [rice.id, onion.id, rice.id])

    assert pantry_service.list_items(user_id) == {rice.id, onion.id}
    assert cache.get(keys[1]) is None
    assert pantry_service.remove(user_id, onion.id) is True
    assert pantry_service.list_items(user_id) == {rice.id}



def test_failed_replace_keeps_pantry_and_still_invalidates(
    pantry_service, pantry_repository, ingredient_repository, cache, user_id
) -> None:
    rice = ingredient_repository.add(make_ingredient("Rice", 130))
    onion = ingredient_repository.add(make_ingredient("Onion", 40))
    pantry_service.add(user_id, rice.id)
    keys = _prime(cache, user_id)
    pantry_repository.fail = True

    with pytest.raises(CollaboratorError):
        pantry_service.replace(user_id, [onion.id])

    assert pantry_service.list_items(user_id) == {rice.id}
    assert cache.get(keys[0]) is None

def test_ingredient_lookup_failure_is_wrapped(
    pantry_repository, ingredient_repository, cache, user_id
) -> None:
    ingredient_repository.fail = True
    service = PantryService(pantry_repository, ingredient_repository, cache)

    with pytest.raises(CollaboratorError):
        service.add(user_id, uuid4())


def test_cache_failures_do_not_block_pantry_changes(
    pantry_repository, ingredient_repository, user_id
) -> None:
    rice = ingredient_repository.add(make_ingredient("Rice", 130))
    service = PantryService(pantry_repository, ingredient_repository, FailingCache())

    service.add(user_id, rice.id)

    assert service.list_items(user_id) == {rice.id}


def test_favorite_toggle_invalidates_cache(favorites_service, cache, user_id) -> None:
    meal_id = uuid4()
    keys = _prime(cache, user_id)

    favorites_service.add(user_id, meal_id)

    assert favorites_service.is_favorite(user_id, meal_id) is True
    assert cache.get(keys[0]) is None

    keys = _prime(cache, user_id)
    assert favorites_service.remove(user_id, meal_id) is True
    assert favorites_service.is_favorite(user_id, meal_id) is False
    assert cache.get(keys[1]) is None
    assert favorites_service.remove(user_id, meal_id) is False
