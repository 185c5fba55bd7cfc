"""Tests for the meal nutrition service."""

from dataclasses import replace
from uuid import uuid4

import pytest

from meal_engine.domain.ingredients import IngredientStatus
from meal_engine.errors import CollaboratorError, InvalidInputError, NotFoundError
from meal_engine.services.nutrition import MealNutritionService
from meal_engine.services.quality import WarningKind
from tests.conftest import (
    InMemoryCatalogRepository,
    InMemoryIngredientRepository,
    make_ingredient,
    make_link,
    make_meal,
)


@pytest.fixture
def kabsa(ingredient_repository: InMemoryIngredientRepository):
    rice = ingredient_repository.add(make_ingredient("Rice", 130, 2.7, 28, 0.3))
    chicken = ingredient_repository.add(
        make_ingredient("Chicken", 165, 31, 0, 3.6, {"iron": 1.0})
    )
    meal = make_meal("Kabsa", servings=2)
    links = (
        make_link(meal.id, "Rice", quantity=2, unit="cup", ingredient_id=rice.id),
        make_link(
            meal.id,
            "Chicken",
            IngredientStatus.RECOMMENDED,
            quantity=300,
            unit="g",
            ingredient_id=chicken.id,
        ),
    )
    return replace(meal, ingredients=links)


def _service(ingredients, catalog, warning_sink) -> MealNutritionService:
    return MealNutritionService(
        ingredients=ingredients, catalog=catalog, warning_sink=warning_sink
    )


def test_compute_for_meal_uses_catalog_servings(
    kabsa, ingredient_repository, warning_sink
) -> None:
    service = _service(
        ingredient_repository, InMemoryCatalogRepository([kabsa]), warning_sink
    )

    nutrition = service.compute_for_meal(kabsa.id)

    assert nutrition.servings == 2
    assert nutrition.total_calories == 976.0
    assert nutrition.per_serving.calories == 488.0
    assert nutrition.total_minerals == {"iron": 3.0}
    assert [item.grams for item in nutrition.contributions] == [370, 300]
    assert warning_sink.warnings == []


def test_missing_profile_counts_as_zero_nutrients(
    kabsa, ingredient_repository, warning_sink
) -> None:
    ghost = make_link(kabsa.id, "Saffron", quantity=1, unit="g")
    service = _service(
        ingredient_repository, InMemoryCatalogRepository(), warning_sink
    )

    nutrition = service.compute_for_links([*kabsa.ingredients, ghost], servings=2)

    assert nutrition.total_calories == 976.0
    assert nutrition.contributions[-1].calories == 0
    assert warning_sink.kinds() == [WarningKind.MISSING_PROFILE]
    assert warning_sink.warnings[0].subject == str(ghost.ingredient_id)


def test_link_without_name_takes_catalog_name(
    ingredient_repository, warning_sink
) -> None:
    rice = ingredient_repository.add(make_ingredient("Rice", 130))
    link = make_link(uuid4(), "", quantity=1, unit="cup", ingredient_id=rice.id)
    service = _service(
        ingredient_repository, InMemoryCatalogRepository(), warning_sink
    )

    nutrition = service.compute_for_links([link])

    assert nutrition.contributions[0].name == "Rice"
    assert nutrition.contributions[0].grams == 185


def test_profile_lookup_failure_propagates(kabsa, warning_sink) -> None:
    service = _service(
        InMemoryIngredientRepository(fail=True),
        InMemoryCatalogRepository([kabsa]),
        warning_sink,
    )

    with pytest.raises(CollaboratorError) as exc_info:
        service.compute_for_meal(kabsa.id)

    assert exc_info.value.collaborator == "ingredient profiles"
    assert isinstance(exc_info.value.cause, TimeoutError)


def test_unknown_meal_raises_not_found(ingredient_repository, warning_sink) -> None:
    service = _service(
        ingredient_repository, InMemoryCatalogRepository(), warning_sink
    )

    with pytest.raises(NotFoundError):
        service.compute_for_meal(uuid4())


def test_invalid_servings_are_rejected(
    kabsa, ingredient_repository, warning_sink
) -> None:
    broken = replace(kabsa, servings=0)
    service = _service(
        ingredient_repository, InMemoryCatalogRepository([broken]), warning_sink
    )

    with pytest.raises(InvalidInputError):
        service.compute_for_meal(broken.id)



def test_non_positive_quantity_names_meal_and_ingredient(
    kabsa, ingredient_repository, warning_sink
) -> None:
    rice, chicken = kabsa.ingredients
    broken = replace(kabsa, ingredients=(rice, replace(chicken, quantity=0.0)))
    service = _service(
        ingredient_repository, InMemoryCatalogRepository([broken]), warning_sink
    )

    with pytest.raises(InvalidInputError) as exc_info:
        service.compute_for_meal(broken.id)

    assert str(broken.id) in str(exc_info.value)
    assert str(chicken.ingredient_id) in str(exc_info.value)

def test_daily_values_for_meal(kabsa, ingredient_repository, warning_sink) -> None:
    service = _service(
        ingredient_repository, InMemoryCatalogRepository([kabsa]), warning_sink
    )

    percentages = service.daily_values_for_meal(kabsa.id)

    assert percentages["calories"] == 24
    assert percentages["iron"] == 8
