"""Conversion of recipe quantities to grams."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from meal_engine.errors import InvalidInputError
from meal_engine.services.quality import (
    DataQualityWarning,
    WarningKind,
    WarningSink,
    log_data_quality_warning,
)

# Volume and count entries are approximations; density and size vary.
GENERAL_UNIT_GRAMS: dict[str, float] = {
    "gram": 1,
    "g": 1,
    "kilogram": 1000,
    "kg": 1000,
    "ounce": 28.35,
    "oz": 28.35,
    "pound": 453.59,
    "lb": 453.59,
    "cup": 240,
    "tablespoon": 15,
    "tbsp": 15,
    "teaspoon": 5,
    "tsp": 5,
    "liter": 1000,
    "l": 1000,
    "milliliter": 1,
    "ml": 1,
    "piece": 100,
    "slice": 30,
    "clove": 3,
    "small": 75,
    "medium": 150,
    "large": 200,
}

INGREDIENT_UNIT_GRAMS: dict[str, dict[str, float]] = {
    "rice": {"cup": 185, "cup_raw": 195},
    "flour": {"cup": 120},
    "milk": {"cup": 240},
    "oil": {"tablespoon": 14, "cup": 218},
    "onion": {"piece": 150, "medium": 150, "large": 200, "small": 100},
    "garlic": {"clove": 3, "piece": 3},
    "potato": {"piece": 150, "medium": 150, "large": 200, "small": 100},
}

_WHITESPACE = re.compile(r"\s+")


class ConversionSource(StrEnum):
    """Which table produced a conversion factor."""

    OVERRIDE = "override"
    GENERAL = "general"
    ASSUMED_GRAMS = "assumed_grams"


@dataclass(frozen=True)
class UnitConversion:
    """Result of converting a quantity to grams."""

    grams: float
    factor: float
    source: ConversionSource


def normalize_unit(unit: str) -> str:
    """Lowercase and trim a unit string."""
    return unit.strip().lower()


def ingredient_key(name: str) -> str:
    """Return the override-table key for an ingredient name."""
    return _WHITESPACE.sub("_", name.strip().lower())


@dataclass(frozen=True)
class UnitOverrides:
    """Ingredient-specific gram factors: ingredient key -> unit -> grams."""

    table: Mapping[str, Mapping[str, float]] = field(
        default_factory=lambda: INGREDIENT_UNIT_GRAMS
    )

    def factor_for(self, ingredient_name: str | None, unit: str) -> float | None:
        """Return the override factor for a normalized unit, if any."""
        if not ingredient_name:
            return None
        units = self.table.get(ingredient_key(ingredient_name))
        if units is None:
            return None
        return units.get(unit)


@dataclass
class UnitNormalizer:
    """Converts (quantity, unit, ingredient) triples to grams."""

    overrides: UnitOverrides = field(default_factory=UnitOverrides)
    general: Mapping[str, float] = field(default_factory=lambda: GENERAL_UNIT_GRAMS)
    warning_sink: WarningSink = log_data_quality_warning

    def convert(
        self, quantity: float, unit: str, ingredient_name: str | None = None
    ) -> UnitConversion:
        """Convert a quantity to grams and report which table was used."""
        if quantity <= 0:
            raise InvalidInputError(f"Quantity must be positive, got {quantity}")
        normalized = normalize_unit(unit)

        override = self.overrides.factor_for(ingredient_name, normalized)
        if override is not None:
            return UnitConversion(
                grams=quantity * override,
                factor=override,
                source=ConversionSource.OVERRIDE,
            )

        general = self.general.get(normalized)
        if general is not None:
            return UnitConversion(
                grams=quantity * general,
                factor=general,
                source=ConversionSource.GENERAL,
            )

        self.warning_sink(
            DataQualityWarning(
                kind=WarningKind.UNKNOWN_UNIT,
                subject=unit,
                detail=f"assuming grams for {ingredient_name or 'ingredient'}",
            )
        )
        return UnitConversion(
            grams=quantity * 1,
            factor=1,
            source=ConversionSource.ASSUMED_GRAMS,
        )

    def to_grams(
        self, quantity: float, unit: str, ingredient_name: str | None = None
    ) -> float:
        """Return the quantity expressed in grams."""
        return self.convert(quantity, unit, ingredient_name).grams


def to_grams(quantity: float, unit: str, ingredient_name: str | None = None) -> float:
    """Convert with the default tables."""
    return UnitNormalizer().to_grams(quantity, unit, ingredient_name)
