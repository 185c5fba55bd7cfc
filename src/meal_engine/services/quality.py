"""Non-fatal data quality signals."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum

_logger = logging.getLogger(__name__)


class WarningKind(StrEnum):
    """Categories of catalog data problems the engine tolerates."""

    UNKNOWN_UNIT = "unknown_unit"
    UNKNOWN_NUTRIENT = "unknown_nutrient"
    UNKNOWN_STATUS = "unknown_status"
    MISSING_PROFILE = "missing_profile"
    EMPTY_MEAL = "empty_meal"
    INVALID_QUANTITY = "invalid_quantity"


@dataclass(frozen=True)
class DataQualityWarning:
    """A tolerated data problem, reported for monitoring."""

    kind: WarningKind
    subject: str
    detail: str


WarningSink = Callable[[DataQualityWarning], None]


def log_data_quality_warning(warning: DataQualityWarning) -> None:
    """Default sink: write the warning to the engine log."""
    _logger.warning(
        "Data quality %s: %s (%s)", warning.kind, warning.subject, warning.detail
    )


@dataclass
class CollectingWarningSink:
    """Sink that keeps warnings in memory and also logs them."""

    warnings: list[DataQualityWarning] = field(default_factory=list)

    def __call__(self, warning: DataQualityWarning) -> None:
        self.warnings.append(warning)
        log_data_quality_warning(warning)

    def kinds(self) -> list[WarningKind]:
        """Return the kinds of collected warnings in order."""
        return [warning.kind for warning in self.warnings]
