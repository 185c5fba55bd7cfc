"""Error types raised by the meal engine."""

from collections.abc import Iterator
from contextlib import contextmanager


class MealEngineError(Exception):
    """Base class for engine errors."""


class InvalidInputError(MealEngineError, ValueError):
    """Raised when a caller passes input the engine cannot work with."""


class NotFoundError(MealEngineError):
    """Raised when a referenced record does not exist."""

    def __init__(self, resource: str, identifier: object) -> None:
        super().__init__(f"{resource} with id '{identifier}' not found")
        self.resource = resource
        self.identifier = identifier


class CollaboratorError(MealEngineError):
    """Raised when an external data source fails."""

    def __init__(self, collaborator: str, cause: BaseException) -> None:
        super().__init__(f"{collaborator} lookup failed: {cause}")
        self.collaborator = collaborator
        self.cause = cause


class SuggestionCancelledError(MealEngineError):
    """Raised when a suggestion request is cancelled between evaluations."""


@contextmanager
def collaborator_call(collaborator: str) -> Iterator[None]:
    """Re-raise repository failures as CollaboratorError."""
    try:
        yield
    except MealEngineError:
        raise
    except Exception as exc:
        raise CollaboratorError(collaborator, exc) from exc
