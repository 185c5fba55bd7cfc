"""Weighted random selection without replacement."""

import random
from collections.abc import Callable, Sequence
from operator import attrgetter
from typing import Protocol, TypeVar

T = TypeVar("T")

MIN_WEIGHT = 1.0


class RandomSource(Protocol):
    """Anything that can draw a uniform float, such as random.Random."""

    def uniform(self, a: float, b: float) -> float:
        """Return a float N such that a <= N <= b."""


def sample_without_replacement(
    items: Sequence[T],
    count: int,
    weight: Callable[[T], float] = attrgetter("weight_score"),
    rng: RandomSource | None = None,
) -> list[T]:
    """Pick up to count items, each with probability proportional to its weight.

    Weights below 1 are raised to 1 so every item stays selectable.
    """
    if count <= 0:
        return []
    if len(items) <= count:
        return list(items)

    source = rng or random.Random()
    remaining = [(item, max(float(weight(item)), MIN_WEIGHT)) for item in items]
    selected: list[T] = []
    while len(selected) < count:
        total = sum(item_weight for _, item_weight in remaining)
        draw = source.uniform(0, total)
        index = len(remaining) - 1
        for position, (_, item_weight) in enumerate(remaining):
            draw -= item_weight
            if draw <= 0:
                index = position
                break
        item, _ = remaining.pop(index)
        selected.append(item)
    return selected
