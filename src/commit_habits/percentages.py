"""Integer percentages that never divide by zero."""

from __future__ import annotations

import math
from collections.abc import Sequence


def half_up(value: float) -> int:
    return math.floor(value + 0.5)


def percent(part: int | float, total: int | float) -> int:
    """``part / total`` as a whole percentage, 0 when ``total`` is 0."""
    if not total:
        return 0
    return half_up(part * 100 / total)


def apportion(counts: Sequence[int]) -> list[int]:
    """Split 100 across ``counts`` with the largest-remainder method.

    Every share is the floor or ceiling of its exact percentage and the
    shares sum to exactly 100. Equal remainders favour the lower index.
    All zeros when the counts sum to zero.
    """
    total = sum(counts)
    if total <= 0:
        return [0] * len(counts)
    floors = [c * 100 // total for c in counts]
    remainders = [c * 100 % total for c in counts]
    leftover = 100 - sum(floors)
    order = sorted(range(len(counts)), key=lambda i: (-remainders[i], i))
    for i in order[:leftover]:
        floors[i] += 1
    return floors
