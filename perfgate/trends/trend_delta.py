from __future__ import annotations

import math
from numbers import Real
from typing import Literal

import msgspec

from .trend_policy import TrendPolicy

Direction = Literal["up", "down", "neutral"]


class TrendDelta(msgspec.Struct, frozen=True, kw_only=True):
    current: float | int
    previous: float | int
    diff: float | int
    pct: float | None
    direction: Direction
    good: bool | None


def _is_finite_number(value: object) -> bool:
    return (
        not isinstance(value, bool)
        and isinstance(value, Real)
        and math.isfinite(value)
    )


def compute_delta(
    current: float | int | None,
    previous: float | int | None,
    policy: TrendPolicy | str | None = TrendPolicy.NEUTRAL,
) -> TrendDelta | None:
    """
    Compare a current metric value with the previous run's value. Returns
    None when either value is missing or not a finite number.
    """
    if not _is_finite_number(current) or not _is_finite_number(previous):
        return None

    policy = TrendPolicy.parse(policy)

    diff = current - previous
    pct = None if previous == 0 else diff / previous * 100

    direction: Direction = "neutral"
    if diff < 0:
        direction = "down"
    elif diff > 0:
        direction = "up"

    good: bool | None = None
    if direction != "neutral":
        if policy == TrendPolicy.LOWER_IS_BETTER:
            good = direction == "down"
        elif policy == TrendPolicy.HIGHER_IS_BETTER:
            good = direction == "up"

    return TrendDelta(
        current=current,
        previous=previous,
        diff=diff,
        pct=pct,
        direction=direction,
        good=good,
    )
