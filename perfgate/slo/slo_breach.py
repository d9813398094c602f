from typing import Literal

import msgspec

from .scope_rules import SLOMetric

BreachScope = Literal["global", "label"]


class SLOBreach(msgspec.Struct, frozen=True, kw_only=True, omit_defaults=True):
    scope: BreachScope
    label: str | None = None
    metric: SLOMetric
    value: float | int
    rule: dict[str, float | int]
