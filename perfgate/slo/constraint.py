from __future__ import annotations

from numbers import Real

from pydantic import BaseModel, ConfigDict, field_validator

Bound = float | int


class Constraint(BaseModel):
    """Numeric bounds on a single metric. Every bound that is set must hold."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    gte: Bound | None = None
    lte: Bound | None = None
    gt: Bound | None = None
    lt: Bound | None = None

    @field_validator("gte", "lte", "gt", "lt", mode="before")
    @classmethod
    def _ignore_non_numeric(cls, value: object) -> object:
        if isinstance(value, bool) or not isinstance(value, Real):
            return None

        return value

    def check(self, value: float | int | None) -> bool:
        if value is None:
            return True

        if self.gte is not None and not value >= self.gte:
            return False

        if self.lte is not None and not value <= self.lte:
            return False

        if self.gt is not None and not value > self.gt:
            return False

        if self.lt is not None and not value < self.lt:
            return False

        return True

    def to_rule(self) -> dict[str, Bound]:
        return self.model_dump(exclude_none=True)
