from __future__ import annotations

from enum import Enum


class TrendPolicy(Enum):
    LOWER_IS_BETTER = "lowerIsBetter"
    HIGHER_IS_BETTER = "higherIsBetter"
    NEUTRAL = "neutral"

    @classmethod
    def parse(cls, policy: TrendPolicy | str | None) -> TrendPolicy:
        if isinstance(policy, TrendPolicy):
            return policy

        if policy is None:
            return cls.NEUTRAL

        try:
            return cls(policy)

        except ValueError:
            return cls.NEUTRAL
