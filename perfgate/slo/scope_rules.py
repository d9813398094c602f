from typing import Literal

from pydantic import BaseModel, ConfigDict

from .constraint import Constraint

SLOMetric = Literal["error_rate_pct", "p95_ms", "throughput_rps"]


class ScopeRules(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    error_rate_pct: Constraint | None = None
    p95_ms: Constraint | None = None
    throughput_rps: Constraint | None = None

    def constraint_for(self, metric: SLOMetric) -> Constraint | None:
        return getattr(self, metric)
