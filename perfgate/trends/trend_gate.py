from __future__ import annotations

from dataclasses import dataclass

from .trend_engine import PlanTrends


@dataclass(frozen=True, slots=True)
class TrendGate:
    """
    Flags a run whose overall error percentage rose, or whose overall
    throughput fell, by more than ``threshold_pct`` percent against the
    previous run.
    """

    threshold_pct: float = 10.0

    def check(self, trends: PlanTrends | None) -> list[str]:
        if trends is None:
            return []

        violations: list[str] = []

        error_rate = trends.summary.get("error_percentage")
        if (
            error_rate is not None
            and error_rate.direction == "up"
            and error_rate.pct is not None
            and error_rate.pct > self.threshold_pct
        ):
            violations.append(
                f"Overall error rate increased by {error_rate.pct:.1f}%"
            )

        throughput = trends.summary.get("throughput")
        if (
            throughput is not None
            and throughput.direction == "down"
            and throughput.pct is not None
            and abs(throughput.pct) > self.threshold_pct
        ):
            violations.append(
                f"Overall throughput decreased by {abs(throughput.pct):.1f}%"
            )

        return violations
