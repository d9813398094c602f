from __future__ import annotations

import msgspec

from .history_entry import HistoryEntry, MetricSnapshot, PlanSnapshot
from .trend_delta import TrendDelta, compute_delta
from .trend_policy import TrendPolicy

TRACKED_METRICS: tuple[tuple[str, TrendPolicy], ...] = (
    ("p95", TrendPolicy.LOWER_IS_BETTER),
    ("p99", TrendPolicy.LOWER_IS_BETTER),
    ("average", TrendPolicy.LOWER_IS_BETTER),
    ("error_percentage", TrendPolicy.LOWER_IS_BETTER),
    ("throughput", TrendPolicy.HIGHER_IS_BETTER),
)


class PlanTrends(msgspec.Struct, kw_only=True):
    previous_timestamp: str
    summary: dict[str, TrendDelta] = msgspec.field(default_factory=dict)
    transactions: dict[str, dict[str, TrendDelta]] = msgspec.field(
        default_factory=dict
    )


class TrendEngine:
    def __init__(
        self,
        metrics: tuple[tuple[str, TrendPolicy], ...] = TRACKED_METRICS,
    ) -> None:
        self._metrics = metrics

    def compare(
        self,
        current: MetricSnapshot,
        previous: MetricSnapshot,
    ) -> dict[str, TrendDelta]:
        deltas: dict[str, TrendDelta] = {}
        for metric, policy in self._metrics:
            delta = compute_delta(
                getattr(current, metric, None),
                getattr(previous, metric, None),
                policy,
            )

            if delta is not None:
                deltas[metric] = delta

        return deltas

    def compute(
        self,
        plan_name: str,
        snapshot: PlanSnapshot,
        previous_entry: HistoryEntry | None,
    ) -> PlanTrends | None:
        """
        Compare a plan against the same plan in the most recent history
        entry. Transactions are compared only when both runs saw them.
        Returns None when there is nothing to compare against.
        """
        if previous_entry is None:
            return None

        previous = previous_entry.plans.get(plan_name)
        if previous is None:
            return None

        transactions: dict[str, dict[str, TrendDelta]] = {}
        for label, current_transaction in snapshot.transactions.items():
            previous_transaction = previous.transactions.get(label)
            if previous_transaction is None:
                continue

            transactions[label] = self.compare(
                current_transaction,
                previous_transaction,
            )

        return PlanTrends(
            previous_timestamp=previous_entry.timestamp,
            summary=self.compare(snapshot.summary, previous.summary),
            transactions=transactions,
        )
