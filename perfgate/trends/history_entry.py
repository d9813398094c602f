from __future__ import annotations

import datetime

import msgspec


class MetricSnapshot(msgspec.Struct, kw_only=True):
    """The comparable subset of a run summary kept in the history log."""

    samples: int | None = None
    error_percentage: float | None = None
    average: int | None = None
    p90: int | None = None
    p95: int | None = None
    p99: int | None = None
    throughput: float | None = None
    status: str | None = None


class PlanSnapshot(msgspec.Struct, kw_only=True):
    summary: MetricSnapshot = msgspec.field(default_factory=MetricSnapshot)
    transactions: dict[str, MetricSnapshot] = msgspec.field(default_factory=dict)


class HistoryEntry(msgspec.Struct, kw_only=True):
    timestamp: str = ""
    plans: dict[str, PlanSnapshot] = msgspec.field(default_factory=dict)

    @classmethod
    def now(cls, plans: dict[str, PlanSnapshot]) -> HistoryEntry:
        return cls(
            timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            plans=plans,
        )
