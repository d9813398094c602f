import msgspec

from perfgate.slo import SLOBreach, SLOStatus
from perfgate.trends import PlanTrends


class OverallSummary(msgspec.Struct, kw_only=True):
    total_samples: int
    error_count: int
    error_percentage: float
    average_response_time: int
    min_response_time: int | None
    max_response_time: int | None
    p90_response_time: int | None
    p95_response_time: int | None
    p99_response_time: int | None
    throughput: float
    received_kb_per_sec: float
    sent_kb_per_sec: float
    duration_seconds: int | None
    status: SLOStatus


class TransactionSummary(msgspec.Struct, kw_only=True):
    name: str
    samples: int
    errors: int
    error_percentage: float
    avg_time: int
    min_time: int | None
    max_time: int | None
    p90: int | None
    p95: int | None
    p99: int | None
    throughput: float
    received_kb_per_sec: float
    sent_kb_per_sec: float
    duration_seconds: int | None


class SLOReport(msgspec.Struct, kw_only=True):
    status: SLOStatus
    source: str
    breaches: list[SLOBreach] = msgspec.field(default_factory=list)
    config: dict = msgspec.field(default_factory=dict)


class RunSummary(msgspec.Struct, kw_only=True):
    test_plan: str
    summary: OverallSummary
    transactions: list[TransactionSummary] = msgspec.field(default_factory=list)
    slo: SLOReport
    trends: PlanTrends | None = None
    warnings: list[str] = msgspec.field(default_factory=list)

    @property
    def status(self) -> SLOStatus:
        return self.slo.status
