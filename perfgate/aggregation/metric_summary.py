import msgspec

OVERALL_SCOPE = "OVERALL"


class MetricSummary(msgspec.Struct, frozen=True, kw_only=True):
    """Finalized, immutable metrics for one aggregation scope."""

    name: str
    samples: int
    errors: int
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
