from __future__ import annotations

import math
from dataclasses import dataclass, field

from perfgate.digest import DigestConfig, TDigest
from perfgate.records import SampleRecord

from .metric_summary import MetricSummary


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


@dataclass(slots=True)
class RunningAccumulator:
    """Running statistics for one aggregation scope."""

    _config: DigestConfig = field(default_factory=DigestConfig.from_env)
    count: int = field(default=0, init=False)
    errors: int = field(default=0, init=False)
    sum_elapsed: int = field(default=0, init=False)
    min_elapsed: float = field(default=float("inf"), init=False)
    max_elapsed: float = field(default=0, init=False)
    bytes_received: int = field(default=0, init=False)
    bytes_sent: int = field(default=0, init=False)
    first_timestamp: float = field(default=float("inf"), init=False)
    last_timestamp: float = field(default=0, init=False)
    digest: TDigest = field(init=False)

    def __post_init__(self) -> None:
        self.digest = TDigest(_config=self._config)

    def update(self, record: SampleRecord) -> None:
        self.count += 1
        if not record.success:
            self.errors += 1

        self.sum_elapsed += record.elapsed
        self.min_elapsed = min(self.min_elapsed, record.elapsed)
        self.max_elapsed = max(self.max_elapsed, record.elapsed)
        self.bytes_received += record.bytes_received
        self.bytes_sent += record.bytes_sent

        # Zero timestamps come from coerced fields and carry no clock reading.
        if record.timestamp > 0:
            self.first_timestamp = min(self.first_timestamp, record.timestamp)
            self.last_timestamp = max(self.last_timestamp, record.timestamp)

        self.digest.add(record.elapsed)

    def merge(self, other: RunningAccumulator) -> RunningAccumulator:
        self.count += other.count
        self.errors += other.errors
        self.sum_elapsed += other.sum_elapsed
        self.min_elapsed = min(self.min_elapsed, other.min_elapsed)
        self.max_elapsed = max(self.max_elapsed, other.max_elapsed)
        self.bytes_received += other.bytes_received
        self.bytes_sent += other.bytes_sent
        self.first_timestamp = min(self.first_timestamp, other.first_timestamp)
        self.last_timestamp = max(self.last_timestamp, other.last_timestamp)
        self.digest.merge(other.digest)
        return self

    @property
    def duration_seconds(self) -> float | None:
        if self.last_timestamp > self.first_timestamp:
            return (self.last_timestamp - self.first_timestamp) / 1000

        return None

    def _percentile(self, quantile: float) -> int | None:
        value = self.digest.quantile(quantile)
        if value is None or not math.isfinite(value):
            return None

        return round_half_up(value)

    def finalize(self, name: str) -> MetricSummary:
        duration = self.duration_seconds
        has_samples = self.count > 0

        if duration and has_samples:
            throughput = self.count / duration
            received_kb_per_sec = self.bytes_received / 1024 / duration
            sent_kb_per_sec = self.bytes_sent / 1024 / duration

        else:
            throughput = 0.0
            received_kb_per_sec = 0.0
            sent_kb_per_sec = 0.0

        return MetricSummary(
            name=name,
            samples=self.count,
            errors=self.errors,
            error_percentage=(
                round(100 * self.errors / self.count, 2) if has_samples else 0.0
            ),
            average_response_time=(
                round_half_up(self.sum_elapsed / self.count) if has_samples else 0
            ),
            min_response_time=int(self.min_elapsed) if has_samples else None,
            max_response_time=int(self.max_elapsed) if has_samples else None,
            p90_response_time=self._percentile(0.90),
            p95_response_time=self._percentile(0.95),
            p99_response_time=self._percentile(0.99),
            throughput=round(throughput, 2),
            received_kb_per_sec=round(received_kb_per_sec, 2),
            sent_kb_per_sec=round(sent_kb_per_sec, 2),
            duration_seconds=round_half_up(duration) if duration else None,
        )
