from __future__ import annotations

from typing import Iterable

from perfgate.digest import DigestConfig
from perfgate.records import SampleRecord

from .metric_summary import OVERALL_SCOPE, MetricSummary
from .running_accumulator import RunningAccumulator


class Aggregator:
    """
    Maintains the OVERALL accumulator plus one accumulator per label.

    A scope of None addresses the OVERALL accumulator and any string
    addresses the accumulator of that label, so a label that happens to
    be named "OVERALL" never collides with the overall scope. Label
    accumulators are created lazily and kept in first-seen order.
    """

    def __init__(self, config: DigestConfig | None = None) -> None:
        self._config = config or DigestConfig.from_env()
        self._overall = RunningAccumulator(_config=self._config)
        self._labels: dict[str, RunningAccumulator] = {}

    @property
    def labels(self) -> list[str]:
        return list(self._labels)

    @property
    def samples(self) -> int:
        return self._overall.count

    def accumulator(self, scope: str | None = None) -> RunningAccumulator:
        if scope is None:
            return self._overall

        if (accumulator := self._labels.get(scope)) is None:
            accumulator = RunningAccumulator(_config=self._config)
            self._labels[scope] = accumulator

        return accumulator

    def update(self, scope: str | None, record: SampleRecord) -> None:
        self.accumulator(scope).update(record)

    def ingest(self, record: SampleRecord) -> None:
        self._overall.update(record)
        self.accumulator(record.label).update(record)

    def consume(self, records: Iterable[SampleRecord]) -> int:
        ingested = 0
        for record in records:
            self.ingest(record)
            ingested += 1

        return ingested

    def finalize(self, scope: str | None = None) -> MetricSummary:
        if scope is None:
            return self._overall.finalize(OVERALL_SCOPE)

        if (accumulator := self._labels.get(scope)) is None:
            raise KeyError(f"Err. - no samples were aggregated for label {scope}")

        return accumulator.finalize(scope)

    def finalize_labels(self) -> dict[str, MetricSummary]:
        return {
            label: accumulator.finalize(label)
            for label, accumulator in self._labels.items()
        }

    def merge(self, other: Aggregator) -> Aggregator:
        """Fold another worker's aggregates into this one."""
        self._overall.merge(other._overall)

        for label, accumulator in other._labels.items():
            self.accumulator(label).merge(accumulator)

        return self
