from __future__ import annotations

from typing import Iterable, Mapping

import msgspec

from perfgate.aggregation import MetricSummary
from perfgate.slo import SLOConfig, SLOVerdict
from perfgate.trends import MetricSnapshot, PlanSnapshot, PlanTrends

from .run_summary import (
    OverallSummary,
    RunSummary,
    SLOReport,
    TransactionSummary,
)


class SummaryAssembler:
    """
    Shapes finalized aggregates, the SLO verdict and trend deltas into the
    run summary document. Assembly is pure: the same inputs always produce
    byte-identical output from ``encode``.
    """

    def __init__(self, indent: int = 2) -> None:
        self._indent = indent
        self._encoder = msgspec.json.Encoder()

    def assemble(
        self,
        test_plan: str,
        overall: MetricSummary,
        transactions: Mapping[str, MetricSummary],
        verdict: SLOVerdict,
        config: SLOConfig,
        config_source: str = "default",
        trends: PlanTrends | None = None,
        warnings: Iterable[str] | None = None,
    ) -> RunSummary:
        return RunSummary(
            test_plan=test_plan,
            summary=OverallSummary(
                total_samples=overall.samples,
                error_count=overall.errors,
                error_percentage=overall.error_percentage,
                average_response_time=overall.average_response_time,
                min_response_time=overall.min_response_time,
                max_response_time=overall.max_response_time,
                p90_response_time=overall.p90_response_time,
                p95_response_time=overall.p95_response_time,
                p99_response_time=overall.p99_response_time,
                throughput=overall.throughput,
                received_kb_per_sec=overall.received_kb_per_sec,
                sent_kb_per_sec=overall.sent_kb_per_sec,
                duration_seconds=overall.duration_seconds,
                status=verdict.status,
            ),
            transactions=[
                self._transaction(summary) for summary in transactions.values()
            ],
            slo=SLOReport(
                status=verdict.status,
                source=config_source,
                breaches=list(verdict.breaches),
                config=config.to_document(),
            ),
            trends=trends,
            warnings=list(warnings or []),
        )

    def _transaction(self, summary: MetricSummary) -> TransactionSummary:
        return TransactionSummary(
            name=summary.name,
            samples=summary.samples,
            errors=summary.errors,
            error_percentage=summary.error_percentage,
            avg_time=summary.average_response_time,
            min_time=summary.min_response_time,
            max_time=summary.max_response_time,
            p90=summary.p90_response_time,
            p95=summary.p95_response_time,
            p99=summary.p99_response_time,
            throughput=summary.throughput,
            received_kb_per_sec=summary.received_kb_per_sec,
            sent_kb_per_sec=summary.sent_kb_per_sec,
            duration_seconds=summary.duration_seconds,
        )

    def to_snapshot(self, run_summary: RunSummary) -> PlanSnapshot:
        overall = run_summary.summary
        return PlanSnapshot(
            summary=MetricSnapshot(
                samples=overall.total_samples,
                error_percentage=overall.error_percentage,
                average=overall.average_response_time,
                p90=overall.p90_response_time,
                p95=overall.p95_response_time,
                p99=overall.p99_response_time,
                throughput=overall.throughput,
                status=overall.status.value,
            ),
            transactions={
                transaction.name: MetricSnapshot(
                    samples=transaction.samples,
                    error_percentage=transaction.error_percentage,
                    average=transaction.avg_time,
                    p90=transaction.p90,
                    p95=transaction.p95,
                    p99=transaction.p99,
                    throughput=transaction.throughput,
                )
                for transaction in run_summary.transactions
            },
        )

    def encode(self, run_summary: RunSummary) -> bytes:
        return msgspec.json.format(
            self._encoder.encode(run_summary),
            indent=self._indent,
        )

    def decode(self, data: bytes) -> RunSummary:
        return msgspec.json.decode(data, type=RunSummary)
