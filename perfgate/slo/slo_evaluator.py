from __future__ import annotations

from typing import Callable, Iterator, Mapping

from perfgate.aggregation import MetricSummary

from .scope_rules import ScopeRules, SLOMetric
from .slo_breach import BreachScope, SLOBreach
from .slo_config import SLOConfig
from .slo_status import SLOStatus
from .slo_verdict import SLOVerdict

# Checked in this order within every scope. Values are the rounded,
# reported ones so a verdict can be reproduced from the summary alone.
CHECKED_METRICS: tuple[tuple[SLOMetric, Callable[[MetricSummary], float | int | None]], ...] = (
    ("error_rate_pct", lambda summary: summary.error_percentage),
    ("p95_ms", lambda summary: summary.p95_response_time),
    ("throughput_rps", lambda summary: summary.throughput),
)


def _check_scope(
    scope: BreachScope,
    label: str | None,
    rules: ScopeRules,
    summary: MetricSummary,
) -> Iterator[SLOBreach]:
    for metric, reported_value in CHECKED_METRICS:
        constraint = rules.constraint_for(metric)
        if constraint is None:
            continue

        value = reported_value(summary)
        if constraint.check(value) is False:
            yield SLOBreach(
                scope=scope,
                label=label,
                metric=metric,
                value=value,
                rule=constraint.to_rule(),
            )


def evaluate(
    config: SLOConfig,
    overall: MetricSummary,
    per_label: Mapping[str, MetricSummary],
) -> SLOVerdict:
    """
    Evaluate the global rules against the OVERALL summary, then each
    configured label in declaration order. Labels absent from the run are
    skipped.
    """
    breaches = list(_check_scope("global", None, config.global_, overall))

    for label, rules in config.labels.items():
        if (summary := per_label.get(label)) is None:
            continue

        breaches.extend(_check_scope("label", label, rules, summary))

    return SLOVerdict(
        status=SLOStatus.FAIL if breaches else SLOStatus.PASS,
        breaches=breaches,
    )
