"""
Tests for SLO evaluation.

Covers:
- Global and per-label breaches in evaluation order
- Skipping labels that were never observed
- Unknown metric values
"""

from perfgate.aggregation import Aggregator, MetricSummary
from perfgate.slo import (
    Constraint,
    ScopeRules,
    SLOConfig,
    SLOStatus,
    default_slo_config,
    evaluate,
)
from tests.helpers import HOMEPAGE_LABEL


def make_summary(name: str = "OVERALL", **overrides) -> MetricSummary:
    values = {
        "name": name,
        "samples": 100,
        "errors": 0,
        "error_percentage": 0.0,
        "average_response_time": 300,
        "min_response_time": 100,
        "max_response_time": 900,
        "p90_response_time": 500,
        "p95_response_time": 600,
        "p99_response_time": 800,
        "throughput": 20.0,
        "received_kb_per_sec": 10.0,
        "sent_kb_per_sec": 2.0,
        "duration_seconds": 5,
    }
    values.update(overrides)
    return MetricSummary(**values)


class TestGlobalRules:
    """Test evaluation of the global scope."""

    def test_passing_run(self) -> None:
        """Test a run within every default bound."""
        verdict = evaluate(default_slo_config(), make_summary(), {})

        assert verdict.status == SLOStatus.PASS
        assert verdict.passed is True
        assert verdict.breaches == []

    def test_breach_order(self) -> None:
        """Test that global breaches follow error rate, p95, throughput."""
        verdict = evaluate(
            default_slo_config(),
            make_summary(error_percentage=12.5, p95_response_time=1800, throughput=1.2),
            {},
        )

        assert verdict.status == SLOStatus.FAIL
        assert [breach.metric for breach in verdict.breaches] == [
            "error_rate_pct",
            "p95_ms",
            "throughput_rps",
        ]
        assert verdict.breaches[1].value == 1800
        assert verdict.breaches[1].rule == {"lte": 1500}
        assert all(breach.scope == "global" for breach in verdict.breaches)
        assert all(breach.label is None for breach in verdict.breaches)

    def test_reported_values_are_compared(self) -> None:
        """Test that the boundary value passes an inclusive bound."""
        verdict = evaluate(
            default_slo_config(),
            make_summary(error_percentage=5.0, p95_response_time=1500, throughput=5.0),
            {},
        )

        assert verdict.passed is True

    def test_unknown_percentile_passes(self) -> None:
        """Test that an unknown p95 never breaches."""
        config = SLOConfig(global_=ScopeRules(p95_ms=Constraint(lte=1)))

        verdict = evaluate(config, make_summary(p95_response_time=None), {})

        assert verdict.passed is True

    def test_empty_run_fails_only_on_throughput(self, digest_config) -> None:
        """Test that a run without samples breaches a positive throughput floor."""
        overall = Aggregator(digest_config).finalize()

        verdict = evaluate(default_slo_config(), overall, {})

        assert [breach.metric for breach in verdict.breaches] == ["throughput_rps"]

        relaxed = SLOConfig(global_=ScopeRules(p95_ms=Constraint(lte=1500)))
        assert evaluate(relaxed, overall, {}).passed is True


class TestLabelRules:
    """Test evaluation of per-label scopes."""

    def test_label_breach_follows_global_breaches(self) -> None:
        """Test ordering of global and label breaches."""
        config = SLOConfig(
            global_=ScopeRules(p95_ms=Constraint(lte=1500)),
            labels={HOMEPAGE_LABEL: ScopeRules(p95_ms=Constraint(lte=800))},
        )

        verdict = evaluate(
            config,
            make_summary(p95_response_time=2100),
            {HOMEPAGE_LABEL: make_summary(HOMEPAGE_LABEL, p95_response_time=2100)},
        )

        assert [(breach.scope, breach.label) for breach in verdict.breaches] == [
            ("global", None),
            ("label", HOMEPAGE_LABEL),
        ]

    def test_labels_evaluated_in_config_order(self) -> None:
        """Test that label scopes follow declaration order, not data order."""
        config = SLOConfig(
            labels={
                "second": ScopeRules(throughput_rps=Constraint(gte=50)),
                "first": ScopeRules(throughput_rps=Constraint(gte=50)),
            }
        )
        per_label = {
            "first": make_summary("first"),
            "second": make_summary("second"),
        }

        verdict = evaluate(config, make_summary(), per_label)

        assert [breach.label for breach in verdict.breaches] == ["second", "first"]

    def test_unobserved_label_is_skipped(self) -> None:
        """Test that a configured label missing from the run is ignored."""
        config = SLOConfig(
            labels={"never ran": ScopeRules(p95_ms=Constraint(lte=1))},
        )

        verdict = evaluate(config, make_summary(), {})

        assert verdict.passed is True
