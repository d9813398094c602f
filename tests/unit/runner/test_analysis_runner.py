"""
End to end tests for AnalysisRunner.

Covers:
- Passing, failing and empty runs
- Summary files and history updates
- Trend comparison between consecutive runs
- Fatal stream and summary write errors leaving outputs untouched
- Merging files that belong to the same plan
"""

import json
import pathlib

import msgspec
import pytest

from perfgate.env import Env
from perfgate.logging import LoggingConfig
from perfgate.errors import SampleStreamError, SummaryWriteError
from perfgate.runner import AnalysisRunner
from perfgate.slo import SLOStatus
from perfgate.trends import HistoryStore
from tests.helpers import BASE_TIMESTAMP, HOMEPAGE_LABEL


def read_json(path: str | pathlib.Path):
    return json.loads(pathlib.Path(path).read_text())


class TestScenarios:
    """Test complete analyses of small runs."""

    async def test_passing_run(self, run_env: Env, write_jtl, scenario_a_records) -> None:
        """Test six fast samples over two labels."""
        path = write_jtl("homepage-results.jtl", scenario_a_records)

        result = await AnalysisRunner(env=run_env).run([path])

        assert result.passed is True
        assert result.exit_code == 0

        (plan,) = result.plans
        assert plan.plan == "homepage"
        assert plan.summary.status == SLOStatus.PASS
        assert plan.summary.summary.error_count == 0
        assert 580 <= plan.summary.summary.p95_response_time <= 700

        document = read_json(plan.output_path)
        assert pathlib.Path(plan.output_path).name == "homepage-summary.json"
        assert document["summary"]["status"] == "PASS"
        assert document["slo"]["source"] == "file"
        assert len(document["transactions"]) == 2

    async def test_slow_run_breaches_global_and_label(
        self,
        run_env: Env,
        write_jtl,
        scenario_b_records,
    ) -> None:
        """Test that slow samples breach the global and the label p95."""
        path = write_jtl("homepage-results.jtl", scenario_b_records)

        result = await AnalysisRunner(env=run_env).run([path])

        breaches = result.plans[0].summary.slo.breaches
        assert result.exit_code == 1
        assert [(breach.scope, breach.label, breach.metric) for breach in breaches] == [
            ("global", None, "p95_ms"),
            ("label", HOMEPAGE_LABEL, "p95_ms"),
        ]
        assert breaches[0].value > 1500
        assert breaches[1].value > 800

    async def test_empty_run(self, run_env: Env, write_jtl) -> None:
        """Test that a run without samples fails only the throughput floor."""
        path = write_jtl("empty-results.jtl", content="")

        result = await AnalysisRunner(env=run_env).run([path])

        overall = result.plans[0].summary.summary
        assert overall.total_samples == 0
        assert overall.error_percentage == 0.0
        assert overall.p95_response_time is None
        assert [breach.metric for breach in result.plans[0].summary.slo.breaches] == [
            "throughput_rps"
        ]

    async def test_default_config_when_file_missing(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test the built-in thresholds for an absent SLO file."""
        env = run_env.model_copy(
            update={"PERFGATE_SLO_CONFIG_PATH": str(tmp_path / "absent.json")}
        )
        path = write_jtl("homepage-results.jtl", scenario_a_records)

        result = await AnalysisRunner(env=env).run([path])

        assert result.plans[0].summary.slo.source == "default"
        assert result.passed is True

    async def test_invalid_config_warns(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that an invalid SLO file is reported in the summary warnings."""
        slo_path = tmp_path / "broken-slo.json"
        slo_path.write_text("{")
        env = run_env.model_copy(update={"PERFGATE_SLO_CONFIG_PATH": str(slo_path)})
        path = write_jtl("homepage-results.jtl", scenario_a_records)

        result = await AnalysisRunner(env=env).run([path])

        warnings = result.plans[0].summary.warnings
        assert len(warnings) == 1
        assert "falling back to default SLOs" in warnings[0]


class TestHistory:
    """Test history updates and trends."""

    async def test_history_entry_per_run(
        self,
        run_env: Env,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that each run appends one entry covering every plan."""
        first = write_jtl("homepage-results.jtl", scenario_a_records)
        second = write_jtl("login-results.jtl", scenario_a_records)

        result = await AnalysisRunner(env=run_env).run([first, second])

        entries = HistoryStore(run_env.PERFGATE_HISTORY_PATH).load().entries
        assert result.history_written is True
        assert len(entries) == 1
        assert list(entries[0].plans) == ["homepage", "login"]
        assert entries[0].plans["homepage"].summary.status == "PASS"

    async def test_second_run_has_trends(
        self,
        run_env: Env,
        write_jtl,
        scenario_a_records,
        scenario_b_records,
    ) -> None:
        """Test that the second run is compared against the first."""
        path = write_jtl("homepage-results.jtl", scenario_a_records)
        first = await AnalysisRunner(env=run_env).run([path])

        path = write_jtl("homepage-results.jtl", scenario_b_records)
        second = await AnalysisRunner(env=run_env).run([path])

        assert first.plans[0].summary.trends is None

        trends = second.plans[0].summary.trends
        assert trends.summary["p95"].direction == "up"
        assert trends.summary["p95"].good is False
        assert list(trends.transactions) == [HOMEPAGE_LABEL]

        document = read_json(second.plans[0].output_path)
        assert document["trends"]["summary"]["p95"]["good"] is False

    async def test_no_history(self, run_env: Env, write_jtl, scenario_a_records) -> None:
        """Test that disabling history leaves no history file."""
        path = write_jtl("homepage-results.jtl", scenario_a_records)

        result = await AnalysisRunner(env=run_env, history_enabled=False).run([path])

        assert result.history_path is None
        assert not pathlib.Path(run_env.PERFGATE_HISTORY_PATH).exists()

    async def test_trend_gate(
        self,
        run_env: Env,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that a throughput drop fails a gated run."""
        env = run_env.model_copy(update={"PERFGATE_FAIL_ON_TREND_REGRESSION": True})
        path = write_jtl("homepage-results.jtl", scenario_a_records)
        await AnalysisRunner(env=env).run([path])

        slower = [
            msgspec.structs.replace(record, timestamp=BASE_TIMESTAMP + idx * 230)
            for idx, record in enumerate(scenario_a_records)
        ]
        path = write_jtl("homepage-results.jtl", slower)
        result = await AnalysisRunner(env=env).run([path])

        (plan,) = result.plans
        assert plan.summary.status == SLOStatus.PASS
        assert plan.trend_violations == ["Overall throughput decreased by 13.0%"]
        assert result.exit_code == 1


class TestStreams:
    """Test multiple and unreadable streams."""

    async def test_missing_stream_aborts_before_writes(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that one unreadable file prevents every write."""
        good = write_jtl("homepage-results.jtl", scenario_a_records)

        with pytest.raises(SampleStreamError):
            await AnalysisRunner(env=run_env).run([good, tmp_path / "missing.jtl"])

        assert not pathlib.Path(run_env.PERFGATE_OUTPUT_DIRECTORY).exists()
        assert not pathlib.Path(run_env.PERFGATE_HISTORY_PATH).exists()

    async def test_unwritable_output_aborts_before_history(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
        scenario_b_records,
    ) -> None:
        """Test that a summary write failure raises and appends no history."""
        blocker = tmp_path / "reports"
        blocker.write_text("not a directory")
        homepage = write_jtl("homepage-results.jtl", scenario_a_records)
        checkout = write_jtl("checkout-results.jtl", scenario_b_records)

        with pytest.raises(SummaryWriteError) as err:
            await AnalysisRunner(env=run_env).run([homepage, checkout])

        assert err.value.path == str(blocker)
        assert blocker.read_text() == "not a directory"
        assert not pathlib.Path(run_env.PERFGATE_HISTORY_PATH).exists()
        assert list(tmp_path.glob("**/*.tmp")) == []

    async def test_summaries_are_written_together(
        self,
        run_env: Env,
        write_jtl,
        scenario_a_records,
        scenario_b_records,
    ) -> None:
        """Test that every plan of a run gets its summary file."""
        homepage = write_jtl("homepage-results.jtl", scenario_a_records)
        checkout = write_jtl("checkout-results.jtl", scenario_b_records)

        result = await AnalysisRunner(env=run_env).run([homepage, checkout])

        reports = pathlib.Path(run_env.PERFGATE_OUTPUT_DIRECTORY)
        assert sorted(path.name for path in reports.iterdir()) == [
            "checkout-summary.json",
            "homepage-summary.json",
        ]
        assert [plan.output_path for plan in result.plans] == [
            str(reports / "homepage-summary.json"),
            str(reports / "checkout-summary.json"),
        ]
        assert read_json(result.plans[1].output_path)["summary"]["status"] == "FAIL"

    async def test_same_plan_files_are_merged(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that worker files for one plan produce one summary."""
        (tmp_path / "worker-1").mkdir()
        (tmp_path / "worker-2").mkdir()
        first = write_jtl("worker-1/homepage-results.jtl", scenario_a_records[:3])
        second = write_jtl("worker-2/homepage-results.jtl", scenario_a_records[3:])

        result = await AnalysisRunner(env=run_env).run([first, second])

        (plan,) = result.plans
        assert plan.sources == [str(first), str(second)]
        assert plan.summary.summary.total_samples == 6
        assert plan.summary.summary.throughput == 6.0

    async def test_coerced_fields_are_reported(self, run_env: Env, write_jtl) -> None:
        """Test that malformed numbers surface as a summary warning."""
        path = write_jtl(
            "homepage-results.jtl",
            content=(
                "timeStamp,elapsed,label,success\n"
                "1700000000000,abc,Home,true\n"
                "1700000000100,120,Home,true\n"
            ),
        )

        result = await AnalysisRunner(env=run_env).run([path])

        assert result.plans[0].summary.warnings == [
            "1 malformed numeric field(s) were coerced to zero"
        ]


class TestLogFile:
    """Test JSON log files configured through settings."""

    async def test_log_path_receives_json_lines(
        self,
        run_env: Env,
        tmp_path,
        write_jtl,
        scenario_a_records,
    ) -> None:
        """Test that PERFGATE_LOG_PATH routes run logs to a JSON lines file."""
        log_path = tmp_path / "logs" / "perfgate.json"
        env = run_env.model_copy(update={"PERFGATE_LOG_PATH": str(log_path)})
        path = write_jtl("homepage-results.jtl", scenario_a_records)
        config = LoggingConfig()
        config.update(log_level="info")

        try:
            await AnalysisRunner(env=env).run([path])

        finally:
            config.update(log_level="error")

        entries = [
            json.loads(line)["entry"] for line in log_path.read_text().splitlines()
        ]
        assert [entry["plans"] for entry in entries if "plans" in entry] == [
            ["homepage"]
        ]
        assert any(entry.get("plan") == "homepage" for entry in entries)
