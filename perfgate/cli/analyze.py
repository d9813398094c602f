import asyncio
import sys

import click

from perfgate.env import Env, load_env
from perfgate.errors import SampleStreamError, SummaryWriteError
from perfgate.logging import LoggingConfig
from perfgate.runner import AnalysisRunner, RunResult

STREAM_ERROR_EXIT_CODE = 2
OUTPUT_ERROR_EXIT_CODE = 3


@click.command(help="Aggregate JTL sample files and evaluate them against SLOs.")
@click.argument(
    "files",
    nargs=-1,
    required=True,
    type=click.Path(dir_okay=False),
)
@click.option("--slo", "slo_path", default=None, type=str, help="SLO config JSON file.")
@click.option("--history", "history_path", default=None, type=str, help="Trend history JSON file.")
@click.option("--history-max-entries", default=None, type=click.IntRange(min=1))
@click.option("--output-directory", default=None, type=str, help="Directory for run summaries.")
@click.option(
    "--no-history",
    is_flag=True,
    show_default=True,
    default=False,
    help="Skip trend comparison and leave the history log untouched.",
)
@click.option(
    "--fail-on-trend-regression",
    is_flag=True,
    show_default=True,
    default=False,
    help="Exit non-zero when error rate or throughput regressed against the previous run.",
)
@click.option("--log-level", default=None, type=str)
@click.option("--log-path", default=None, type=str, help="Write logs as JSON lines to this .json file.")
@click.option("--env-file", default=None, type=str, help="Dotenv file with PERFGATE_ settings.")
def analyze(
    files: tuple[str, ...],
    slo_path: str | None,
    history_path: str | None,
    history_max_entries: int | None,
    output_directory: str | None,
    no_history: bool,
    fail_on_trend_regression: bool,
    log_level: str | None,
    log_path: str | None,
    env_file: str | None,
):
    overrides = {
        "PERFGATE_SLO_CONFIG_PATH": slo_path,
        "PERFGATE_HISTORY_PATH": history_path,
        "PERFGATE_HISTORY_MAX_ENTRIES": history_max_entries,
        "PERFGATE_OUTPUT_DIRECTORY": output_directory,
        "PERFGATE_FAIL_ON_TREND_REGRESSION": True if fail_on_trend_regression else None,
        "PERFGATE_LOG_LEVEL": log_level,
        "PERFGATE_LOG_PATH": log_path,
    }

    env = load_env(
        Env,
        env_file=env_file,
        override=Env(
            **{name: value for name, value in overrides.items() if value is not None}
        ),
    )

    LoggingConfig().update(
        log_level=env.PERFGATE_LOG_LEVEL,
        log_output=env.PERFGATE_LOG_OUTPUT,
    )

    runner = AnalysisRunner(env=env, history_enabled=not no_history)

    try:
        result = asyncio.run(runner.run(files))

    except SampleStreamError as err:
        click.echo(str(err), err=True)
        sys.exit(STREAM_ERROR_EXIT_CODE)

    except SummaryWriteError as err:
        click.echo(str(err), err=True)
        sys.exit(OUTPUT_ERROR_EXIT_CODE)

    report(result)
    sys.exit(result.exit_code)


def report(result: RunResult):
    for plan in result.plans:
        overall = plan.summary.summary
        click.echo(
            f"{plan.plan}: {overall.status.value} - "
            f"{overall.total_samples} samples, "
            f"p95 {overall.p95_response_time} ms, "
            f"{overall.throughput} req/s, "
            f"{overall.error_percentage}% errors -> {plan.output_path}"
        )

        for breach in plan.summary.slo.breaches:
            scope = breach.label if breach.label else "global"
            click.echo(f"  SLO breach [{scope}] {breach.metric}={breach.value} {breach.rule}")

        for violation in plan.trend_violations:
            click.echo(f"  Trend regression: {violation}")
