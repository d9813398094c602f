from __future__ import annotations

import asyncio
import os
import pathlib
import tempfile
from dataclasses import dataclass, field
from typing import Iterable

from perfgate.aggregation import Aggregator
from perfgate.digest import DigestConfig
from perfgate.env import Env
from perfgate.errors import HistoryError, SampleStreamError, SummaryWriteError
from perfgate.logging import Logger, LoggerStream
from perfgate.logging.perfgate_logging_models import (
    HistoryWarning,
    PlanDebug,
    PlanInfo,
    RecordCoercionWarning,
    RunInfo,
    SLOConfigWarning,
    StreamFatal,
    SummaryWriteFatal,
    TrendGateError,
)
from perfgate.records import RecordReader, plan_name_from_path
from perfgate.slo import LoadedSLOConfig, aload_slo_config, evaluate
from perfgate.summary import SummaryAssembler
from perfgate.trends import (
    HistoryEntry,
    HistoryStore,
    LoadedHistory,
    PlanSnapshot,
    TrendEngine,
    TrendGate,
)

from .plan_result import PlanResult, RunResult

LOGGER_NAME = "perfgate"


@dataclass(slots=True)
class PlanIngest:
    plan: str
    aggregator: Aggregator
    sources: list[str] = field(default_factory=list)
    coerced_fields: int = 0


class AnalysisRunner:
    """
    Analyzes one run made of one or more sample files. Files that resolve
    to the same test plan name are merged into one aggregate. Every file
    is read before anything is written, so a stream that cannot be read
    leaves previous summaries and the history log untouched. Summaries are
    staged in temporary files and only replace their targets once every
    plan has been written, and the history entry is appended after that.
    """

    def __init__(
        self,
        env: Env | None = None,
        logger: Logger | None = None,
        history_enabled: bool = True,
    ) -> None:
        self._env = env or Env()
        self._logger = logger or Logger()
        self._history_enabled = history_enabled
        self._digest_config = DigestConfig.from_env(self._env)
        self._assembler = SummaryAssembler()
        self._trends = TrendEngine()
        self._gate = TrendGate(
            threshold_pct=self._env.PERFGATE_TREND_REGRESSION_THRESHOLD_PCT
        )
        self._loop: asyncio.AbstractEventLoop | None = None

        self._logger.configure(
            name=LOGGER_NAME,
            template="{timestamp} - {level} - {message}",
            path=self._env.PERFGATE_LOG_PATH,
        )

    async def run(self, paths: Iterable[str | os.PathLike]) -> RunResult:
        self._loop = asyncio.get_running_loop()
        sources = [str(path) for path in paths]

        async with self._logger.context(name=LOGGER_NAME) as ctx:
            ingests = await self._ingest_all(ctx, sources)

            loaded_config = await aload_slo_config(self._env.PERFGATE_SLO_CONFIG_PATH)
            for warning in loaded_config.warnings:
                await ctx.log(
                    SLOConfigWarning(
                        message=warning,
                        path=loaded_config.path or "",
                    )
                )

            store: HistoryStore | None = None
            history = LoadedHistory()
            if self._history_enabled:
                store = HistoryStore(
                    self._env.PERFGATE_HISTORY_PATH,
                    max_entries=self._env.PERFGATE_HISTORY_MAX_ENTRIES,
                )
                history = await store.aload()

                for warning in history.warnings:
                    await ctx.log(
                        HistoryWarning(
                            message=warning,
                            path=str(store.path),
                        )
                    )

            await ctx.log(
                RunInfo(
                    message=f"Analyzing {len(ingests)} test plan(s) from {len(sources)} file(s)",
                    plans=[ingest.plan for ingest in ingests],
                    slo_source=loaded_config.source,
                    history_path=str(store.path) if store else None,
                )
            )

            previous_entry = history.latest()
            result = RunResult(history_path=str(store.path) if store else None)
            snapshots: dict[str, PlanSnapshot] = {}

            for ingest in ingests:
                plan_result = self._analyze(ingest, loaded_config, previous_entry)
                plan_result.output_path = os.path.join(
                    self._env.PERFGATE_OUTPUT_DIRECTORY,
                    f"{plan_result.plan}-summary.json",
                )

                snapshots[ingest.plan] = self._assembler.to_snapshot(
                    plan_result.summary
                )
                result.plans.append(plan_result)

            try:
                await self._loop.run_in_executor(
                    None,
                    self._write_summaries,
                    {
                        plan_result.output_path: self._assembler.encode(
                            plan_result.summary
                        )
                        for plan_result in result.plans
                    },
                )

            except SummaryWriteError as err:
                await ctx.log(
                    SummaryWriteFatal(
                        message=str(err),
                        path=err.path,
                    )
                )
                raise

            for ingest, plan_result in zip(ingests, result.plans):
                if ingest.coerced_fields > 0:
                    await ctx.log(
                        RecordCoercionWarning(
                            message=f"Coerced {ingest.coerced_fields} malformed field(s) to zero in {ingest.plan}",
                            plan=ingest.plan,
                            coerced_fields=ingest.coerced_fields,
                        )
                    )

                if plan_result.trend_violations:
                    await ctx.log(
                        TrendGateError(
                            message=f"Trend regression detected for {ingest.plan}",
                            plan=ingest.plan,
                            violations=plan_result.trend_violations,
                        )
                    )

                overall = plan_result.summary.summary
                await ctx.log(
                    PlanInfo(
                        message=f"{ingest.plan}: {overall.total_samples} samples, SLO {overall.status.value}",
                        plan=ingest.plan,
                        samples=overall.total_samples,
                        labels=len(plan_result.summary.transactions),
                        status=overall.status.value,
                    )
                )

            if store is not None and snapshots:
                try:
                    await store.aappend(HistoryEntry.now(snapshots))
                    result.history_written = True

                except HistoryError as err:
                    await ctx.log(
                        HistoryWarning(
                            message=f"{err} - history was not updated",
                            path=str(store.path),
                        )
                    )

            return result

    async def _ingest_all(
        self,
        ctx: LoggerStream,
        sources: list[str],
    ) -> list[PlanIngest]:
        ingests: dict[str, PlanIngest] = {}

        for source in sources:
            try:
                (
                    aggregator,
                    has_header,
                    coerced_fields,
                ) = await self._loop.run_in_executor(
                    None,
                    self._aggregate,
                    source,
                )

            except SampleStreamError as err:
                await ctx.log(
                    StreamFatal(
                        message=str(err),
                        source=source,
                    )
                )
                raise

            plan = plan_name_from_path(source)
            await ctx.log(
                PlanDebug(
                    message=f"Read {aggregator.samples} samples from {source}",
                    plan=plan,
                    source=source,
                    has_header=bool(has_header),
                )
            )

            if (ingest := ingests.get(plan)) is None:
                ingests[plan] = PlanIngest(
                    plan=plan,
                    aggregator=aggregator,
                    sources=[source],
                    coerced_fields=coerced_fields,
                )

            else:
                ingest.aggregator.merge(aggregator)
                ingest.sources.append(source)
                ingest.coerced_fields += coerced_fields

        return list(ingests.values())

    def _aggregate(self, source: str) -> tuple[Aggregator, bool | None, int]:
        aggregator = Aggregator(self._digest_config)

        with RecordReader.from_path(source) as reader:
            aggregator.consume(reader)

        return aggregator, reader.has_header, reader.coerced_fields

    def _analyze(
        self,
        ingest: PlanIngest,
        loaded_config: LoadedSLOConfig,
        previous_entry: HistoryEntry | None,
    ) -> PlanResult:
        overall = ingest.aggregator.finalize()
        transactions = ingest.aggregator.finalize_labels()
        verdict = evaluate(loaded_config.config, overall, transactions)

        warnings = list(loaded_config.warnings)
        if ingest.coerced_fields > 0:
            warnings.append(
                f"{ingest.coerced_fields} malformed numeric field(s) were coerced to zero"
            )

        run_summary = self._assembler.assemble(
            ingest.plan,
            overall,
            transactions,
            verdict,
            loaded_config.config,
            config_source=loaded_config.source,
            warnings=warnings,
        )

        run_summary.trends = self._trends.compute(
            ingest.plan,
            self._assembler.to_snapshot(run_summary),
            previous_entry,
        )

        violations: list[str] = []
        if self._env.PERFGATE_FAIL_ON_TREND_REGRESSION:
            violations = self._gate.check(run_summary.trends)

        return PlanResult(
            plan=ingest.plan,
            sources=ingest.sources,
            summary=run_summary,
            trend_violations=violations,
        )

    def _write_summaries(self, payloads: dict[str, bytes]) -> None:
        staged: dict[str, str] = {}

        try:
            for path, data in payloads.items():
                output_path = pathlib.Path(path)
                output_path.parent.mkdir(parents=True, exist_ok=True)

                with tempfile.NamedTemporaryFile(
                    "wb",
                    dir=output_path.parent,
                    prefix=f".{output_path.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as tmp:
                    staged[path] = tmp.name
                    tmp.write(data + b"\n")

            for path, tmp_path in staged.items():
                os.replace(tmp_path, path)

        except OSError as err:
            for tmp_path in staged.values():
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)

            raise SummaryWriteError(
                str(err.filename or path),
                err.strerror or str(err),
            ) from err
