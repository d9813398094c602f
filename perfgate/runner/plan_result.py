from dataclasses import dataclass, field

from perfgate.slo import SLOStatus
from perfgate.summary import RunSummary


@dataclass(slots=True)
class PlanResult:
    plan: str
    sources: list[str]
    summary: RunSummary
    output_path: str | None = None
    trend_violations: list[str] = field(default_factory=list)

    @property
    def passed(self) -> bool:
        return self.summary.status == SLOStatus.PASS and not self.trend_violations


@dataclass(slots=True)
class RunResult:
    plans: list[PlanResult] = field(default_factory=list)
    history_path: str | None = None
    history_written: bool = False

    @property
    def passed(self) -> bool:
        return all(plan.passed for plan in self.plans)

    @property
    def exit_code(self) -> int:
        return 0 if self.passed else 1
