from .analysis_runner import AnalysisRunner
from .plan_result import PlanResult, RunResult

__all__ = [
    "AnalysisRunner",
    "PlanResult",
    "RunResult",
]
