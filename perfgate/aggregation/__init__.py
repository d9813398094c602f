from .aggregator import Aggregator
from .metric_summary import OVERALL_SCOPE, MetricSummary
from .running_accumulator import RunningAccumulator, round_half_up

__all__ = [
    "Aggregator",
    "MetricSummary",
    "OVERALL_SCOPE",
    "RunningAccumulator",
    "round_half_up",
]
