from .history_entry import HistoryEntry, MetricSnapshot, PlanSnapshot
from .history_store import HistoryStore, LoadedHistory, append_capped
from .trend_delta import TrendDelta, compute_delta
from .trend_engine import TRACKED_METRICS, PlanTrends, TrendEngine
from .trend_gate import TrendGate
from .trend_policy import TrendPolicy

__all__ = [
    "HistoryEntry",
    "HistoryStore",
    "LoadedHistory",
    "MetricSnapshot",
    "PlanSnapshot",
    "PlanTrends",
    "TRACKED_METRICS",
    "TrendDelta",
    "TrendEngine",
    "TrendGate",
    "TrendPolicy",
    "append_capped",
    "compute_delta",
]
