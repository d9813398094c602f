from .models import Entry, LogLevel


class RunInfo(Entry, kw_only=True):
    plans: list[str]
    slo_source: str
    history_path: str | None
    level: LogLevel = LogLevel.INFO


class PlanInfo(Entry, kw_only=True):
    plan: str
    samples: int
    labels: int
    status: str
    level: LogLevel = LogLevel.INFO


class PlanDebug(Entry, kw_only=True):
    plan: str
    source: str
    has_header: bool
    level: LogLevel = LogLevel.DEBUG


class RecordCoercionWarning(Entry, kw_only=True):
    plan: str
    coerced_fields: int
    level: LogLevel = LogLevel.WARN


class SLOConfigWarning(Entry, kw_only=True):
    path: str
    level: LogLevel = LogLevel.WARN


class HistoryWarning(Entry, kw_only=True):
    path: str
    level: LogLevel = LogLevel.WARN


class TrendGateError(Entry, kw_only=True):
    plan: str
    violations: list[str]
    level: LogLevel = LogLevel.ERROR


class StreamFatal(Entry, kw_only=True):
    source: str
    level: LogLevel = LogLevel.FATAL


class SummaryWriteFatal(Entry, kw_only=True):
    path: str
    level: LogLevel = LogLevel.FATAL
