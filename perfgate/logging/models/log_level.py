from __future__ import annotations

from enum import Enum
from typing import Literal

LogLevelName = Literal[
    "trace",
    "debug",
    "info",
    "warn",
    "error",
    "critical",
    "fatal",
]


class LogLevel(Enum):
    TRACE = "TRACE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"
    FATAL = "FATAL"

    @classmethod
    def to_level(cls, level_name: LogLevelName | str) -> LogLevel | None:
        normalized = level_name.upper()
        if normalized == "WARNING":
            normalized = "WARN"

        try:
            return cls(normalized)

        except ValueError:
            return None
