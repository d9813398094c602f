from __future__ import annotations

import os
from typing import Callable, Dict, Literal, Union

from pydantic import (
    BaseModel,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    model_validator,
)

PrimaryType = Union[str, int, float, bytes, bool]


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, bool):
        return value
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class Env(BaseModel):
    PERFGATE_SLO_CONFIG_PATH: StrictStr = os.path.join(
        "config",
        "performance",
        "jmeter-slo.json",
    )
    PERFGATE_HISTORY_PATH: StrictStr = os.path.join(
        "reports",
        "load-tests",
        "test-history.json",
    )
    PERFGATE_HISTORY_MAX_ENTRIES: StrictInt = 20
    PERFGATE_OUTPUT_DIRECTORY: StrictStr = os.path.join(
        "reports",
        "load-tests",
        "jmeter",
    )

    # T-Digest settings
    PERFGATE_TDIGEST_DELTA: StrictFloat = 100.0
    PERFGATE_TDIGEST_MAX_UNMERGED: StrictInt = 2048

    # Trend gate settings
    PERFGATE_FAIL_ON_TREND_REGRESSION: StrictBool = False
    PERFGATE_TREND_REGRESSION_THRESHOLD_PCT: StrictFloat = 10.0

    PERFGATE_LOG_LEVEL: StrictStr = "info"
    PERFGATE_LOG_OUTPUT: Literal["stdout", "stderr"] = "stderr"
    PERFGATE_LOG_PATH: StrictStr | None = None

    @model_validator(mode="after")
    def validate_log_path(self) -> Env:
        if self.PERFGATE_LOG_PATH and not self.PERFGATE_LOG_PATH.endswith(".json"):
            raise ValueError("Err. - PERFGATE_LOG_PATH must be a .json file")

        return self

    @classmethod
    def types_map(cls) -> Dict[str, Callable[[str], PrimaryType]]:
        return {
            "PERFGATE_SLO_CONFIG_PATH": str,
            "PERFGATE_HISTORY_PATH": str,
            "PERFGATE_HISTORY_MAX_ENTRIES": int,
            "PERFGATE_OUTPUT_DIRECTORY": str,
            "PERFGATE_TDIGEST_DELTA": float,
            "PERFGATE_TDIGEST_MAX_UNMERGED": int,
            "PERFGATE_FAIL_ON_TREND_REGRESSION": _parse_bool,
            "PERFGATE_TREND_REGRESSION_THRESHOLD_PCT": float,
            "PERFGATE_LOG_LEVEL": str,
            "PERFGATE_LOG_OUTPUT": str,
            "PERFGATE_LOG_PATH": str,
        }
