from __future__ import annotations

import asyncio
import os
import pathlib
from dataclasses import dataclass, field
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from perfgate.errors import SLOConfigError

from .constraint import Constraint
from .scope_rules import ScopeRules

SLOConfigSource = Literal["file", "default"]


class SLOConfig(BaseModel):
    """
    Pass/fail thresholds for a run: one global scope evaluated against the
    OVERALL summary, plus per-label scopes kept in declaration order.
    """

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    global_: ScopeRules = Field(default_factory=ScopeRules, alias="global")
    labels: dict[str, ScopeRules] = Field(default_factory=dict)

    @field_validator("global_", "labels", mode="before")
    @classmethod
    def _empty_when_null(cls, value: object, info: ValidationInfo) -> object:
        if value is None:
            return {} if info.field_name == "labels" else ScopeRules()

        return value

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def default_slo_config() -> SLOConfig:
    return SLOConfig(
        global_=ScopeRules(
            error_rate_pct=Constraint(lte=5),
            p95_ms=Constraint(lte=1500),
            throughput_rps=Constraint(gte=5),
        ),
    )


@dataclass(slots=True)
class LoadedSLOConfig:
    config: SLOConfig
    source: SLOConfigSource
    path: str | None = None
    warnings: list[str] = field(default_factory=list)


def read_slo_config(path: str | os.PathLike) -> SLOConfig:
    try:
        data = pathlib.Path(path).read_bytes()

    except OSError as err:
        raise SLOConfigError(str(path), str(err)) from err

    try:
        return SLOConfig.model_validate_json(data)

    except ValidationError as err:
        raise SLOConfigError(
            str(path),
            "; ".join(error["msg"] for error in err.errors()),
        ) from err


def load_slo_config(path: str | os.PathLike | None) -> LoadedSLOConfig:
    """
    Load thresholds from a JSON file. A missing file selects the built-in
    defaults silently, an unreadable or invalid one selects them with a
    warning.
    """
    resolved_path = str(path) if path is not None else None

    if resolved_path is None or not os.path.exists(resolved_path):
        return LoadedSLOConfig(
            config=default_slo_config(),
            source="default",
            path=resolved_path,
        )

    try:
        config = read_slo_config(resolved_path)

    except SLOConfigError as err:
        return LoadedSLOConfig(
            config=default_slo_config(),
            source="default",
            path=resolved_path,
            warnings=[f"{err} - falling back to default SLOs"],
        )

    return LoadedSLOConfig(
        config=config,
        source="file",
        path=resolved_path,
    )


async def aload_slo_config(path: str | os.PathLike | None) -> LoadedSLOConfig:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, load_slo_config, path)
