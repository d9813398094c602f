from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, TypeVar

from perfgate.env import Env

T = TypeVar("T")


def _resolve_env_value(
    env: Env | None,
    name: str,
    default: T,
    cast: Callable[[object], T],
) -> T:
    env_value = getattr(env, name, None) if env is not None else None
    if env_value is not None:
        return cast(env_value)
    raw_value = os.getenv(name)
    if raw_value is not None:
        return cast(raw_value)
    return default


@dataclass(frozen=True, slots=True)
class DigestConfig:
    """Compression settings shared by every digest of a run."""

    tdigest_delta: float = 100.0
    tdigest_max_unmerged: int = 2048

    @classmethod
    def from_env(cls, env: Env | None = None) -> "DigestConfig":
        return cls(
            tdigest_delta=_resolve_env_value(
                env, "PERFGATE_TDIGEST_DELTA", 100.0, float
            ),
            tdigest_max_unmerged=_resolve_env_value(
                env, "PERFGATE_TDIGEST_MAX_UNMERGED", 2048, int
            ),
        )
