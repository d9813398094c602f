"""
Shared fixtures for the perfgate test suite.

Sample files are written as JMeter CSV (JTL) documents so every test reads
them through the same RecordReader path the CLI uses.
"""

import json
import pathlib
from typing import Callable, Iterable

import pytest

from perfgate.digest import DigestConfig
from perfgate.env import Env
from perfgate.logging import LoggingConfig
from perfgate.records import SampleRecord
from tests.helpers import (
    BASE_TIMESTAMP,
    HOMEPAGE_LABEL,
    LOGIN_LABEL,
    to_jtl,
)


@pytest.fixture(autouse=True)
def quiet_logging():
    config = LoggingConfig()
    config.update(log_level="error")
    yield
    config.update(log_level="error")


@pytest.fixture
def digest_config() -> DigestConfig:
    return DigestConfig()


@pytest.fixture
def scenario_a_records() -> list[SampleRecord]:
    """Six passing samples over two labels spread across one second."""
    elapsed_values = [250, 320, 580, 420, 650, 455]
    labels = [HOMEPAGE_LABEL, LOGIN_LABEL] * 3

    return [
        SampleRecord(
            timestamp=BASE_TIMESTAMP + idx * 200,
            elapsed=elapsed,
            label=label,
            success=True,
            bytes_received=2048,
            bytes_sent=512,
        )
        for idx, (elapsed, label) in enumerate(zip(elapsed_values, labels))
    ]


@pytest.fixture
def scenario_b_records() -> list[SampleRecord]:
    """Three slow passing samples of the homepage label within half a second."""
    return [
        SampleRecord(
            timestamp=BASE_TIMESTAMP + idx * 250,
            elapsed=elapsed,
            label=HOMEPAGE_LABEL,
            success=True,
            bytes_received=1024,
            bytes_sent=256,
        )
        for idx, elapsed in enumerate([1800, 2000, 2100])
    ]


@pytest.fixture
def write_jtl(tmp_path: pathlib.Path) -> Callable[..., pathlib.Path]:
    def write(
        name: str,
        records: Iterable[SampleRecord] = (),
        header: bool = True,
        content: str | None = None,
    ) -> pathlib.Path:
        path = tmp_path / name
        path.write_text(content if content is not None else to_jtl(records, header))
        return path

    return write


@pytest.fixture
def homepage_slo_path(tmp_path: pathlib.Path) -> pathlib.Path:
    path = tmp_path / "jmeter-slo.json"
    path.write_text(
        json.dumps(
            {
                "global": {
                    "error_rate_pct": {"lte": 5},
                    "p95_ms": {"lte": 1500},
                    "throughput_rps": {"gte": 5},
                },
                "labels": {
                    HOMEPAGE_LABEL: {"p95_ms": {"lte": 800}},
                },
            }
        )
    )
    return path


@pytest.fixture
def run_env(tmp_path: pathlib.Path, homepage_slo_path: pathlib.Path) -> Env:
    return Env(
        PERFGATE_SLO_CONFIG_PATH=str(homepage_slo_path),
        PERFGATE_HISTORY_PATH=str(tmp_path / "history" / "test-history.json"),
        PERFGATE_OUTPUT_DIRECTORY=str(tmp_path / "reports"),
        PERFGATE_LOG_LEVEL="error",
    )
