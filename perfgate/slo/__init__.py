from .constraint import Constraint
from .scope_rules import ScopeRules, SLOMetric
from .slo_breach import SLOBreach
from .slo_config import (
    LoadedSLOConfig,
    SLOConfig,
    aload_slo_config,
    default_slo_config,
    load_slo_config,
    read_slo_config,
)
from .slo_evaluator import evaluate
from .slo_status import SLOStatus
from .slo_verdict import SLOVerdict

__all__ = [
    "Constraint",
    "LoadedSLOConfig",
    "ScopeRules",
    "SLOBreach",
    "SLOConfig",
    "SLOMetric",
    "SLOStatus",
    "SLOVerdict",
    "aload_slo_config",
    "default_slo_config",
    "evaluate",
    "load_slo_config",
    "read_slo_config",
]
