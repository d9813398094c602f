from .run_summary import (
    OverallSummary,
    RunSummary,
    SLOReport,
    TransactionSummary,
)
from .summary_assembler import SummaryAssembler

__all__ = [
    "OverallSummary",
    "RunSummary",
    "SLOReport",
    "SummaryAssembler",
    "TransactionSummary",
]
