"""
Exceptions raised by the perfgate analysis pipeline.

Only SampleStreamError and SummaryWriteError reach callers of the runner.
Configuration and history errors are raised by the low-level loaders and
recovered by the callers that own the fallback behavior.
"""


class PerfgateError(Exception):
    """Base class for all perfgate errors."""

    pass


class SampleStreamError(PerfgateError):
    """
    Raised when a sample stream cannot be opened or read.

    No partial aggregate built from such a stream can be trusted, so the
    analysis of the whole run is abandoned and no summary or history entry
    is written.
    """

    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"Err. - could not read sample stream {source}: {reason}")
        self.source = source
        self.reason = reason


class SLOConfigError(PerfgateError):
    """
    Raised when an SLO configuration file exists but cannot be read or
    validated. The loader converts it into a fallback to the built-in
    defaults plus a warning.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Err. - invalid SLO config {path}: {reason}")
        self.path = path
        self.reason = reason


class HistoryError(PerfgateError):
    """
    Raised when the trend history file is corrupt or unreadable. The store
    converts it into an empty history plus a warning.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Err. - invalid trend history {path}: {reason}")
        self.path = path
        self.reason = reason


class SummaryWriteError(PerfgateError):
    """
    Raised when run summaries cannot be written. Summaries are staged in
    temporary files before any of them replaces an existing file, so a
    failed write leaves no partial summary and no history entry behind.
    """

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Err. - could not write run summary {path}: {reason}")
        self.path = path
        self.reason = reason
