import msgspec

UNNAMED_LABEL = "UNNAMED"


class SampleRecord(msgspec.Struct, frozen=True, kw_only=True):
    """A single timed request or transaction read from a sample stream."""

    timestamp: int = 0
    elapsed: int = 0
    label: str = UNNAMED_LABEL
    success: bool = False
    bytes_received: int = 0
    bytes_sent: int = 0
