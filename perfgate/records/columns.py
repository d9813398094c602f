from typing import Literal

# JMeter CSV log format column order, used when a stream has no header row.
DEFAULT_COLUMNS = (
    "timeStamp",
    "elapsed",
    "label",
    "responseCode",
    "responseMessage",
    "threadName",
    "dataType",
    "success",
    "failureMessage",
    "bytes",
    "sentBytes",
    "grpThreads",
    "allThreads",
    "URL",
    "Latency",
    "IdleTime",
    "Connect",
)

RecordField = Literal[
    "timestamp",
    "elapsed",
    "label",
    "success",
    "bytes_received",
    "bytes_sent",
]

# Lower-cased column names accepted for each record field, in priority order.
COLUMN_ALIASES: dict[RecordField, tuple[str, ...]] = {
    "timestamp": ("timestamp",),
    "elapsed": ("elapsed",),
    "label": ("label", "lbl"),
    "success": ("success",),
    "bytes_received": ("bytes", "bytesreceived"),
    "bytes_sent": ("sentbytes", "bytessent"),
}

HEADER_MARKER = "timestamp"


def resolve_column_indexes(columns: list[str] | tuple[str, ...]) -> dict[RecordField, int]:
    """Map each record field to the index of the first column carrying it."""
    normalized = [column.strip().lower() for column in columns]

    indexes: dict[RecordField, int] = {}
    for field_name, aliases in COLUMN_ALIASES.items():
        for alias in aliases:
            if alias in normalized:
                indexes[field_name] = normalized.index(alias)
                break

    return indexes
