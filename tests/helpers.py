from typing import Iterable

from perfgate.records import SampleRecord

JTL_HEADER = "timeStamp,elapsed,label,responseCode,responseMessage,threadName,dataType,success,failureMessage,bytes,sentBytes,grpThreads,allThreads,URL,Latency,IdleTime,Connect"

BASE_TIMESTAMP = 1_700_000_000_000

HOMEPAGE_LABEL = "01 - Load Homepage"
LOGIN_LABEL = "02 - Login"


def to_jtl_row(record: SampleRecord) -> str:
    return ",".join(
        [
            str(record.timestamp),
            str(record.elapsed),
            record.label,
            "200" if record.success else "500",
            "OK" if record.success else "Internal Server Error",
            "Thread Group 1-1",
            "text",
            "true" if record.success else "false",
            "",
            str(record.bytes_received),
            str(record.bytes_sent),
            "1",
            "1",
            "https://example.test/",
            str(record.elapsed),
            "0",
            "12",
        ]
    )


def to_jtl(records: Iterable[SampleRecord], header: bool = True) -> str:
    lines = [JTL_HEADER] if header else []
    lines.extend(to_jtl_row(record) for record in records)
    return "\n".join(lines) + "\n"
