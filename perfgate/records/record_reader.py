from __future__ import annotations

import contextlib
import csv
import io
import math
import os
import pathlib
import re
from typing import IO, Iterable, Iterator

from perfgate.errors import SampleStreamError

from .columns import (
    DEFAULT_COLUMNS,
    HEADER_MARKER,
    RecordField,
    resolve_column_indexes,
)
from .sample_record import UNNAMED_LABEL, SampleRecord

_PLAN_SUFFIX = re.compile(r"(-results)?\.jtl$", re.IGNORECASE)


def plan_name_from_path(path: str | os.PathLike) -> str:
    """Derive a test plan name from a sample file name."""
    return _PLAN_SUFFIX.sub("", pathlib.Path(path).name)


class RecordReader:
    """
    Streams SampleRecords out of a delimited JTL-style source.

    The source is consumed line by line, so memory use does not depend on
    its size. Malformed numeric fields are coerced to zero and counted in
    ``coerced_fields`` instead of failing the stream; a source that cannot
    be read at all raises SampleStreamError.
    """

    def __init__(
        self,
        source: IO[bytes] | IO[str] | Iterable[str],
        name: str | None = None,
        delimiter: str = ",",
    ) -> None:
        self._source = source
        self._delimiter = delimiter
        self.name = name or str(getattr(source, "name", "<stream>"))
        self.has_header: bool | None = None
        self.coerced_fields = 0
        self.records_read = 0

    @classmethod
    @contextlib.contextmanager
    def from_path(
        cls,
        path: str | os.PathLike,
        delimiter: str = ",",
    ) -> Iterator[RecordReader]:
        try:
            stream = open(path, "rb")

        except OSError as err:
            raise SampleStreamError(str(path), str(err)) from err

        with stream:
            yield cls(stream, name=str(path), delimiter=delimiter)

    def __iter__(self) -> Iterator[SampleRecord]:
        try:
            yield from self._read()

        except (OSError, csv.Error) as err:
            raise SampleStreamError(self.name, str(err)) from err

    def _read(self) -> Iterator[SampleRecord]:
        with self._text_lines() as lines:
            rows = csv.reader(lines, delimiter=self._delimiter)

            indexes: dict[RecordField, int] | None = None

            for row in rows:
                fields = [field.strip() for field in row]
                if not any(fields):
                    continue

                if indexes is None:
                    self.has_header = HEADER_MARKER in self._delimiter.join(fields).lower()

                    if self.has_header:
                        indexes = resolve_column_indexes(fields)
                        continue

                    indexes = resolve_column_indexes(DEFAULT_COLUMNS)

                self.records_read += 1
                yield self._to_record(fields, indexes)

    @contextlib.contextmanager
    def _text_lines(self) -> Iterator[Iterable[str]]:
        source = self._source

        if isinstance(source, (io.RawIOBase, io.BufferedIOBase)) or (
            hasattr(source, "read") and "b" in getattr(source, "mode", "")
        ):
            wrapper = io.TextIOWrapper(
                source,
                encoding="utf-8-sig",
                errors="replace",
                newline="",
            )
            try:
                yield wrapper

            finally:
                wrapper.detach()

        else:
            yield self._strip_bom(source)

    def _strip_bom(self, lines: Iterable[str]) -> Iterator[str]:
        first = True
        for line in lines:
            if first:
                line = line.removeprefix("\ufeff")
                first = False

            yield line

    def _to_record(
        self,
        fields: list[str],
        indexes: dict[RecordField, int],
    ) -> SampleRecord:
        def field_value(name: RecordField) -> str:
            index = indexes.get(name)
            if index is None or index >= len(fields):
                return ""

            return fields[index]

        return SampleRecord(
            timestamp=self._coerce_int(field_value("timestamp")),
            elapsed=self._coerce_int(field_value("elapsed")),
            label=field_value("label") or UNNAMED_LABEL,
            success=field_value("success").lower() == "true",
            bytes_received=self._coerce_int(field_value("bytes_received")),
            bytes_sent=self._coerce_int(field_value("bytes_sent")),
        )

    def _coerce_int(self, value: str) -> int:
        if value == "":
            return 0

        try:
            number = float(value)

        except ValueError:
            self.coerced_fields += 1
            return 0

        if not math.isfinite(number) or number < 0:
            self.coerced_fields += 1
            return 0

        return int(round(number))
