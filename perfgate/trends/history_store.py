from __future__ import annotations

import asyncio
import os
import pathlib
import tempfile
from dataclasses import dataclass, field

import msgspec

from perfgate.errors import HistoryError

from .history_entry import HistoryEntry


@dataclass(slots=True)
class LoadedHistory:
    entries: list[HistoryEntry] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def latest(self) -> HistoryEntry | None:
        return self.entries[-1] if self.entries else None


def append_capped(
    entries: list[HistoryEntry],
    entry: HistoryEntry,
    max_entries: int,
) -> list[HistoryEntry]:
    updated = [*entries, entry]
    return updated[-max_entries:]


class HistoryStore:
    """
    Bounded, ordered log of past run snapshots persisted as one JSON
    document. Writes replace the whole file so readers never see a
    partially written log.
    """

    def __init__(
        self,
        path: str | os.PathLike,
        max_entries: int = 20,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"Err. - max_entries must be at least 1, got {max_entries}")

        self.path = pathlib.Path(path)
        self.max_entries = max_entries

    def read(self) -> list[HistoryEntry]:
        try:
            data = self.path.read_bytes()

        except OSError as err:
            raise HistoryError(str(self.path), str(err)) from err

        if not data.strip():
            return []

        try:
            return msgspec.json.decode(data, type=list[HistoryEntry])

        except (msgspec.DecodeError, msgspec.ValidationError) as err:
            raise HistoryError(str(self.path), str(err)) from err

    def load(self) -> LoadedHistory:
        if not self.path.exists():
            return LoadedHistory()

        try:
            entries = self.read()

        except HistoryError as err:
            return LoadedHistory(
                warnings=[f"{err} - starting with an empty history"],
            )

        return LoadedHistory(entries=entries[-self.max_entries :])

    def latest(self) -> HistoryEntry | None:
        return self.load().latest()

    def write(self, entries: list[HistoryEntry]) -> None:
        payload = msgspec.json.format(msgspec.json.encode(entries), indent=2)
        tmp_path: str | None = None

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)

            with tempfile.NamedTemporaryFile(
                "wb",
                dir=self.path.parent,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = tmp.name
                tmp.write(payload)
                tmp.write(b"\n")

            os.replace(tmp_path, self.path)

        except OSError as err:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)

            raise HistoryError(str(self.path), str(err)) from err

    def append(self, entry: HistoryEntry) -> LoadedHistory:
        loaded = self.load()
        loaded.entries = append_capped(loaded.entries, entry, self.max_entries)
        self.write(loaded.entries)
        return loaded

    async def aload(self) -> LoadedHistory:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.load)

    async def aappend(self, entry: HistoryEntry) -> LoadedHistory:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.append, entry)
