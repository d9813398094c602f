import asyncio
import datetime
import io
import os
import pathlib
import sys
import threading
from collections import defaultdict
from typing import (
    Callable,
    Dict,
    TypeVar,
)

import msgspec

from perfgate.logging.config import LoggingConfig, StreamType
from perfgate.logging.models import Entry, Log

T = TypeVar("T", bound=Entry)


class LoggerStream:
    def __init__(
        self,
        name: str | None = None,
        template: str | None = None,
        filename: str | None = None,
        directory: str | None = None,
    ) -> None:
        if name is None:
            name = "default"

        self._name = name
        self._default_template = template
        self._default_logfile = filename
        self._default_log_directory = directory

        self._init_lock = asyncio.Lock()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._files: Dict[str, io.BufferedRandom] = {}
        self._file_locks: Dict[str, asyncio.Lock] = defaultdict(asyncio.Lock)
        self._cwd: str | None = None
        self._default_logfile_path: str | None = None

        self._config = LoggingConfig()
        self._initialized: bool = False

    @property
    def name(self):
        return self._name

    async def initialize(self):
        async with self._init_lock:
            if self._initialized:
                return

            if self._loop is None:
                self._loop = asyncio.get_running_loop()

            if self._cwd is None:
                self._cwd = await self._loop.run_in_executor(
                    None,
                    os.getcwd,
                )

            self._initialized = True

    async def open_file(
        self,
        filename: str,
        directory: str | None = None,
        is_default: bool = False,
    ):
        await self.initialize()

        logfile_path = self._to_logfile_path(filename, directory=directory)

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._open_file,
                logfile_path,
            )

        if is_default:
            self._default_logfile_path = logfile_path

    def _open_file(
        self,
        logfile_path: str,
    ):
        resolved_path = pathlib.Path(logfile_path).absolute().resolve()
        resolved_path.parent.mkdir(parents=True, exist_ok=True)

        self._files[logfile_path] = open(str(resolved_path), "ab+")

    async def close(self):
        if self._loop is None:
            return

        await asyncio.gather(
            *[self._close_file(logfile_path) for logfile_path in self._files]
        )

        self._initialized = False

    async def _close_file(self, logfile_path: str):
        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._close_file_at_path,
                logfile_path,
            )

    def _close_file_at_path(self, logfile_path: str):
        if (logfile := self._files.get(logfile_path)) and logfile.closed is False:
            logfile.close()

    def _to_logfile_path(
        self,
        filename: str,
        directory: str | None = None,
    ):
        filename_path = pathlib.Path(filename)

        assert filename_path.suffix == ".json", "Err. - file must be JSON file for logs."

        if self._config.directory:
            directory = self._config.directory

        elif directory is None:
            directory = self._cwd

        return os.path.join(directory, filename_path)

    async def log(
        self,
        entry: T | Log[T],
        template: str | None = None,
        path: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        filename: str | None = None
        directory: str | None = None

        if path:
            logfile_path = pathlib.Path(path)
            is_logfile = len(logfile_path.suffix) > 0

            filename = logfile_path.name if is_logfile else None
            directory = (
                str(logfile_path.parent.absolute())
                if is_logfile
                else str(logfile_path.absolute())
            )

        if template is None:
            template = self._default_template

        if filename is None:
            filename = self._default_logfile

        if directory is None:
            directory = self._default_log_directory

        if filename or directory:
            await self._log_to_file(
                entry,
                filename=filename,
                directory=directory,
                filter=filter,
            )

        else:
            await self._log(
                entry,
                template=template,
                filter=filter,
            )

    async def _log(
        self,
        entry_or_log: T | Log[T],
        template: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = (
            entry_or_log.entry if isinstance(entry_or_log, Log) else entry_or_log
        )

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        await self.initialize()

        if template is None:
            template = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"

        if isinstance(entry_or_log, Log):
            log_file = entry_or_log.filename
            line_number = entry_or_log.line_number
            function_name = entry_or_log.function_name

        else:
            log_file, line_number, function_name = self._find_caller()

        output = sys.stdout if self._config.output == StreamType.STDOUT else sys.stderr

        await self._loop.run_in_executor(
            None,
            self._write_to_stream,
            output,
            entry.to_template(
                template,
                context={
                    "filename": log_file,
                    "function_name": function_name,
                    "line_number": line_number,
                    "thread_id": threading.get_native_id(),
                    "timestamp": datetime.datetime.now(datetime.UTC).isoformat(),
                },
            ),
        )

    def _write_to_stream(self, output: io.TextIOBase, line: str):
        output.write(line + "\n")
        output.flush()

    async def _log_to_file(
        self,
        entry_or_log: T | Log[T],
        filename: str | None = None,
        directory: str | None = None,
        filter: Callable[[T], bool] | None = None,
    ):
        entry = (
            entry_or_log.entry if isinstance(entry_or_log, Log) else entry_or_log
        )

        if self._config.enabled(self._name, entry.level) is False:
            return

        if filter and filter(entry) is False:
            return

        await self.initialize()

        if filename and directory:
            logfile_path = self._to_logfile_path(
                filename,
                directory=directory,
            )

        elif self._default_logfile_path:
            logfile_path = self._default_logfile_path

        else:
            filename = "logs.json"
            directory = os.path.join(self._cwd, "logs")
            logfile_path = os.path.join(directory, filename)

        if self._files.get(logfile_path) is None or self._files[logfile_path].closed:
            await self.open_file(
                filename,
                directory=directory,
            )

        if isinstance(entry_or_log, Log):
            log = entry_or_log

        else:
            log_file, line_number, function_name = self._find_caller()

            log = Log(
                entry=entry,
                filename=log_file,
                function_name=function_name,
                line_number=line_number,
            )

        async with self._file_locks[logfile_path]:
            await self._loop.run_in_executor(
                None,
                self._write_to_file,
                log,
                logfile_path,
            )

    def _write_to_file(
        self,
        log: Log,
        logfile_path: str,
    ):
        if (logfile := self._files.get(logfile_path)) and logfile.closed is False:
            logfile.write(msgspec.json.encode(log) + b"\n")
            logfile.flush()

    def _find_caller(self):
        """
        Find the stack frame of the caller so that we can note the source
        file name, line number and function name.
        """
        frame = sys._getframe(3)
        code = frame.f_code

        return (
            code.co_filename,
            frame.f_lineno,
            code.co_name,
        )
