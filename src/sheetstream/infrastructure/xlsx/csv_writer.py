from __future__ import annotations

import csv
from collections.abc import Sequence
from pathlib import Path
from types import TracebackType
from typing import IO

from sheetstream.core.errors import WriteError


class RecordWriter:
    """Delimiter-separated CSV destination with standard quoting.

    Fields holding the delimiter, a quote or a line break are quoted and
    embedded quotes doubled. Failures surface as ``WriteError``.
    """

    def __init__(self, path: Path, *, delimiter: str = ";", encoding: str = "utf-8") -> None:
        self.path = path
        self.delimiter = delimiter
        self.encoding = encoding
        self._handle: IO[str] | None = None
        self._writer = None
        self._quoted_writer = None

    def open(self) -> RecordWriter:
        try:
            self._handle = self.path.open("w", encoding=self.encoding, newline="")
        except OSError as exc:
            raise WriteError(f"Error creating CSV {self.path}: {exc}") from exc
        self._writer = csv.writer(
            self._handle,
            delimiter=self.delimiter,
            quotechar='"',
            quoting=csv.QUOTE_MINIMAL,
            lineterminator="\n",
        )
        # A bare CR is not in the line terminator, so QUOTE_MINIMAL leaves it raw.
        self._quoted_writer = csv.writer(
            self._handle,
            delimiter=self.delimiter,
            quotechar='"',
            quoting=csv.QUOTE_ALL,
            lineterminator="\n",
        )
        return self

    def write_row(self, row: Sequence[str]) -> None:
        if self._writer is None:
            raise WriteError(f"CSV {self.path} is not open")
        try:
            if any("\r" in field for field in row):
                self._quoted_writer.writerow(row)
            else:
                self._writer.writerow(row)
        except (csv.Error, OSError, UnicodeEncodeError) as exc:
            raise WriteError(f"Error writing row to {self.path}: {exc}") from exc

    def close(self) -> None:
        if self._handle is None:
            return
        handle = self._handle
        self._handle = None
        self._writer = None
        self._quoted_writer = None
        try:
            handle.flush()
        except OSError as exc:
            handle.close()
            raise WriteError(f"Error flushing CSV {self.path}: {exc}") from exc
        try:
            handle.close()
        except OSError as exc:
            raise WriteError(f"Error closing CSV {self.path}: {exc}") from exc

    def __enter__(self) -> RecordWriter:
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if exc_type is None:
            self.close()
            return
        if self._handle is not None:
            self._handle.close()
            self._handle = None
            self._writer = None
            self._quoted_writer = None
