"""Decode the watcher's CSV output into WatchEvent records."""
from __future__ import annotations

import csv
import io
from typing import Iterator, List, Optional, Sequence, TextIO

from .events import WatchEvent

FIELD_COUNT = 3


class DecodeError(Exception):
    """Raised when the event stream cannot be read or parsed."""


class MalformedRecordError(Exception):
    """A record was read but does not have exactly three fields."""

    def __init__(self, fields: List[str], line_num: int):
        super().__init__(f"unexpected line {line_num}: {fields!r}")
        self.fields = fields
        self.line_num = line_num


class EventStreamDecoder:
    """Pulls one event at a time from a watcher output stream."""

    def __init__(self, stream: TextIO):
        self._reader = csv.reader(stream)

    @property
    def line_num(self) -> int:
        return self._reader.line_num

    def read(self) -> Optional[WatchEvent]:
        """Return the next event, or ``None`` once the stream is closed."""

        try:
            fields = next(self._reader)
        except StopIteration:
            return None
        except (csv.Error, OSError, UnicodeDecodeError, ValueError) as exc:
            raise DecodeError(f"failed to read event stream at line {self.line_num}: {exc}") from exc

        if len(fields) != FIELD_COUNT:
            raise MalformedRecordError(fields, self.line_num)
        directory, event_kind, file_name = fields
        return WatchEvent(directory=directory, event_kind=event_kind, file_name=file_name)

    def __iter__(self) -> Iterator[WatchEvent]:
        while True:
            event = self.read()
            if event is None:
                return
            yield event


def encode_record(fields: Sequence[str]) -> str:
    """Encode one record the way the watcher writes it, newline included."""

    buffer = io.StringIO()
    csv.writer(buffer, lineterminator="\n").writerow(fields)
    return buffer.getvalue()
