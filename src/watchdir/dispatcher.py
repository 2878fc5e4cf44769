"""Filter watch events and report matching processes."""
from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

from .events import WatchEvent, WatchTarget
from .query import ProcessQuery, ProcessReport

logger = logging.getLogger(__name__)


class EventDispatcher:
    """Runs the process query for events that match the target file."""

    def __init__(self, target: WatchTarget, query: ProcessQuery, out: Optional[TextIO] = None):
        self._target = target
        self._query = query
        self._out = out

    def matches(self, event: WatchEvent) -> bool:
        if self._target.matches_any_file:
            return True
        return event.file_name == self._target.file_filter

    def dispatch(self, event: WatchEvent) -> Optional[ProcessReport]:
        """Report processes for ``event``; returns the report, or ``None`` when filtered out."""

        if not self.matches(event):
            logger.debug("Ignoring %s %s", event.event_kind, event.file_name)
            return None

        report = self._query.query(self._target.process_pattern)
        if not report.ok:
            logger.error("%s\n%s", report.error, report.diagnostics)

        out = self._out or sys.stdout
        out.write(f"*** {event.event_kind} {event.file_name}\n{report.output}\n")
        out.flush()
        return report
