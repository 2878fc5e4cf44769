"""Main watch loop: launch the watcher, decode its events and dispatch them."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TextIO

from .decoder import DecodeError, EventStreamDecoder, MalformedRecordError
from .dispatcher import EventDispatcher
from .events import WatchTarget
from .query import PgrepQuery, ProcessQuery
from .signals import SignalForwarder
from .watcher import WatcherLauncher

logger = logging.getLogger(__name__)


class MonitorState(str, Enum):
    """Lifecycle of a monitor run."""

    STARTING = "starting"
    RUNNING = "running"
    DRAINING = "draining"
    TERMINATED = "terminated"


@dataclass
class MonitorStats:
    """Counters emitted by the monitor for observability."""

    events: int = 0
    matches: int = 0
    malformed_records: int = 0
    failed_queries: int = 0


class WatchMonitor:
    """Runs the watcher subprocess and reports processes on matching events."""

    def __init__(
        self,
        target: WatchTarget,
        *,
        launcher: Optional[WatcherLauncher] = None,
        query: Optional[ProcessQuery] = None,
        forwarder: Optional[SignalForwarder] = None,
        out: Optional[TextIO] = None,
    ):
        self._target = target
        self._launcher = launcher or WatcherLauncher()
        self._forwarder = forwarder or SignalForwarder()
        self._dispatcher = EventDispatcher(target, query or PgrepQuery(), out)
        self._stats = MonitorStats()
        self.state = MonitorState.STARTING

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    def run(self) -> int:
        """Run until the watcher closes its output; returns the program exit status.

        Raises LaunchError if the watcher cannot start and DecodeError if its
        output cannot be read.
        """

        # Handlers go in before launch so an early signal is queued, not lost.
        self._forwarder.install()
        process = self._launcher.start(self._target.directory)
        self._forwarder.attach(process)

        self.state = MonitorState.RUNNING
        try:
            self.pump(EventStreamDecoder(process.stdout))
        except DecodeError:
            logger.error("Stopping watcher after unreadable output")
            process.terminate()
            raise

        self.state = MonitorState.DRAINING
        process.wait()
        self.state = MonitorState.TERMINATED
        logger.info(
            "Monitor stopped after %s events, %s matches, %s malformed records, %s failed queries",
            self._stats.events,
            self._stats.matches,
            self._stats.malformed_records,
            self._stats.failed_queries,
        )
        return 0

    def pump(self, decoder: EventStreamDecoder) -> None:
        """Dispatch events one at a time until the stream ends."""

        while True:
            try:
                event = decoder.read()
            except MalformedRecordError as exc:
                self._stats.malformed_records += 1
                logger.warning("unexpected line %s: %s", exc.line_num, exc.fields)
                continue
            if event is None:
                return

            self._stats.events += 1
            report = self._dispatcher.dispatch(event)
            if report is None:
                continue
            self._stats.matches += 1
            if not report.ok:
                self._stats.failed_queries += 1
