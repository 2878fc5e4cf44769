"""Relay termination signals to the watcher subprocess."""
from __future__ import annotations

import logging
import queue
import signal
import threading
from concurrent.futures import Future
from typing import Any, Dict, Iterable, Optional

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = (signal.SIGINT, signal.SIGTERM)

_STOP = object()


class SignalForwarder:
    """Queues SIGINT/SIGTERM and forwards them to the watcher once it exists.

    Handlers only enqueue; a daemon thread blocks until the watcher handle
    has been attached and then delivers every queued signal in order. The
    program is expected to shut down when the watcher exits and closes its
    output, so the forwarder itself never exits.
    """

    def __init__(self, signals: Iterable[int] = DEFAULT_SIGNALS):
        self._signals = tuple(signals)
        self._pending: "queue.SimpleQueue[Any]" = queue.SimpleQueue()
        self._handle: Future = Future()
        self._previous: Dict[int, Any] = {}
        self._thread: Optional[threading.Thread] = None

    def install(self) -> None:
        """Register handlers and start the forwarding thread.

        Must be called from the main thread.
        """

        for signum in self._signals:
            self._previous[signum] = signal.signal(signum, self._on_signal)
        self._thread = threading.Thread(target=self._run, name="signal-forwarder", daemon=True)
        self._thread.start()

    def attach(self, process: Any) -> None:
        """Publish the watcher handle; anything with ``send_signal`` works."""

        self._handle.set_result(process)

    def uninstall(self) -> None:
        for signum, handler in self._previous.items():
            signal.signal(signum, handler)
        self._previous.clear()
        self._pending.put(_STOP)
        if not self._handle.done():
            self._handle.set_result(None)
        if self._thread is not None:
            self._thread.join()
            self._thread = None

    def _on_signal(self, signum: int, _frame: Any) -> None:
        self._pending.put(signum)

    def _run(self) -> None:
        process = self._handle.result()
        while True:
            signum = self._pending.get()
            if signum is _STOP or process is None:
                return
            logger.info("Forwarding %s to watcher", signal.Signals(signum).name)
            try:
                process.send_signal(signum)
            except ProcessLookupError:
                logger.debug("Watcher already exited; dropped %s", signum)
