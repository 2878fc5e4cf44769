"""Launch and supervise the external filesystem watcher."""
from __future__ import annotations

import io
import logging
import subprocess
from typing import List, Optional, TextIO

from .config import WatcherConfig

logger = logging.getLogger(__name__)


class LaunchError(Exception):
    """Raised when the watcher subprocess cannot be started."""


def build_command(config: WatcherConfig, directory: str) -> List[str]:
    """Return the argv that makes the watcher stream CSV events for ``directory``."""

    command = [config.command, "-m", "--csv"]
    for event in config.events:
        command.extend(["-e", event.value])
    if config.recursive:
        command.append("-r")
    command.extend(config.extra_args)
    command.append(directory)
    return command


class WatcherProcess:
    """Handle on a running watcher: its event stream and its lifetime."""

    def __init__(self, process: subprocess.Popen):
        self._process = process
        # newline="" keeps quoted CR/LF inside filenames intact for the csv reader
        self._stdout = io.TextIOWrapper(
            process.stdout,
            encoding="utf-8",
            errors="surrogateescape",
            newline="",
        )

    @property
    def stdout(self) -> TextIO:
        return self._stdout

    @property
    def args(self) -> List[str]:
        return list(self._process.args)

    @property
    def pid(self) -> int:
        return self._process.pid

    def send_signal(self, signum: int) -> None:
        self._process.send_signal(signum)

    def terminate(self) -> None:
        if self._process.poll() is None:
            self._process.terminate()

    def wait(self) -> int:
        """Block until the watcher exits and log how it ended."""

        returncode = self._process.wait()
        self._stdout.close()
        command = " ".join(self.args)
        if returncode == 0:
            logger.info("%s:\n\texited normally", command)
        elif returncode < 0:
            logger.warning("%s:\n\tterminated by signal %s", command, -returncode)
        else:
            logger.warning("%s:\n\texit status %s", command, returncode)
        return returncode


class WatcherLauncher:
    """Starts the configured watcher tool."""

    def __init__(self, config: Optional[WatcherConfig] = None):
        self._config = config or WatcherConfig()

    def start(self, directory: str) -> WatcherProcess:
        command = build_command(self._config, directory)
        logger.debug("Launching watcher: %s", command)
        try:
            process = subprocess.Popen(
                command,
                stdout=subprocess.PIPE,
                stderr=None,
            )
        except OSError as exc:
            raise LaunchError(f"Unable to start watcher '{self._config.command}': {exc}") from exc

        if process.stdout is None:  # pragma: no cover - PIPE always attaches
            process.kill()
            process.wait()
            raise LaunchError("Watcher output stream could not be attached")

        logger.info("Watching %s with %s (pid %s)", directory, self._config.command, process.pid)
        return WatcherProcess(process)
