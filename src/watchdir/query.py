"""Run the external process-listing tool."""
from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from typing import List, Optional, Protocol

from .config import QueryConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessReport:
    """Captured result of one process query."""

    output: str
    diagnostics: str = ""
    returncode: Optional[int] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ProcessQuery(Protocol):
    def query(self, pattern: str) -> ProcessReport:
        ...


class PgrepQuery:
    """Lists processes whose command line matches a pattern.

    The pattern is passed as a single argv entry; no shell is involved.
    """

    def __init__(self, config: Optional[QueryConfig] = None):
        self._config = config or QueryConfig()

    def command_for(self, pattern: str) -> List[str]:
        return [self._config.command, *self._config.args, pattern]

    def query(self, pattern: str) -> ProcessReport:
        command = self.command_for(pattern)
        logger.debug("Running process query: %s", command)
        try:
            proc = subprocess.run(
                command,
                capture_output=True,
                text=True,
                errors="replace",
                timeout=self._config.timeout,
                check=False,
            )
        except FileNotFoundError as exc:
            return ProcessReport(output="", error=f"{self._config.command}: {exc.strerror}")
        except subprocess.TimeoutExpired as exc:
            return ProcessReport(
                output=_as_text(exc.stdout),
                diagnostics=_as_text(exc.stderr),
                error=f"{self._config.command}: timed out after {exc.timeout}s",
            )
        except OSError as exc:
            return ProcessReport(output="", error=f"{self._config.command}: {exc}")

        error = None
        if proc.returncode != 0:
            error = f"{self._config.command}: exit status {proc.returncode}"
        return ProcessReport(
            output=proc.stdout,
            diagnostics=proc.stderr,
            returncode=proc.returncode,
            error=error,
        )


def _as_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode(errors="replace")
    return value
