import io
import os
import stat
import sys
import threading
from pathlib import Path
from typing import List

import pytest

from watchdir.query import ProcessReport


class FakeQuery:
    """Records patterns and answers with a canned report."""

    def __init__(self, report: ProcessReport = None):
        self.report = report or ProcessReport(output="4242 myproc --serve\n", returncode=0)
        self.patterns: List[str] = []

    def query(self, pattern):
        self.patterns.append(pattern)
        return self.report


class FakeProcess:
    """Stands in for WatcherProcess with an in-memory event stream."""

    def __init__(self, text: str = "", returncode: int = 0):
        self.stdout = io.StringIO(text, newline="")
        self.args = ["inotifywait", "-m", "--csv"]
        self.returncode = returncode
        self.signals: List[int] = []
        self.signalled = threading.Event()
        self.waited = 0
        self.terminated = False

    def send_signal(self, signum):
        self.signals.append(signum)
        self.signalled.set()

    def terminate(self):
        self.terminated = True

    def wait(self):
        self.waited += 1
        return self.returncode


class PipeProcess(FakeProcess):
    """A watcher whose stream stays open until it receives a signal."""

    def __init__(self, text: str = ""):
        super().__init__()
        read_fd, write_fd = os.pipe()
        self.stdout = os.fdopen(read_fd, "r", newline="")
        self._writer = os.fdopen(write_fd, "w")
        self._writer.write(text)
        self._writer.flush()

    def send_signal(self, signum):
        super().send_signal(signum)
        self._writer.close()


class FakeLauncher:
    def __init__(self, process):
        self.process = process
        self.directories: List[str] = []

    def start(self, directory):
        self.directories.append(directory)
        return self.process


class FakeForwarder:
    def __init__(self):
        self.installed = False
        self.attached = None

    def install(self):
        self.installed = True

    def attach(self, process):
        self.attached = process


@pytest.fixture
def fake_query():
    return FakeQuery()


@pytest.fixture
def make_script(tmp_path):
    """Write an executable Python script and return its path."""

    if os.name != "posix":  # pragma: no cover - POSIX-only helpers
        pytest.skip("stand-in tools need a POSIX shebang")

    def _make(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text(f"#!{sys.executable}\n{body}")
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return _make
