"""Shared fixtures: keep config, preferences and logs out of the real home
directory, and a scripted stand-in for the external player."""

import threading
from typing import List, Optional

import pytest


@pytest.fixture(autouse=True)
def isolated_dirs(tmp_path, monkeypatch):
    """Point XDG config and data directories at a temporary location."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.delenv("LOFI_RADIO_PLAYER", raising=False)
    monkeypatch.delenv("LOFI_RADIO_LOG_LEVEL", raising=False)
    return tmp_path


class FakeProcess:
    """Stands in for PlayerProcess; exits are delivered synchronously.

    The callbacks handed over at spawn stay reachable through
    ``initial_on_stderr`` and ``initial_on_exit`` after detach(), so tests can
    replay a monitor that fires late.
    """

    def __init__(self, command, on_stderr, on_exit, pid, ignore_sigterm=False):
        self.command = command
        self.pid = pid
        self.signals: List[str] = []
        self.returncode: Optional[int] = None
        self.initial_on_stderr = on_stderr
        self.initial_on_exit = on_exit
        self._ignore_sigterm = ignore_sigterm
        self._on_stderr = on_stderr
        self._on_exit = on_exit
        self._lock = threading.Lock()
        self._terminated = threading.Event()

    def detach(self) -> None:
        with self._lock:
            self._on_stderr = None
            self._on_exit = None

    def is_alive(self) -> bool:
        return not self._terminated.is_set()

    def request_graceful_stop(self) -> None:
        self.signals.append("SIGTERM")
        if not self._ignore_sigterm:
            self.exit(-15)

    def force_kill(self) -> None:
        self.signals.append("SIGKILL")
        self.exit(-9)

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._terminated.wait(timeout)

    def emit_stderr(self, line: str) -> None:
        with self._lock:
            callback = self._on_stderr
        if callback:
            callback(line)

    def exit(self, code: int) -> None:
        if self._terminated.is_set():
            return
        self.returncode = code
        self._terminated.set()
        with self._lock:
            callback = self._on_exit
        if callback:
            callback(code)


class FakePlayerFactory:
    """Process factory that follows a script of spawn outcomes.

    Outcomes: "ok" (keeps running), "fail" (exits 1 immediately), "stderr"
    (reports a fatal stream error), "stubborn" (ignores SIGTERM), "missing"
    (executable not found), "denied" (other OS error). Unscripted spawns are "ok".
    """

    def __init__(self, *script: str):
        self.script = list(script)
        self.processes: List[FakeProcess] = []
        self.spawned = threading.Event()
        self._next_pid = 1000

    def __call__(self, command, on_stderr=None, on_exit=None) -> FakeProcess:
        outcome = self.script.pop(0) if self.script else "ok"
        if outcome == "missing":
            raise FileNotFoundError(command[0])
        if outcome == "denied":
            raise PermissionError("Permission denied")

        self._next_pid += 1
        process = FakeProcess(
            command,
            on_stderr,
            on_exit,
            self._next_pid,
            ignore_sigterm=outcome == "stubborn",
        )
        self.processes.append(process)
        self.spawned.set()

        if outcome == "fail":
            process.exit(1)
        elif outcome == "stderr":
            process.emit_stderr(f"{command[-1]}: Connection refused")
        return process

    @property
    def alive(self) -> List[FakeProcess]:
        return [p for p in self.processes if p.is_alive()]


class EventRecorder:
    """Listener that records events and lets tests wait for them."""

    def __init__(self):
        self.events = []
        self._condition = threading.Condition()

    def __call__(self, event) -> None:
        with self._condition:
            self.events.append(event)
            self._condition.notify_all()

    def of_type(self, event_type) -> list:
        with self._condition:
            return [e for e in self.events if isinstance(e, event_type)]

    def wait_for(self, event_type, count: int = 1, timeout: float = 5.0) -> bool:
        with self._condition:
            return self._condition.wait_for(
                lambda: len([e for e in self.events if isinstance(e, event_type)]) >= count,
                timeout,
            )


@pytest.fixture
def factory() -> FakePlayerFactory:
    return FakePlayerFactory()


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()
