"""
External player process integration.

Wraps one ffplay subprocess: builds its command line, drains stderr on a
background thread, waits for exit on another, and reports both to callbacks
that the supervisor can detach before stopping the process.
"""

import subprocess
import sys
import threading
from typing import Callable, List, Optional

from loguru import logger

StderrCallback = Callable[[str], None]
ExitCallback = Callable[[Optional[int]], None]


def volume_to_gain(volume: int) -> str:
    """Convert a 0-100 volume to the linear gain ffplay expects ('0.70')."""
    return f"{volume / 100:.2f}"


def build_player_command(binary: str, url: str, volume: int) -> List[str]:
    """Build the ffplay command line for a stream."""
    return [
        binary,
        "-nodisp",
        "-loglevel",
        "error",
        "-af",
        f"volume={volume_to_gain(volume)}",
        "-vn",
        url,
    ]


def check_player_available(binary: str = "ffplay", timeout: float = 3.0) -> bool:
    """Check if the external player is available on the system."""
    try:
        result = subprocess.run(
            [binary, "-version"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=timeout,
        )
        # Some ffplay builds print the version and exit with 1
        return result.returncode in (0, 1)
    except (subprocess.SubprocessError, FileNotFoundError, OSError):
        return False


class PlayerProcess:
    """Owned handle to one running player process.

    Only exposes what the supervisor needs: graceful stop, force kill,
    liveness, a termination wait, and detaching the monitors.
    """

    def __init__(
        self,
        process: subprocess.Popen,
        on_stderr: Optional[StderrCallback] = None,
        on_exit: Optional[ExitCallback] = None,
    ):
        self._process = process
        self._callback_lock = threading.Lock()
        self._on_stderr = on_stderr
        self._on_exit = on_exit
        self._terminated = threading.Event()
        self.returncode: Optional[int] = None

        self._stderr_thread = threading.Thread(
            target=self._stderr_drain,
            daemon=True,
            name=f"PlayerStderr-{process.pid}",
        )
        self._exit_thread = threading.Thread(
            target=self._exit_watch,
            daemon=True,
            name=f"PlayerExit-{process.pid}",
        )
        self._stderr_thread.start()
        self._exit_thread.start()

    @classmethod
    def spawn(
        cls,
        command: List[str],
        on_stderr: Optional[StderrCallback] = None,
        on_exit: Optional[ExitCallback] = None,
    ) -> "PlayerProcess":
        """Start the player.

        Raises:
            FileNotFoundError: If the executable does not exist
            OSError: If the process could not be started
        """
        process = subprocess.Popen(
            command,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            # ffplay is only resolvable through the shell on Windows
            shell=sys.platform == "win32",
        )
        logger.debug(f"Spawned player pid={process.pid}: {' '.join(command)}")
        return cls(process, on_stderr=on_stderr, on_exit=on_exit)

    @property
    def pid(self) -> int:
        return self._process.pid

    def detach(self) -> None:
        """Stop forwarding stderr and exit notifications."""
        with self._callback_lock:
            self._on_stderr = None
            self._on_exit = None

    def is_alive(self) -> bool:
        return not self._terminated.is_set() and self._process.poll() is None

    def request_graceful_stop(self) -> None:
        """Send SIGTERM."""
        try:
            self._process.terminate()
        except ProcessLookupError:
            pass  # Already gone

    def force_kill(self) -> None:
        """Send SIGKILL."""
        try:
            self._process.kill()
        except ProcessLookupError:
            pass

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Wait for the process to exit. Returns True once it has."""
        return self._terminated.wait(timeout)

    def _stderr_drain(self) -> None:
        stream = self._process.stderr
        if stream is None:
            return
        try:
            for raw in iter(stream.readline, b""):
                line = raw.decode(errors="ignore").rstrip()
                if not line:
                    continue
                logger.debug(f"[ffplay {self.pid}] {line}")
                with self._callback_lock:
                    callback = self._on_stderr
                if callback:
                    callback(line)
        except (OSError, ValueError) as e:
            logger.debug(f"Stderr read ended for pid={self.pid}: {e}")
        finally:
            try:
                stream.close()
            except OSError:
                pass

    def _exit_watch(self) -> None:
        self.returncode = self._process.wait()
        # Let the stderr reader flush the last lines before reporting the exit
        self._stderr_thread.join(timeout=1.0)
        self._terminated.set()
        logger.debug(f"Player pid={self.pid} exited with code {self.returncode}")
        with self._callback_lock:
            callback = self._on_exit
        if callback:
            callback(self.returncode)
