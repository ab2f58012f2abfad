"""Tests for the external player process wrapper."""

import subprocess
import sys
import threading
from unittest.mock import MagicMock, patch

import pytest

from lofi_radio.domain.playback.process import (
    PlayerProcess,
    build_player_command,
    check_player_available,
    volume_to_gain,
)


class TestBuildPlayerCommand:
    """Tests for command line construction."""

    @pytest.mark.parametrize(
        "volume,gain",
        [(0, "0.00"), (5, "0.05"), (70, "0.70"), (100, "1.00")],
    )
    def test_volume_to_gain(self, volume, gain) -> None:
        assert volume_to_gain(volume) == gain

    def test_command_layout(self) -> None:
        command = build_player_command("ffplay", "http://example.com/stream", 70)
        assert command == [
            "ffplay",
            "-nodisp",
            "-loglevel",
            "error",
            "-af",
            "volume=0.70",
            "-vn",
            "http://example.com/stream",
        ]

    def test_custom_binary(self) -> None:
        command = build_player_command("/opt/ffmpeg/bin/ffplay", "http://x", 10)
        assert command[0] == "/opt/ffmpeg/bin/ffplay"
        assert command[-1] == "http://x"


class TestCheckPlayerAvailable:
    """Tests for the startup preflight."""

    @pytest.mark.parametrize("returncode,expected", [(0, True), (1, True), (2, False)])
    def test_return_codes(self, returncode, expected) -> None:
        with patch(
            "lofi_radio.domain.playback.process.subprocess.run",
            return_value=MagicMock(returncode=returncode),
        ) as run:
            assert check_player_available("ffplay") is expected
        assert run.call_args[0][0] == ["ffplay", "-version"]

    def test_missing_binary(self) -> None:
        with patch(
            "lofi_radio.domain.playback.process.subprocess.run",
            side_effect=FileNotFoundError,
        ):
            assert check_player_available("ffplay") is False

    def test_timeout(self) -> None:
        with patch(
            "lofi_radio.domain.playback.process.subprocess.run",
            side_effect=subprocess.TimeoutExpired(["ffplay"], 3),
        ):
            assert check_player_available("ffplay") is False


class TestPlayerProcess:
    """Tests against a real child process standing in for ffplay."""

    def test_reports_stderr_and_exit(self) -> None:
        lines = []
        exited = threading.Event()
        codes = []

        def on_exit(code) -> None:
            codes.append(code)
            exited.set()

        process = PlayerProcess.spawn(
            [sys.executable, "-c", "import sys; sys.stderr.write('Invalid data\\n'); sys.exit(3)"],
            on_stderr=lines.append,
            on_exit=on_exit,
        )

        assert exited.wait(10)
        assert lines == ["Invalid data"]
        assert codes == [3]
        assert process.returncode == 3
        assert not process.is_alive()

    def test_missing_executable_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            PlayerProcess.spawn(["lofi-radio-no-such-player", "-version"])

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_graceful_stop_after_detach(self) -> None:
        exits = []
        process = PlayerProcess.spawn(
            [sys.executable, "-c", "import time; time.sleep(30)"],
            on_exit=exits.append,
        )
        assert process.is_alive()

        process.detach()
        process.request_graceful_stop()

        assert process.wait(10)
        assert not process.is_alive()
        assert exits == []

    @pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals")
    def test_force_kill(self) -> None:
        process = PlayerProcess.spawn(
            [
                sys.executable,
                "-c",
                "import signal, time; signal.signal(signal.SIGTERM, signal.SIG_IGN); time.sleep(30)",
            ]
        )
        process.force_kill()
        assert process.wait(10)
        assert process.returncode == -9
