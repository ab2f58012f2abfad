"""Tests for the one-shot command line."""

import os
import signal
import threading
from unittest.mock import patch

import pytest

from lofi_radio import cli
from lofi_radio.context import AppContext
from lofi_radio.core import preferences
from lofi_radio.core.config import Config, PlayerConfig
from lofi_radio.core.console import get_console
from lofi_radio.domain.playback import (
    PlaybackPhase,
    PlaybackSupervisor,
    PlayingEvent,
    StoppedEvent,
)
from lofi_radio.domain.stations import get_default_station, get_station_by_id


@pytest.fixture
def cfg():
    """Skip logging setup; preferences still use the temporary data dir."""
    preferences.init_database()
    config = Config()
    with patch("lofi_radio.main.bootstrap", return_value=config):
        yield config


@pytest.fixture
def player_available():
    with patch("lofi_radio.cli.check_player_available", return_value=True) as check:
        yield check


class TestParser:
    def test_play_arguments(self) -> None:
        args = cli.build_parser().parse_args(["play", "soma-deep", "-v", "40"])
        assert args.subcommand == "play"
        assert args.station == "soma-deep"
        assert args.volume == "40"

    def test_no_subcommand(self) -> None:
        assert cli.build_parser().parse_args([]).subcommand is None


class TestChooseStation:
    def test_explicit_query(self, cfg) -> None:
        assert cli.choose_station("lush") == get_station_by_id("soma-lush")

    def test_unknown_query(self, cfg) -> None:
        assert cli.choose_station("polka") is None

    def test_reuses_last_station(self, cfg) -> None:
        preferences.set_last_station_id("soma-deep")
        assert cli.choose_station(None) == get_station_by_id("soma-deep")

    def test_default_without_terminal(self, cfg) -> None:
        preferences.set_last_station_id("removed-station")
        with patch("lofi_radio.cli.sys.stdin") as stdin:
            stdin.isatty.return_value = False
            assert cli.choose_station(None) == get_default_station()

    def test_prompts_on_terminal(self, cfg) -> None:
        with (
            patch("lofi_radio.cli.sys.stdin") as stdin,
            patch("lofi_radio.cli.IntPrompt.ask", return_value=3),
            patch("lofi_radio.cli.ui.print_station_choices"),
        ):
            stdin.isatty.return_value = True
            assert cli.choose_station(None) == get_station_by_id("soma-deep")


class TestRun:
    def test_stations(self, cfg) -> None:
        with patch("lofi_radio.cli.ui.print_stations") as print_stations:
            assert cli.run(["stations"]) == 0
        print_stations.assert_called_once()

    def test_stop_reports_nothing_playing(self, cfg, capsys) -> None:
        assert cli.run(["stop"]) == 0
        assert "No station is currently playing" in capsys.readouterr().out

    def test_status_shows_last_station_and_volume(self, cfg, capsys) -> None:
        preferences.set_last_station_id("soma-groove")
        preferences.set_volume(25)
        assert cli.run(["status"]) == 0
        out = capsys.readouterr().out
        assert "Not playing" in out
        assert "SomaFM - Groove Salad" in out
        assert "25%" in out

    def test_volume_set_and_show(self, cfg, capsys) -> None:
        assert cli.run(["volume", "30"]) == 0
        assert preferences.get_volume() == 30
        assert cli.run(["volume"]) == 0
        assert "Current volume: 30%" in capsys.readouterr().out

    @pytest.mark.parametrize("level", ["150", "loud", "-5"])
    def test_volume_invalid(self, cfg, level) -> None:
        assert cli.run(["volume", level]) == 1
        assert preferences.get_volume() == preferences.DEFAULT_VOLUME

    def test_play_missing_player(self, cfg) -> None:
        with (
            patch("lofi_radio.cli.check_player_available", return_value=False),
            patch("lofi_radio.main.print_missing_player") as missing,
        ):
            assert cli.run(["play", "soma-groove"]) == 1
        missing.assert_called_once_with("ffplay")

    def test_play_unknown_station(self, cfg, player_available) -> None:
        assert cli.run(["play", "polka"]) == 1

    def test_play_invalid_volume(self, cfg, player_available) -> None:
        with patch("lofi_radio.cli.start_station") as start:
            assert cli.run(["play", "soma-groove", "--volume", "120"]) == 1
        start.assert_not_called()

    def test_play_failure_exits_with_error(self, cfg, player_available) -> None:
        with patch("lofi_radio.cli.start_station", return_value=False) as start:
            assert cli.run(["play", "soma-groove", "-v", "20"]) == 1

        ctx, station = start.call_args[0]
        assert station == get_station_by_id("soma-groove")
        assert ctx.supervisor.get_state().volume == 20
        assert preferences.get_volume() == 20


@pytest.fixture
def fake_supervisor(cfg, factory, recorder):
    """Route run_play through a supervisor driving the scripted fake player."""
    cfg.player = PlayerConfig(
        grace_period_ms=50,
        stop_timeout_ms=200,
        reconnect_delay_ms=10,
        max_reconnect_attempts=1,
    )
    supervisor = PlaybackSupervisor(cfg.player, process_factory=factory)
    supervisor.subscribe(recorder)
    ctx = AppContext.create(cfg, get_console(), supervisor=supervisor)
    with patch.object(cli.AppContext, "create", return_value=ctx):
        yield supervisor
    supervisor.stop()


def on_first_playing(supervisor, action):
    """Run action once, when the first stream is confirmed."""
    fired = []

    def listener(event) -> None:
        if isinstance(event, PlayingEvent) and not fired:
            fired.append(event)
            action()

    supervisor.subscribe(listener)


class TestRunPlay:
    def test_connection_lost_exits_with_error(
        self, fake_supervisor, factory, recorder, player_available
    ) -> None:
        def break_stream() -> None:
            factory.script = ["fail"]
            factory.processes[0].exit(1)

        on_first_playing(fake_supervisor, break_stream)

        assert cli.run(["play", "soma-groove"]) == 1
        assert len(factory.processes) == 2
        assert factory.alive == []
        assert recorder.of_type(StoppedEvent) == []
        assert preferences.get_last_station_id() == "soma-groove"

    def test_sigint_stops_playback(
        self, fake_supervisor, factory, recorder, player_available
    ) -> None:
        previous = signal.getsignal(signal.SIGINT)
        # Delivered while run_play sits in its wait loop
        on_first_playing(
            fake_supervisor,
            lambda: threading.Timer(0.1, os.kill, (os.getpid(), signal.SIGINT)).start(),
        )

        assert cli.run(["play", "soma-groove"]) == 0
        assert factory.processes[0].signals == ["SIGTERM"]
        assert len(recorder.of_type(StoppedEvent)) == 1
        assert not fake_supervisor.get_state().is_playing
        assert signal.getsignal(signal.SIGINT) is previous

    def test_end_of_stream_exits_cleanly(
        self, fake_supervisor, factory, player_available
    ) -> None:
        on_first_playing(fake_supervisor, lambda: factory.processes[0].exit(0))

        assert cli.run(["play", "soma-groove"]) == 0
        assert fake_supervisor.get_state().phase == PlaybackPhase.STOPPED
