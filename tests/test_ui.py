"""Tests for terminal formatting helpers."""

from datetime import datetime

import pytest

from lofi_radio import ui
from lofi_radio.core.config import UIConfig
from lofi_radio.domain.playback import PlaybackPhase, PlaybackState
from lofi_radio.domain.stations import get_station_by_id

GROOVE = get_station_by_id("soma-groove")


@pytest.fixture(autouse=True)
def ascii_icons():
    ui.set_ui_config(UIConfig(use_emoji=False))
    yield
    ui.set_ui_config(UIConfig())


@pytest.mark.parametrize(
    "text,expected",
    [("0", 0), ("50", 50), (" 100 ", 100), ("101", None), ("-1", None), ("x", None), ("", None)],
)
def test_validate_volume(text, expected) -> None:
    assert ui.validate_volume(text) == expected


def test_formatters_escape_markup() -> None:
    assert ui.format_error("bad [tag]") == "[red]x bad \\[tag][/red]"


def test_ascii_icons() -> None:
    assert ui.format_success("ok").startswith("[green]+ ")


class TestPrintStatus:
    def test_not_playing(self, capsys) -> None:
        ui.print_status(PlaybackState(volume=20), "Not playing")
        out = capsys.readouterr().out
        assert "Status: Not playing" in out
        assert "Volume: 20%" in out

    def test_reconnecting(self, capsys) -> None:
        state = PlaybackState(current_station=GROOVE, phase=PlaybackPhase.RECONNECTING)
        ui.print_status(state, "Not playing")
        out = capsys.readouterr().out
        assert "Status: Reconnecting" in out
        assert GROOVE.name in out

    def test_playing(self, capsys) -> None:
        state = PlaybackState(
            is_playing=True,
            current_station=GROOVE,
            volume=70,
            start_time=datetime.now(),
            process_id=42,
            phase=PlaybackPhase.PLAYING,
        )
        ui.print_status(state, "2m 5s")
        out = capsys.readouterr().out
        assert "Status: Playing" in out
        assert "Genre: Chill/Ambient" in out
        assert "Uptime: 2m 5s" in out


def test_print_stations_lists_every_station(capsys) -> None:
    ui.print_stations([GROOVE])
    out = capsys.readouterr().out
    assert "[1]" in out
    assert "[soma-groove]" in out
    assert GROOVE.url in out
