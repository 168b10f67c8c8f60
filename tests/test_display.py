from __future__ import annotations

import io

import pytest
from rich.console import Console

from echoprobe.display import ConsoleDisplay, render_table
from echoprobe.errors import DisplayError
from echoprobe.probe import Outcome
from echoprobe.stats import StatsAggregator
from echoprobe.sweep import build_sweep


def _text(renderable) -> str:
    console = Console(file=io.StringIO(), width=120, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


def test_table_states():
    configs = build_sweep([4.0], [50, 100, 200], rounds=2)
    agg = StatsAggregator()
    agg.record(0, Outcome.DELIVERED)
    agg.record(0, Outcome.MISSED)
    agg.record(1, Outcome.MISSED)
    agg.fail(1, "refused")

    out = _text(render_table(configs, agg.snapshot()))
    assert "4hz" in out
    assert "200 bytes" in out
    assert "Done" in out
    assert "Failed: refused" in out
    assert "Not Started" in out


def test_live_display_requires_terminal():
    console = Console(file=io.StringIO())
    display = ConsoleDisplay(build_sweep([4.0], [50]), console=console)
    with pytest.raises(DisplayError):
        with display:
            pass


def test_live_display_renders_updates():
    console = Console(file=io.StringIO(), force_terminal=True, width=120, color_system=None)
    configs = build_sweep([8.0], [50], rounds=5)
    agg = StatsAggregator()
    with ConsoleDisplay(configs, console=console) as display:
        agg.record(0, Outcome.DELIVERED)
        display.update(agg.snapshot())
    out = console.file.getvalue()
    assert "Running 1/5" in out
