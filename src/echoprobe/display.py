"""Terminal rendering of sweep statistics.

The display only ever receives immutable snapshots from the aggregator; it
holds no reference to live counters.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Protocol, Sequence

from rich.console import Console
from rich.live import Live
from rich.table import Table
from rich.text import Text

from .errors import DisplayError
from .probe import ProbeConfig
from .stats import Snapshot


class DisplaySink(Protocol):
    def update(self, snapshot: Snapshot) -> None: ...


class NullDisplay:
    def __init__(self) -> None:
        self.last: Snapshot = MappingProxyType({})

    def update(self, snapshot: Snapshot) -> None:
        self.last = snapshot


def render_table(configs: Sequence[ProbeConfig], snapshot: Snapshot) -> Table:
    table = Table(show_header=True, header_style="bold cyan", title="echoprobe")
    table.add_column("#", justify="right")
    table.add_column("Rate", justify="right")
    table.add_column("Packet Size", justify="right")
    table.add_column("Sent", justify="right", style="blue")
    table.add_column("Missed", justify="right", style="yellow")
    table.add_column("Status")

    for cfg in configs:
        rate = f"{cfg.hertz:g}hz"
        size = f"{cfg.payload_size} bytes"
        stat = snapshot.get(cfg.id)
        if stat is None:
            table.add_row(str(cfg.id), rate, size, "", "", Text("Not Started", style="bold red"))
            continue

        if stat.error is not None:
            status = Text(f"Failed: {stat.error}", style="bold red")
        elif stat.sent >= cfg.rounds:
            status = Text("Done", style="green")
        else:
            status = Text(f"Running {stat.sent}/{cfg.rounds}")
        table.add_row(str(cfg.id), rate, size, str(stat.sent), str(stat.missed), status)

    return table


class ConsoleDisplay:
    """Live-updating table on a terminal."""

    def __init__(
        self,
        configs: Sequence[ProbeConfig],
        console: Console | None = None,
        refresh_per_second: float = 8.0,
    ):
        self.configs = list(configs)
        self.console = console or Console()
        self._snapshot: Snapshot = MappingProxyType({})
        self._live = Live(
            self._render(),
            console=self.console,
            refresh_per_second=refresh_per_second,
            auto_refresh=False,
        )

    def _render(self) -> Table:
        return render_table(self.configs, self._snapshot)

    def update(self, snapshot: Snapshot) -> None:
        self._snapshot = snapshot
        self._live.update(self._render(), refresh=True)

    def __enter__(self) -> "ConsoleDisplay":
        if not self.console.is_terminal:
            raise DisplayError("live display needs a terminal; use --no-live or --json")
        self._live.start(refresh=True)
        return self

    def __exit__(self, *exc: object) -> None:
        self._live.stop()
