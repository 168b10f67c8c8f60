from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable, List

from .constants import DEFAULT_RATES, DEFAULT_ROUNDS, DEFAULT_SIZES
from .display import DisplaySink, NullDisplay
from .net import Impairment, UdpEndpoint
from .probe import ProbeConfig
from .responder import EchoResponder
from .stats import Snapshot, StatsAggregator
from .sweep import build_sweep, run_sweep, summarize


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    configs: List[ProbeConfig]
    snapshot: Snapshot
    duration_s: float
    echoed: int

    def to_dict(self) -> dict:
        return {
            "duration_s": self.duration_s,
            "echoed": self.echoed,
            "runs": summarize(self.configs, self.snapshot),
        }


def run_benchmark(
    *,
    rates: Iterable[float] = DEFAULT_RATES,
    sizes: Iterable[int] = DEFAULT_SIZES,
    rounds: int = DEFAULT_ROUNDS,
    loss_rate: float = 0.0,
    delay_ms: int = 0,
    display: DisplaySink | None = None,
) -> BenchmarkResult:
    """Run a sweep against an echo responder on loopback."""
    configs = build_sweep(rates, sizes, rounds)
    impair = Impairment(loss_rate=loss_rate, delay_ms=delay_ms)

    responder = EchoResponder(UdpEndpoint.bound("127.0.0.1", 0, impairment=impair))
    responder.start()
    try:
        with UdpEndpoint.bound("127.0.0.1", 0) as probe_ep:
            start = time.monotonic()
            snapshot = run_sweep(
                probe_ep,
                responder.udp.address,
                configs,
                StatsAggregator(),
                display or NullDisplay(),
            )
            duration_s = time.monotonic() - start
    finally:
        responder.stop()
        responder.udp.close()

    return BenchmarkResult(
        configs=configs,
        snapshot=snapshot,
        duration_s=duration_s,
        echoed=responder.echoed,
    )
