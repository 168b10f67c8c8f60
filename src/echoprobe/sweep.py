from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from .constants import DEFAULT_RATES, DEFAULT_ROUNDS, DEFAULT_SIZES
from .display import DisplaySink
from .net import Address, UdpEndpoint
from .probe import Probe, ProbeConfig
from .stats import Snapshot, StatsAggregator

log = logging.getLogger(__name__)


def build_sweep(
    rates: Iterable[float] = DEFAULT_RATES,
    sizes: Iterable[int] = DEFAULT_SIZES,
    rounds: int = DEFAULT_ROUNDS,
) -> List[ProbeConfig]:
    """Cross product of rates and sizes, rate-major, ids in enumeration order."""
    size_list = list(sizes)
    pairs = [(hz, size) for hz in rates for size in size_list]
    return [
        ProbeConfig(id=idx, hertz=float(hz), payload_size=size, rounds=rounds)
        for idx, (hz, size) in enumerate(pairs)
    ]


def run_sweep(
    udp: UdpEndpoint,
    dest: Address,
    configs: Sequence[ProbeConfig],
    aggregator: StatsAggregator,
    display: DisplaySink,
) -> Snapshot:
    for cfg in configs:
        outcomes = Probe(udp, dest, cfg).run()
        while True:
            # only the probe's own socket I/O is isolated; display errors propagate
            try:
                outcome = next(outcomes)
            except StopIteration:
                break
            except OSError as exc:
                log.error("probe %d aborted: %s", cfg.id, exc)
                aggregator.fail(cfg.id, str(exc) or type(exc).__name__)
                display.update(aggregator.snapshot())
                break
            aggregator.record(cfg.id, outcome)
            display.update(aggregator.snapshot())

    return aggregator.snapshot()


def summarize(configs: Sequence[ProbeConfig], snapshot: Snapshot) -> List[dict]:
    rows = []
    for cfg in configs:
        stat = snapshot.get(cfg.id)
        rows.append(
            {
                "id": cfg.id,
                "hertz": cfg.hertz,
                "payload_size": cfg.payload_size,
                "rounds": cfg.rounds,
                "sent": stat.sent if stat else 0,
                "missed": stat.missed if stat else 0,
                "error": stat.error if stat else None,
            }
        )
    return rows
