"""echoprobe: UDP round-trip delivery probe

Sends fixed-size, sequence-numbered datagrams to an echo peer at a sweep of
rates and payload sizes, and counts how many come back before their timer
runs out.

- packet framing is separate from the round-trip state machine
- statistics are aggregated behind a lock and handed out as snapshots
- rendering only ever sees snapshots
"""

from .errors import ConfigurationError, DisplayError, EchoProbeError, PayloadTooSmall
from .probe import Outcome, Probe, ProbeConfig, round_trip
from .stats import Stat, StatsAggregator

__all__ = [
    "ConfigurationError",
    "DisplayError",
    "EchoProbeError",
    "Outcome",
    "PayloadTooSmall",
    "Probe",
    "ProbeConfig",
    "Stat",
    "StatsAggregator",
    "round_trip",
]

__version__ = "0.1.0"
