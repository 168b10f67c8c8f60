from __future__ import annotations

import threading
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from .probe import Outcome


@dataclass(frozen=True, slots=True)
class Stat:
    sent: int = 0
    missed: int = 0
    error: Optional[str] = None

    @property
    def delivered(self) -> int:
        return self.sent - self.missed

    @property
    def loss_ratio(self) -> float:
        if self.sent <= 0:
            return 0.0
        return self.missed / self.sent


Snapshot = Mapping[int, Stat]


class StatsAggregator:
    """Running sent/missed counts per configuration id.

    Entries are immutable ``Stat`` values swapped under a lock, so a snapshot
    sees each id either before or after an update, never halfway.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stats: Dict[int, Stat] = {}

    def record(self, config_id: int, outcome: Outcome) -> Stat:
        with self._lock:
            cur = self._stats.get(config_id, Stat())
            new = replace(
                cur,
                sent=cur.sent + 1,
                missed=cur.missed + (1 if outcome is Outcome.MISSED else 0),
            )
            self._stats[config_id] = new
            return new

    def fail(self, config_id: int, error: str) -> Stat:
        with self._lock:
            new = replace(self._stats.get(config_id, Stat()), error=error)
            self._stats[config_id] = new
            return new

    def get(self, config_id: int) -> Optional[Stat]:
        with self._lock:
            return self._stats.get(config_id)

    def snapshot(self) -> Snapshot:
        with self._lock:
            return MappingProxyType(dict(self._stats))
