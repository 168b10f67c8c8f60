from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Iterator

from .constants import DEFAULT_ROUNDS, SEQ_LEN
from .errors import ConfigurationError
from .net import Address, UdpEndpoint
from .packet import decode_seq, encode_probe

log = logging.getLogger(__name__)


class Outcome(enum.Enum):
    DELIVERED = "delivered"
    MISSED = "missed"


@dataclass(frozen=True, slots=True)
class ProbeConfig:
    id: int
    hertz: float
    payload_size: int
    rounds: int = DEFAULT_ROUNDS

    def __post_init__(self) -> None:
        if not self.hertz > 0:
            raise ConfigurationError(f"rate must be positive, got {self.hertz}")
        if self.payload_size < SEQ_LEN:
            raise ConfigurationError(
                f"payload size must be at least {SEQ_LEN} bytes, got {self.payload_size}"
            )
        if self.rounds < 0:
            raise ConfigurationError(f"rounds must not be negative, got {self.rounds}")

    @property
    def timeout_s(self) -> float:
        return 1.0 / self.hertz


def round_trip(
    udp: UdpEndpoint,
    dest: Address,
    seq: int,
    timeout_s: float,
    payload_size: int,
) -> Outcome:
    """Send one probe and wait out its timer.

    Only the first datagram received before the deadline is inspected. A
    matching echo does not end the wait early: the call always returns once
    the timer elapses, so each round trip occupies exactly one send period.
    """
    payload = encode_probe(seq, payload_size)
    deadline = time.monotonic() + timeout_s

    udp.sendto(payload, dest)
    try:
        raw = udp.recv_until(deadline)
    except TimeoutError:
        log.debug("timeout; seq=%d", seq)
        return Outcome.MISSED

    try:
        matched = decode_seq(raw) == seq
    except ValueError:
        matched = False
    if not matched:
        log.debug("mismatched echo; seq=%d got %d bytes", seq, len(raw))

    remaining = deadline - time.monotonic()
    if remaining > 0:
        time.sleep(remaining)
    return Outcome.DELIVERED if matched else Outcome.MISSED


class Probe:
    def __init__(self, udp: UdpEndpoint, dest: Address, config: ProbeConfig):
        self.udp = udp
        self.dest = dest
        self.config = config
        self.timeout_s = config.timeout_s
        self._started = False

    def run(self) -> Iterator[Outcome]:
        if self._started:
            raise RuntimeError(f"probe {self.config.id} has already been run")
        self._started = True
        return self._rounds()

    def _rounds(self) -> Iterator[Outcome]:
        cfg = self.config
        log.info(
            "probe %d start; rate=%.2fHz size=%d rounds=%d",
            cfg.id,
            cfg.hertz,
            cfg.payload_size,
            cfg.rounds,
        )
        for seq in range(cfg.rounds):
            yield round_trip(self.udp, self.dest, seq, self.timeout_s, cfg.payload_size)
        log.info("probe %d done", cfg.id)
