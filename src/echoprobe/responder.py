from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field

from .net import UdpEndpoint

log = logging.getLogger(__name__)


@dataclass
class EchoResponder:
    """Peer that sends every datagram back to where it came from.

    Simulated loss and delay come from the endpoint's ``Impairment`` and apply
    in both directions.
    """

    udp: UdpEndpoint
    poll_s: float = 0.1
    echoed: int = 0
    _stop: threading.Event = field(default_factory=threading.Event, repr=False)
    _thread: threading.Thread | None = field(default=None, repr=False)

    def reply(self, raw: bytes) -> bytes | None:
        return raw

    def run(self) -> int:
        self.udp.sock.settimeout(self.poll_s)
        host, port = self.udp.address
        log.info("echo responder listening on %s:%d", host, port)

        while not self._stop.is_set():
            try:
                raw, addr = self.udp.recvfrom()
            except TimeoutError:
                continue

            out = self.reply(raw)
            if out is None:
                continue
            self.udp.sendto(out, addr)
            self.echoed += 1

        log.info("echo responder done; echoed=%d", self.echoed)
        return self.echoed

    def start(self) -> threading.Thread:
        self._thread = threading.Thread(target=self.run, name="echo-responder", daemon=True)
        self._thread.start()
        return self._thread

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
