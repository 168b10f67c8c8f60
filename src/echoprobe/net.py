from __future__ import annotations

import logging
import random
import socket
import time
from dataclasses import dataclass
from typing import Tuple

from .constants import RECV_BUFSIZE
from .errors import ConfigurationError

log = logging.getLogger(__name__)

Address = Tuple[str, int]


def parse_address(text: str) -> Address:
    """Split ``HOST:PORT`` into a socket address tuple."""
    host, sep, port = text.rpartition(":")
    if not sep or not host:
        raise ConfigurationError(f"expected HOST:PORT, got {text!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ConfigurationError(f"invalid port in {text!r}") from None
    if not 0 <= port_num <= 65535:
        raise ConfigurationError(f"port out of range in {text!r}")
    return host.strip("[]"), port_num


@dataclass(frozen=True, slots=True)
class Impairment:
    loss_rate: float = 0.0
    delay_ms: int = 0

    def should_drop(self) -> bool:
        return random.random() < self.loss_rate

    def sleep_if_needed(self) -> None:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)


class UdpEndpoint:
    def __init__(self, sock: socket.socket, impairment: Impairment | None = None):
        self.sock = sock
        self.impairment = impairment or Impairment()

    @classmethod
    def bound(
        cls,
        host: str,
        port: int,
        impairment: Impairment | None = None,
    ) -> "UdpEndpoint":
        family, _, _, _, sockaddr = socket.getaddrinfo(host, port, type=socket.SOCK_DGRAM)[0]
        sock = socket.socket(family, socket.SOCK_DGRAM)
        try:
            sock.bind(sockaddr)
        except OSError:
            sock.close()
            raise
        log.debug("bound udp endpoint on %s:%d", *sock.getsockname()[:2])
        return cls(sock, impairment)

    @property
    def address(self) -> Address:
        host, port = self.sock.getsockname()[:2]
        return host, port

    def check_reachable(self, addr: Address) -> None:
        """Raise ConfigurationError if ``addr`` has no form this socket's family can send to."""
        try:
            socket.getaddrinfo(addr[0], addr[1], family=self.sock.family, type=socket.SOCK_DGRAM)
        except socket.gaierror:
            raise ConfigurationError(
                f"target {addr[0]}:{addr[1]} is not reachable from a {self.sock.family.name} socket"
            ) from None

    def sendto(self, data: bytes, addr: Address) -> None:
        if self.impairment.should_drop():
            log.debug("dropped outbound %d bytes to %s:%d", len(data), *addr[:2])
            return
        self.impairment.sleep_if_needed()
        self.sock.sendto(data, addr)

    def recvfrom(self, bufsize: int = RECV_BUFSIZE) -> Tuple[bytes, Address]:
        while True:
            data, addr = self.sock.recvfrom(bufsize)
            if self.impairment.should_drop():
                log.debug("dropped inbound %d bytes from %s:%d", len(data), *addr[:2])
                continue
            self.impairment.sleep_if_needed()
            return data, addr

    def recv_until(self, deadline: float, bufsize: int = RECV_BUFSIZE) -> bytes:
        """Receive one datagram, raising TimeoutError once ``deadline`` passes.

        ``deadline`` is a ``time.monotonic()`` value.
        """
        while True:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise TimeoutError("receive deadline elapsed")
            self.sock.settimeout(remaining)
            try:
                data, addr = self.sock.recvfrom(bufsize)
            except TimeoutError:
                continue
            if self.impairment.should_drop():
                log.debug("dropped inbound %d bytes from %s:%d", len(data), *addr[:2])
                continue
            self.impairment.sleep_if_needed()
            return data

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "UdpEndpoint":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
