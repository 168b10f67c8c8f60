from __future__ import annotations

import pytest

from echoprobe.net import Impairment, UdpEndpoint
from echoprobe.responder import EchoResponder


class OffByOneResponder(EchoResponder):
    """Echoes the sequence number one below the one it received."""

    def reply(self, raw: bytes) -> bytes | None:
        seq = int.from_bytes(raw[:8], "little")
        return ((seq - 1) % 2**64).to_bytes(8, "little") + raw[8:]


def _serve(responder):
    responder.start()
    try:
        yield responder
    finally:
        responder.stop()
        responder.udp.close()


@pytest.fixture
def echo_peer():
    yield from _serve(EchoResponder(UdpEndpoint.bound("127.0.0.1", 0)))


@pytest.fixture
def silent_peer():
    yield from _serve(EchoResponder(UdpEndpoint.bound("127.0.0.1", 0, impairment=Impairment(loss_rate=1.0))))


@pytest.fixture
def off_by_one_peer():
    yield from _serve(OffByOneResponder(UdpEndpoint.bound("127.0.0.1", 0)))


@pytest.fixture
def probe_ep():
    ep = UdpEndpoint.bound("127.0.0.1", 0)
    try:
        yield ep
    finally:
        ep.close()


class ShortEchoResponder(EchoResponder):
    """Echoes only the first half of the sequence number."""

    def reply(self, raw: bytes) -> bytes | None:
        return raw[:4]


@pytest.fixture
def short_echo_peer():
    yield from _serve(ShortEchoResponder(UdpEndpoint.bound("127.0.0.1", 0)))


@pytest.fixture
def slow_peer():
    # 60ms each way, longer than the 50ms timeout used against it
    yield from _serve(EchoResponder(UdpEndpoint.bound("127.0.0.1", 0, impairment=Impairment(delay_ms=60))))
