from __future__ import annotations

import struct

from .constants import PAD_BYTE, SEQ_FORMAT, SEQ_LEN
from .errors import PayloadTooSmall

_SEQ = struct.Struct(SEQ_FORMAT)


def encode_probe(seq: int, payload_size: int) -> bytes:
    if payload_size < SEQ_LEN:
        raise PayloadTooSmall(f"payload size {payload_size} cannot hold a {SEQ_LEN}-byte sequence number")
    return _SEQ.pack(seq) + bytes([PAD_BYTE]) * (payload_size - SEQ_LEN)


def decode_seq(raw: bytes) -> int:
    if len(raw) < SEQ_LEN:
        raise ValueError(f"datagram too small to carry a sequence number: {len(raw)} bytes")
    (seq,) = _SEQ.unpack_from(raw)
    return seq
