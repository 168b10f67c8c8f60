from __future__ import annotations

SEQ_FORMAT = "<Q"  # unsigned 64-bit little-endian sequence number
SEQ_LEN = 8
PAD_BYTE = 0xFF

RECV_BUFSIZE = 65535

DEFAULT_ROUNDS = 100
DEFAULT_RATES = (4.0, 8.0, 16.0)
DEFAULT_SIZES = (50, 100, 200)
