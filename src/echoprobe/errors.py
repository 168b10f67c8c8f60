from __future__ import annotations


class EchoProbeError(Exception):
    """Base class for errors raised by echoprobe."""


class ConfigurationError(EchoProbeError, ValueError):
    pass


class PayloadTooSmall(ConfigurationError):
    pass


class DisplayError(EchoProbeError):
    pass
