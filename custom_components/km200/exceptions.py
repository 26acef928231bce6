"""Exceptions for Buderus KM200 gateway communication."""

from __future__ import annotations


class KM200Error(Exception):
    """Base Buderus KM200 exception."""


class KM200TransportError(KM200Error):
    """KM200 transport exception (timeout, unreachable, non-2xx)."""


class KM200DecodingError(KM200Error):
    """KM200 decoding exception (bad base64, block length or cipher)."""


class KM200ProtocolError(KM200Error):
    """KM200 protocol exception (payload does not match its envelope).

    Carries the resource ``path`` and the declared envelope ``type``
    (``None`` when the payload could not be parsed at all).
    """

    def __init__(self, message: str, path: str, type_: str | None = None) -> None:
        self.path = path
        self.type = type_
        super().__init__(message)


class KM200AuthenticationError(KM200Error):
    """KM200 authentication exception (wrong gateway or private password)."""


class KM200ConfigError(KM200Error):
    """KM200 configuration exception (malformed credentials file)."""
