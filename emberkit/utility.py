"""Text encoding helpers and debug logging."""

from __future__ import annotations

import logging

_logger = logging.getLogger("emberkit")


def decode_utf8(data: bytes) -> str:
    """Decode UTF-8 bytes, replacing invalid sequences with U+FFFD."""
    if not data:
        return ""
    return bytes(data).decode("utf-8", errors="replace")


def encode_utf8(text: str) -> bytes:
    """Encode text as UTF-8.

    Surrogate pairs are joined into one character; lone surrogates become
    U+FFFD.
    """
    if not text:
        return b""
    normalised = text.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return normalised.encode("utf-8")


def log(message: str) -> None:
    """Write a debug message to the package logger."""
    _logger.debug(message.rstrip("\n"))