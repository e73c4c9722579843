"""Binary/text classification of entry payloads."""

from __future__ import annotations

BINARY_SNIFF_BYTES = 1000


def is_binary_byte(byte: int) -> bool:
    """NUL and control bytes other than 7..13 (bell through carriage return)."""
    return byte < 7 or 13 < byte < 32


def is_binary(data: bytes, prefix: int = BINARY_SNIFF_BYTES) -> bool:
    """Return whether the first ``prefix`` bytes contain a binary control byte."""
    return any(is_binary_byte(byte) for byte in data[:prefix])


__all__ = [
    "BINARY_SNIFF_BYTES",
    "is_binary_byte",
    "is_binary",
]
