"""Conversion of felts into fixed-width signed integers."""

from __future__ import annotations

from .cairo_serde import FELT_PRIME

_SUPPORTED_BITS = (8, 16, 32, 64, 128)


class PrimitiveFromFeltError(ValueError):
    """Raised when a felt does not fit the requested signed integer type."""

    def __init__(self, message: str = "Failed to convert `Felt` into primitive type") -> None:
        super().__init__(message)


def try_from_felt(value: int, bits: int) -> int:
    """Interpret ``value`` as a signed integer of ``bits`` width.

    Non-negative felts below ``2**(bits-1)`` map to themselves; felts just
    below the field prime map to the negative integers they encode.
    """
    if bits not in _SUPPORTED_BITS:
        raise ValueError(f"unsupported integer width: {bits}")
    if not 0 <= value < FELT_PRIME:
        raise PrimitiveFromFeltError()

    half = 1 << (bits - 1)
    if value < half:
        return value
    negative = value - FELT_PRIME
    if -half <= negative <= -1:
        return negative
    raise PrimitiveFromFeltError()