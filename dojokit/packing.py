"""Unpacking of bit-packed model values stored in felts."""

from __future__ import annotations

from typing import Iterable, Iterator, Optional

FELT_BITS = 251
"""Number of usable bits in one packed felt."""


class PackingError(ValueError):
    """Raised when packed values cannot be unpacked."""


class ParseError(PackingError):
    """Raised when a schema or layout value cannot be parsed."""

    def __init__(
        self,
        message: str,
        type_name: Optional[str] = None,
        value: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.type_name = type_name
        self.value = value

    @classmethod
    def invalid_schema(cls, msg: str = "") -> ParseError:
        """Build the error reported for a schema that does not make sense."""
        return cls(f"Invalid schema: {msg}")


def _next_felt(felts: Iterator[int]) -> int:
    try:
        return next(felts)
    except StopIteration:
        raise PackingError("Error when unpacking entity") from None


def unpack(packed: Iterable[int], layout: Iterable[int]) -> list[int]:
    """Split packed felts into values whose bit sizes are given by ``layout``.

    Values are read from the least significant bits of each felt upward; a
    value that does not fit in the bits left in the current felt starts at
    the bottom of the next one.
    """
    felts = iter(packed)
    current = _next_felt(felts)
    offset = 0
    unpacked: list[int] = []

    for size in layout:
        if isinstance(size, bool) or not isinstance(size, int) or not 0 <= size <= 0xFF:
            raise ParseError("Value out of range", type_name="u8", value=size)

        if FELT_BITS - offset < size:
            current = _next_felt(felts)
            offset = 0

        unpacked.append((current >> offset) & ((1 << size) - 1))
        offset += size

    return unpacked