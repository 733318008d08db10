"""Felt arithmetic helpers and the Cairo ``ByteArray`` serialization format."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

FELT_PRIME = 2**251 + 17 * 2**192 + 1
"""The Stark field prime; every felt lies in ``[0, FELT_PRIME)``."""

BYTES31_SIZE = 31
_MAX_BYTES31 = 1 << (8 * BYTES31_SIZE)


class CairoSerdeError(ValueError):
    """Raised when felts cannot be serialized or deserialized."""


def to_felt(value: int) -> int:
    """Return ``value`` reduced into the field, so negative integers wrap around."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an int, got {type(value).__name__}")
    return value % FELT_PRIME


def felt_to_signed(value: int) -> int:
    """Read a felt as a signed integer: values above half the prime are negative."""
    if not 0 <= value < FELT_PRIME:
        raise CairoSerdeError(f"value {value:#x} is not a valid felt")
    return value - FELT_PRIME if value > FELT_PRIME // 2 else value


def _felt_at(felts: Sequence[int], index: int) -> int:
    try:
        return felts[index]
    except IndexError:
        raise CairoSerdeError(
            f"out of bounds: needed felt at index {index}, have {len(felts)}"
        ) from None


@dataclass(frozen=True)
class ByteArray:
    """A Cairo byte array: full 31-byte words plus one pending partial word."""

    data: tuple[int, ...] = ()
    pending_word: int = 0
    pending_word_len: int = 0

    def __post_init__(self) -> None:
        if not 0 <= self.pending_word_len < BYTES31_SIZE:
            raise CairoSerdeError(
                f"pending word length {self.pending_word_len} must be below {BYTES31_SIZE}"
            )
        if not 0 <= self.pending_word < (1 << (8 * self.pending_word_len)):
            raise CairoSerdeError("pending word does not fit in its declared length")
        for word in self.data:
            if not 0 <= word < _MAX_BYTES31:
                raise CairoSerdeError(f"word {word:#x} does not fit in 31 bytes")

    @classmethod
    def from_bytes(cls, raw: bytes) -> ByteArray:
        """Split raw bytes into 31-byte words and a pending remainder."""
        full = len(raw) - len(raw) % BYTES31_SIZE
        words = tuple(
            int.from_bytes(raw[start : start + BYTES31_SIZE], "big")
            for start in range(0, full, BYTES31_SIZE)
        )
        tail = raw[full:]
        return cls(words, int.from_bytes(tail, "big"), len(tail))

    @classmethod
    def from_string(cls, value: str) -> ByteArray:
        """Build a byte array from the UTF-8 encoding of ``value``."""
        return cls.from_bytes(value.encode("utf-8"))

    def to_bytes(self) -> bytes:
        """Return the raw bytes held by the array."""
        chunks = [word.to_bytes(BYTES31_SIZE, "big") for word in self.data]
        chunks.append(self.pending_word.to_bytes(self.pending_word_len, "big"))
        return b"".join(chunks)

    def to_string(self) -> str:
        """Decode the bytes as UTF-8."""
        try:
            return self.to_bytes().decode("utf-8")
        except UnicodeDecodeError as exc:
            raise CairoSerdeError(f"byte array is not valid UTF-8: {exc}") from exc

    def serialize(self) -> list[int]:
        """Return the felts: word count, words, pending word, pending length."""
        return [len(self.data), *self.data, self.pending_word, self.pending_word_len]

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return len(self.data) + 3

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> ByteArray:
        """Read a byte array from ``felts`` starting at ``offset``."""
        count = _felt_at(felts, offset)
        if count > len(felts):
            raise CairoSerdeError(f"byte array word count {count} exceeds input length")
        words = tuple(_felt_at(felts, offset + 1 + i) for i in range(count))
        pending_word = _felt_at(felts, offset + 1 + count)
        pending_len = _felt_at(felts, offset + 2 + count)
        return cls(words, pending_word, pending_len)

    def __str__(self) -> str:
        return self.to_string()