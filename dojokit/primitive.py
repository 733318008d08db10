"""Scalar Cairo values: their felt encoding and their SQL representation."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import MutableSequence, Optional, Union

from .cairo_serde import FELT_PRIME, to_felt
from .primitive_conversion import PrimitiveFromFeltError, try_from_felt

_LOW_128 = (1 << 128) - 1

PrimitiveValue = Union[int, bool, None]


class PrimitiveError(ValueError):
    """Raised when a primitive cannot be encoded, decoded or assigned."""


def _missing() -> PrimitiveError:
    return PrimitiveError("Value must have at least one FieldElement")


def _not_enough() -> PrimitiveError:
    return PrimitiveError("Not enough FieldElements for U256")


def _out_of_range(value: int, type_name: str) -> PrimitiveError:
    return PrimitiveError(f"Felt value ({value:#x}) out of range for {type_name}")


class SqlType(enum.Enum):
    """Column type used to store a primitive in SQLite."""

    INTEGER = "INTEGER"
    TEXT = "TEXT"

    def __str__(self) -> str:
        return self.value


class PrimitiveKind(enum.Enum):
    """The scalar types, in declaration order; values are their display names."""

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    USIZE = "usize"
    BOOL = "bool"
    FELT252 = "felt252"
    CLASS_HASH = "ClassHash"
    CONTRACT_ADDRESS = "ContractAddress"

    def __str__(self) -> str:
        return self.value


_SIGNED_BITS = {
    PrimitiveKind.I8: 8,
    PrimitiveKind.I16: 16,
    PrimitiveKind.I32: 32,
    PrimitiveKind.I64: 64,
    PrimitiveKind.I128: 128,
}

# Unsigned kinds: (bit width, type name reported in errors).
_UNSIGNED = {
    PrimitiveKind.U8: (8, "u8"),
    PrimitiveKind.U16: (16, "u16"),
    PrimitiveKind.U32: (32, "u32"),
    PrimitiveKind.U64: (64, "u64"),
    PrimitiveKind.U128: (128, "u128"),
    PrimitiveKind.USIZE: (32, "u32"),
}

_FELT_KINDS = frozenset(
    {PrimitiveKind.FELT252, PrimitiveKind.CLASS_HASH, PrimitiveKind.CONTRACT_ADDRESS}
)

_NUMERIC = {
    PrimitiveKind.U8: 0,
    PrimitiveKind.U16: 1,
    PrimitiveKind.U32: 2,
    PrimitiveKind.U64: 3,
    PrimitiveKind.U128: 4,
    PrimitiveKind.U256: 5,
    PrimitiveKind.USIZE: 6,
    PrimitiveKind.BOOL: 7,
    PrimitiveKind.FELT252: 8,
    PrimitiveKind.CLASS_HASH: 9,
    PrimitiveKind.CONTRACT_ADDRESS: 10,
    PrimitiveKind.I8: 11,
    PrimitiveKind.I16: 12,
    PrimitiveKind.I32: 13,
    PrimitiveKind.I64: 14,
    PrimitiveKind.I128: 15,
}

_INTEGER_SQL = frozenset(
    {
        PrimitiveKind.I8,
        PrimitiveKind.I16,
        PrimitiveKind.I32,
        PrimitiveKind.I64,
        PrimitiveKind.U8,
        PrimitiveKind.U16,
        PrimitiveKind.U32,
        PrimitiveKind.USIZE,
        PrimitiveKind.BOOL,
    }
)


def _value_range(kind: PrimitiveKind) -> tuple[int, int]:
    if kind in _SIGNED_BITS:
        half = 1 << (_SIGNED_BITS[kind] - 1)
        return -half, half - 1
    if kind in _UNSIGNED:
        return 0, (1 << _UNSIGNED[kind][0]) - 1
    if kind is PrimitiveKind.U256:
        return 0, (1 << 256) - 1
    return 0, FELT_PRIME - 1


@dataclass(frozen=True)
class Primitive:
    """A scalar of a given kind, holding a value or ``None`` when unset."""

    kind: PrimitiveKind
    value: PrimitiveValue = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", PrimitiveKind(self.kind))
        value = self.value
        if value is None:
            return
        if self.kind is PrimitiveKind.BOOL:
            if not isinstance(value, bool):
                raise PrimitiveError("Set value type mismatch")
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise PrimitiveError("Set value type mismatch")
        low, high = _value_range(self.kind)
        if not low <= value <= high:
            raise PrimitiveError(f"Value {value} out of range for {self.kind}")

    def __str__(self) -> str:
        return str(self.kind)

    def with_value(self, value: PrimitiveValue) -> Primitive:
        """Return a primitive of the same kind holding ``value``."""
        return dataclasses.replace(self, value=value)

    def to_numeric(self) -> int:
        """Return the numeric identifier of this kind."""
        return _NUMERIC[self.kind]

    @classmethod
    def from_numeric(cls, value: int) -> Optional[Primitive]:
        """Return an unset primitive of the ``value``-th kind in declaration order."""
        kinds = list(PrimitiveKind)
        if not 0 <= value < len(kinds):
            return None
        return cls(kinds[value])

    def to_sql_type(self) -> SqlType:
        """Return the SQLite column type able to hold this primitive."""
        return SqlType.INTEGER if self.kind in _INTEGER_SQL else SqlType.TEXT

    def to_sql_value(self) -> str:
        """Return the textual SQL representation of the value."""
        felts = self.serialize()
        kind = self.kind
        try:
            if kind in _SIGNED_BITS and kind is not PrimitiveKind.I128:
                return str(try_from_felt(felts[0], _SIGNED_BITS[kind]))
            if kind is PrimitiveKind.I128:
                signed = try_from_felt(felts[0], 128)
                return f"{signed & _LOW_128:#064x}"
        except PrimitiveFromFeltError as exc:
            raise PrimitiveError(str(exc)) from exc
        if kind in _INTEGER_SQL:
            return str(felts[0])
        if kind is PrimitiveKind.U256:
            if len(felts) < 2:
                raise _not_enough()
            combined = ((felts[1] & _LOW_128) << 128) | (felts[0] & _LOW_128)
            return f"0x{combined:064x}"
        return f"{felts[0]:#064x}"

    def serialize(self) -> list[int]:
        """Return the felt encoding of the value."""
        if self.value is None:
            raise _missing()
        kind, value = self.kind, self.value
        if kind is PrimitiveKind.U256:
            return [value & _LOW_128, value >> 128]
        if kind is PrimitiveKind.BOOL:
            return [1 if value else 0]
        return [to_felt(value)]

    def deserialize(self, felts: MutableSequence[int]) -> Primitive:
        """Read a value of this kind from the front of ``felts``.

        The consumed felts are removed from ``felts``; the decoded primitive
        is returned.
        """
        if not felts:
            raise _missing()
        kind = self.kind
        if kind is PrimitiveKind.U256:
            if len(felts) < 2:
                raise _not_enough()
            low, high = felts[0], felts[1]
            del felts[:2]
            return self.with_value(((high & _LOW_128) << 128) | (low & _LOW_128))

        felt = felts.pop(0)
        if kind in _SIGNED_BITS:
            try:
                return self.with_value(try_from_felt(felt, _SIGNED_BITS[kind]))
            except PrimitiveFromFeltError:
                raise _out_of_range(felt, kind.value) from None
        if kind in _UNSIGNED:
            bits, type_name = _UNSIGNED[kind]
            if not 0 <= felt < (1 << bits):
                raise _out_of_range(felt, type_name)
            return self.with_value(felt)
        if kind is PrimitiveKind.BOOL:
            return self.with_value(felt == 1)
        return self.with_value(felt)