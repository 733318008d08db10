"""Model schemas: typed trees of members that encode values to and from felts."""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Iterator, MutableSequence, Optional, Union

from .cairo_serde import ByteArray, CairoSerdeError
from .primitive import Primitive, PrimitiveError, PrimitiveKind

_PRIMITIVE = "primitive"
_STRUCT = "struct"
_ENUM = "enum"
_TUPLE = "tuple"
_ARRAY = "array"
_BYTE_ARRAY = "bytearray"
_KINDS = frozenset({_PRIMITIVE, _STRUCT, _ENUM, _TUPLE, _ARRAY, _BYTE_ARRAY})

_FELT_KINDS = frozenset(
    {PrimitiveKind.FELT252, PrimitiveKind.CLASS_HASH, PrimitiveKind.CONTRACT_ADDRESS}
)

TyValue = Union[Primitive, "Struct", "Enum", list, str]


class EnumError(ValueError):
    """Raised when an enum option is unset or does not exist."""


def _option_not_set() -> EnumError:
    return EnumError("Enum option not set")


def _option_invalid() -> EnumError:
    return EnumError("Enum option invalid")


def _take(felts: MutableSequence[int]) -> int:
    if not felts:
        raise PrimitiveError("Value must have at least one FieldElement")
    return felts.pop(0)


def _take_unsigned(felts: MutableSequence[int], bits: int, type_name: str) -> int:
    value = _take(felts)
    if not 0 <= value < (1 << bits):
        raise PrimitiveError(f"Felt value ({value:#x}) out of range for {type_name}")
    return value


@dataclass
class Member:
    """A named member of a model, possibly part of its key."""

    name: str
    ty: Ty
    key: bool = False

    def serialize(self) -> list[int]:
        """Return the felt encoding of the member's value."""
        return self.ty.serialize()


@dataclass
class Ty:
    """Any Cairo type, optionally holding a value.

    ``value`` is a :class:`Primitive`, a :class:`Struct`, an :class:`Enum`, a
    list of :class:`Ty` for tuples and arrays, or a string for byte arrays.
    """

    kind: str
    value: TyValue

    def __post_init__(self) -> None:
        if self.kind not in _KINDS:
            raise ValueError(f"unknown type kind: {self.kind!r}")

    @classmethod
    def primitive(cls, value: Primitive) -> Ty:
        """Wrap a primitive."""
        return cls(_PRIMITIVE, value)

    @classmethod
    def struct(cls, value: Struct) -> Ty:
        """Wrap a struct."""
        return cls(_STRUCT, value)

    @classmethod
    def enum(cls, value: Enum) -> Ty:
        """Wrap an enum."""
        return cls(_ENUM, value)

    @classmethod
    def tuple(cls, items: list) -> Ty:
        """Build a tuple of the given types."""
        return cls(_TUPLE, list(items))

    @classmethod
    def array(cls, items: list) -> Ty:
        """Build an array; a single item serves as the element template."""
        return cls(_ARRAY, list(items))

    @classmethod
    def byte_array(cls, value: str = "") -> Ty:
        """Build a byte array holding ``value``."""
        return cls(_BYTE_ARRAY, value)

    def name(self) -> str:
        """Return the Cairo name of the type."""
        if self.kind == _PRIMITIVE:
            return str(self.value)
        if self.kind in (_STRUCT, _ENUM):
            return self.value.name
        if self.kind == _TUPLE:
            return "(" + ", ".join(ty.name() for ty in self.value) + ")"
        if self.kind == _ARRAY:
            return f"Array<{self.value[0].name()}>" if self.value else "Array"
        return "ByteArray"

    def walk(self) -> Iterator[Ty]:
        """Yield this type and, depth first, the types of struct members and enum options."""
        stack = [self]
        while stack:
            ty = stack.pop()
            if ty.kind == _STRUCT:
                stack.extend(member.ty for member in ty.value.children)
            elif ty.kind == _ENUM:
                stack.extend(option.ty for option in ty.value.options)
            yield ty

    def serialize(self) -> list[int]:
        """Return the felt encoding of the held value."""
        out: list[int] = []
        self._serialize_into(out)
        return out

    def _serialize_into(self, out: list[int]) -> None:
        kind = self.kind
        if kind == _PRIMITIVE:
            out.extend(self.value.serialize())
        elif kind == _STRUCT:
            for member in self.value.children:
                member.ty._serialize_into(out)
        elif kind == _ENUM:
            if self.value.option is None:
                raise PrimitiveError("Value must have at least one FieldElement")
            out.append(self.value.option)
            for option in self.value.options:
                option.ty._serialize_into(out)
        elif kind == _TUPLE:
            for ty in self.value:
                ty._serialize_into(out)
        elif kind == _ARRAY:
            out.append(len(self.value))
            for ty in self.value:
                ty._serialize_into(out)
        else:
            try:
                out.extend(ByteArray.from_string(self.value).serialize())
            except CairoSerdeError as exc:
                raise PrimitiveError(str(exc)) from exc

    def deserialize(self, felts: MutableSequence[int]) -> None:
        """Fill this type's values from the front of ``felts``, consuming them."""
        kind = self.kind
        if kind == _PRIMITIVE:
            self.value = self.value.deserialize(felts)
        elif kind == _STRUCT:
            for member in self.value.children:
                member.ty.deserialize(felts)
        elif kind == _ENUM:
            enum_value = self.value
            option = _take_unsigned(felts, 8, "u8")
            enum_value.option = option
            if option >= len(enum_value.options):
                raise _option_invalid()
            chosen = enum_value.options[option].ty
            # Unit variants carry no payload.
            if not (chosen.kind == _TUPLE and not chosen.value):
                chosen.deserialize(felts)
        elif kind == _TUPLE:
            for ty in self.value:
                ty.deserialize(felts)
        elif kind == _ARRAY:
            length = _take_unsigned(felts, 32, "u32")
            if not self.value:
                raise PrimitiveError("Array type has no element template")
            template = self.value.pop()
            for _ in range(length):
                item = copy.deepcopy(template)
                item.deserialize(felts)
                self.value.append(item)
        else:
            try:
                bytearray_value = ByteArray.deserialize(felts, 0)
                del felts[: bytearray_value.serialized_size()]
                self.value = bytearray_value.to_string()
            except CairoSerdeError as exc:
                raise PrimitiveError(str(exc)) from exc

    def __str__(self) -> str:
        parts = []
        for ty in self.walk():
            if ty.kind == _STRUCT:
                body = "".join(f"{format_member(m)},\n" for m in ty.value.children)
                parts.append(f"struct {ty.value.name} {{\n{body}}}")
            elif ty.kind == _ENUM:
                body = "".join(f"  {o.name}\n" for o in ty.value.options)
                parts.append(f"enum {ty.value.name} {{\n{body}}}")
            elif ty.kind == _TUPLE:
                parts.append("tuple(" + ", ".join(t.name() for t in ty.value) + ")")
            elif ty.kind == _ARRAY:
                parts.append(ty.name())
            elif ty.kind == _BYTE_ARRAY:
                parts.append("ByteArray")
        return "\n\n".join(parts)


@dataclass
class Struct:
    """A struct type with its members."""

    name: str
    children: list[Member] = field(default_factory=list)

    def get(self, field: str) -> Optional[Ty]:
        """Return the type of the member called ``field``, or ``None``."""
        return next((m.ty for m in self.children if m.name == field), None)

    def keys(self) -> list[Member]:
        """Return copies of the members that form the key."""
        return [copy.deepcopy(m) for m in self.children if m.key]


@dataclass
class EnumOption:
    """One variant of an enum."""

    name: str
    ty: Ty


@dataclass
class Enum:
    """An enum type with its variants and the selected variant index."""

    name: str
    option: Optional[int] = None
    options: list[EnumOption] = field(default_factory=list)

    def option_name(self) -> str:
        """Return the name of the selected variant."""
        if self.option is None:
            raise _option_not_set()
        if self.option >= len(self.options):
            raise _option_invalid()
        return self.options[self.option].name

    def set_option(self, name: str) -> None:
        """Select the variant called ``name``."""
        for index, option in enumerate(self.options):
            if option.name == name:
                self.option = index
                return
        raise _option_invalid()

    def to_sql_value(self) -> str:
        """Return the selected variant's name, as stored in SQL."""
        return self.option_name()


@dataclass
class Query:
    """A storage lookup: an address domain and the entity keys."""

    address_domain: int
    keys: list[int] = field(default_factory=list)


@dataclass
class Dependency:
    """A system's read and write access to a model."""

    name: str
    read: bool
    write: bool


def _format_primitive_value(primitive: Primitive) -> str:
    value = primitive.value
    if value is None:
        return ""
    if primitive.kind is PrimitiveKind.BOOL:
        return " = true" if value else " = false"
    if primitive.kind is PrimitiveKind.U256:
        return f" = {value:064X}"
    if primitive.kind in _FELT_KINDS:
        return f" = {value:#x}"
    return f" = {value}"


def format_member(member: Member) -> str:
    """Render a member as a line of a struct definition, with its value if set."""
    if member.key:
        text = f"  #[key]\n  {member.name}: {member.ty.name()}"
    else:
        text = f"  {member.name}: {member.ty.name()}"
    if member.ty.kind == _PRIMITIVE:
        text += _format_primitive_value(member.ty.value)
    elif member.ty.kind == _ENUM:
        try:
            text += f" = {member.ty.value.option_name()}"
        except EnumError:
            text += " = Invalid Option"
    return text