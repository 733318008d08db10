"""Model ABI types exchanged with world contracts and their felt serialization."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Callable, Sequence, TypeVar, Union

from .cairo_serde import FELT_PRIME, ByteArray, CairoSerdeError

_T = TypeVar("_T")
_LOW_128 = (1 << 128) - 1


def _read(felts: Sequence[int], index: int) -> int:
    try:
        value = felts[index]
    except IndexError:
        raise CairoSerdeError(
            f"out of bounds: needed felt at index {index}, have {len(felts)}"
        ) from None
    if not 0 <= value < FELT_PRIME:
        raise CairoSerdeError(f"value {value:#x} is not a valid felt")
    return value


def _check_felt(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an int felt, got {type(value).__name__}")
    if not 0 <= value < FELT_PRIME:
        raise CairoSerdeError(f"value {value:#x} is not a valid felt")
    return value


def _read_count(felts: Sequence[int], offset: int) -> int:
    count = _read(felts, offset)
    if count > len(felts) - offset - 1:
        raise CairoSerdeError(f"array length {count} exceeds remaining input")
    return count


def _read_list(
    felts: Sequence[int],
    offset: int,
    read_item: Callable[[Sequence[int], int], tuple[_T, int]],
) -> tuple[list[_T], int]:
    """Read a length-prefixed list; return the items and the felts consumed."""
    count = _read_count(felts, offset)
    position = offset + 1
    items: list[_T] = []
    for _ in range(count):
        item, size = read_item(felts, position)
        items.append(item)
        position += size
    return items, position - offset


def _read_felt(felts: Sequence[int], offset: int) -> tuple[int, int]:
    return _read(felts, offset), 1


def _read_u8(felts: Sequence[int], offset: int) -> tuple[int, int]:
    value = _read(felts, offset)
    if value > 0xFF:
        raise CairoSerdeError(f"value {value:#x} out of range for u8")
    return value, 1


def _variant_index(felts: Sequence[int], offset: int) -> int:
    return _read(felts, offset) & _LOW_128


class LayoutKind(enum.IntEnum):
    """Variants of a storage layout, numbered as on the wire."""

    FIXED = 0
    STRUCT = 1
    TUPLE = 2
    ARRAY = 3
    BYTE_ARRAY = 4
    ENUM = 5


@dataclass(frozen=True)
class Layout:
    """Storage layout of a model.

    ``value`` holds bit sizes for ``FIXED``, field layouts for ``STRUCT`` and
    ``ENUM``, nested layouts for ``TUPLE`` and ``ARRAY``, and nothing for
    ``BYTE_ARRAY``.
    """

    kind: LayoutKind
    value: tuple = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", LayoutKind(self.kind))
        items = tuple(self.value)
        if self.kind is LayoutKind.FIXED:
            for size in items:
                if isinstance(size, bool) or not isinstance(size, int) or not 0 <= size <= 0xFF:
                    raise CairoSerdeError(f"fixed layout size {size!r} is not a u8")
        elif self.kind in (LayoutKind.STRUCT, LayoutKind.ENUM):
            if not all(isinstance(item, FieldLayout) for item in items):
                raise TypeError(f"{self.kind.name} layout expects FieldLayout items")
        elif self.kind in (LayoutKind.TUPLE, LayoutKind.ARRAY):
            if not all(isinstance(item, Layout) for item in items):
                raise TypeError(f"{self.kind.name} layout expects Layout items")
        elif items:
            raise CairoSerdeError("BYTE_ARRAY layout carries no value")
        object.__setattr__(self, "value", items)

    def serialize(self) -> list[int]:
        """Return the variant index followed by the variant's payload."""
        out = [int(self.kind)]
        if self.kind is LayoutKind.BYTE_ARRAY:
            return out
        out.append(len(self.value))
        if self.kind is LayoutKind.FIXED:
            out.extend(self.value)
        else:
            for item in self.value:
                out.extend(item.serialize())
        return out

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        if self.kind is LayoutKind.BYTE_ARRAY:
            return 1
        if self.kind is LayoutKind.FIXED:
            return 2 + len(self.value)
        return 2 + sum(item.serialized_size() for item in self.value)

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> Layout:
        """Read a layout from ``felts`` starting at ``offset``."""
        index = _variant_index(felts, offset)
        try:
            kind = LayoutKind(index)
        except ValueError:
            raise CairoSerdeError("Index not handle for enum Layout") from None
        if kind is LayoutKind.BYTE_ARRAY:
            return cls(kind)
        if kind is LayoutKind.FIXED:
            items, _ = _read_list(felts, offset + 1, _read_u8)
        elif kind in (LayoutKind.STRUCT, LayoutKind.ENUM):
            items, _ = _read_list(felts, offset + 1, _sized(FieldLayout.deserialize))
        else:
            items, _ = _read_list(felts, offset + 1, _sized(Layout.deserialize))
        return cls(kind, tuple(items))


@dataclass(frozen=True)
class FieldLayout:
    """Layout of one field, addressed by its selector."""

    selector: int
    layout: Layout

    def __post_init__(self) -> None:
        _check_felt(self.selector)

    def serialize(self) -> list[int]:
        """Return the selector followed by the layout."""
        return [self.selector, *self.layout.serialize()]

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return 1 + self.layout.serialized_size()

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> FieldLayout:
        """Read a field layout from ``felts`` starting at ``offset``."""
        selector = _read(felts, offset)
        return cls(selector, Layout.deserialize(felts, offset + 1))


class TyKind(enum.IntEnum):
    """Variants of a schema type, numbered as on the wire."""

    PRIMITIVE = 0
    STRUCT = 1
    ENUM = 2
    TUPLE = 3
    ARRAY = 4
    BYTE_ARRAY = 5


TyValue = Union[int, "Struct", "Enum", tuple, None]


@dataclass(frozen=True)
class Ty:
    """Schema type of a model as reported by the contract.

    ``value`` is a felt naming the primitive, a :class:`Struct`, an
    :class:`Enum`, a tuple of :class:`Ty`, or ``None`` for ``BYTE_ARRAY``.
    """

    kind: TyKind
    value: TyValue = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", TyKind(self.kind))
        kind, value = self.kind, self.value
        if kind is TyKind.PRIMITIVE:
            _check_felt(value)
        elif kind is TyKind.STRUCT:
            if not isinstance(value, Struct):
                raise TypeError("STRUCT type expects a Struct value")
        elif kind is TyKind.ENUM:
            if not isinstance(value, Enum):
                raise TypeError("ENUM type expects an Enum value")
        elif kind in (TyKind.TUPLE, TyKind.ARRAY):
            items = tuple(value or ())
            if not all(isinstance(item, Ty) for item in items):
                raise TypeError(f"{kind.name} type expects Ty items")
            object.__setattr__(self, "value", items)
        elif value is not None:
            raise CairoSerdeError("BYTE_ARRAY type carries no value")

    def serialize(self) -> list[int]:
        """Return the variant index followed by the variant's payload."""
        out = [int(self.kind)]
        if self.kind is TyKind.PRIMITIVE:
            out.append(self.value)
        elif self.kind in (TyKind.STRUCT, TyKind.ENUM):
            out.extend(self.value.serialize())
        elif self.kind in (TyKind.TUPLE, TyKind.ARRAY):
            out.append(len(self.value))
            for item in self.value:
                out.extend(item.serialize())
        return out

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        if self.kind is TyKind.PRIMITIVE:
            return 2
        if self.kind in (TyKind.STRUCT, TyKind.ENUM):
            return 1 + self.value.serialized_size()
        if self.kind in (TyKind.TUPLE, TyKind.ARRAY):
            return 2 + sum(item.serialized_size() for item in self.value)
        return 1

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> Ty:
        """Read a type from ``felts`` starting at ``offset``."""
        index = _variant_index(felts, offset)
        try:
            kind = TyKind(index)
        except ValueError:
            raise CairoSerdeError("Index not handle for enum Ty") from None
        if kind is TyKind.PRIMITIVE:
            return cls(kind, _read(felts, offset + 1))
        if kind is TyKind.STRUCT:
            return cls(kind, Struct.deserialize(felts, offset + 1))
        if kind is TyKind.ENUM:
            return cls(kind, Enum.deserialize(felts, offset + 1))
        if kind in (TyKind.TUPLE, TyKind.ARRAY):
            items, _ = _read_list(felts, offset + 1, _sized(Ty.deserialize))
            return cls(kind, tuple(items))
        return cls(kind)


@dataclass(frozen=True)
class Member:
    """A named struct member with attributes and a type."""

    name: int
    attrs: tuple[int, ...] = ()
    ty: Ty = field(default_factory=lambda: Ty(TyKind.BYTE_ARRAY))

    def __post_init__(self) -> None:
        _check_felt(self.name)
        object.__setattr__(self, "attrs", tuple(_check_felt(a) for a in self.attrs))

    def serialize(self) -> list[int]:
        """Return name, attribute list and type."""
        return [self.name, len(self.attrs), *self.attrs, *self.ty.serialize()]

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return 2 + len(self.attrs) + self.ty.serialized_size()

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> Member:
        """Read a member from ``felts`` starting at ``offset``."""
        name = _read(felts, offset)
        attrs, used = _read_list(felts, offset + 1, _read_felt)
        ty = Ty.deserialize(felts, offset + 1 + used)
        return cls(name, tuple(attrs), ty)


@dataclass(frozen=True)
class Struct:
    """A struct schema: name, attributes and members."""

    name: int
    attrs: tuple[int, ...] = ()
    children: tuple[Member, ...] = ()

    def __post_init__(self) -> None:
        _check_felt(self.name)
        object.__setattr__(self, "attrs", tuple(_check_felt(a) for a in self.attrs))
        children = tuple(self.children)
        if not all(isinstance(child, Member) for child in children):
            raise TypeError("struct children must be Member instances")
        object.__setattr__(self, "children", children)

    def serialize(self) -> list[int]:
        """Return name, attribute list and member list."""
        out = [self.name, len(self.attrs), *self.attrs, len(self.children)]
        for child in self.children:
            out.extend(child.serialize())
        return out

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return 3 + len(self.attrs) + sum(c.serialized_size() for c in self.children)

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> Struct:
        """Read a struct schema from ``felts`` starting at ``offset``."""
        name = _read(felts, offset)
        attrs, used = _read_list(felts, offset + 1, _read_felt)
        children, _ = _read_list(felts, offset + 1 + used, _sized(Member.deserialize))
        return cls(name, tuple(attrs), tuple(children))


@dataclass(frozen=True)
class Enum:
    """An enum schema: name, attributes and ``(variant name, type)`` pairs."""

    name: int
    attrs: tuple[int, ...] = ()
    children: tuple[tuple[int, Ty], ...] = ()

    def __post_init__(self) -> None:
        _check_felt(self.name)
        object.__setattr__(self, "attrs", tuple(_check_felt(a) for a in self.attrs))
        children = []
        for variant_name, ty in self.children:
            _check_felt(variant_name)
            if not isinstance(ty, Ty):
                raise TypeError("enum children must pair a felt with a Ty")
            children.append((variant_name, ty))
        object.__setattr__(self, "children", tuple(children))

    def serialize(self) -> list[int]:
        """Return name, attribute list and variant list."""
        out = [self.name, len(self.attrs), *self.attrs, len(self.children)]
        for variant_name, ty in self.children:
            out.append(variant_name)
            out.extend(ty.serialize())
        return out

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return (
            3
            + len(self.attrs)
            + sum(1 + ty.serialized_size() for _, ty in self.children)
        )

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> Enum:
        """Read an enum schema from ``felts`` starting at ``offset``."""
        name = _read(felts, offset)
        attrs, used = _read_list(felts, offset + 1, _read_felt)
        children, _ = _read_list(felts, offset + 1 + used, _read_variant)
        return cls(name, tuple(attrs), tuple(children))


@dataclass(frozen=True)
class ResourceMetadata:
    """Metadata URI attached to a world resource."""

    resource_id: int
    metadata_uri: ByteArray = field(default_factory=ByteArray)

    def __post_init__(self) -> None:
        _check_felt(self.resource_id)

    def serialize(self) -> list[int]:
        """Return the resource id followed by the URI byte array."""
        return [self.resource_id, *self.metadata_uri.serialize()]

    def serialized_size(self) -> int:
        """Return how many felts :meth:`serialize` produces."""
        return 1 + self.metadata_uri.serialized_size()

    @classmethod
    def deserialize(cls, felts: Sequence[int], offset: int = 0) -> ResourceMetadata:
        """Read resource metadata from ``felts`` starting at ``offset``."""
        resource_id = _read(felts, offset)
        return cls(resource_id, ByteArray.deserialize(felts, offset + 1))


def _sized(reader: Callable[[Sequence[int], int], _T]) -> Callable[[Sequence[int], int], tuple[_T, int]]:
    def read(felts: Sequence[int], offset: int) -> tuple[_T, int]:
        item = reader(felts, offset)
        return item, item.serialized_size()

    return read


def _read_variant(felts: Sequence[int], offset: int) -> tuple[tuple[int, Ty], int]:
    variant_name = _read(felts, offset)
    ty = Ty.deserialize(felts, offset + 1)
    return (variant_name, ty), 1 + ty.serialized_size()