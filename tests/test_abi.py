import pytest

from dojokit.abi import (
    Enum,
    FieldLayout,
    Layout,
    LayoutKind,
    Member,
    ResourceMetadata,
    Struct,
    Ty,
    TyKind,
)
from dojokit.cairo_serde import FELT_PRIME, ByteArray, CairoSerdeError


def _sample_struct() -> Struct:
    return Struct(
        name=0x506F736974696F6E,
        attrs=(7,),
        children=(
            Member(name=0x78, attrs=(), ty=Ty(TyKind.PRIMITIVE, 0x7533)),
            Member(name=0x79, attrs=(1, 2), ty=Ty(TyKind.BYTE_ARRAY)),
        ),
    )


def _sample_enum() -> Enum:
    return Enum(
        name=0x446972,
        attrs=(),
        children=(
            (0x4C656674, Ty(TyKind.TUPLE, ())),
            (0x5269676874, Ty(TyKind.ARRAY, (Ty(TyKind.PRIMITIVE, 0x7538),))),
        ),
    )


LAYOUTS = [
    Layout(LayoutKind.FIXED, (8, 16, 251)),
    Layout(LayoutKind.BYTE_ARRAY),
    Layout(LayoutKind.STRUCT, (FieldLayout(0x123, Layout(LayoutKind.FIXED, (32,))),)),
    Layout(LayoutKind.TUPLE, (Layout(LayoutKind.BYTE_ARRAY), Layout(LayoutKind.FIXED, ()))),
    Layout(LayoutKind.ARRAY, (Layout(LayoutKind.FIXED, (128,)),)),
    Layout(
        LayoutKind.ENUM,
        (
            FieldLayout(1, Layout(LayoutKind.FIXED, (8,))),
            FieldLayout(2, Layout(LayoutKind.ARRAY, (Layout(LayoutKind.BYTE_ARRAY),))),
        ),
    ),
]

TYS = [
    Ty(TyKind.PRIMITIVE, 0x66656C74323532),
    Ty(TyKind.STRUCT, _sample_struct()),
    Ty(TyKind.ENUM, _sample_enum()),
    Ty(TyKind.TUPLE, (Ty(TyKind.BYTE_ARRAY), Ty(TyKind.PRIMITIVE, 3))),
    Ty(TyKind.ARRAY, (Ty(TyKind.STRUCT, _sample_struct()),)),
    Ty(TyKind.BYTE_ARRAY),
]


@pytest.mark.parametrize("layout", LAYOUTS)
def test_layout_round_trip(layout):
    felts = layout.serialize()
    assert Layout.deserialize(felts, 0) == layout
    assert layout.serialized_size() == len(felts)


@pytest.mark.parametrize("ty", TYS)
def test_ty_round_trip(ty):
    felts = ty.serialize()
    assert Ty.deserialize(felts, 0) == ty
    assert ty.serialized_size() == len(felts)


def test_layout_variant_index_leads():
    for layout in LAYOUTS:
        assert layout.serialize()[0] == int(layout.kind)


def test_byte_array_variants_are_single_felt():
    assert Layout(LayoutKind.BYTE_ARRAY).serialize() == [LayoutKind.BYTE_ARRAY]
    assert Ty(TyKind.BYTE_ARRAY).serialize() == [TyKind.BYTE_ARRAY]


def test_fixed_layout_wire_form():
    assert Layout(LayoutKind.FIXED, (8, 16)).serialize() == [LayoutKind.FIXED, 2, 8, 16]


def test_primitive_ty_wire_form():
    assert Ty(TyKind.PRIMITIVE, 0x7538).serialize() == [TyKind.PRIMITIVE, 0x7538]


def test_deserialize_at_offset_and_ignores_trailing():
    layout = LAYOUTS[5]
    felts = [99, 98, *layout.serialize(), 42, 43]
    assert Layout.deserialize(felts, 2) == layout


def test_unknown_layout_index_raises():
    with pytest.raises(CairoSerdeError, match="Index not handle for enum Layout"):
        Layout.deserialize([6], 0)


def test_unknown_ty_index_raises():
    with pytest.raises(CairoSerdeError, match="Index not handle for enum Ty"):
        Ty.deserialize([6, 1], 0)


def test_truncated_input_raises():
    felts = LAYOUTS[0].serialize()[:-1]
    with pytest.raises(CairoSerdeError):
        Layout.deserialize(felts, 0)


def test_empty_input_raises():
    with pytest.raises(CairoSerdeError):
        Ty.deserialize([], 0)


def test_fixed_layout_rejects_non_u8_size():
    with pytest.raises(CairoSerdeError):
        Layout.deserialize([LayoutKind.FIXED, 1, 256], 0)


def test_fixed_layout_constructor_rejects_non_u8():
    with pytest.raises(CairoSerdeError):
        Layout(LayoutKind.FIXED, (300,))


def test_primitive_ty_rejects_value_outside_field():
    with pytest.raises(CairoSerdeError):
        Ty(TyKind.PRIMITIVE, FELT_PRIME)


def test_field_layout_round_trip():
    field_layout = FieldLayout(0xABC, LAYOUTS[2])
    felts = field_layout.serialize()
    assert felts[0] == 0xABC
    assert FieldLayout.deserialize(felts, 0) == field_layout
    assert field_layout.serialized_size() == len(felts)


def test_member_round_trip():
    member = Member(name=0x6B6579, attrs=(0x6B6579,), ty=TYS[3])
    felts = member.serialize()
    assert Member.deserialize(felts, 0) == member
    assert member.serialized_size() == len(felts)


def test_struct_round_trip():
    struct = _sample_struct()
    felts = struct.serialize()
    assert Struct.deserialize(felts, 0) == struct
    assert struct.serialized_size() == len(felts)


def test_enum_round_trip():
    enum_ = _sample_enum()
    felts = enum_.serialize()
    restored = Enum.deserialize(felts, 0)
    assert restored == enum_
    assert [name for name, _ in restored.children] == [0x4C656674, 0x5269676874]
    assert enum_.serialized_size() == len(felts)


def test_resource_metadata_round_trip():
    metadata = ResourceMetadata(0x1234, ByteArray.from_string("ipfs://metadata-uri"))
    felts = metadata.serialize()
    restored = ResourceMetadata.deserialize(felts, 0)
    assert restored == metadata
    assert restored.metadata_uri.to_string() == "ipfs://metadata-uri"
    assert metadata.serialized_size() == len(felts)


def test_resource_metadata_starts_with_resource_id():
    metadata = ResourceMetadata(0x55, ByteArray.from_string("uri"))
    felts = metadata.serialize()
    assert felts[0] == 0x55
    assert felts[1:] == ByteArray.from_string("uri").serialize()


def test_variant_index_uses_low_128_bits():
    felts = [(1 << 128) | LayoutKind.BYTE_ARRAY]
    assert Layout.deserialize(felts, 0) == Layout(LayoutKind.BYTE_ARRAY)


def test_array_length_beyond_input_raises():
    with pytest.raises(CairoSerdeError):
        Ty.deserialize([TyKind.ARRAY, 1000, TyKind.BYTE_ARRAY], 0)