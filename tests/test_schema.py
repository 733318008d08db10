import pytest

from dojokit.cairo_serde import FELT_PRIME, ByteArray
from dojokit.primitive import Primitive, PrimitiveError, PrimitiveKind
from dojokit.schema import (
    Enum,
    EnumError,
    EnumOption,
    Member,
    Struct,
    Ty,
    format_member,
)


def prim(kind, value=None):
    return Ty.primitive(Primitive(kind, value))


def unit_enum(option=None):
    return Enum(
        "Direction",
        option,
        [EnumOption("Left", Ty.tuple([])), EnumOption("Right", Ty.tuple([]))],
    )


@pytest.mark.parametrize(
    "member, expected",
    [
        (Member("i8_field", prim(PrimitiveKind.I8, -42)), "  i8_field: i8 = -42"),
        (Member("i16_field", prim(PrimitiveKind.I16, -1000)), "  i16_field: i16 = -1000"),
        (Member("i32_field", prim(PrimitiveKind.I32, -100000)), "  i32_field: i32 = -100000"),
        (
            Member("i64_field", prim(PrimitiveKind.I64, -1000000000)),
            "  i64_field: i64 = -1000000000",
        ),
        (
            Member("i128_field", prim(PrimitiveKind.I128, -1000000000000000000)),
            "  i128_field: i128 = -1000000000000000000",
        ),
        (Member("u8_field", prim(PrimitiveKind.U8, 255)), "  u8_field: u8 = 255"),
        (Member("u16_field", prim(PrimitiveKind.U16, 65535)), "  u16_field: u16 = 65535"),
        (
            Member("u32_field", prim(PrimitiveKind.U32, 4294967295)),
            "  u32_field: u32 = 4294967295",
        ),
        (
            Member("u64_field", prim(PrimitiveKind.U64, 18446744073709551615)),
            "  u64_field: u64 = 18446744073709551615",
        ),
        (
            Member(
                "u128_field",
                prim(PrimitiveKind.U128, 340282366920938463463374607431768211455),
            ),
            "  u128_field: u128 = 340282366920938463463374607431768211455",
        ),
        (
            Member("u256_field", prim(PrimitiveKind.U256, 123456789)),
            "  u256_field: u256 = "
            "00000000000000000000000000000000000000000000000000000000075BCD15",
        ),
        (Member("bool_field", prim(PrimitiveKind.BOOL, True)), "  bool_field: bool = true"),
        (
            Member("felt252_field", prim(PrimitiveKind.FELT252, 0x123ABC)),
            "  felt252_field: felt252 = 0x123abc",
        ),
        (
            Member(
                "enum_field",
                Ty.enum(
                    Enum(
                        "TestEnum",
                        1,
                        [
                            EnumOption("OptionA", Ty.tuple([])),
                            EnumOption("OptionB", Ty.tuple([])),
                        ],
                    )
                ),
            ),
            "  enum_field: TestEnum = OptionB",
        ),
    ],
)
def test_format_member(member, expected):
    assert format_member(member) == expected


def test_format_member_key_and_invalid_enum():
    member = Member("dir", Ty.enum(unit_enum(7)), key=True)
    assert format_member(member) == "  #[key]\n  dir: Direction = Invalid Option"


def test_names():
    assert prim(PrimitiveKind.U8).name() == "u8"
    assert Ty.tuple([prim(PrimitiveKind.U8), prim(PrimitiveKind.BOOL)]).name() == "(u8, bool)"
    assert Ty.array([prim(PrimitiveKind.U32)]).name() == "Array<u32>"
    assert Ty.array([]).name() == "Array"
    assert Ty.byte_array("x").name() == "ByteArray"
    assert Ty.struct(Struct("Position")).name() == "Position"


def _position():
    return Ty.struct(
        Struct(
            "Position",
            [
                Member("player", prim(PrimitiveKind.CONTRACT_ADDRESS, 0x1), key=True),
                Member("vec", Ty.struct(Struct("Vec2", [Member("x", prim(PrimitiveKind.U32))]))),
            ],
        )
    )


def test_walk_order():
    names = [ty.name() for ty in _position().walk()]
    assert names == ["Position", "Vec2", "u32", "ContractAddress"]


def test_str_rendering():
    expected = (
        "struct Position {\n  #[key]\n  player: ContractAddress = 0x1,\n  vec: Vec2,\n}"
        "\n\nstruct Vec2 {\n  x: u32,\n}"
    )
    assert str(_position()) == expected


def test_struct_get_and_keys():
    struct = _position().value
    assert struct.get("player") == prim(PrimitiveKind.CONTRACT_ADDRESS, 0x1)
    assert struct.get("missing") is None
    assert [m.name for m in struct.keys()] == ["player"]


def test_struct_round_trip_with_signed():
    ty = Ty.struct(
        Struct(
            "S",
            [
                Member("a", prim(PrimitiveKind.I8, -5)),
                Member("b", prim(PrimitiveKind.U16, 300)),
            ],
        )
    )
    felts = ty.serialize()
    assert felts == [FELT_PRIME - 5, 300]
    template = Ty.struct(
        Struct("S", [Member("a", prim(PrimitiveKind.I8)), Member("b", prim(PrimitiveKind.U16))])
    )
    remaining = list(felts)
    template.deserialize(remaining)
    assert remaining == []
    assert template == ty


def test_tuple_serialize():
    ty = Ty.tuple([prim(PrimitiveKind.U8, 5), prim(PrimitiveKind.BOOL, True)])
    assert ty.serialize() == [5, 1]


def test_array_deserialize_and_serialize():
    ty = Ty.array([prim(PrimitiveKind.U8)])
    felts = [3, 1, 2, 3, 9]
    ty.deserialize(felts)
    assert felts == [9]
    assert [item.value.value for item in ty.value] == [1, 2, 3]
    assert ty.serialize() == [3, 1, 2, 3]


def test_byte_array_round_trip():
    ty = Ty.byte_array()
    felts = ByteArray.from_string("hello dojo").serialize() + [7]
    ty.deserialize(felts)
    assert ty.value == "hello dojo"
    assert felts == [7]
    assert ty.serialize() == ByteArray.from_string("hello dojo").serialize()


def test_enum_serialize_selected_option():
    ty = Ty.enum(unit_enum())
    ty.value.set_option("Right")
    assert ty.value.option == 1
    assert ty.serialize() == [1]


def test_enum_serialize_without_option():
    with pytest.raises(PrimitiveError):
        Ty.enum(unit_enum()).serialize()


def test_enum_deserialize_with_payload():
    ty = Ty.enum(
        Enum("E", None, [EnumOption("None", Ty.tuple([])), EnumOption("Some", prim(PrimitiveKind.U8))])
    )
    felts = [1, 42]
    ty.deserialize(felts)
    assert felts == []
    assert ty.value.option_name() == "Some"
    assert ty.value.options[1].ty.value.value == 42


def test_enum_deserialize_unit_variant():
    ty = Ty.enum(unit_enum())
    felts = [0, 5]
    ty.deserialize(felts)
    assert ty.value.option_name() == "Left"
    assert felts == [5]


def test_enum_deserialize_invalid_index():
    with pytest.raises(EnumError):
        Ty.enum(unit_enum()).deserialize([5])


def test_enum_deserialize_out_of_u8_range():
    with pytest.raises(PrimitiveError, match="out of range for u8"):
        Ty.enum(unit_enum()).deserialize([300])


def test_enum_option_errors():
    with pytest.raises(EnumError, match="not set"):
        unit_enum().option_name()
    with pytest.raises(EnumError, match="invalid"):
        unit_enum(2).option_name()
    with pytest.raises(EnumError, match="invalid"):
        unit_enum().set_option("Up")
    assert unit_enum(0).to_sql_value() == "Left"


def test_member_serialize_missing_value():
    with pytest.raises(PrimitiveError):
        Member("x", prim(PrimitiveKind.U32)).serialize()
    assert Member("x", prim(PrimitiveKind.U32, 9)).serialize() == [9]