# dojokit

Pure-Python tools for working with Dojo world data on Cairo/Starknet. The package
has no runtime dependencies.

## Modules

- `dojokit.cairo_serde`: felt helpers (`FELT_PRIME`, `to_felt`, `felt_to_signed`),
  the `CairoSerdeError` exception, and `ByteArray`, the Cairo byte-array encoding.
  `ByteArray` converts from and to strings and bytes and serializes to and from felts.
- `dojokit.abi`: the model ABI types `Layout`/`LayoutKind`, `FieldLayout`,
  `Ty`/`TyKind`, `Struct`, `Enum`, `Member` and `ResourceMetadata`. Each has
  `serialize()`, `serialized_size()` and a `deserialize(felts, offset)` classmethod.
- `dojokit.primitive_conversion`: `try_from_felt(value, bits)` reads a felt as a
  signed 8, 16, 32, 64 or 128-bit integer. It raises `PrimitiveFromFeltError` when
  the value does not fit.
- `dojokit.primitive`: `Primitive`, a scalar of a `PrimitiveKind` that is either
  set or unset (`None`). It provides its felt encoding (`serialize`, `deserialize`),
  its numeric id (`to_numeric`, `from_numeric`) and its SQLite representation
  (`to_sql_type`, which returns a `SqlType`, and `to_sql_value`). Failures raise
  `PrimitiveError`.
- `dojokit.schema`: model schemas built from `Ty`, `Struct`, `Member`, `Enum` and
  `EnumOption`. A `Ty` serializes the values it holds to felts. It can also fill
  itself in from felts, where an array's single item serves as the element template.
  `str(ty)` renders the schema as Cairo-like text, and `format_member` renders one
  member line. The module also defines `EnumError`, `Query` and `Dependency`.
- `dojokit.naming`: handling of `namespace-name` tags, with `split_tag`, `get_tag`,
  `ensure_namespace`, `is_valid_tag`, `get_name_from_tag`, `get_namespace_from_tag`,
  `get_tag_from_filename` and `capitalize`.
- `dojokit.packing`: `unpack(packed, layout)` splits bit-packed felts into values of
  the given bit sizes. It raises `PackingError`, or `ParseError` for a size that is
  not a u8.
- `dojokit.world_param`: rules for the `world` and `self` parameters of system
  functions. The module has `Param`, `is_world_param`, `check_self_parameter` and
  `parse_world_injection`, which returns a `WorldParamInjectionKind` together with a
  list of diagnostic messages.
- `dojokit.workspace`: `Workspace` computes the target and manifests directories
  for a profile and checks that the profile is declared (`profile_check` raises
  `WorkspaceError`). The module also has the path helpers `children` and
  `list_files`, and the `ProfileSpec` enum.

## Installation

```
pip install dojokit
```

## Examples

Tags:

```python
from dojokit.naming import split_tag, ensure_namespace, is_valid_tag

split_tag("namespace-name")              # ("namespace", "name")
ensure_namespace("name", "default")      # "default-name"
is_valid_tag("dojo_examples-base_test")  # True
is_valid_tag("invalid-")                 # False
```

Byte arrays and ABI types:

```python
from dojokit.cairo_serde import ByteArray
from dojokit.abi import Layout, LayoutKind

ByteArray.from_string("test").serialize()   # [0, 0x74657374, 4]

layout = Layout(LayoutKind.FIXED, (8, 16))
felts = layout.serialize()                  # [0, 2, 8, 16]
Layout.deserialize(felts) == layout         # True
```

Primitives:

```python
from dojokit.cairo_serde import to_felt
from dojokit.primitive import Primitive, PrimitiveKind
from dojokit.primitive_conversion import try_from_felt

value = Primitive(PrimitiveKind.U8, 42)
value.serialize()       # [42]
value.to_sql_value()    # "42"
value.to_sql_type()     # SqlType.INTEGER

try_from_felt(to_felt(-64), 8)   # -64
```

Schemas:

```python
from dojokit.primitive import Primitive, PrimitiveKind
from dojokit.schema import Member, Struct, Ty

def position_schema(player=None, x=None):
    return Ty.struct(Struct("Position", [
        Member("player", Ty.primitive(Primitive(PrimitiveKind.CONTRACT_ADDRESS, player)), key=True),
        Member("x", Ty.primitive(Primitive(PrimitiveKind.U32, x))),
    ]))

position_schema(0x1, 10).serialize()   # [1, 10]

schema = position_schema()
schema.deserialize([1, 10])            # fills the values, consuming the list
schema.value.get("x").value.value      # 10
```

Unpacking packed storage:

```python
from dojokit.packing import unpack

unpack([0b1011], [1, 1, 2])   # [1, 1, 2]
```

World parameters:

```python
from dojokit.world_param import Param, parse_world_injection

parse_world_injection([Param("world", "ref", "IWorldDispatcher")])
# (WorldParamInjectionKind.EXTERNAL, [])
parse_world_injection([Param("world", "", "IWorldDispatcher")])
# (WorldParamInjectionKind.VIEW, ["World parameter must be a snapshot if `ref` is not used."])
```

Workspace directories:

```python
from dojokit.workspace import Workspace

ws = Workspace("project/Scarb.toml", profile="dev")
ws.manifests_dir_profile()        # Path("project/manifests/dev")
ws.base_manifests_dir_profile()   # Path("project/manifests/dev/base")
ws.target_dir_profile()           # Path("project/target/dev")

Workspace("project/Scarb.toml", profile="staging").profile_check()
# WorkspaceError: Profile 'staging' not found in workspace. ...
```

## What this package does not do

- It has no Poseidon hashing. It cannot compute model selectors, byte-array hashes,
  or selector-suffixed manifest filenames from tags. `get_tag_from_filename` only
  parses such filenames.
- It does not talk to a network. The ABI types encode and decode calldata and
  results, but nothing here calls a contract or a provider.
- It does not expand or compile contract code, and it provides no macros.
  `world_param` applies its rules to parameters you describe with `Param`.
- `Workspace` does not read the manifest file. You pass the profile and the
  declared profiles yourself.

## Tests

```
pip install -e ".[test]"
pytest
```