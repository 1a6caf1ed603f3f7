from enum import IntEnum

from borsh_construct import CStruct, String, U8, U64, Vec

from kitchen.encoding import SALT_LEN


class RecipeOpcode(IntEnum):
    CREATE = 0x01
    COOK = 0x02
    UNCOOK = 0x03


# Everything after the opcode byte. Vec(U64) is the u32 seed count followed by
# the amounts, which is exactly the program's header.
CreateRecipeLayout = CStruct(
    "amounts" / Vec(U64),
    "salt" / U8[SALT_LEN],
    "name" / String,
    "symbol" / String,
    "uri" / String,
)
UseRecipeLayout = CStruct(
    "amounts" / Vec(U64),
    "salt" / U8[SALT_LEN],
    "quantity" / U64,
)


def decode_recipe_instruction(data: bytes) -> dict:
    """Parse recipe instruction data back into its fields."""
    if not data:
        raise ValueError("Empty instruction data")
    opcode = RecipeOpcode(data[0])
    layout = CreateRecipeLayout if opcode == RecipeOpcode.CREATE else UseRecipeLayout
    parsed = layout.parse(data[1:])
    decoded = {
        "opcode": opcode,
        "amounts": list(parsed.amounts),
        "salt": bytes(parsed.salt).rstrip(b"\x00").decode("utf-8", errors="replace"),
    }
    if opcode == RecipeOpcode.CREATE:
        decoded.update(name=parsed.name, symbol=parsed.symbol, uri=parsed.uri)
    else:
        decoded["quantity"] = parsed.quantity
    return decoded
