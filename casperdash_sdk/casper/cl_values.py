"""
CL values for runtime arguments and global state reads.

Values are pycspr `CLV_*` instances: pycspr derives their CL types and
encodes them when they travel inside a deploy. The builder here adds range
checks and accepts the loose inputs the contract clients pass around
(public keys, hashes, formatted key strings).
"""
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple, Union

import pycspr
from pycspr.serializer import cl_value_to_cl_type
from pycspr.types.cl import (
    CLT_Type,
    CLV_Bool,
    CLV_ByteArray,
    CLV_I32,
    CLV_I64,
    CLV_Key,
    CLV_KeyType,
    CLV_List,
    CLV_Map,
    CLV_Option,
    CLV_PublicKey,
    CLV_String,
    CLV_Tuple1,
    CLV_Tuple2,
    CLV_Tuple3,
    CLV_U8,
    CLV_U32,
    CLV_U64,
    CLV_U128,
    CLV_U256,
    CLV_U512,
    CLV_Unit,
    CLV_URef,
    CLV_Value,
)
from pycspr.utils import convertor

from .keys import PublicKey, public_key_from_hex

# Named arguments of a deploy item, in insertion order
RuntimeArgs = Dict[str, CLV_Value]

KeyParameter = Union[PublicKey, CLV_Value, bytes, str]

_KEY_PREFIXES = {
    CLV_KeyType.ACCOUNT: "account-hash-",
    CLV_KeyType.HASH: "hash-",
    CLV_KeyType.UREF: "uref-",
}


def _check_range(value: Union[int, str], low: int, high: int, name: str) -> int:
    value = int(value)
    if not low <= value <= high:
        raise ValueError(f"Value {value} out of range for {name}")
    return value


def _key(raw: bytes, key_type: CLV_KeyType = CLV_KeyType.HASH) -> CLV_Key:
    if len(raw) != 32:
        raise ValueError(f"Keys hold 32 bytes, got {len(raw)}")
    return CLV_Key(bytes(raw), key_type)


class CLValueBuilder:
    """Factory helpers for pycspr CL values."""

    @staticmethod
    def bool(value: bool) -> CLV_Bool:
        return CLV_Bool(bool(value))

    @staticmethod
    def i32(value: int) -> CLV_I32:
        return CLV_I32(_check_range(value, -(1 << 31), (1 << 31) - 1, "I32"))

    @staticmethod
    def i64(value: int) -> CLV_I64:
        return CLV_I64(_check_range(value, -(1 << 63), (1 << 63) - 1, "I64"))

    @staticmethod
    def u8(value: int) -> CLV_U8:
        return CLV_U8(_check_range(value, 0, 0xFF, "U8"))

    @staticmethod
    def u32(value: int) -> CLV_U32:
        return CLV_U32(_check_range(value, 0, (1 << 32) - 1, "U32"))

    @staticmethod
    def u64(value: Union[int, str]) -> CLV_U64:
        return CLV_U64(_check_range(value, 0, (1 << 64) - 1, "U64"))

    @staticmethod
    def u128(value: Union[int, str]) -> CLV_U128:
        return CLV_U128(_check_range(value, 0, (1 << 128) - 1, "U128"))

    @staticmethod
    def u256(value: Union[int, str]) -> CLV_U256:
        return CLV_U256(_check_range(value, 0, (1 << 256) - 1, "U256"))

    @staticmethod
    def u512(value: Union[int, str]) -> CLV_U512:
        return CLV_U512(_check_range(value, 0, (1 << 512) - 1, "U512"))

    @staticmethod
    def unit() -> CLV_Unit:
        return CLV_Unit()

    @staticmethod
    def string(value: str) -> CLV_String:
        return CLV_String(str(value))

    @staticmethod
    def byte_array(value: bytes) -> CLV_ByteArray:
        return CLV_ByteArray(bytes(value))

    @staticmethod
    def public_key(value: Union[PublicKey, str]) -> CLV_PublicKey:
        if isinstance(value, str):
            value = public_key_from_hex(value)
        return convertor.clv_public_key_from_public_key(value)

    @staticmethod
    def uref(value: Union[CLV_URef, str]) -> CLV_URef:
        if isinstance(value, str):
            return convertor.clv_uref_from_str(value)
        return value

    @staticmethod
    def key(value: KeyParameter) -> CLV_Key:
        """
        Build a Key value.

        Public keys become account-hash keys, 32-byte arrays become hash keys
        and formatted strings ("account-hash-…", "hash-…", "uref-…") are parsed.
        """
        if isinstance(value, CLV_Key):
            return value
        if isinstance(value, PublicKey):
            return _key(value.to_account_hash(), CLV_KeyType.ACCOUNT)
        if isinstance(value, CLV_PublicKey):
            return _key(value.account_hash, CLV_KeyType.ACCOUNT)
        if isinstance(value, CLV_ByteArray):
            return _key(value.value)
        if isinstance(value, CLV_URef):
            return _key(value.address, CLV_KeyType.UREF)
        if isinstance(value, (bytes, bytearray)):
            return _key(value)
        if isinstance(value, str):
            if value.startswith("uref-"):
                return _key(convertor.clv_uref_from_str(value).address, CLV_KeyType.UREF)
            parsed = convertor.clv_key_from_str(value)
            return _key(parsed.identifier, parsed.key_type)
        raise ValueError(f"Cannot build a key from {type(value).__name__}")

    @staticmethod
    def option(value: Optional[CLV_Value], inner_type: Optional[CLT_Type] = None) -> CLV_Option:
        if value is None and inner_type is None:
            raise ValueError("An empty option needs an explicit inner type")
        return CLV_Option(value, inner_type or cl_value_to_cl_type(value))

    @staticmethod
    def list(values: Sequence[CLV_Value]) -> CLV_List:
        """
        Build a List value.

        Raises:
            ValueError: If the list is empty (its item type cannot be derived)
                or its items differ in type
        """
        values = list(values)
        if not values:
            raise ValueError("An empty list has no derivable item type")
        item_type = cl_value_to_cl_type(values[0])
        for item in values[1:]:
            if cl_value_to_cl_type(item) != item_type:
                raise ValueError(f"List items must all be of one type, got {type(item).__name__}")
        return CLV_List(values)

    @staticmethod
    def map(pairs: Union[Mapping[Any, CLV_Value], Sequence[Tuple[CLV_Value, CLV_Value]]]) -> CLV_Map:
        pairs = list(pairs.items()) if isinstance(pairs, Mapping) else list(pairs)
        if not pairs:
            raise ValueError("An empty map has no derivable key and value types")
        return CLV_Map(pairs)

    @staticmethod
    def tuple(*values: CLV_Value) -> CLV_Value:
        tuple_types = {1: CLV_Tuple1, 2: CLV_Tuple2, 3: CLV_Tuple3}
        if len(values) not in tuple_types:
            raise ValueError("Tuples hold between one and three values")
        return tuple_types[len(values)](*values)


def to_cl_map(mapping: Mapping[str, str]) -> CLV_Map:
    """Build a Map<String, String> from a plain mapping, keeping its order."""
    return CLValueBuilder.map(
        [(CLValueBuilder.string(k), CLValueBuilder.string(v)) for k, v in mapping.items()]
    )


def key_to_formatted_str(key: CLV_Key) -> str:
    return _KEY_PREFIXES[key.key_type] + key.identifier.hex()


def cl_value_to_json(value: CLV_Value) -> Dict[str, Any]:
    """`{"cl_type", "bytes", "parsed"}` as the node reports CL values"""
    return pycspr.to_json(value)


def cl_value_from_json(data: Mapping[str, Any]) -> CLV_Value:
    """
    Decode a CL value from its node JSON form.

    Raises:
        ValueError: If the type is unknown or the bytes do not match it
    """
    try:
        return pycspr.from_json(dict(data), CLV_Value)
    except (AssertionError, KeyError, IndexError, NotImplementedError, TypeError) as e:
        raise ValueError(f"Undecodable CL value {data!r}: {e}") from e
