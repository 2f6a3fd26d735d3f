"""
Utility functions for the CasperDash SDK.
"""
from typing import Any, Union

import pycspr
from pycspr.types.cl import (
    CLV_ByteArray,
    CLV_List,
    CLV_Map,
    CLV_Option,
    CLV_Tuple1,
    CLV_Tuple2,
    CLV_Tuple3,
    CLV_Unit,
    CLV_Value,
)

from .casper.cl_values import CLValueBuilder
from .casper.keys import PublicKey


HASH_PREFIXES = ("hash-", "contract-package-", "contract-")


def strip_hash_prefix(value: str) -> str:
    """Remove a "hash-" / "contract-" style prefix from a hex hash string"""
    for prefix in HASH_PREFIXES:
        if value.startswith(prefix):
            return value[len(prefix):]
    return value


def convert_hash_str_to_bytes(value: str) -> bytes:
    """
    Convert a (possibly prefixed) hex hash to its 32 bytes

    Raises:
        ValueError: If the value is not a 32-byte hex string
    """
    raw = bytes.fromhex(strip_hash_prefix(value))
    if len(raw) != 32:
        raise ValueError(f"Expected a 32-byte hash, got {len(raw)} bytes: {value}")
    return raw


def key_and_value_to_hex(key: CLV_Value, value: CLV_Value) -> str:
    """
    Derive a dictionary item key from a Key and a U256 value

    Returns:
        Hex of blake2b-256 over the two values' byte encodings
    """
    return pycspr.get_hash(pycspr.to_bytes(key) + pycspr.to_bytes(value)).hex()


def owned_token_index_key(owner: PublicKey, index: Union[int, str]) -> str:
    """Dictionary key of the `index`-th token owned by `owner` (CEP-47)"""
    return key_and_value_to_hex(CLValueBuilder.key(owner), CLValueBuilder.u256(index))


def account_hash_hex(public_key: PublicKey) -> str:
    """Account hash hex without the "account-hash-" prefix"""
    return public_key.to_account_hash().hex()


def cl_to_native(value: CLV_Value) -> Any:
    """
    Unwrap a CL value into plain Python values

    Options unwrap to their inner value (or None), lists to lists, maps to a
    list of (key, value) tuples and byte arrays to bytes. Keys, URefs and
    public keys stay as objects.
    """
    if isinstance(value, CLV_Option):
        return None if value.value is None else cl_to_native(value.value)
    if isinstance(value, CLV_List):
        return [cl_to_native(item) for item in value.vector]
    if isinstance(value, CLV_Map):
        return [(cl_to_native(k), cl_to_native(v)) for k, v in value.value]
    if isinstance(value, CLV_Tuple1):
        return (cl_to_native(value.v0),)
    if isinstance(value, CLV_Tuple2):
        return cl_to_native(value.v0), cl_to_native(value.v1)
    if isinstance(value, CLV_Tuple3):
        return cl_to_native(value.v0), cl_to_native(value.v1), cl_to_native(value.v2)
    if isinstance(value, CLV_ByteArray):
        return bytes(value.value)
    if isinstance(value, CLV_Unit):
        return None
    return getattr(value, "value", value)
