"""
Tests for utility functions in the CasperDash SDK.
"""
import hashlib

import pycspr
import pytest
from pycspr.types.cl import CLT_Type_String

from casperdash_sdk.casper.cl_values import CLValueBuilder
from casperdash_sdk.utils import (
    account_hash_hex,
    cl_to_native,
    convert_hash_str_to_bytes,
    key_and_value_to_hex,
    owned_token_index_key,
    strip_hash_prefix,
)


@pytest.mark.parametrize("value", [
    "hash-" + "ab" * 32,
    "contract-" + "ab" * 32,
    "contract-package-" + "ab" * 32,
    "ab" * 32,
])
def test_strip_hash_prefix(value):
    assert strip_hash_prefix(value) == "ab" * 32


def test_convert_hash_str_to_bytes():
    assert convert_hash_str_to_bytes("hash-" + "01" * 32) == b"\x01" * 32
    with pytest.raises(ValueError):
        convert_hash_str_to_bytes("hash-0102")
    with pytest.raises(ValueError):
        convert_hash_str_to_bytes("hash-" + "zz" * 32)


def test_owned_token_index_key(key_pair):
    """Index keys hash the owner Key followed by the U256 index"""
    owner = CLValueBuilder.key(key_pair.public_key)
    data = pycspr.to_bytes(owner) + pycspr.to_bytes(CLValueBuilder.u256(2))
    expected = hashlib.blake2b(data, digest_size=32).hexdigest()
    assert owned_token_index_key(key_pair.public_key, 2) == expected
    assert key_and_value_to_hex(owner, CLValueBuilder.u256(2)) == expected
    assert owned_token_index_key(key_pair.public_key, "2") == expected
    assert owned_token_index_key(key_pair.public_key, 3) != expected


def test_account_hash_hex(key_pair):
    assert account_hash_hex(key_pair.public_key) == key_pair.public_key.to_account_hash().hex()
    assert len(account_hash_hex(key_pair.public_key)) == 64


def test_cl_to_native_containers(key_pair):
    assert cl_to_native(CLValueBuilder.option(None, CLT_Type_String())) is None
    assert cl_to_native(CLValueBuilder.byte_array(b"\x01\x02")) == b"\x01\x02"
    assert cl_to_native(CLValueBuilder.unit()) is None
    assert cl_to_native(CLValueBuilder.tuple(CLValueBuilder.u8(1))) == (1,)
    key = CLValueBuilder.key(key_pair.public_key)
    assert cl_to_native(CLValueBuilder.list([key])) == [key]
