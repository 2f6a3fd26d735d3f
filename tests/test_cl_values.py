"""
Tests for CL values and runtime arguments.
"""
import pycspr
import pytest
from hypothesis import HealthCheck, given, settings, strategies as st
from pycspr.serializer import cl_value_to_cl_type
from pycspr.types.cl import (
    CLT_Type_Key,
    CLT_Type_List,
    CLT_Type_String,
    CLT_Type_U8,
    CLT_Type_U256,
    CLV_KeyType,
    CLV_Map,
    CLV_U8,
    CLV_U256,
)
from pycspr.types.node.rpc import DeployOfModuleBytes

from casperdash_sdk.casper.cl_values import (
    CLValueBuilder,
    cl_value_from_json,
    cl_value_to_json,
    key_to_formatted_str,
    to_cl_map,
)
from casperdash_sdk.utils import cl_to_native


class TestPrimitiveEncoding:
    """Byte layouts of primitive values."""

    def test_fixed_width_integers_are_little_endian(self):
        assert pycspr.to_bytes(CLValueBuilder.u8(7)) == b"\x07"
        assert pycspr.to_bytes(CLValueBuilder.u32(1)) == bytes.fromhex("01000000")
        assert pycspr.to_bytes(CLValueBuilder.u64(258)) == bytes.fromhex("0201000000000000")
        assert pycspr.to_bytes(CLValueBuilder.i32(-1)) == bytes.fromhex("ffffffff")

    def test_big_integers_are_length_prefixed(self):
        assert pycspr.to_bytes(CLValueBuilder.u512(0)) == b"\x00"
        assert pycspr.to_bytes(CLValueBuilder.u512(1000)) == bytes.fromhex("02e803")
        assert pycspr.to_bytes(CLValueBuilder.u256("256")) == bytes.fromhex("020001")

    def test_string_and_bool(self):
        assert pycspr.to_bytes(CLValueBuilder.string("abc")) == bytes.fromhex("03000000616263")
        assert pycspr.to_bytes(CLValueBuilder.bool(True)) == b"\x01"
        assert pycspr.to_bytes(CLValueBuilder.unit()) == b""

    def test_out_of_range_values_rejected(self):
        with pytest.raises(ValueError):
            CLValueBuilder.u8(256)
        with pytest.raises(ValueError):
            CLValueBuilder.u64(-1)
        with pytest.raises(ValueError):
            CLValueBuilder.u512(1 << 512)


class TestKeys:
    """Global state keys and URefs."""

    def test_account_key_from_public_key(self, key_pair):
        value = CLValueBuilder.key(key_pair.public_key)
        assert value.key_type == CLV_KeyType.ACCOUNT
        assert pycspr.to_bytes(value) == b"\x00" + key_pair.public_key.to_account_hash()

    def test_account_key_from_hex_public_key(self, key_pair):
        public_key_hex = key_pair.public_key.account_key.hex()
        assert CLValueBuilder.key(CLValueBuilder.public_key(public_key_hex)) == CLValueBuilder.key(key_pair.public_key)

    def test_hash_key_from_byte_array(self):
        raw = bytes(range(32))
        value = CLValueBuilder.key(CLValueBuilder.byte_array(raw))
        assert value.key_type == CLV_KeyType.HASH
        assert value.identifier == raw
        assert key_to_formatted_str(value) == "hash-" + raw.hex()

    def test_formatted_strings_parsed(self):
        account = CLValueBuilder.key("account-hash-" + "11" * 32)
        assert (account.key_type, account.identifier) == (CLV_KeyType.ACCOUNT, b"\x11" * 32)
        contract = CLValueBuilder.key("hash-" + "22" * 32)
        assert key_to_formatted_str(contract) == "hash-" + "22" * 32

    def test_uref_key(self):
        uref = CLValueBuilder.uref("uref-" + "44" * 32 + "-007")
        assert pycspr.to_bytes(uref) == b"\x44" * 32 + b"\x07"
        key = CLValueBuilder.key(uref)
        assert key.key_type == CLV_KeyType.UREF
        assert key_to_formatted_str(key) == "uref-" + "44" * 32

    def test_short_hash_rejected(self):
        with pytest.raises(ValueError):
            CLValueBuilder.key(b"\x01" * 31)
        with pytest.raises(ValueError):
            CLValueBuilder.key(1234)


class TestComposites:
    """Option, List and Map values."""

    def test_option(self):
        assert pycspr.to_bytes(CLValueBuilder.option(None, CLT_Type_String())) == b"\x00"
        some = CLValueBuilder.option(CLValueBuilder.u8(5))
        assert some.option_type == CLT_Type_U8()
        assert pycspr.to_bytes(some) == b"\x01\x05"

    def test_empty_option_needs_type(self):
        with pytest.raises(ValueError):
            CLValueBuilder.option(None)

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            CLValueBuilder.list([])
        with pytest.raises(ValueError):
            CLValueBuilder.map({})

    def test_list_items_must_share_type(self):
        with pytest.raises(ValueError):
            CLValueBuilder.list([CLValueBuilder.u8(1), CLValueBuilder.string("x")])

    def test_list_type(self):
        value = CLValueBuilder.list([CLValueBuilder.u256(1), CLValueBuilder.u256(2)])
        assert cl_value_to_cl_type(value) == CLT_Type_List(CLT_Type_U256())
        keys = CLValueBuilder.list([CLValueBuilder.key(b"\x01" * 32)])
        assert cl_value_to_cl_type(keys) == CLT_Type_List(CLT_Type_Key())

    def test_to_cl_map_keeps_order(self):
        value = to_cl_map({"b": "2", "a": "1"})
        assert cl_value_to_json(value)["parsed"] == [{"key": "b", "value": "2"}, {"key": "a", "value": "1"}]

    def test_tuple(self):
        value = CLValueBuilder.tuple(CLValueBuilder.u8(1), CLValueBuilder.string("a"))
        assert cl_to_native(value) == (1, "a")
        with pytest.raises(ValueError):
            CLValueBuilder.tuple()


class TestJsonDecoding:
    """CLValue JSON as reported by the node."""

    def test_decode_option_u256(self):
        value = cl_value_from_json({"cl_type": {"Option": "U256"}, "bytes": "01020001", "parsed": "256"})
        assert cl_to_native(value) == 256

    def test_decode_empty_option(self):
        value = cl_value_from_json({"cl_type": {"Option": "U256"}, "bytes": "00", "parsed": None})
        assert cl_to_native(value) is None

    def test_decode_list_of_u64(self):
        raw = pycspr.to_bytes(CLValueBuilder.list([CLValueBuilder.u64(1), CLValueBuilder.u64(9)])).hex()
        value = cl_value_from_json({"cl_type": {"List": "U64"}, "bytes": raw})
        assert cl_to_native(value) == [1, 9]

    def test_decode_map_to_pairs(self):
        source = to_cl_map({"name": "Punk", "rarity": "rare"})
        value = cl_value_from_json(cl_value_to_json(source))
        assert isinstance(value, CLV_Map)
        assert cl_to_native(value) == [("name", "Punk"), ("rarity", "rare")]

    def test_decode_key(self):
        raw = "01" + "ab" * 32
        value = cl_value_from_json({"cl_type": "Key", "bytes": raw})
        assert key_to_formatted_str(value) == "hash-" + "ab" * 32

    def test_trailing_bytes_rejected(self):
        with pytest.raises(ValueError):
            cl_value_from_json({"cl_type": "U8", "bytes": "0102"})

    def test_missing_bytes_rejected(self):
        with pytest.raises(ValueError):
            cl_value_from_json({"cl_type": "U8"})

    @settings(max_examples=50, suppress_health_check=[HealthCheck.function_scoped_fixture])
    @given(st.integers(min_value=0, max_value=(1 << 512) - 1))
    def test_u512_decodes_to_same_integer(self, amount):
        value = CLValueBuilder.u512(amount)
        assert cl_value_from_json(cl_value_to_json(value)).value == amount


class TestRuntimeArgs:
    """Named runtime arguments carried by deploy items."""

    def test_argument_order_kept(self):
        session = DeployOfModuleBytes(
            args={"z": CLValueBuilder.u8(1), "a": CLValueBuilder.u8(2)},
            module_bytes=b"",
        )
        assert [arg.name for arg in session.arguments] == ["z", "a"]

    def test_builder_returns_typed_values(self):
        assert isinstance(CLValueBuilder.u256(5), CLV_U256)
        assert isinstance(CLValueBuilder.u8(5), CLV_U8)
