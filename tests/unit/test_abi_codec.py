import pytest

from tokencheck.core.errors import AbiDecodingError
from tokencheck.services.abi import (
    ERC20_FIELDS,
    decode_string,
    decode_uint256,
    encode_call,
    encode_string,
    encode_uint256,
    hex_to_bytes,
    to_hex,
)


def test_selectors_for_erc20_getters():
    assert encode_call("name") == "0x06fdde03"
    assert encode_call("symbol") == "0x95d89b41"
    assert encode_call("decimals") == "0x313ce567"
    assert encode_call("totalSupply") == "0x18160ddd"
    assert ERC20_FIELDS == ("name", "symbol", "decimals", "totalSupply")


def test_unknown_function_is_rejected():
    with pytest.raises(ValueError):
        encode_call("balanceOf")


def test_hex_to_bytes_handles_empty_results():
    assert hex_to_bytes(None) == b""
    assert hex_to_bytes("") == b""
    assert hex_to_bytes("0x") == b""
    assert hex_to_bytes("0x0a") == b"\x0a"
    assert hex_to_bytes("0xa") == b"\x0a"


def test_hex_to_bytes_rejects_garbage():
    with pytest.raises(AbiDecodingError):
        hex_to_bytes("0xzz")


def test_dynamic_string_usdc():
    data = encode_string("USDC")
    assert len(data) == 96
    assert decode_string(data) == "USDC"
    assert decode_string(hex_to_bytes(to_hex(data))) == "USDC"


def test_bytes32_string():
    data = b"MKR".ljust(32, b"\x00")
    assert decode_string(data) == "MKR"


def test_all_zero_bytes32_decodes_to_empty():
    assert decode_string(b"\x00" * 32) == ""


def test_empty_string_result():
    assert decode_string(b"") == ""


def test_string_length_out_of_range_is_rejected():
    zero_length = encode_uint256(32) + encode_uint256(0) + b"\x00" * 32
    with pytest.raises(AbiDecodingError):
        decode_string(zero_length)

    too_long = encode_uint256(32) + encode_uint256(101) + b"A" * 128
    with pytest.raises(AbiDecodingError):
        decode_string(too_long)


def test_truncated_payload_is_rejected():
    truncated = encode_uint256(32) + encode_uint256(40) + b"A" * 8
    with pytest.raises(AbiDecodingError):
        decode_string(truncated)


def test_short_dynamic_payload_is_rejected():
    with pytest.raises(AbiDecodingError):
        decode_string(b"\x00" * 40)


def test_uint256_round_values():
    assert decode_uint256(encode_uint256(6)) == 6
    assert decode_uint256(encode_uint256(2**256 - 1)) == 2**256 - 1
    with pytest.raises(AbiDecodingError):
        decode_uint256(b"")
    with pytest.raises(ValueError):
        encode_uint256(-1)
