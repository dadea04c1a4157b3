"""
ERC-20 read-only call encoding and ABI return-data decoding.

All decoding works on ``bytes``; ``hex_to_bytes`` is the only place that
touches the hex strings returned by ``eth_call``.
"""

from __future__ import annotations

from typing import Dict

from ..core.errors import AbiDecodingError

WORD_SIZE = 32
MAX_STRING_LENGTH = 100

# 4-byte selectors (first 4 bytes of keccak256 of the signature). None of
# these take arguments, so the selector alone is the call data.
SELECTORS: Dict[str, bytes] = {
    "name": bytes.fromhex("06fdde03"),
    "symbol": bytes.fromhex("95d89b41"),
    "decimals": bytes.fromhex("313ce567"),
    "totalSupply": bytes.fromhex("18160ddd"),
}

ERC20_FIELDS = ("name", "symbol", "decimals", "totalSupply")


def encode_call(function: str) -> str:
    """Return ``eth_call`` data for one of the ERC-20 metadata getters."""
    try:
        selector = SELECTORS[function]
    except KeyError:
        raise ValueError(f"Unknown ERC-20 function: {function}") from None
    return "0x" + selector.hex()


def hex_to_bytes(value: str | None) -> bytes:
    """Convert an RPC hex result to bytes. ``None``, ``""`` and ``"0x"`` are empty."""
    if not value:
        return b""
    if not isinstance(value, str):
        raise AbiDecodingError(f"Expected hex string, got {type(value).__name__}")
    text = value[2:] if value[:2].lower() == "0x" else value
    if len(text) % 2:
        text = "0" + text
    try:
        return bytes.fromhex(text)
    except ValueError as exc:
        raise AbiDecodingError(f"Invalid hex data: {value[:20]}...") from exc


def decode_uint256(data: bytes) -> int:
    """Big-endian unsigned integer from the first ABI word."""
    if not data:
        raise AbiDecodingError("Empty return data for uint256")
    return int.from_bytes(data[:WORD_SIZE], "big")


def decode_string(data: bytes) -> str:
    """Decode a ``string`` or legacy ``bytes32`` return value.

    A result of exactly one word is a right-padded ``bytes32`` (MKR-style
    tokens). Anything longer is the dynamic encoding: offset word, length
    word, then the payload padded to a word boundary.
    """
    if not data:
        return ""

    if len(data) == WORD_SIZE:
        return _clean(data.rstrip(b"\x00"))

    if len(data) < 2 * WORD_SIZE:
        raise AbiDecodingError(f"Return data too short for a dynamic string ({len(data)} bytes)")

    length = int.from_bytes(data[WORD_SIZE:2 * WORD_SIZE], "big")
    if length < 1 or length > MAX_STRING_LENGTH:
        raise AbiDecodingError(f"String length {length} outside [1, {MAX_STRING_LENGTH}]")

    payload = data[2 * WORD_SIZE:2 * WORD_SIZE + length]
    if len(payload) < length:
        raise AbiDecodingError(f"String payload truncated: expected {length} bytes, got {len(payload)}")
    return _clean(payload)


def _clean(raw: bytes) -> str:
    return raw.decode("utf-8", errors="replace").replace("\x00", "").strip()


def encode_uint256(value: int) -> bytes:
    if value < 0:
        raise ValueError("uint256 cannot be negative")
    return value.to_bytes(WORD_SIZE, "big")


def encode_string(value: str) -> bytes:
    """Standard dynamic ABI encoding of a single ``string`` return value."""
    payload = value.encode("utf-8")
    padding = (-len(payload)) % WORD_SIZE
    return encode_uint256(WORD_SIZE) + encode_uint256(len(payload)) + payload + b"\x00" * padding


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


__all__ = [
    "SELECTORS",
    "ERC20_FIELDS",
    "MAX_STRING_LENGTH",
    "encode_call",
    "hex_to_bytes",
    "decode_uint256",
    "decode_string",
    "encode_uint256",
    "encode_string",
    "to_hex",
]
