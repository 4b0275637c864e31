"""
Hex String Utilities

This module provides helpers for moving digests between their byte form and
the 0x-prefixed hex strings used by JSON documents, the CLI and the REST API.
"""

from typing import List, Sequence

from ..constants import HASH_SIZE
from ..merkle.errors import InvalidDigestError

HEX_CHARS = "0123456789abcdefABCDEF"


def hex_to_bytes(hex_str: str) -> bytes:
    """
    Convert a hex string to bytes.

    Args:
        hex_str: Hex string (with or without '0x' prefix)

    Returns:
        Bytes representation of the hex string

    Raises:
        ValueError: If the value is not a string of valid hex

    Examples:
        >>> hex_to_bytes("0x1234")
        b'\\x124'
    """
    if not isinstance(hex_str, str):
        raise ValueError(f"Expected a hex string, got {type(hex_str).__name__}")

    if hex_str.startswith("0x"):
        hex_str = hex_str[2:]

    if not all(c in HEX_CHARS for c in hex_str):
        raise ValueError(f"Invalid hex string: {hex_str}")

    # Pad to even length
    if len(hex_str) % 2 == 1:
        hex_str = "0" + hex_str

    return bytes.fromhex(hex_str)


def bytes_to_hex(data: bytes, prefix: bool = True) -> str:
    """
    Convert bytes to a hex string.

    Examples:
        >>> bytes_to_hex(b'\\x12\\x34')
        '0x1234'
        >>> bytes_to_hex(b'\\x12\\x34', prefix=False)
        '1234'
    """
    hex_str = bytes(data).hex()
    return f"0x{hex_str}" if prefix else hex_str


def hex_to_digest(hex_str: str, name: str = "digest") -> bytes:
    """
    Convert a 0x-prefixed hex string to a 32-byte digest.

    Raises:
        ValueError: If the value is not a string of valid hex
        InvalidDigestError: If it does not decode to exactly 32 bytes
    """
    if not isinstance(hex_str, str):
        raise ValueError(f"{name} must be a hex string, got {type(hex_str).__name__}")
    data = hex_to_bytes(hex_str)
    if len(data) != HASH_SIZE:
        raise InvalidDigestError(
            f"{name} must be a {HASH_SIZE}-byte hex digest, got {len(data)} bytes"
        )
    return data


def hex_list_to_digests(values: Sequence[str], name: str = "proof") -> List[bytes]:
    """Convert a list of hex strings to digests, naming the offending position."""
    if not isinstance(values, (list, tuple)):
        raise ValueError(f"{name} must be a list of hex strings, got {type(values).__name__}")
    return [hex_to_digest(v, f"{name}[{i}]") for i, v in enumerate(values)]
