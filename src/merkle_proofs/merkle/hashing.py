"""
Domain-Separated Hashing

This module implements the hashing scheme shared by every verifier. Leaves and
internal nodes are hashed with distinct tag bytes, so a 64-byte leaf can never
be presented as the concatenation of two child digests.

The hash primitive is keccak-256, matching on-chain verification.
"""

from typing import Any, Iterable, List

from eth_utils import keccak

from ..constants import HASH_SIZE, LEAF_PREFIX, NODE_PREFIX
from .errors import InvalidDigestError


def hash_leaf(data: bytes) -> bytes:
    """
    Hash application data into a leaf digest.

    Args:
        data: Encoded leaf data of any length

    Returns:
        32-byte keccak256(LEAF_PREFIX || data)

    Examples:
        >>> hash_leaf(b"alice").hex()  # doctest: +SKIP
    """
    return keccak(LEAF_PREFIX + data)


def combine(a: bytes, b: bytes) -> bytes:
    """
    Hash two child digests into their parent, keeping operand order.

    Args:
        a: Left child digest
        b: Right child digest

    Returns:
        32-byte keccak256(NODE_PREFIX || a || b)
    """
    return keccak(NODE_PREFIX + a + b)


def combine_unordered(a: bytes, b: bytes) -> bytes:
    """
    Hash two child digests into their parent regardless of operand order.

    The numerically smaller digest goes first. Digests are fixed-width and
    big-endian, so byte-wise comparison is numeric comparison.
    """
    if a < b:
        return combine(a, b)
    return combine(b, a)


def is_digest(value: Any) -> bool:
    """Return True if value is a 32-byte digest."""
    return isinstance(value, (bytes, bytearray)) and len(value) == HASH_SIZE


def require_digest(value: Any, name: str = "digest") -> bytes:
    """
    Check that value is a 32-byte digest and return it as bytes.

    Raises:
        InvalidDigestError: If value has the wrong type or width
    """
    if not is_digest(value):
        width = len(value) if isinstance(value, (bytes, bytearray)) else None
        raise InvalidDigestError(
            f"{name} must be a {HASH_SIZE}-byte digest, got "
            f"{type(value).__name__} of length {width}"
        )
    return bytes(value)


def require_digests(values: Iterable[Any], name: str = "proof") -> List[bytes]:
    """Check every element of a digest sequence, naming the offending position."""
    return [require_digest(v, f"{name}[{i}]") for i, v in enumerate(values)]
