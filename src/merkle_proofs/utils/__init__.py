"""
Utility Functions

This package provides hex string helpers used by the CLI, the REST API and the
proof document loader.
"""

from .hex_helpers import (
    hex_to_bytes,
    bytes_to_hex,
    hex_to_digest,
    hex_list_to_digests,
)

__all__ = [
    'hex_to_bytes',
    'bytes_to_hex',
    'hex_to_digest',
    'hex_list_to_digests',
]
