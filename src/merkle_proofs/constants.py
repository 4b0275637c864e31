"""
Merkle Proof Constants

This module contains the constants shared by the hashing scheme, the
verifiers and the outer service layers.
"""

# ====================
# Digest Constants
# ====================

# Width of every digest handled by the verifiers (keccak-256 output)
HASH_SIZE = 32

# ====================
# Domain Separation Tags
# ====================

# Prepended to application data before hashing a leaf
LEAF_PREFIX = b"\x00"

# Prepended to the two children before hashing an internal node
NODE_PREFIX = b"\x01"

# ====================
# On-chain Root Source
# ====================

# Default zero-argument view function returning the committed root
DEFAULT_ROOT_SIGNATURE = "merkleRoot()"

# Width of an ABI function selector
SELECTOR_SIZE = 4

# ====================
# Claim Bitmap
# ====================

# Bits per bitmap word, matching a uint256 storage slot
BITMAP_WORD_SIZE = 256
