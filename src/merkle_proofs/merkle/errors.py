"""
Structural errors raised by the proof verifiers.

A failed membership check is reported as ``False``. The exceptions below mean
the proof data itself is malformed and must not be read as "not a member".
"""


class MerkleProofError(ValueError):
    """Base class for malformed proof input."""
    pass


class InvalidDigestError(MerkleProofError):
    """Raised when a leaf, root or proof element is not a 32-byte digest."""
    pass


class InvalidIndexError(MerkleProofError):
    """Raised when a leaf index cannot be addressed by the proof depth."""
    pass


class InvalidMultiProofError(MerkleProofError):
    """Raised when a multiproof's shape does not describe a tree reduction."""
    pass
