"""
Merkle Proof Verification

This package provides membership-proof verification against a committed root.

The module is organized into four components:
- hashing: Domain-separated leaf and internal-node hashing
- proof: Single proof verification (unordered and index-ordered)
- multiproof: Simultaneous verification of several leaves
- errors: Structural errors for malformed proof data
"""

# Hashing scheme
from .hashing import (
    hash_leaf,
    combine,
    combine_unordered,
    is_digest,
    require_digest,
    require_digests,
)

# Single proofs
from .proof import (
    process_proof,
    verify,
    process_proof_with_index,
    verify_with_index,
    compute_path,
    batch_verify,
)

# Multiproofs
from .multiproof import (
    MultiProof,
    process_multi_proof,
    verify_multi_proof,
)

# Errors
from .errors import (
    MerkleProofError,
    InvalidDigestError,
    InvalidIndexError,
    InvalidMultiProofError,
)

__all__ = [
    # Hashing
    "hash_leaf",
    "combine",
    "combine_unordered",
    "is_digest",
    "require_digest",
    "require_digests",
    # Single proofs
    "process_proof",
    "verify",
    "process_proof_with_index",
    "verify_with_index",
    "compute_path",
    "batch_verify",
    # Multiproofs
    "MultiProof",
    "process_multi_proof",
    "verify_multi_proof",
    # Errors
    "MerkleProofError",
    "InvalidDigestError",
    "InvalidIndexError",
    "InvalidMultiProofError",
]
