"""
Merkle Proofs

Membership-proof verification against a committed Merkle root: domain-separated
hashing, single proofs (commutative and index-ordered) and multiproofs.

Usage:
    from merkle_proofs import hash_leaf, verify, verify_with_index

    leaf = hash_leaf(b"alice")
    assert verify(proof, root, leaf)
"""

__version__ = "0.1.0"

from .merkle import (
    hash_leaf,
    combine,
    combine_unordered,
    process_proof,
    verify,
    process_proof_with_index,
    verify_with_index,
    compute_path,
    batch_verify,
    MultiProof,
    process_multi_proof,
    verify_multi_proof,
    MerkleProofError,
    InvalidDigestError,
    InvalidIndexError,
    InvalidMultiProofError,
)
from .main import VerificationResult, verify_proof_document, verify_proof_file

__all__ = [
    "__version__",
    "hash_leaf",
    "combine",
    "combine_unordered",
    "process_proof",
    "verify",
    "process_proof_with_index",
    "verify_with_index",
    "compute_path",
    "batch_verify",
    "MultiProof",
    "process_multi_proof",
    "verify_multi_proof",
    "MerkleProofError",
    "InvalidDigestError",
    "InvalidIndexError",
    "InvalidMultiProofError",
    "VerificationResult",
    "verify_proof_document",
    "verify_proof_file",
]
