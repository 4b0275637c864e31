"""
Single Merkle Proof Verification

This module folds a leaf digest with its sibling path to rebuild a candidate
root. Two combination modes are provided:

- unordered: siblings are combined commutatively, so proofs carry no
  left/right information
- indexed: the leaf position decides the operand order at every level, which
  authenticates the position as well as the membership
"""

from typing import List, Optional, Sequence

from .errors import InvalidIndexError
from .hashing import combine, combine_unordered, require_digest, require_digests


def process_proof(proof: Sequence[bytes], leaf: bytes) -> bytes:
    """
    Rebuild the root implied by a leaf and its commutative proof.

    Args:
        proof: Sibling digests ordered from the leaf up to the root
        leaf: Leaf digest

    Returns:
        The reconstructed 32-byte root

    Raises:
        InvalidDigestError: If the leaf or any proof element is not 32 bytes
    """
    computed = require_digest(leaf, "leaf")
    for sibling in require_digests(proof):
        computed = combine_unordered(computed, sibling)
    return computed


def verify(proof: Sequence[bytes], root: bytes, leaf: bytes) -> bool:
    """
    Verify that leaf is part of the tree committed to by root.

    An empty proof is valid exactly when the leaf is the root.

    Examples:
        >>> verify([sibling], root, leaf)  # doctest: +SKIP
        True
    """
    root = require_digest(root, "root")
    return process_proof(proof, leaf) == root


def _check_index(index: int, depth: int) -> None:
    if isinstance(index, bool) or not isinstance(index, int):
        raise InvalidIndexError(f"index must be an integer, got {type(index).__name__}")
    if index < 0:
        raise InvalidIndexError(f"index must be non-negative, got {index}")
    # Bits above the proof depth would never be read
    if index >> depth:
        raise InvalidIndexError(
            f"index {index} out of range for a proof of depth {depth} "
            f"(max: {(1 << depth) - 1})"
        )


def process_proof_with_index(proof: Sequence[bytes], leaf: bytes, index: int) -> bytes:
    """
    Rebuild the root implied by a leaf at a given position.

    At each level an even index puts the running hash on the left and the
    sibling on the right; an odd index swaps them. The index is halved when
    ascending a level.

    Args:
        proof: Sibling digests ordered from the leaf up to the root
        leaf: Leaf digest
        index: 0-based position of the leaf at the base level

    Returns:
        The reconstructed 32-byte root

    Raises:
        InvalidDigestError: If the leaf or any proof element is not 32 bytes
        InvalidIndexError: If index is negative or needs more levels than the proof has
    """
    siblings = require_digests(proof)
    _check_index(index, len(siblings))

    computed = require_digest(leaf, "leaf")
    for sibling in siblings:
        if index % 2 == 0:
            computed = combine(computed, sibling)  # Node is left
        else:
            computed = combine(sibling, computed)  # Node is right
        index //= 2
    return computed


def verify_with_index(proof: Sequence[bytes], root: bytes, leaf: bytes, index: int) -> bool:
    """
    Verify that leaf sits at position index of the tree committed to by root.

    Examples:
        >>> verify_with_index(proof, root, leaf, 5)  # doctest: +SKIP
        True
    """
    root = require_digest(root, "root")
    return process_proof_with_index(proof, leaf, index) == root


def compute_path(proof: Sequence[bytes], leaf: bytes, index: Optional[int] = None) -> List[bytes]:
    """
    Return every digest on the path from the leaf to the root.

    The first element is the leaf and the last one is the candidate root.
    Without an index the commutative combination is used.
    """
    siblings = require_digests(proof)
    if index is not None:
        _check_index(index, len(siblings))

    path = [require_digest(leaf, "leaf")]
    for sibling in siblings:
        if index is None:
            path.append(combine_unordered(path[-1], sibling))
        else:
            if index % 2 == 0:
                path.append(combine(path[-1], sibling))
            else:
                path.append(combine(sibling, path[-1]))
            index //= 2
    return path


def batch_verify(
    leaves: Sequence[bytes],
    proofs: Sequence[Sequence[bytes]],
    root: bytes,
    indices: Optional[Sequence[int]] = None,
) -> List[bool]:
    """
    Verify several independent proofs against the same root.

    Args:
        leaves: Leaf digests being proven
        proofs: One proof per leaf
        root: Expected root
        indices: Optional leaf positions; when given the indexed variant is used

    Returns:
        List of boolean results, one per leaf
    """
    if len(leaves) != len(proofs):
        raise ValueError(f"Got {len(leaves)} leaves but {len(proofs)} proofs")
    if indices is not None and len(indices) != len(leaves):
        raise ValueError(f"Got {len(leaves)} leaves but {len(indices)} indices")

    results = []
    for i, (leaf, proof) in enumerate(zip(leaves, proofs)):
        if indices is None:
            results.append(verify(proof, root, leaf))
        else:
            results.append(verify_with_index(proof, root, leaf, indices[i]))
    return results
