"""
Merkle Multiproof Verification

A multiproof proves several leaves at once. Internal hashes shared between the
leaves' paths are computed once and reused, so only the siblings that cannot
be derived from the batch itself travel in the proof.

The flag sequence drives the reconstruction. Each flag describes one
reduction step: the first operand always comes from the batch (remaining
leaves first, then hashes computed by earlier steps); the second operand
comes from the batch when the flag is set and from the proof otherwise.
"""

from dataclasses import dataclass, field
from typing import List, Sequence

from .errors import InvalidMultiProofError
from .hashing import combine_unordered, require_digest, require_digests


@dataclass
class MultiProof:
    """Container for a multiproof: sibling hashes, proven leaves and step flags."""
    proof: List[bytes] = field(default_factory=list)
    leaves: List[bytes] = field(default_factory=list)
    flags: List[bool] = field(default_factory=list)

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        """
        Check the structural invariant len(flags) == len(leaves) + len(proof) - 1.

        Raises:
            InvalidMultiProofError: If a flag is not a bool or the lengths do not
                describe a tree reduction
        """
        for i, flag in enumerate(self.flags):
            if not isinstance(flag, bool):
                raise InvalidMultiProofError(
                    f"flags[{i}] must be a bool, got {type(flag).__name__}"
                )
        expected = len(self.leaves) + len(self.proof) - 1
        if len(self.flags) != expected:
            raise InvalidMultiProofError(
                f"Invalid multiproof: {len(self.flags)} flags for {len(self.leaves)} leaves "
                f"and {len(self.proof)} proof hashes (expected {expected} flags)"
            )

    def process(self) -> bytes:
        """Rebuild the root committed to by this multiproof."""
        return process_multi_proof(self.proof, self.leaves, self.flags)

    def verify(self, root: bytes) -> bool:
        """Check this multiproof against root."""
        return verify_multi_proof(self.proof, root, self.leaves, self.flags)


def process_multi_proof(
    proof: Sequence[bytes], leaves: Sequence[bytes], flags: Sequence[bool]
) -> bytes:
    """
    Rebuild the root implied by a set of leaves and their shared proof.

    Args:
        proof: Sibling hashes not derivable from the leaves, in consumption order
        leaves: Leaf digests, in the order used when the multiproof was generated
        flags: One flag per reduction step; True takes the second operand from
            the batch, False takes it from the proof

    Returns:
        The reconstructed 32-byte root

    Raises:
        InvalidDigestError: If any leaf or proof element is not 32 bytes
        InvalidMultiProofError: If a flag is not a bool, if the lengths are
            inconsistent, or if a step reads past the end of its source
    """
    multiproof = MultiProof(
        proof=require_digests(proof, "proof"),
        leaves=require_digests(leaves, "leaves"),
        flags=list(flags),
    )

    leaves = multiproof.leaves
    proof = multiproof.proof
    flags = multiproof.flags

    if not flags:
        # A lone leaf is its own root; with no leaves the proof carries the root
        return leaves[0] if leaves else proof[0]

    hashes: List[bytes] = []
    leaf_pos = 0
    hash_pos = 0
    proof_pos = 0

    def next_from_batch(step: int) -> bytes:
        nonlocal leaf_pos, hash_pos
        if leaf_pos < len(leaves):
            leaf_pos += 1
            return leaves[leaf_pos - 1]
        # Only hashes produced by earlier steps can be consumed
        if hash_pos < len(hashes):
            hash_pos += 1
            return hashes[hash_pos - 1]
        raise InvalidMultiProofError(
            f"Invalid multiproof: step {step} has no leaf or computed hash left to consume"
        )

    for i, flag in enumerate(flags):
        a = next_from_batch(i)
        if flag:
            b = next_from_batch(i)
        else:
            if proof_pos >= len(proof):
                raise InvalidMultiProofError(
                    f"Invalid multiproof: step {i} needs a proof hash but all "
                    f"{len(proof)} were consumed"
                )
            b = proof[proof_pos]
            proof_pos += 1
        hashes.append(combine_unordered(a, b))

    if proof_pos != len(proof):
        raise InvalidMultiProofError(
            f"Invalid multiproof: {len(proof) - proof_pos} proof hashes left unused"
        )

    return hashes[-1]


def verify_multi_proof(
    proof: Sequence[bytes],
    root: bytes,
    leaves: Sequence[bytes],
    flags: Sequence[bool],
) -> bool:
    """
    Verify that every leaf is part of the tree committed to by root.

    A wrong root, a wrong leaf order or a tampered hash yields False. A
    structurally malformed multiproof raises instead.

    Examples:
        >>> verify_multi_proof([b_hash, d_hash], root, [a, c], [False, False, True])  # doctest: +SKIP
        True
    """
    root = require_digest(root, "root")
    return process_multi_proof(proof, leaves, flags) == root
