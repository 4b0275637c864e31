"""
Claim Bookkeeping

Reference collaborator for distribution systems built on the verifiers. It
encodes claim leaves the way the distributing contract does, and tracks which
indices were already claimed in a growable bitmap so a valid proof can only be
used once.

Transferring value and managing the root are left to the caller.
"""

import logging
import threading
from typing import List, Sequence

from eth_abi import encode

from .constants import BITMAP_WORD_SIZE
from .merkle import hash_leaf, verify

logger = logging.getLogger(__name__)


class AlreadyClaimedError(Exception):
    """Raised when an index is claimed a second time."""
    pass


def encode_claim_leaf(index: int, account: str, amount: int) -> bytes:
    """
    Build the leaf digest for a distribution entry.

    The entry is ABI-encoded as (uint256 index, address account, uint256 amount)
    and hashed with the leaf domain tag.

    Args:
        index: Position of the entry in the distribution
        account: Recipient address (hex string)
        amount: Amount owed to the recipient

    Returns:
        32-byte leaf digest
    """
    return hash_leaf(encode(["uint256", "address", "uint256"], [index, account, amount]))


class ClaimBitmap:
    """
    Growable bit-set of claimed indices.

    Bits are packed into 256-bit words, one word per ``index // 256``, matching
    the storage layout of an on-chain ``mapping(uint256 => uint256)``.
    """

    def __init__(self):
        self._words: List[int] = []
        self._count = 0
        self._lock = threading.Lock()

    @staticmethod
    def _locate(index: int):
        if index < 0:
            raise ValueError(f"Claim index must be non-negative, got {index}")
        return divmod(index, BITMAP_WORD_SIZE)

    def is_claimed(self, index: int) -> bool:
        """Return True if index has been claimed."""
        word_index, bit_index = self._locate(index)
        with self._lock:
            if word_index >= len(self._words):
                return False
            return bool(self._words[word_index] >> bit_index & 1)

    def set_claimed(self, index: int) -> None:
        """
        Mark index as claimed.

        Raises:
            AlreadyClaimedError: If the bit is already set
        """
        word_index, bit_index = self._locate(index)
        with self._lock:
            if word_index >= len(self._words):
                self._words.extend([0] * (word_index + 1 - len(self._words)))
            mask = 1 << bit_index
            if self._words[word_index] & mask:
                raise AlreadyClaimedError(f"Index {index} already claimed")
            self._words[word_index] |= mask
            self._count += 1

    @property
    def claimed_count(self) -> int:
        return self._count

    @property
    def words(self) -> List[int]:
        """Snapshot of the backing words."""
        with self._lock:
            return list(self._words)


def claim(
    bitmap: ClaimBitmap,
    root: bytes,
    index: int,
    account: str,
    amount: int,
    proof: Sequence[bytes],
) -> bool:
    """
    Verify a distribution entry and mark it claimed.

    Returns False, leaving the bitmap untouched, when the proof does not match
    root. Raises AlreadyClaimedError when the entry was claimed before.
    """
    if bitmap.is_claimed(index):
        raise AlreadyClaimedError(f"Index {index} already claimed")

    leaf = encode_claim_leaf(index, account, amount)
    if not verify(proof, root, leaf):
        logger.info(f"Rejected claim for index {index}: proof does not match root")
        return False

    bitmap.set_claimed(index)
    logger.info(f"Claimed index {index} for {account} (amount {amount})")
    return True
