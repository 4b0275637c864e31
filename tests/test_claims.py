"""
Tests for Claim Bookkeeping

This module checks claim leaf encoding, the claimed-index bitmap and the
verify-then-mark claim flow.
"""

import unittest
import sys
import os
import threading

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))

from eth_abi import encode

from merkle_proofs.claims import AlreadyClaimedError, ClaimBitmap, claim, encode_claim_leaf
from merkle_proofs.merkle import hash_leaf
from tree_builder import build_array_tree, array_proof

ACCOUNTS = [
    "0x" + "11" * 20,
    "0x" + "22" * 20,
    "0x" + "33" * 20,
    "0x" + "44" * 20,
    "0x" + "55" * 20,
]
AMOUNTS = [100, 250, 10**18, 7, 42]


class TestClaimLeaf(unittest.TestCase):

    def test_leaf_is_tagged_hash_of_abi_encoding(self):
        expected = hash_leaf(encode(["uint256", "address", "uint256"], [3, ACCOUNTS[0], 500]))
        self.assertEqual(encode_claim_leaf(3, ACCOUNTS[0], 500), expected)

    def test_every_field_changes_the_leaf(self):
        base = encode_claim_leaf(0, ACCOUNTS[0], 100)
        self.assertNotEqual(base, encode_claim_leaf(1, ACCOUNTS[0], 100))
        self.assertNotEqual(base, encode_claim_leaf(0, ACCOUNTS[1], 100))
        self.assertNotEqual(base, encode_claim_leaf(0, ACCOUNTS[0], 101))


class TestClaimBitmap(unittest.TestCase):

    def test_set_and_check(self):
        bitmap = ClaimBitmap()
        self.assertFalse(bitmap.is_claimed(5))
        bitmap.set_claimed(5)
        self.assertTrue(bitmap.is_claimed(5))
        self.assertFalse(bitmap.is_claimed(4))
        self.assertEqual(bitmap.claimed_count, 1)

    def test_second_claim_raises(self):
        bitmap = ClaimBitmap()
        bitmap.set_claimed(9)
        with self.assertRaises(AlreadyClaimedError):
            bitmap.set_claimed(9)
        self.assertEqual(bitmap.claimed_count, 1)

    def test_grows_across_words(self):
        bitmap = ClaimBitmap()
        bitmap.set_claimed(255)
        bitmap.set_claimed(256)
        bitmap.set_claimed(1000)
        self.assertEqual(len(bitmap.words), 4)
        self.assertEqual(bitmap.words[0], 1 << 255)
        self.assertEqual(bitmap.words[1], 1)
        self.assertTrue(bitmap.is_claimed(1000))
        self.assertFalse(bitmap.is_claimed(10**6))

    def test_negative_index_raises(self):
        with self.assertRaises(ValueError):
            ClaimBitmap().set_claimed(-1)

    def test_concurrent_claims_set_the_bit_once(self):
        bitmap = ClaimBitmap()
        successes = []
        failures = []

        def worker():
            try:
                bitmap.set_claimed(77)
                successes.append(True)
            except AlreadyClaimedError:
                failures.append(True)

        threads = [threading.Thread(target=worker) for _ in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertEqual(len(successes), 1)
        self.assertEqual(len(failures), 15)


class TestClaimFlow(unittest.TestCase):

    def setUp(self):
        self.leaves = [
            encode_claim_leaf(i, account, amount)
            for i, (account, amount) in enumerate(zip(ACCOUNTS, AMOUNTS))
        ]
        self.tree = build_array_tree(self.leaves)
        self.root = self.tree[0]
        self.bitmap = ClaimBitmap()

    def test_valid_claim_marks_index(self):
        proof = array_proof(self.tree, 2)
        self.assertTrue(claim(self.bitmap, self.root, 2, ACCOUNTS[2], AMOUNTS[2], proof))
        self.assertTrue(self.bitmap.is_claimed(2))

    def test_double_claim_raises(self):
        proof = array_proof(self.tree, 1)
        claim(self.bitmap, self.root, 1, ACCOUNTS[1], AMOUNTS[1], proof)
        with self.assertRaises(AlreadyClaimedError):
            claim(self.bitmap, self.root, 1, ACCOUNTS[1], AMOUNTS[1], proof)

    def test_wrong_amount_is_rejected_without_marking(self):
        proof = array_proof(self.tree, 0)
        self.assertFalse(claim(self.bitmap, self.root, 0, ACCOUNTS[0], AMOUNTS[0] + 1, proof))
        self.assertFalse(self.bitmap.is_claimed(0))
        self.assertEqual(self.bitmap.claimed_count, 0)

    def test_wrong_index_is_rejected(self):
        proof = array_proof(self.tree, 3)
        self.assertFalse(claim(self.bitmap, self.root, 4, ACCOUNTS[3], AMOUNTS[3], proof))
        self.assertFalse(self.bitmap.is_claimed(4))


if __name__ == '__main__':
    unittest.main()
