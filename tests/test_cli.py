"""
Tests for the command-line interface.

Exit status is the contract for scripts: 0 valid, 1 invalid, 2 usage error,
3 malformed proof.
"""

import unittest
import sys
import os
import json
import tempfile
from unittest import mock

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))
sys.path.insert(0, os.path.dirname(__file__))

from click.testing import CliRunner

from merkle_proofs.cli import cli, parse_flags
from merkle_proofs.merkle import hash_leaf
from merkle_proofs.utils import bytes_to_hex
from tree_builder import (
    make_leaves,
    build_level_tree,
    level_proof,
    build_array_tree,
    array_proof,
    array_multiproof,
)


def proof_args(digests):
    args = []
    for digest in digests:
        args.extend(["-p", bytes_to_hex(digest)])
    return args


class CLITestCase(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.leaves = make_leaves(8)
        self.array_tree = build_array_tree(self.leaves)
        self.level_tree = build_level_tree(self.leaves)
        self.root = bytes_to_hex(self.array_tree[0])

    def invoke(self, args):
        return self.runner.invoke(cli, args, obj={})


class TestParseFlags(unittest.TestCase):

    def test_accepted_spellings(self):
        self.assertEqual(parse_flags("0,0,1"), [False, False, True])
        self.assertEqual(parse_flags("true, f ,T"), [True, False, True])
        self.assertEqual(parse_flags(""), [])

    def test_rejects_unknown_flag(self):
        import click
        with self.assertRaises(click.BadParameter):
            parse_flags("0,2")


class TestHashLeafCommand(CLITestCase):

    def test_hash_text(self):
        result = self.invoke(["hash-leaf", "--text", "leaf-3"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), bytes_to_hex(self.leaves[3]))

    def test_hash_hex(self):
        result = self.invoke(["hash-leaf", "0xdeadbeef"])
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.output.strip(), bytes_to_hex(hash_leaf(bytes.fromhex("deadbeef"))))

    def test_invalid_hex(self):
        result = self.invoke(["hash-leaf", "0xnothex"])
        self.assertEqual(result.exit_code, 1)


class TestVerifyCommand(CLITestCase):

    def test_valid_proof_json(self):
        args = ["verify", "--leaf", bytes_to_hex(self.leaves[6]), "--root", self.root, "--format", "json"]
        result = self.invoke(args + proof_args(array_proof(self.array_tree, 6)))
        self.assertEqual(result.exit_code, 0, result.output)
        body = json.loads(result.output)
        self.assertTrue(body["valid"])
        self.assertEqual(body["type"], "single")

    def test_invalid_proof_exits_one(self):
        args = ["verify", "--leaf", bytes_to_hex(self.leaves[5]), "--root", self.root]
        result = self.invoke(args + proof_args(array_proof(self.array_tree, 6)))
        self.assertEqual(result.exit_code, 1)

    def test_indexed_proof(self):
        root = bytes_to_hex(self.level_tree[-1][0])
        base = ["verify", "--leaf", bytes_to_hex(self.leaves[3]), "--root", root]
        proof = proof_args(level_proof(self.level_tree, 3))

        result = self.invoke(base + ["--index", "3", "--format", "detailed"] + proof)
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Proof Path", result.output)

        result = self.invoke(base + ["--index", "2"] + proof)
        self.assertEqual(result.exit_code, 1)

    def test_index_out_of_range_exits_three(self):
        root = bytes_to_hex(self.level_tree[-1][0])
        args = ["verify", "--leaf", bytes_to_hex(self.leaves[0]), "--root", root, "--index", "64"]
        result = self.invoke(args + proof_args(level_proof(self.level_tree, 0)))
        self.assertEqual(result.exit_code, 3)

    def test_short_digest_exits_three(self):
        result = self.invoke(["verify", "--leaf", "0x1234", "--root", self.root])
        self.assertEqual(result.exit_code, 3)

    def test_missing_root_is_usage_error(self):
        result = self.invoke(["verify", "--leaf", bytes_to_hex(self.leaves[0])])
        self.assertEqual(result.exit_code, 2)

    def test_onchain_root(self):
        with mock.patch("merkle_proofs.cli.OnchainRootReader") as reader_cls:
            reader_cls.return_value.get_root.return_value = self.array_tree[0]
            args = [
                "--contract", "0x" + "11" * 20,
                "verify", "--leaf", bytes_to_hex(self.leaves[1]), "--onchain", "--format", "json",
            ]
            result = self.invoke(args + proof_args(array_proof(self.array_tree, 1)))

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(json.loads(result.output)["valid"])
        self.assertEqual(reader_cls.call_args.kwargs["contract_address"], "0x" + "11" * 20)


class TestVerifyMultiCommand(CLITestCase):

    def _args(self, subset):
        proof, leaves, flags = array_multiproof(self.array_tree, subset)
        args = ["verify-multi", "--root", self.root]
        for leaf in leaves:
            args.extend(["-l", bytes_to_hex(leaf)])
        return args + proof_args(proof), flags

    def test_valid_multiproof(self):
        args, flags = self._args([0, 3, 7])
        flag_str = ",".join("1" if f else "0" for f in flags)
        result = self.invoke(args + ["--flags", flag_str, "--format", "json"])
        self.assertEqual(result.exit_code, 0, result.output)
        body = json.loads(result.output)
        self.assertTrue(body["valid"])
        self.assertEqual(body["metadata"]["leaf_count"], 3)

    def test_flag_mismatch_exits_three(self):
        args, flags = self._args([0, 3, 7])
        flag_str = ",".join("1" if f else "0" for f in flags[:-1])
        result = self.invoke(args + ["--flags", flag_str])
        self.assertEqual(result.exit_code, 3)

    def test_bad_flag_is_usage_error(self):
        args, _ = self._args([0, 3])
        result = self.invoke(args + ["--flags", "0,maybe"])
        self.assertEqual(result.exit_code, 2)


class TestVerifyFileCommand(CLITestCase):

    def setUp(self):
        super().setUp()
        self.temp_dir = tempfile.mkdtemp()

    def tearDown(self):
        import shutil
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def _write(self, document):
        path = os.path.join(self.temp_dir, "proof.json")
        with open(path, "w") as f:
            json.dump(document, f)
        return path

    def test_valid_file(self):
        path = self._write({
            "type": "single",
            "root": self.root,
            "leaf": bytes_to_hex(self.leaves[2]),
            "proof": [bytes_to_hex(d) for d in array_proof(self.array_tree, 2)],
        })
        result = self.invoke(["verify-file", path])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn("Single Proof Verification", result.output)

    def test_root_override_makes_file_invalid(self):
        path = self._write({
            "type": "single",
            "root": self.root,
            "leaf": bytes_to_hex(self.leaves[2]),
            "proof": [bytes_to_hex(d) for d in array_proof(self.array_tree, 2)],
        })
        other_root = bytes_to_hex(self.leaves[0])
        result = self.invoke(["verify-file", path, "--root", other_root])
        self.assertEqual(result.exit_code, 1)

    def test_mistyped_document_fields_fail_cleanly(self):
        proof = [bytes_to_hex(d) for d in array_proof(self.array_tree, 2)]
        for document in (
            {"type": "indexed", "root": self.root, "leaf": bytes_to_hex(self.leaves[2]),
             "index": None, "proof": proof},
            {"type": "single", "root": self.root, "leaf": 42, "proof": proof},
        ):
            result = self.invoke(["verify-file", self._write(document)])
            self.assertEqual(result.exit_code, 1, result.output)
            self.assertNotIsInstance(result.exception, (TypeError, AttributeError))

    def test_incomplete_document_fails(self):
        path = self._write({"type": "single", "root": self.root})
        result = self.invoke(["verify-file", path])
        self.assertEqual(result.exit_code, 1)
        self.assertIn("leaf", result.output)


if __name__ == '__main__':
    unittest.main()
