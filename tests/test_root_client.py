"""
Tests for the On-chain Root Client

The Web3 instance is replaced with a mock, so no RPC endpoint is needed.
"""

import unittest
import sys
import os
from unittest import mock
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

import requests
from web3 import Web3
from web3.exceptions import Web3Exception

from merkle_proofs.api.root_client import OnchainRootReader, RootSourceError

CONTRACT = "0x" + "11" * 20
ROOT = bytes(range(32))


class TestOnchainRootReader(unittest.TestCase):

    def setUp(self):
        self.w3 = MagicMock()
        self.reader = OnchainRootReader(contract_address=CONTRACT, web3=self.w3)

    def test_default_selector(self):
        expected = bytes(Web3.keccak(text="merkleRoot()"))[:4]
        self.assertEqual(self.reader.selector, expected)
        self.assertEqual(self.reader.contract_address, Web3.to_checksum_address(CONTRACT))

    def test_custom_signature(self):
        reader = OnchainRootReader(
            contract_address=CONTRACT, signature="distributionRoot()", web3=self.w3
        )
        self.assertEqual(reader.selector, bytes(Web3.keccak(text="distributionRoot()"))[:4])

    def test_get_root_calls_contract(self):
        self.w3.eth.call.return_value = ROOT

        self.assertEqual(self.reader.get_root(), ROOT)

        call_args, block = self.w3.eth.call.call_args[0]
        self.assertEqual(call_args["to"], Web3.to_checksum_address(CONTRACT))
        self.assertEqual(call_args["data"], "0x" + self.reader.selector.hex())
        self.assertEqual(block, "latest")

    def test_get_root_at_block(self):
        self.w3.eth.call.return_value = ROOT
        self.reader.get_root("finalized")
        self.assertEqual(self.w3.eth.call.call_args[0][1], "finalized")

    def test_wrong_width_result_raises(self):
        self.w3.eth.call.return_value = b"\x01" * 64
        with self.assertRaises(RootSourceError):
            self.reader.get_root()

    def test_connection_error_raises(self):
        self.w3.eth.call.side_effect = requests.ConnectionError("refused")
        with self.assertRaises(RootSourceError) as ctx:
            self.reader.get_root()
        self.assertIn("Failed to connect", str(ctx.exception))

    def test_timeout_raises(self):
        self.w3.eth.call.side_effect = requests.Timeout("slow")
        with self.assertRaises(RootSourceError):
            self.reader.get_root()

    def test_web3_error_raises(self):
        self.w3.eth.call.side_effect = Web3Exception("execution reverted")
        with self.assertRaises(RootSourceError):
            self.reader.get_root()

    def test_health_check(self):
        self.w3.is_connected.return_value = True
        self.assertTrue(self.reader.health_check())

        self.w3.is_connected.side_effect = requests.ConnectionError("down")
        self.assertFalse(self.reader.health_check())


class TestOnchainRootReaderConfig(unittest.TestCase):

    def test_missing_contract_raises(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                OnchainRootReader(rpc_url="http://localhost:8545")

    def test_missing_rpc_url_raises(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            with self.assertRaises(ValueError):
                OnchainRootReader(contract_address=CONTRACT)

    def test_invalid_contract_raises(self):
        with self.assertRaises(ValueError):
            OnchainRootReader(contract_address="0x1234", web3=MagicMock())

    def test_reads_environment(self):
        env = {
            "MERKLE_RPC_URL": "http://localhost:8545",
            "MERKLE_ROOT_CONTRACT": CONTRACT,
            "MERKLE_ROOT_SIGNATURE": "root()",
        }
        with mock.patch.dict(os.environ, env, clear=True):
            reader = OnchainRootReader(web3=MagicMock())
        self.assertEqual(reader.rpc_url, "http://localhost:8545")
        self.assertEqual(reader.signature, "root()")
        self.assertEqual(reader.selector, bytes(Web3.keccak(text="root()"))[:4])


if __name__ == '__main__':
    unittest.main()
