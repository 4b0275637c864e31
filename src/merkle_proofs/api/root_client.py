"""
On-chain Root Client

This module reads the trusted Merkle root from a contract over JSON-RPC. The
contract is expected to expose a zero-argument view function returning the
root as ``bytes32`` (``merkleRoot()`` by default).
"""

import os
import logging
from typing import Optional

import requests
from dotenv import load_dotenv
from web3 import Web3
from web3.exceptions import Web3Exception

from ..constants import DEFAULT_ROOT_SIGNATURE, HASH_SIZE, SELECTOR_SIZE

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


class RootSourceError(Exception):
    """Exception raised when the committed root cannot be read."""
    pass


class OnchainRootReader:
    """
    Client reading the committed root from a contract.

    Provides the root and a connectivity check, translating RPC failures into
    RootSourceError.
    """

    def __init__(
        self,
        rpc_url: Optional[str] = None,
        contract_address: Optional[str] = None,
        signature: Optional[str] = None,
        web3: Optional[Web3] = None,
    ):
        """
        Initialize the root reader.

        Args:
            rpc_url: JSON-RPC endpoint. If None, uses the MERKLE_RPC_URL env var.
            contract_address: Contract holding the root. If None, uses MERKLE_ROOT_CONTRACT.
            signature: View function returning the root. If None, uses
                MERKLE_ROOT_SIGNATURE or merkleRoot().
            web3: Preconfigured Web3 instance; rpc_url is ignored when given.
        """
        self.rpc_url = rpc_url or os.getenv('MERKLE_RPC_URL')
        contract_address = contract_address or os.getenv('MERKLE_ROOT_CONTRACT')
        self.signature = signature or os.getenv('MERKLE_ROOT_SIGNATURE', DEFAULT_ROOT_SIGNATURE)

        if not contract_address:
            raise ValueError("MERKLE_ROOT_CONTRACT environment variable is not set")
        if not Web3.is_address(contract_address):
            raise ValueError(f"Invalid contract address: {contract_address}")
        self.contract_address = Web3.to_checksum_address(contract_address)

        if web3 is None:
            if not self.rpc_url:
                raise ValueError("MERKLE_RPC_URL environment variable is not set")
            web3 = Web3(Web3.HTTPProvider(self.rpc_url, request_kwargs={'timeout': 30}))
        self.w3 = web3

        self.selector = bytes(Web3.keccak(text=self.signature))[:SELECTOR_SIZE]

        logger.info(
            f"Initialized OnchainRootReader for {self.contract_address}.{self.signature}"
        )

    def get_root(self, block_identifier: str = "latest") -> bytes:
        """
        Fetch the committed root.

        Args:
            block_identifier: Block to read at ("latest", "finalized" or a number)

        Returns:
            32-byte root

        Raises:
            RootSourceError: If the call fails or does not return a bytes32 value
        """
        try:
            logger.info(f"Reading root from {self.contract_address} at block {block_identifier}")
            result = self.w3.eth.call(
                {
                    'to': self.contract_address,
                    'data': '0x' + self.selector.hex(),
                },
                block_identifier,
            )
        except requests.ConnectionError as e:
            raise RootSourceError(
                f"Failed to connect to RPC endpoint at {self.rpc_url}. "
                f"Check that the node is reachable or pass --root explicitly. "
                f"Original error: {e}"
            )
        except requests.Timeout as e:
            raise RootSourceError(
                f"Timeout calling RPC endpoint at {self.rpc_url}. Original error: {e}"
            )
        except (Web3Exception, requests.RequestException, ValueError) as e:
            raise RootSourceError(
                f"Call to {self.contract_address}.{self.signature} failed: {e}"
            )

        result = bytes(result)
        if len(result) != HASH_SIZE:
            raise RootSourceError(
                f"Expected a {HASH_SIZE}-byte root from {self.signature}, got {len(result)} bytes"
            )

        logger.info(f"Read root 0x{result.hex()}")
        return result

    def health_check(self) -> bool:
        """
        Check if the RPC endpoint is reachable.

        Returns:
            True if connected, False otherwise
        """
        try:
            return bool(self.w3.is_connected())
        except Exception as e:
            logger.warning(f"RPC health check failed: {e}")
            return False
