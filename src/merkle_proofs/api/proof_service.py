"""
Verification Service Module

This module provides a service layer between the hex-encoded outer interfaces
(CLI and REST API) and the verification functions from main.py.
"""

import logging
from typing import Any, Dict, List, Optional

from ..main import VerificationResult, verify_multi, verify_single
from ..merkle import MerkleProofError, hash_leaf
from ..utils import bytes_to_hex, hex_to_bytes, hex_to_digest, hex_list_to_digests
from .root_client import OnchainRootReader

logger = logging.getLogger(__name__)


class VerificationServiceError(Exception):
    """Custom exception for verification service operations."""
    pass


class VerificationService:
    """Service for verifying hex-encoded proofs."""

    def __init__(self, root_reader: Optional[OnchainRootReader] = None):
        """
        Initialize the verification service.

        Args:
            root_reader: OnchainRootReader instance. If None, a new reader will
                only be created when a request omits the root.
        """
        self.root_reader = root_reader

    def resolve_root(self, root: Optional[str]) -> bytes:
        """
        Return the root to verify against.

        Args:
            root: Hex root supplied by the caller, or None to read it on-chain

        Raises:
            VerificationServiceError: If no root is given and no on-chain source is configured
            RootSourceError: If the on-chain read fails
        """
        if root is not None:
            return self._digest(root, "root")

        if not self.root_reader:
            try:
                self.root_reader = OnchainRootReader()
            except ValueError as e:
                raise VerificationServiceError(
                    f"No root supplied and no on-chain root source configured: {e}"
                )
        return self.root_reader.get_root()

    @staticmethod
    def _digest(value: str, name: str) -> bytes:
        try:
            return hex_to_digest(value, name)
        except MerkleProofError:
            raise
        except ValueError as e:
            raise VerificationServiceError(f"Invalid {name}: {e}")

    @staticmethod
    def _digests(values: List[str], name: str) -> List[bytes]:
        try:
            return hex_list_to_digests(values, name)
        except MerkleProofError:
            raise
        except ValueError as e:
            raise VerificationServiceError(f"Invalid {name}: {e}")

    def hash_leaf(self, data: str, text: bool = False) -> Dict[str, Any]:
        """
        Hash leaf data with the leaf domain tag.

        Args:
            data: Hex-encoded data, or UTF-8 text when text is True

        Returns:
            Dictionary with the data length and the leaf digest
        """
        if text:
            raw = data.encode("utf-8")
        else:
            try:
                raw = hex_to_bytes(data)
            except ValueError as e:
                raise VerificationServiceError(f"Invalid data: {e}")
        return {"leaf": bytes_to_hex(hash_leaf(raw)), "data_length": len(raw)}

    def verify(
        self,
        proof: List[str],
        leaf: str,
        root: Optional[str] = None,
        index: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Verify a single proof, indexed when index is given.

        Returns:
            Dictionary with the verdict, both roots and metadata

        Raises:
            VerificationServiceError: If the request data cannot be decoded
            MerkleProofError: If the proof is structurally malformed
            RootSourceError: If the root has to be read on-chain and that fails
        """
        proof_bytes = self._digests(proof, "proof")
        leaf_bytes = self._digest(leaf, "leaf")
        root_bytes = self.resolve_root(root)

        result = verify_single(proof_bytes, root_bytes, leaf_bytes, index)
        logger.info(
            f"Verified {result.metadata['type']} proof for leaf {leaf}: valid={result.valid}"
        )
        return self._format(result, root_source="request" if root is not None else "onchain")

    def verify_multi(
        self,
        proof: List[str],
        leaves: List[str],
        flags: List[bool],
        root: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Verify a multiproof.

        Raises:
            VerificationServiceError: If the request data cannot be decoded
            MerkleProofError: If the multiproof is structurally malformed
            RootSourceError: If the root has to be read on-chain and that fails
        """
        proof_bytes = self._digests(proof, "proof")
        leaf_bytes = self._digests(leaves, "leaves")
        root_bytes = self.resolve_root(root)

        result = verify_multi(proof_bytes, root_bytes, leaf_bytes, flags)
        logger.info(f"Verified multiproof for {len(leaves)} leaves: valid={result.valid}")
        return self._format(result, root_source="request" if root is not None else "onchain")

    @staticmethod
    def _format(result: VerificationResult, root_source: str) -> Dict[str, Any]:
        metadata = dict(result.metadata)
        metadata["root_source"] = root_source
        return {
            "valid": result.valid,
            "root": bytes_to_hex(result.root),
            "computed_root": bytes_to_hex(result.computed_root),
            "type": metadata.pop("type"),
            "metadata": metadata,
        }
