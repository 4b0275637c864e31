"""
Merkle Proofs - Main verification module

This module contains the high-level verification functions shared by the CLI
and API interfaces. It wraps the core verifiers with result metadata and
reads proof documents from JSON files.

A proof document looks like::

    {
        "type": "indexed",
        "root": "0x...",
        "leaf": "0x...",
        "index": 5,
        "proof": ["0x...", "0x..."]
    }

``type`` is one of ``single``, ``indexed`` or ``multi``. Multiproof documents
carry ``leaves`` and ``flags`` instead of ``leaf`` and ``index``. A document
may give ``data`` (hex-encoded leaf data) instead of ``leaf``; it is hashed
with the leaf domain tag.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from .merkle import (
    hash_leaf,
    process_proof,
    process_proof_with_index,
    process_multi_proof,
    require_digest,
)
from .utils import hex_to_bytes, hex_to_digest, hex_list_to_digests

logger = logging.getLogger(__name__)

PROOF_TYPES = ("single", "indexed", "multi")


@dataclass
class VerificationResult:
    """Container for verification results."""
    valid: bool
    root: bytes
    computed_root: bytes
    metadata: Dict[str, Any] = field(default_factory=dict)


def verify_single(
    proof: Sequence[bytes],
    root: bytes,
    leaf: bytes,
    index: Optional[int] = None,
) -> VerificationResult:
    """
    Verify a single proof, using the indexed variant when index is given.

    Raises:
        MerkleProofError: If the proof data is malformed
    """
    root = require_digest(root, "root")
    if index is None:
        computed = process_proof(proof, leaf)
    else:
        computed = process_proof_with_index(proof, leaf, index)

    metadata = {
        "type": "single" if index is None else "indexed",
        "proof_length": len(proof),
        "leaf": f"0x{bytes(leaf).hex()}",
    }
    if index is not None:
        metadata["index"] = index

    return VerificationResult(computed == root, root, computed, metadata)


def verify_multi(
    proof: Sequence[bytes],
    root: bytes,
    leaves: Sequence[bytes],
    flags: Sequence[bool],
) -> VerificationResult:
    """
    Verify a multiproof.

    Raises:
        MerkleProofError: If the multiproof is malformed
    """
    root = require_digest(root, "root")
    computed = process_multi_proof(proof, leaves, flags)

    metadata = {
        "type": "multi",
        "proof_length": len(proof),
        "leaf_count": len(leaves),
        "flag_count": len(flags),
        "leaves": [f"0x{bytes(leaf).hex()}" for leaf in leaves],
    }

    return VerificationResult(computed == root, root, computed, metadata)


def _document_leaf(document: Dict[str, Any]) -> bytes:
    if document.get("leaf") is not None:
        return hex_to_digest(document["leaf"], "leaf")
    if document.get("data") is not None:
        return hash_leaf(hex_to_bytes(document["data"]))
    raise ValueError("Proof document needs either 'leaf' or 'data'")


def _document_index(document: Dict[str, Any]) -> int:
    if "index" not in document:
        raise ValueError("Indexed proof document needs an 'index'")
    index = document["index"]
    # Floats are rejected, never truncated
    if isinstance(index, bool) or not isinstance(index, int):
        raise ValueError(f"index must be an integer, got {index!r}")
    return index


def _parse_flags(flags: Sequence[Any]) -> List[bool]:
    if not isinstance(flags, list):
        raise ValueError(f"flags must be a list, got {type(flags).__name__}")
    parsed = []
    for i, flag in enumerate(flags):
        if isinstance(flag, bool):
            parsed.append(flag)
        elif isinstance(flag, int) and flag in (0, 1):
            parsed.append(bool(flag))
        else:
            raise ValueError(f"flags[{i}] must be a boolean, got {flag!r}")
    return parsed


def verify_proof_document(document: Dict[str, Any], root: Optional[bytes] = None) -> VerificationResult:
    """
    Verify a parsed proof document.

    Args:
        document: Proof document (see module docstring)
        root: Root overriding the document's own 'root' field

    Returns:
        VerificationResult for the document

    Raises:
        ValueError: If the document is missing fields or holds invalid hex
        MerkleProofError: If the proof data is malformed
    """
    if not isinstance(document, dict):
        raise ValueError(f"Proof document must be an object, got {type(document).__name__}")

    proof_type = document.get("type")
    if proof_type is None:
        proof_type = "multi" if "leaves" in document else ("indexed" if "index" in document else "single")
    if proof_type not in PROOF_TYPES:
        raise ValueError(f"Unknown proof type '{proof_type}', expected one of {', '.join(PROOF_TYPES)}")

    if root is None:
        if document.get("root") is None:
            raise ValueError("Proof document has no 'root' and none was supplied")
        root = hex_to_digest(document["root"], "root")

    proof = hex_list_to_digests(document.get("proof", []), "proof")

    if proof_type == "multi":
        leaves = hex_list_to_digests(document.get("leaves", []), "leaves")
        flags = _parse_flags(document.get("flags", []))
        return verify_multi(proof, root, leaves, flags)

    leaf = _document_leaf(document)
    if proof_type == "indexed":
        return verify_single(proof, root, leaf, _document_index(document))
    return verify_single(proof, root, leaf)


def load_proof_document(path: str) -> Dict[str, Any]:
    """Load a proof document from a JSON file."""
    with open(path, "r") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return document


def verify_proof_file(path: str, root: Optional[bytes] = None) -> VerificationResult:
    """Verify the proof document stored at path."""
    document = load_proof_document(path)
    result = verify_proof_document(document, root)
    logger.info(f"Verified {result.metadata['type']} proof from {path}: valid={result.valid}")
    return result
