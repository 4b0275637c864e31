"""
Verification API Package

This package exposes proof verification to remote callers. It includes:

- OnchainRootReader: JSON-RPC client reading the committed root from a contract
- VerificationService: hex-level service used by the CLI and the REST API

Usage:
    from merkle_proofs.api import VerificationService

    service = VerificationService()
    result = service.verify(proof, leaf, root)
"""

from .root_client import OnchainRootReader, RootSourceError
from .proof_service import VerificationService, VerificationServiceError

__all__ = [
    'OnchainRootReader',
    'RootSourceError',
    'VerificationService',
    'VerificationServiceError',
]
