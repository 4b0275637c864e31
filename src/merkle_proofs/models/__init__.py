"""
API Models Package

This package contains request and response models for the verification API.
It includes Pydantic models for validation and serialization of:

- Verification requests (single, indexed and multi proofs)
- Verification responses (verdict, roots, metadata)
- Leaf hashing, error and status models

Usage:
    from merkle_proofs.models import VerifyProofRequest, VerificationResponse

    request = VerifyProofRequest(proof=[...], leaf="0x...", root="0x...")
"""

from .api_models import (
    ErrorResponse,
    HealthResponse,
    HashLeafRequest,
    HashLeafResponse,
    VerifyProofRequest,
    VerifyIndexedProofRequest,
    VerifyMultiProofRequest,
    VerificationResponse,
)

__all__ = [
    'ErrorResponse',
    'HealthResponse',
    'HashLeafRequest',
    'HashLeafResponse',
    'VerifyProofRequest',
    'VerifyIndexedProofRequest',
    'VerifyMultiProofRequest',
    'VerificationResponse',
]
