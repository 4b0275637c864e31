"""
API Models

This module defines Pydantic models for API request and response validation.
Digests travel as 0x-prefixed hex strings.
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import datetime, timezone

from ..constants import HASH_SIZE

EXAMPLE_ROOT = "0x84c7e6c2ad2a9bd49fce4e73a0e4c1ee6d7bb4f1f3e80f2ad7f1d16b4c3cf0a9"


def _check_hex(value: str, name: str) -> str:
    if not isinstance(value, str) or not value.startswith('0x'):
        raise ValueError(f"{name} must be a hex string starting with '0x'")
    if not all(c in "0123456789abcdefABCDEF" for c in value[2:]):
        raise ValueError(f"{name} contains non-hex characters")
    return value


def _check_digest(value: str, name: str) -> str:
    _check_hex(value, name)
    if len(value) != 2 + HASH_SIZE * 2:
        raise ValueError(f"{name} must be a {HASH_SIZE}-byte hex string starting with '0x'")
    return value


class ErrorResponse(BaseModel):
    """
    Response model for API errors.

    Attributes:
        error: Error message
        code: Error code (string identifier)
        details: Additional error details
    """
    error: str = Field(..., description="Error message")
    code: str = Field(..., description="Error code")
    details: Optional[dict] = Field(default=None, description="Additional error details")


class HealthResponse(BaseModel):
    """
    Response model for health check endpoint.

    Attributes:
        status: Service status
        root_source: Whether an on-chain root source is configured and reachable
        version: Service version
        timestamp: Response timestamp
    """
    status: str = Field(..., description="Service status")
    root_source: bool = Field(..., description="On-chain root source connectivity")
    version: str = Field(default="0.1.0", description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class HashLeafRequest(BaseModel):
    """
    Request model for leaf hashing.

    Attributes:
        data: Leaf data, hex encoded unless text is set
        text: Treat data as UTF-8 text
    """
    data: str = Field(..., description="Leaf data (hex string with 0x prefix, or text)")
    text: bool = Field(default=False, description="Interpret data as UTF-8 text")


class HashLeafResponse(BaseModel):
    """Response model for leaf hashing."""
    leaf: str = Field(..., description="Leaf digest as hex string")
    data_length: int = Field(..., description="Number of data bytes hashed")


class VerifyProofRequest(BaseModel):
    """
    Request model for single proof verification.

    Attributes:
        proof: Sibling digests from the leaf up to the root
        leaf: Leaf digest
        root: Root to verify against; read on-chain when omitted
    """
    proof: List[str] = Field(default_factory=list, description="Proof digests as hex strings")
    leaf: str = Field(..., description="Leaf digest (32-byte hex string)")
    root: Optional[str] = Field(default=None, description="Root digest; read on-chain if omitted")

    @field_validator('proof')
    @classmethod
    def validate_proof(cls, v):
        """Validate proof steps are 32-byte hex strings."""
        for i, step in enumerate(v):
            _check_digest(step, f"proof[{i}]")
        return v

    @field_validator('leaf')
    @classmethod
    def validate_leaf(cls, v):
        return _check_digest(v, "leaf")

    @field_validator('root')
    @classmethod
    def validate_root(cls, v):
        if v is not None:
            _check_digest(v, "root")
        return v

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "proof": [
                "0x5b1f7e4c3a1d0c2b8e9f6a7d4c3b2a1908f7e6d5c4b3a29180f7e6d5c4b3a291",
                "0x0d4c6a8f1e3b5d7c9a2f4e6b8d0c1a3e5f7b9d1c3e5a7f9b1d3c5e7a9f1b3d5c",
            ],
            "leaf": "0x3ac225168df54212a25c1c01fd35bebfea408fdac2e31ddd6f80a4bbf9a5f1cb",
            "root": EXAMPLE_ROOT,
        }
    })


class VerifyIndexedProofRequest(VerifyProofRequest):
    """
    Request model for position-aware proof verification.

    Attributes:
        index: 0-based position of the leaf at the base level
    """
    index: int = Field(..., ge=0, description="Leaf index")


class VerifyMultiProofRequest(BaseModel):
    """
    Request model for multiproof verification.

    Attributes:
        proof: Sibling digests not derivable from the leaves
        leaves: Leaf digests in the order used to build the multiproof
        flags: One flag per reduction step
        root: Root to verify against; read on-chain when omitted
    """
    proof: List[str] = Field(default_factory=list, description="Proof digests as hex strings")
    leaves: List[str] = Field(default_factory=list, description="Leaf digests as hex strings")
    flags: List[bool] = Field(default_factory=list, description="Reduction step flags")
    root: Optional[str] = Field(default=None, description="Root digest; read on-chain if omitted")

    @field_validator('proof', 'leaves')
    @classmethod
    def validate_digests(cls, v, info):
        for i, step in enumerate(v):
            _check_digest(step, f"{info.field_name}[{i}]")
        return v

    @field_validator('root')
    @classmethod
    def validate_root(cls, v):
        if v is not None:
            _check_digest(v, "root")
        return v


class VerificationResponse(BaseModel):
    """
    Response model for all verification endpoints.

    Attributes:
        valid: Whether the proof reconstructs the root
        type: Proof type (single, indexed or multi)
        root: Root the proof was checked against
        computed_root: Root reconstructed from the proof
        metadata: Additional verification metadata
    """
    valid: bool = Field(..., description="Verification verdict")
    type: str = Field(..., description="Proof type")
    root: str = Field(..., description="Root as hex string")
    computed_root: str = Field(..., description="Reconstructed root as hex string")
    metadata: dict = Field(default_factory=dict, description="Additional verification metadata")

    @field_validator('root', 'computed_root')
    @classmethod
    def validate_hex_format(cls, v):
        """Validate hex string format."""
        return _check_hex(v, "root")

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "valid": True,
            "type": "indexed",
            "root": EXAMPLE_ROOT,
            "computed_root": EXAMPLE_ROOT,
            "metadata": {
                "proof_length": 2,
                "index": 1,
                "leaf": "0x3ac225168df54212a25c1c01fd35bebfea408fdac2e31ddd6f80a4bbf9a5f1cb",
                "root_source": "request",
            },
        }
    })
