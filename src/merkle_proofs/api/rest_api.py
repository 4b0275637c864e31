"""
REST API for Merkle Proofs

This module provides a FastAPI-based REST API for verifying Merkle membership
proofs and multiproofs with full OpenAPI documentation.
"""

import logging
import os
import traceback
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn

from .. import __version__
from ..merkle import MerkleProofError
from .proof_service import VerificationService, VerificationServiceError
from .root_client import OnchainRootReader, RootSourceError
from ..models.api_models import (
    ErrorResponse,
    HealthResponse,
    HashLeafRequest,
    HashLeafResponse,
    VerifyProofRequest,
    VerifyIndexedProofRequest,
    VerifyMultiProofRequest,
    VerificationResponse,
)

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="Merkle Proofs API",
    description="""
    Verify Merkle membership proofs against a committed root.

    Leaves are hashed as keccak256(0x00 || data) and internal nodes as
    keccak256(0x01 || left || right).

    ## Features
    - **Single Proofs**: Commutative verification without position tracking
    - **Indexed Proofs**: Position-aware verification that authenticates the leaf index
    - **Multiproofs**: Several leaves verified at once with shared internal hashes
    - **On-chain Roots**: Omit the root to read it from the configured contract

    ## Verdicts
    A proof that does not reconstruct the root returns `valid: false` with HTTP 200.
    A structurally malformed proof returns HTTP 422 with code `MALFORMED_PROOF`.
    """,
    version=__version__,
    license_info={
        "name": "MIT",
        "url": "https://opensource.org/licenses/MIT"
    }
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global verification service instance
verification_service = None


def get_verification_service() -> VerificationService:
    """Dependency to get the verification service instance."""
    global verification_service
    if verification_service is None:
        verification_service = VerificationService()
    return verification_service


@app.exception_handler(MerkleProofError)
async def malformed_proof_handler(request, exc: MerkleProofError):
    """Handle structurally malformed proofs."""
    logger.warning(f"Malformed proof: {exc}")
    return JSONResponse(
        status_code=422,
        content=ErrorResponse(
            error=str(exc),
            code="MALFORMED_PROOF",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.exception_handler(VerificationServiceError)
async def service_error_handler(request, exc: VerificationServiceError):
    """Handle undecodable request data."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": "VerificationServiceError"}
        ).model_dump()
    )


@app.exception_handler(RootSourceError)
async def root_source_exception_handler(request, exc: RootSourceError):
    """Handle on-chain root lookup errors."""
    logger.error(f"Root source error: {exc}")
    return JSONResponse(
        status_code=502,
        content=ErrorResponse(
            error=str(exc),
            code="ROOT_SOURCE_ERROR",
            details={"error_type": "RootSourceError"}
        ).model_dump()
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unexpected error: {exc}\n{traceback.format_exc()}")
    return JSONResponse(
        status_code=500,
        content=ErrorResponse(
            error="Internal server error",
            code="INTERNAL_ERROR",
            details={"error_type": type(exc).__name__}
        ).model_dump()
    )


@app.get("/", response_model=dict)
async def root():
    """API root endpoint with basic information."""
    return {
        "name": "Merkle Proofs API",
        "version": __version__,
        "description": "Verify Merkle membership proofs and multiproofs",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(service: VerificationService = Depends(get_verification_service)):
    """
    Health check endpoint.

    Reports whether an on-chain root source is configured and reachable.
    Verification with an explicit root works either way.
    """
    reader = service.root_reader
    if reader is None:
        try:
            reader = OnchainRootReader()
        except ValueError:
            return HealthResponse(status="healthy", root_source=False, version=__version__)
        service.root_reader = reader

    if reader.health_check():
        return HealthResponse(status="healthy", root_source=True, version=__version__)

    logger.warning("Root source is configured but unreachable")
    return HealthResponse(status="degraded", root_source=False, version=__version__)


@app.post("/leaves/hash", response_model=HashLeafResponse)
async def hash_leaf(
    request: HashLeafRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """Hash leaf data with the leaf domain tag."""
    return HashLeafResponse(**service.hash_leaf(request.data, request.text))


@app.post("/proofs/verify", response_model=VerificationResponse)
async def verify_proof(
    request: VerifyProofRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify a single proof with commutative node combination.

    Siblings are combined in sorted order, so the proof carries no left/right
    information and the leaf position is not authenticated. Use
    `/proofs/verify-indexed` when the position matters.
    """
    result = service.verify(request.proof, request.leaf, request.root)
    return VerificationResponse(**result)


@app.post("/proofs/verify-indexed", response_model=VerificationResponse)
async def verify_indexed_proof(
    request: VerifyIndexedProofRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify a single proof at a given leaf index.

    The index parity at each level decides whether the running hash is the
    left or right operand, so the proof only verifies at its own position.
    """
    result = service.verify(request.proof, request.leaf, request.root, request.index)
    return VerificationResponse(**result)


@app.post("/proofs/verify-multi", response_model=VerificationResponse)
async def verify_multi_proof(
    request: VerifyMultiProofRequest,
    service: VerificationService = Depends(get_verification_service)
):
    """
    Verify several leaves at once.

    `flags` must hold `len(leaves) + len(proof) - 1` entries; any other length
    is rejected as a malformed proof.
    """
    result = service.verify_multi(request.proof, request.leaves, request.flags, request.root)
    return VerificationResponse(**result)


def run_server(host: str = None, port: int = None, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to (defaults to MERKLE_API_HOST or 127.0.0.1)
        port: Port to bind to (defaults to MERKLE_API_PORT or 8000)
        dev: Enable development mode with auto-reload
    """
    host = host or os.getenv("MERKLE_API_HOST", "127.0.0.1")
    port = port or int(os.getenv("MERKLE_API_PORT", "8000"))
    logger.info(f"Starting Merkle Proofs API server on {host}:{port}")
    uvicorn.run(
        "merkle_proofs.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )


if __name__ == "__main__":
    run_server(dev=True)
