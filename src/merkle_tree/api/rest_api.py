"""
REST API for Merkle Trees

This module provides a FastAPI-based REST API for building named Merkle
trees, appending elements, and generating and verifying inclusion proofs.
"""

import logging
import traceback

import uvicorn
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..models.api_models import (
    AddElementsRequest,
    CreateTreeRequest,
    ErrorResponse,
    HealthResponse,
    ProofRequest,
    ProofResponse,
    TreeListResponse,
    TreeSummary,
    VerifyRequest,
    VerifyResponse,
)
from .tree_service import (
    ELEMENT_NOT_FOUND,
    TREE_EXISTS,
    TREE_NOT_FOUND,
    TreeService,
    TreeServiceError,
)

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    TREE_NOT_FOUND: 404,
    ELEMENT_NOT_FOUND: 404,
    TREE_EXISTS: 409,
}

# Initialize FastAPI app
app = FastAPI(
    title="Merkle Tree API",
    description="""
    Build binary Merkle trees over ordered elements and produce compact
    inclusion proofs.

    ## Features
    - **Named Trees**: Create any number of in-memory trees by name
    - **Append**: Add elements; the root is recomputed over all leaves
    - **Proofs**: Sibling-hash paths from a leaf to the root
    - **Verification**: Check a proof against a tree's current root

    Digests are SHA-256, rendered as 0x-prefixed lowercase hex.
    """,
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global service instance
tree_service = None


def get_tree_service() -> TreeService:
    """Dependency to get the tree service instance."""
    global tree_service
    if tree_service is None:
        tree_service = TreeService()
    return tree_service


@app.exception_handler(TreeServiceError)
async def tree_service_error_handler(request, exc: TreeServiceError):
    """Handle tree service errors."""
    status_code = ERROR_STATUS.get(exc.code, 400)
    logger.warning(f"Tree service error ({exc.code}): {exc.message}")
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            error=exc.message,
            code=exc.code,
            details={"error_type": "TreeServiceError"}
        ).model_dump()
    )


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle validation errors."""
    logger.error(f"Validation error: {exc}")
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(
            error=str(exc),
            code="VALIDATION_ERROR",
            details={"error_type": type(exc).__name__}
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
        "name": "Merkle Tree API",
        "version": __version__,
        "description": "Build Merkle trees and generate inclusion proofs",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health", response_model=HealthResponse)
async def health_check(service: TreeService = Depends(get_tree_service)):
    """Health check endpoint."""
    return HealthResponse(status="healthy", tree_count=service.tree_count(), version=__version__)


@app.get("/trees", response_model=TreeListResponse)
async def list_trees(service: TreeService = Depends(get_tree_service)):
    return TreeListResponse(trees=service.list_trees())


@app.post("/trees", response_model=TreeSummary, status_code=201)
async def create_tree(request: CreateTreeRequest, service: TreeService = Depends(get_tree_service)):
    """
    Create a named tree from its initial elements.

    An empty element list is rejected with code `EMPTY_INPUT`.
    """
    return service.create_tree(request.name, request.elements)


@app.get("/trees/{name}", response_model=TreeSummary)
async def get_tree(name: str, service: TreeService = Depends(get_tree_service)):
    return service.get_tree(name)


@app.delete("/trees/{name}", status_code=204)
async def delete_tree(name: str, service: TreeService = Depends(get_tree_service)):
    service.delete_tree(name)


@app.post("/trees/{name}/elements", response_model=TreeSummary)
async def add_elements(
    name: str,
    request: AddElementsRequest,
    service: TreeService = Depends(get_tree_service)
):
    """Append elements to a tree; the root is recomputed over all leaves."""
    return service.add_elements(name, request.elements)


@app.post("/trees/{name}/proof", response_model=ProofResponse)
async def generate_proof(
    name: str,
    request: ProofRequest,
    service: TreeService = Depends(get_tree_service)
):
    """
    Generate an inclusion proof for an element.

    Elements are matched by digest, so for duplicate elements the proof
    follows the first occurrence. Non-members return 404 with code
    `ELEMENT_NOT_FOUND`.
    """
    return service.get_proof(name, request.element)


@app.post("/trees/{name}/verify", response_model=VerifyResponse)
async def verify_proof(
    name: str,
    request: VerifyRequest,
    service: TreeService = Depends(get_tree_service)
):
    """Verify a proof against the tree's current root."""
    return service.verify(name, request.element, request.proof)


def run_server(host: str = "127.0.0.1", port: int = 8000, dev: bool = False):
    """
    Run the API server.

    Args:
        host: Host to bind to
        port: Port to bind to
        dev: Enable development mode with auto-reload
    """
    logger.info(f"Starting Merkle Tree API server on {host}:{port}")
    uvicorn.run(
        "merkle_tree.api.rest_api:app",
        host=host,
        port=port,
        reload=dev,
        log_level="info"
    )
