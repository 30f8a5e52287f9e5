"""
API Models Package

Pydantic models for tree, proof and error payloads.

Usage:
    from merkle_tree.models import ProofResponse, SiblingModel
"""

from .api_models import (
    AddElementsRequest,
    CreateTreeRequest,
    ErrorResponse,
    HealthResponse,
    ProofRequest,
    ProofResponse,
    SiblingModel,
    TreeListResponse,
    TreeSummary,
    VerifyRequest,
    VerifyResponse,
    models_to_proof,
    proof_to_models,
)

__all__ = [
    'AddElementsRequest',
    'CreateTreeRequest',
    'ErrorResponse',
    'HealthResponse',
    'ProofRequest',
    'ProofResponse',
    'SiblingModel',
    'TreeListResponse',
    'TreeSummary',
    'VerifyRequest',
    'VerifyResponse',
    'models_to_proof',
    'proof_to_models',
]
