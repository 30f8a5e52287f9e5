"""
API Models

This module defines Pydantic models for request and response validation.
They are shared by the REST API, the REST client and the CLI's JSON output
so that proofs have one serialized form everywhere.
"""

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .. import __version__
from ..proof import Proof, Sibling, Side
from ..utils.hex_helpers import bytes_to_hex, hex_to_bytes, normalize_hex


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
    status: str = Field(..., description="Service status")
    tree_count: int = Field(..., description="Number of trees held by the service")
    version: str = Field(default=__version__, description="Service version")
    timestamp: Optional[str] = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Response timestamp",
    )


class SiblingModel(BaseModel):
    """
    A serialized proof step.

    Attributes:
        digest: Sibling digest as a 0x-prefixed hex string
        side: Which side of the working hash the sibling sits on
    """
    digest: str = Field(..., description="Sibling digest as hex string")
    side: Side = Field(..., description="Sibling side: 'left' or 'right'")

    @field_validator('digest')
    @classmethod
    def validate_digest(cls, v):
        """Validate and normalize the digest hex string."""
        return normalize_hex(v)

    @classmethod
    def from_sibling(cls, sibling: Sibling) -> "SiblingModel":
        return cls(digest=bytes_to_hex(sibling.digest), side=sibling.side)

    def to_sibling(self) -> Sibling:
        return Sibling(hex_to_bytes(self.digest), Side(self.side))


def proof_to_models(proof: Proof) -> List[SiblingModel]:
    return [SiblingModel.from_sibling(sibling) for sibling in proof]


def models_to_proof(models: List[SiblingModel]) -> Proof:
    return [model.to_sibling() for model in models]


class CreateTreeRequest(BaseModel):
    name: str = Field(
        ..., min_length=1, pattern=r"^[A-Za-z0-9_.-]+$",
        description="Tree name (letters, digits, '_', '.', '-')"
    )
    elements: List[str] = Field(..., description="Initial elements, at least one")


class AddElementsRequest(BaseModel):
    elements: List[str] = Field(..., description="Elements to append in order")


class ProofRequest(BaseModel):
    element: str = Field(..., description="Element to prove")


class VerifyRequest(BaseModel):
    element: str = Field(..., description="Element the proof is for")
    proof: List[SiblingModel] = Field(default_factory=list, description="Proof steps, leaf level first")


class TreeSummary(BaseModel):
    """
    Summary of a tree held by the service.

    Attributes:
        name: Tree name
        leaf_count: Number of leaves
        depth: Number of levels above the leaves
        root: Root digest as hex string
    """
    name: str
    leaf_count: int
    depth: int
    root: Optional[str] = Field(default=None, description="Root digest as hex string")


class TreeListResponse(BaseModel):
    trees: List[TreeSummary] = Field(default_factory=list)


class ProofResponse(BaseModel):
    """
    Inclusion proof for one element.

    Attributes:
        element: The element that was proven
        leaf: Leaf digest of the element
        root: Root digest the proof resolves to
        proof: Proof steps, leaf level first
    """
    element: str = Field(..., description="Proven element")
    leaf: str = Field(..., description="Leaf digest as hex string")
    root: str = Field(..., description="Root digest as hex string")
    proof: List[SiblingModel] = Field(default_factory=list, description="Proof steps")

    @field_validator('leaf', 'root')
    @classmethod
    def validate_hex_format(cls, v):
        """Validate hex string format."""
        return normalize_hex(v)

    class Config:
        json_schema_extra = {
            "example": {
                "element": "a",
                "leaf": "0xca978112ca1bbdcafac231b39a23dc4da786eff8147c4e72b9807785afee48bb",
                "root": "0x14ed...",
                "proof": [
                    {"digest": "0x3e23e8160039594a33894f6564e1b1348bbd7a0088d42c4acb73eeaed59c009d", "side": "right"},
                    {"digest": "0xbffe...", "side": "right"},
                ],
            }
        }


class VerifyResponse(BaseModel):
    element: str
    valid: bool
    root: Optional[str] = None
