"""
Merkle Proof Types and Verification

This module defines the inclusion proof structure (a leaf-to-root list of
side-tagged sibling digests) and the fold that replays a proof into a
candidate root.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .digest import Element, HashFunction, hash_element, hash_pair, sha256_hash


class Side(str, Enum):
    """Which side of the working hash a sibling digest sits on."""

    LEFT = "left"
    RIGHT = "right"


@dataclass(frozen=True)
class Sibling:
    """A single proof step: a sibling digest and its side."""

    digest: bytes
    side: Side

    def to_dict(self) -> dict:
        return {"digest": f"0x{self.digest.hex()}", "side": self.side.value}


Proof = List[Sibling]


def compute_root_from_proof(
    leaf: bytes, proof: Proof, hash_fn: HashFunction = sha256_hash
) -> bytes:
    """
    Rebuild the root digest from a leaf digest and its proof.

    Args:
        leaf: Digest of the element being proven
        proof: Sibling steps, leaf level first
        hash_fn: Digest function used to build the tree

    Returns:
        The candidate root digest

    Examples:
        >>> root = compute_root_from_proof(leaf_hash, proof)
    """
    current = leaf
    for sibling in proof:
        if sibling.side == Side.LEFT:
            # Sibling on the left, working hash on the right
            current = hash_pair(sibling.digest, current, hash_fn)
        else:
            current = hash_pair(current, sibling.digest, hash_fn)
    return current


def is_well_formed(proof: Optional[Proof]) -> bool:
    """Return True if proof is a sequence of Siblings carrying byte digests."""
    if not isinstance(proof, (list, tuple)):
        return False
    return all(
        isinstance(step, Sibling)
        and isinstance(step.digest, (bytes, bytearray))
        and step.side in (Side.LEFT, Side.RIGHT)
        for step in proof
    )


def verify_proof(
    element: Element,
    proof: Optional[Proof],
    root: Optional[bytes],
    hash_fn: HashFunction = sha256_hash,
) -> bool:
    """
    Verify an inclusion proof against a known root.

    Args:
        element: The raw element being proven
        proof: Sibling steps, leaf level first
        root: Expected root digest, or None for a rootless tree
        hash_fn: Digest function used to build the tree

    Returns:
        True if the proof reproduces the root; False otherwise, including
        when there is no root to compare against or the proof is absent
        or malformed

    Raises:
        TypeError: If the element is neither str nor bytes
    """
    leaf = hash_element(element, hash_fn)
    if root is None or not is_well_formed(proof):
        return False
    return compute_root_from_proof(leaf, proof, hash_fn) == root
