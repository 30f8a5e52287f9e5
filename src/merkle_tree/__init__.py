"""
Merkle Tree

A binary Merkle tree committing an ordered sequence of elements to a single
SHA-256 root, with incremental appends and compact inclusion proofs.

Usage:
    from merkle_tree import MerkleTree

    tree = MerkleTree(["a", "b", "c", "d"])
    proof = tree.generate_proof("a")
    assert tree.verify("a", proof)
"""

__version__ = "0.1.0"

from .digest import DIGEST_SIZE, element_bytes, hash_element, hash_pair, sha256_hash
from .proof import Proof, Side, Sibling, compute_root_from_proof, verify_proof
from .tree import EmptyInputError, MerkleTree, build_levels

__all__ = [
    "DIGEST_SIZE",
    "EmptyInputError",
    "MerkleTree",
    "Proof",
    "Side",
    "Sibling",
    "build_levels",
    "compute_root_from_proof",
    "element_bytes",
    "hash_element",
    "hash_pair",
    "sha256_hash",
    "verify_proof",
]
