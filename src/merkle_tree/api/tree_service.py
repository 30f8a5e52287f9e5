"""
Tree Service Module

This module provides a service layer that owns a set of named in-memory
Merkle trees. The service is the single writer of every tree it holds;
all access goes through one lock so concurrent API requests never observe
a tree mid-rebuild.
"""

import logging
import threading
from typing import Dict, Iterable, List

from ..digest import hash_element
from ..models.api_models import (
    ProofResponse,
    SiblingModel,
    TreeSummary,
    VerifyResponse,
    models_to_proof,
    proof_to_models,
)
from ..tree import EmptyInputError, MerkleTree
from ..utils.hex_helpers import bytes_to_hex

logger = logging.getLogger(__name__)

TREE_NOT_FOUND = "TREE_NOT_FOUND"
TREE_EXISTS = "TREE_EXISTS"
EMPTY_INPUT = "EMPTY_INPUT"
ELEMENT_NOT_FOUND = "ELEMENT_NOT_FOUND"


class TreeServiceError(Exception):
    """Exception raised for tree service operations."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class TreeService:
    """Service holding named Merkle trees and producing proofs for them."""

    def __init__(self):
        self._trees: Dict[str, MerkleTree] = {}
        self._lock = threading.Lock()

    def _get(self, name: str) -> MerkleTree:
        tree = self._trees.get(name)
        if tree is None:
            raise TreeServiceError(TREE_NOT_FOUND, f"Tree '{name}' not found")
        return tree

    @staticmethod
    def summarize(name: str, tree: MerkleTree) -> TreeSummary:
        return TreeSummary(
            name=name,
            leaf_count=len(tree),
            depth=tree.depth,
            root=bytes_to_hex(tree.root) if tree.root is not None else None,
        )

    def create_tree(self, name: str, elements: Iterable[str]) -> TreeSummary:
        """
        Create a named tree from its initial elements.

        Args:
            name: Unique tree name
            elements: Initial elements, at least one

        Returns:
            Summary of the new tree

        Raises:
            TreeServiceError: If the name is taken or elements is empty
        """
        with self._lock:
            if name in self._trees:
                raise TreeServiceError(TREE_EXISTS, f"Tree '{name}' already exists")
            try:
                tree = MerkleTree(elements)
            except EmptyInputError as e:
                raise TreeServiceError(EMPTY_INPUT, str(e))
            self._trees[name] = tree
            logger.info(f"Created tree '{name}' with {len(tree)} leaves")
            return self.summarize(name, tree)

    def add_elements(self, name: str, elements: Iterable[str]) -> TreeSummary:
        """Append elements to a tree and return its updated summary."""
        with self._lock:
            tree = self._get(name)
            tree.add_elements(elements)
            logger.info(f"Tree '{name}' now has {len(tree)} leaves, root {tree.root_hex}")
            return self.summarize(name, tree)

    def get_tree(self, name: str) -> TreeSummary:
        with self._lock:
            return self.summarize(name, self._get(name))

    def list_trees(self) -> List[TreeSummary]:
        with self._lock:
            return [self.summarize(name, tree) for name, tree in sorted(self._trees.items())]

    def delete_tree(self, name: str) -> None:
        with self._lock:
            self._get(name)
            del self._trees[name]
            logger.info(f"Deleted tree '{name}'")

    def get_proof(self, name: str, element: str) -> ProofResponse:
        """
        Generate an inclusion proof for an element of a named tree.

        Raises:
            TreeServiceError: If the tree is unknown or the element is not a member
        """
        with self._lock:
            tree = self._get(name)
            proof = tree.generate_proof(element)
            if proof is None:
                raise TreeServiceError(
                    ELEMENT_NOT_FOUND, f"Element '{element}' not found in tree '{name}'"
                )
            return ProofResponse(
                element=element,
                leaf=bytes_to_hex(hash_element(element, tree.hash_fn)),
                root=bytes_to_hex(tree.root),
                proof=proof_to_models(proof),
            )

    def verify(self, name: str, element: str, proof: List[SiblingModel]) -> VerifyResponse:
        """Verify a proof and report the root it was checked against."""
        with self._lock:
            tree = self._get(name)
            return VerifyResponse(
                element=element,
                valid=tree.verify(element, models_to_proof(proof)),
                root=bytes_to_hex(tree.root),
            )

    def tree_count(self) -> int:
        with self._lock:
            return len(self._trees)
