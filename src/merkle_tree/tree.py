"""
Merkle Tree Engine

This module owns leaf storage, level-by-level hash aggregation and proof
generation for a binary Merkle tree. An odd node at any level is paired
with itself. The root is recomputed from scratch whenever leaves change,
since pairing boundaries shift at every level when the leaf count crosses
an odd/even boundary.
"""

import logging
from typing import Iterable, List, Optional, Sequence

from .digest import Element, HashFunction, hash_element, hash_pair, sha256_hash
from .proof import Proof, Sibling, Side, verify_proof

logger = logging.getLogger(__name__)


class EmptyInputError(ValueError):
    """Raised when a tree is constructed from zero elements."""
    pass


def build_levels(leaves: Sequence[bytes], hash_fn: HashFunction = sha256_hash) -> List[List[bytes]]:
    """
    Build every level of the tree from the leaf digests up to the root.

    Args:
        leaves: Leaf digests in insertion order
        hash_fn: Digest function applied to each concatenated pair

    Returns:
        List of levels where levels[0] is the leaves and levels[-1] holds
        the single root digest. Empty input yields an empty list.

    Example:
        >>> levels = build_levels([h(b"a"), h(b"b"), h(b"c")])
        >>> [len(level) for level in levels]
        [3, 2, 1]
    """
    if not leaves:
        return []

    current_level = list(leaves)
    levels = [current_level]
    while len(current_level) > 1:
        next_level = []
        for i in range(0, len(current_level), 2):
            left = current_level[i]
            right = current_level[i + 1] if i + 1 < len(current_level) else left
            next_level.append(hash_pair(left, right, hash_fn))
        levels.append(next_level)
        current_level = next_level
    return levels


class MerkleTree:
    """
    A binary Merkle tree over an ordered sequence of elements.

    Usage:
        tree = MerkleTree(["a", "b", "c", "d"])
        proof = tree.generate_proof("a")
        assert tree.verify("a", proof)
        tree.add_element("e")

    A tree has a single writer; callers sharing one instance across
    threads must synchronize around add_element themselves.
    """

    def __init__(self, elements: Iterable[Element], hash_fn: HashFunction = sha256_hash):
        """
        Args:
            elements: Initial elements (str or bytes), at least one
            hash_fn: Digest function for leaves and nodes

        Raises:
            EmptyInputError: If no elements are given
            TypeError: If an element is neither str nor bytes
        """
        self._hash_fn = hash_fn
        leaves = [hash_element(element, hash_fn) for element in elements]
        self._set_leaves(leaves)

    @classmethod
    def from_leaves(cls, leaves: Iterable[bytes], hash_fn: HashFunction = sha256_hash) -> "MerkleTree":
        """Build a tree from precomputed leaf digests."""
        tree = cls.__new__(cls)
        tree._hash_fn = hash_fn
        tree._set_leaves([bytes(leaf) for leaf in leaves])
        return tree

    def _set_leaves(self, leaves: List[bytes]) -> None:
        if not leaves:
            raise EmptyInputError("Cannot build a Merkle tree from zero elements")
        self._leaves = leaves
        self._rebuild()

    def _rebuild(self) -> None:
        self._levels = build_levels(self._leaves, self._hash_fn)
        self._root = self._levels[-1][0] if self._levels else None
        logger.debug(f"Rebuilt tree with {len(self._leaves)} leaves, root {self.root_hex}")

    @property
    def leaves(self) -> List[bytes]:
        return list(self._leaves)

    @property
    def root(self) -> Optional[bytes]:
        return self._root

    @property
    def root_hex(self) -> Optional[str]:
        return self._root.hex() if self._root is not None else None

    @property
    def levels(self) -> List[List[bytes]]:
        return [list(level) for level in self._levels]

    @property
    def depth(self) -> int:
        """Number of levels above the leaves."""
        return max(len(self._levels) - 1, 0)

    @property
    def hash_fn(self) -> HashFunction:
        return self._hash_fn

    def __len__(self) -> int:
        return len(self._leaves)

    def __repr__(self) -> str:
        return f"MerkleTree(leaves={len(self._leaves)}, root={self.root_hex})"

    def contains(self, element: Element) -> bool:
        return hash_element(element, self._hash_fn) in self._leaves

    def add_element(self, element: Element) -> None:
        """
        Append an element and recompute the root over all leaves.

        Args:
            element: Element to append; it takes the next leaf position
        """
        self._leaves.append(hash_element(element, self._hash_fn))
        self._rebuild()

    def add_elements(self, elements: Iterable[Element]) -> None:
        """Append several elements in order, rebuilding once."""
        new_leaves = [hash_element(element, self._hash_fn) for element in elements]
        if not new_leaves:
            return
        self._leaves.extend(new_leaves)
        self._rebuild()

    def generate_proof(self, element: Element) -> Optional[Proof]:
        """
        Generate an inclusion proof for an element.

        The element's digest is looked up by value, so for duplicate
        elements the proof follows the first matching leaf.

        Args:
            element: Element to prove

        Returns:
            List of siblings from the leaf level up, an empty list for a
            single-leaf tree whose leaf matches, or None if the element's
            digest cannot be located at some level
        """
        if not self._levels:
            return None

        tracked = hash_element(element, self._hash_fn)
        proof: Proof = []

        for level in self._levels[:-1]:
            found = False
            for i in range(0, len(level), 2):
                left = level[i]
                right = level[i + 1] if i + 1 < len(level) else left
                if tracked == left:
                    proof.append(Sibling(right, Side.RIGHT))
                elif tracked == right:
                    proof.append(Sibling(left, Side.LEFT))
                else:
                    continue
                tracked = hash_pair(left, right, self._hash_fn)
                found = True
                break

            if not found:
                logger.debug(f"Digest not found at level with {len(level)} nodes")
                return None

        if tracked != self._root:
            return None
        return proof

    def verify(self, element: Element, proof: Optional[Proof]) -> bool:
        """
        Check a proof for an element against the current root.

        Returns:
            True if folding the proof reproduces the root; False on any
            mismatch, for an absent or malformed proof, or if the tree
            has no root
        """
        return verify_proof(element, proof, self._root, self._hash_fn)
