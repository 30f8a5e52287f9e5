"""
Merkle Tree Visualization Module

This module renders trees and proofs with rich, helping users see the
level structure, the duplicated odd nodes and the path a proof follows.
"""

from typing import List, Optional, Set, Tuple

from rich.table import Table
from rich.tree import Tree

from .digest import Element, hash_element
from .proof import Proof
from .tree import MerkleTree


def short_hex(digest: bytes, length: int = 16) -> str:
    """Render a digest as truncated hex for display."""
    hex_str = digest.hex()
    return hex_str if len(hex_str) <= length else f"{hex_str[:length]}..."


def proof_path(tree: MerkleTree, element: Element) -> Set[Tuple[int, int]]:
    """
    Compute the (level, index) positions on the path from an element's leaf
    to the root.

    Follows the first leaf whose digest matches, as proof generation does.
    Returns an empty set when the element is not a leaf.
    """
    target = hash_element(element, tree.hash_fn)
    leaves = tree.leaves
    if target not in leaves:
        return set()

    index = leaves.index(target)
    path = set()
    for level in range(tree.depth + 1):
        path.add((level, index))
        index //= 2
    return path


def render_tree(tree: MerkleTree, element: Optional[Element] = None, title: str = "Merkle Tree") -> Tree:
    """
    Build a rich Tree with the root at the top and leaves at the bottom.

    Args:
        tree: Tree to render
        element: Optional element whose proof path is highlighted
        title: Label for the top of the rendering

    Returns:
        rich.tree.Tree ready for Console.print
    """
    levels = tree.levels
    highlighted = proof_path(tree, element) if element is not None else set()
    rendering = Tree(f"[bold]{title}[/bold] ({len(tree)} leaves, depth {tree.depth})")
    if not levels:
        return rendering

    def label(level: int, index: int, duplicate: bool = False) -> str:
        kind = "leaf" if level == 0 else ("root" if level == len(levels) - 1 else f"L{level}")
        text = f"{kind}[{index}] {short_hex(levels[level][index])}"
        if duplicate:
            return f"[dim]{text} (dup)[/dim]"
        if (level, index) in highlighted:
            return f"[bold green]{text}[/bold green]"
        return text

    def attach(parent: Tree, level: int, index: int, duplicate: bool = False) -> None:
        node = parent.add(label(level, index, duplicate))
        if level == 0 or duplicate:
            return
        child_level = level - 1
        left = index * 2
        attach(node, child_level, left)
        if left + 1 < len(levels[child_level]):
            attach(node, child_level, left + 1)
        else:
            # odd node paired with itself
            attach(node, child_level, left, duplicate=True)

    attach(rendering, len(levels) - 1, 0)
    return rendering


def proof_table(element: Element, proof: Proof, root: Optional[bytes] = None) -> Table:
    """Build a rich Table listing each proof step."""
    table = Table(title=f"Proof for {element!r}")
    table.add_column("Step", style="cyan", justify="right")
    table.add_column("Side", style="magenta")
    table.add_column("Sibling Digest", style="green")

    for i, sibling in enumerate(proof):
        table.add_row(str(i), sibling.side.value, sibling.digest.hex())

    if root is not None:
        table.caption = f"root {root.hex()}"
    return table


def level_table(tree: MerkleTree) -> Table:
    """Summarize each level of a tree: node count and whether an odd node was duplicated."""
    table = Table(title="Tree Levels")
    table.add_column("Level", style="cyan", justify="right")
    table.add_column("Nodes", style="green", justify="right")
    table.add_column("Odd Node Duplicated")

    levels: List[List[bytes]] = tree.levels
    for i, level in enumerate(levels):
        is_top = i == len(levels) - 1
        table.add_row(str(i), str(len(level)), "-" if is_top else ("yes" if len(level) % 2 else "no"))
    return table
