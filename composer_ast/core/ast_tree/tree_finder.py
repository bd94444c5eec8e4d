"""
AST tree finder - locate nodes by type or structural path.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from .models import CONDITION_SLOT, PathStep
from .node import AstNode
from .tree import AstTree


def find_nodes(
    tree: AstTree,
    node_type: Optional[str] = None,
    predicate: Optional[Callable[[AstNode], bool]] = None,
) -> List[AstNode]:
    """
    Find nodes reachable from the root, in source order.

    Args:
        tree: Tree to search
        node_type: Optional type tag filter (e.g., "IfStatement")
        predicate: Optional extra filter

    Returns:
        Matching nodes
    """
    root = tree.root
    if root is None:
        return []
    matches: List[AstNode] = []
    for node in root.iter_nodes():
        if node_type is not None and node.type != node_type:
            continue
        if predicate is not None and not predicate(node):
            continue
        matches.append(node)
    return matches


def parse_path(text: str) -> Tuple[PathStep, ...]:
    """
    Parse a path like "0/1/condition" (empty string = root).

    Raises:
        ValueError: If a step is neither an index nor 'condition'
    """
    steps: List[PathStep] = []
    for part in text.strip().strip("/").split("/"):
        if not part:
            continue
        if part == CONDITION_SLOT:
            steps.append(CONDITION_SLOT)
        elif part.isdigit():
            steps.append(int(part))
        else:
            raise ValueError(f"Invalid path step: {part!r}")
    return tuple(steps)


def resolve_path(tree: AstTree, path: Sequence[PathStep]) -> AstNode:
    """
    Return the node at a structural path (as produced by AstNode.path()).

    Raises:
        LookupError: If the path does not lead to a node
    """
    node = tree.root
    if node is None:
        raise LookupError(f"Tree {tree.tree_id} has no root")
    for step in path:
        if step == CONDITION_SLOT:
            next_node = node.get_attribute(CONDITION_SLOT)
        elif isinstance(step, int) and 0 <= step < len(node.children):
            next_node = node.children[step]
        else:
            next_node = None
        if next_node is None:
            raise LookupError(f"No node at step {step!r} below {node!r}")
        node = next_node
    return node
