"""
AST tree builder - builds, stores and saves typed trees.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ...fragments import parse_source
from ..config import ComposerConfig
from ..exceptions import ComposerError, MalformedTreeError
from .tree import AstTree

logger = logging.getLogger(__name__)

# In-memory storage for AST trees
_trees: Dict[str, AstTree] = {}


def build_tree(
    raw: Mapping[str, Any], config: Optional[ComposerConfig] = None
) -> AstTree:
    """
    Build a typed tree from a raw JSON root node and store it in memory.

    Args:
        raw: Raw JSON root (usually a CompilationUnit)
        config: Optional configuration

    Returns:
        AstTree whose root is the built node

    Raises:
        MalformedTreeError: If the raw tree is malformed or too deep
        UnrecognizedNodeTypeError: If a node type is not registered
    """
    tree = AstTree.create(config)
    _check_depth(raw, tree.config.max_depth)
    try:
        root = tree.factory.build(raw)
    except ComposerError as e:
        logger.error(f"Error building tree from raw node: {e}")
        raise
    tree.set_root(root)
    _trees[tree.tree_id] = tree
    logger.debug("Built tree %s with %d nodes", tree.tree_id, len(tree.nodes))
    return tree


def _check_depth(raw: Any, max_depth: int) -> None:
    """Reject raw trees nested deeper than max_depth (iterative walk)."""
    stack = [(raw, 1)]
    while stack:
        node, depth = stack.pop()
        if depth > max_depth:
            raise MalformedTreeError(
                f"Raw tree is nested deeper than {max_depth} levels",
                details={"max_depth": max_depth},
            )
        if not isinstance(node, Mapping):
            continue
        condition = node.get("condition")
        if condition is not None:
            stack.append((condition, depth + 1))
        children = node.get("children")
        if isinstance(children, list):
            stack.extend((child, depth + 1) for child in children)


def load_source(source: str, config: Optional[ComposerConfig] = None) -> AstTree:
    """
    Parse source text and build a typed tree.

    Raises:
        FragmentParseError: If the source does not parse
    """
    return build_tree(parse_source(source), config=config)


def load_file_to_tree(
    file_path: str, config: Optional[ComposerConfig] = None
) -> AstTree:
    """
    Load a source file into a typed tree.

    Args:
        file_path: Path to source file
        config: Optional configuration

    Returns:
        AstTree with file_path set

    Raises:
        FileNotFoundError: If file not found
        FragmentParseError: If the file does not parse
    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")
    tree = load_source(path.read_text(encoding="utf-8"), config=config)
    tree.file_path = str(path.resolve())
    return tree


def emit_source(tree: AstTree) -> str:
    """Render the whole tree back to source text."""
    if tree.root is None:
        raise MalformedTreeError(f"Tree {tree.tree_id} has no root")
    return tree.root.to_source()


def render_raw(raw: Mapping[str, Any], config: Optional[ComposerConfig] = None) -> str:
    """Render a raw JSON node to source text without storing the tree."""
    tree = AstTree.create(config)
    _check_depth(raw, tree.config.max_depth)
    return tree.factory.build(raw).to_source()


def get_tree(tree_id: str) -> Optional[AstTree]:
    """Get tree by tree_id."""
    return _trees.get(tree_id)


def remove_tree(tree_id: str) -> bool:
    """Remove tree from memory."""
    if tree_id in _trees:
        del _trees[tree_id]
        return True
    return False


def save_tree_to_file(tree: AstTree, file_path: Optional[str] = None) -> Path:
    """
    Save tree to file atomically.

    The emitted text is parsed again before anything is written, so a tree
    that no longer renders valid source never reaches the disk.

    Args:
        tree: Tree to save
        file_path: Target path (defaults to the path the tree was loaded from)

    Returns:
        Path written

    Raises:
        ValueError: If no target path is known
        FragmentParseError: If the emitted text does not parse
    """
    target = file_path or tree.file_path
    if not target:
        raise ValueError(f"No file path for tree {tree.tree_id}")
    target_path = Path(target)
    source = emit_source(tree)
    parse_source(source)

    target_path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=str(target_path.parent), prefix=f".{target_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(source)
        os.replace(tmp_name, target_path)
    except OSError:
        if os.path.exists(tmp_name):
            os.unlink(tmp_name)
        raise
    tree.file_path = str(target_path.resolve())
    logger.info(f"Saved tree {tree.tree_id} to {target_path}")
    return target_path
