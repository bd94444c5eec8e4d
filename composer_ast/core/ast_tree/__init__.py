"""
AST tree infrastructure.

Provides typed, mutable, round-trippable trees built from raw parse JSON.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from .models import ChangeAction, NodeCategory, NodeChange, NodeKind
from .node import AstNode
from .conditional import ConditionalStatement
from .factory import NODE_CONSTRUCTORS, NodeFactory
from .grammar_shims import is_connector_declaration
from .tree import AstTree
from .change_log import ChangeLog
from .tree_builder import (
    build_tree,
    emit_source,
    get_tree,
    load_file_to_tree,
    load_source,
    remove_tree,
    render_raw,
    save_tree_to_file,
)
from .tree_finder import find_nodes, parse_path, resolve_path

__all__ = [
    "ChangeAction",
    "NodeCategory",
    "NodeChange",
    "NodeKind",
    "AstNode",
    "ConditionalStatement",
    "NODE_CONSTRUCTORS",
    "NodeFactory",
    "is_connector_declaration",
    "AstTree",
    "ChangeLog",
    "build_tree",
    "emit_source",
    "get_tree",
    "load_file_to_tree",
    "load_source",
    "remove_tree",
    "render_raw",
    "save_tree_to_file",
    "find_nodes",
    "parse_path",
    "resolve_path",
]
