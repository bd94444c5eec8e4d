"""
composer-ast - mutable, round-trippable AST model for source editing.

Source text is parsed into raw JSON by the fragment bridge, raw JSON is turned
into typed nodes by the node factory, nodes are edited through a mutation API
that reports every change, and trees render back to text with the original
formatting of untouched regions.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

__version__ = "1.0.0"

from .core.ast_tree import (
    AstNode,
    AstTree,
    ChangeLog,
    ConditionalStatement,
    NodeChange,
    NodeFactory,
    NodeKind,
    build_tree,
    emit_source,
    load_source,
)
from .core.config import ComposerConfig
from .core.exceptions import (
    ComposerError,
    FragmentParseError,
    InvalidMutationError,
    MalformedTreeError,
    UnrecognizedNodeTypeError,
)
from .fragments import create_expression_fragment, parse_fragment, parse_source

__all__ = [
    "AstNode",
    "AstTree",
    "ChangeLog",
    "ConditionalStatement",
    "NodeChange",
    "NodeFactory",
    "NodeKind",
    "build_tree",
    "emit_source",
    "load_source",
    "ComposerConfig",
    "ComposerError",
    "FragmentParseError",
    "InvalidMutationError",
    "MalformedTreeError",
    "UnrecognizedNodeTypeError",
    "create_expression_fragment",
    "parse_fragment",
    "parse_source",
]
