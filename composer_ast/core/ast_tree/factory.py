"""
Node factory - maps raw JSON type tags to node constructors.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, Mapping

from ..exceptions import MalformedTreeError, UnrecognizedNodeTypeError
from .conditional import ConditionalStatement
from .models import NodeKind
from .node import AstNode

if TYPE_CHECKING:
    from .tree import AstTree

logger = logging.getLogger(__name__)

NodeConstructor = Callable[["AstTree"], AstNode]


def _plain(kind: NodeKind) -> NodeConstructor:
    return lambda tree: AstNode(kind, tree)


def _conditional(kind: NodeKind) -> NodeConstructor:
    return lambda tree: ConditionalStatement(kind, tree)


# Dispatch table; must cover every NodeKind.
NODE_CONSTRUCTORS: Dict[NodeKind, NodeConstructor] = {
    NodeKind.COMPILATION_UNIT: _plain(NodeKind.COMPILATION_UNIT),
    NodeKind.IF_ELSE_STATEMENT: _plain(NodeKind.IF_ELSE_STATEMENT),
    NodeKind.IF_STATEMENT: _conditional(NodeKind.IF_STATEMENT),
    NodeKind.ELSE_IF_STATEMENT: _conditional(NodeKind.ELSE_IF_STATEMENT),
    NodeKind.ELSE_STATEMENT: _plain(NodeKind.ELSE_STATEMENT),
    NodeKind.WHILE_STATEMENT: _conditional(NodeKind.WHILE_STATEMENT),
    NodeKind.ASSIGNMENT_STATEMENT: _plain(NodeKind.ASSIGNMENT_STATEMENT),
    NodeKind.VARIABLE_DEFINITION_STATEMENT: _plain(
        NodeKind.VARIABLE_DEFINITION_STATEMENT
    ),
    NodeKind.CONNECTOR_DECLARATION: _plain(NodeKind.CONNECTOR_DECLARATION),
    NodeKind.RETURN_STATEMENT: _plain(NodeKind.RETURN_STATEMENT),
    NodeKind.EXPRESSION_STATEMENT: _plain(NodeKind.EXPRESSION_STATEMENT),
    NodeKind.VARIABLE_DECLARATION: _plain(NodeKind.VARIABLE_DECLARATION),
    NodeKind.BINARY_EXPR: _plain(NodeKind.BINARY_EXPR),
    NodeKind.UNARY_EXPR: _plain(NodeKind.UNARY_EXPR),
    NodeKind.BASIC_LITERAL_EXPR: _plain(NodeKind.BASIC_LITERAL_EXPR),
    NodeKind.VARIABLE_REFERENCE_EXPR: _plain(NodeKind.VARIABLE_REFERENCE_EXPR),
    NodeKind.FUNCTION_INVOCATION_EXPR: _plain(NodeKind.FUNCTION_INVOCATION_EXPR),
    NodeKind.BRACKETED_EXPR: _plain(NodeKind.BRACKETED_EXPR),
    NodeKind.CONNECTOR_INIT_EXPR: _plain(NodeKind.CONNECTOR_INIT_EXPR),
}

_KINDS_BY_TAG: Dict[str, NodeKind] = {kind.value: kind for kind in NodeKind}


def kind_for_tag(node_type: str) -> NodeKind:
    """
    Resolve a raw type tag.

    Raises:
        UnrecognizedNodeTypeError: If no node class is registered for the tag
    """
    kind = _KINDS_BY_TAG.get(node_type)
    if kind is None or kind not in NODE_CONSTRUCTORS:
        raise UnrecognizedNodeTypeError(
            f"Unrecognized node type: {node_type!r}", node_type=node_type
        )
    return kind


class NodeFactory:
    """Creates nodes bound to one tree."""

    def __init__(self, tree: AstTree) -> None:
        self.tree = tree

    def create(self, kind: NodeKind) -> AstNode:
        """Create an uninitialized node of a registered kind."""
        return NODE_CONSTRUCTORS[NodeKind(kind)](self.tree)

    def create_from_json(self, raw: Mapping[str, Any]) -> AstNode:
        """
        Create an uninitialized node for a raw JSON node.

        The caller must run `init_from_json` on the result.

        Raises:
            MalformedTreeError: If raw is not a mapping with a string 'type'
            UnrecognizedNodeTypeError: If the type tag is not registered
        """
        if not isinstance(raw, Mapping):
            raise MalformedTreeError(
                f"Raw node must be a mapping, got {type(raw).__name__}", field="type"
            )
        node_type = raw.get("type")
        if not isinstance(node_type, str):
            raise MalformedTreeError(
                "Raw node has no 'type' string", node_type=None, field="type"
            )
        return self.create(kind_for_tag(node_type))

    def create_connector_declaration(self) -> AstNode:
        """Create an uninitialized connector declaration."""
        return self.create(NodeKind.CONNECTOR_DECLARATION)

    def build(self, raw: Mapping[str, Any]) -> AstNode:
        """
        Create and fully initialize a subtree from a raw JSON node.

        If initialization fails, the partially built subtree is dropped from
        the tree and the error is re-raised.
        """
        node = self.create_from_json(raw)
        try:
            node.init_from_json(raw)
        except Exception as e:
            logger.debug(f"Error building {node.type} in tree {self.tree.tree_id}: {e}")
            self.tree.release(node)
            raise
        return node
