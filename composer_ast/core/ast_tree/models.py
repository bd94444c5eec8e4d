"""
Data models for AST tree management.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

PathStep = Union[int, str]

CONDITION_SLOT = "condition"


class NodeKind(str, Enum):
    """Closed set of node type tags (grammar production names)."""

    COMPILATION_UNIT = "CompilationUnit"
    IF_ELSE_STATEMENT = "IfElseStatement"
    IF_STATEMENT = "IfStatement"
    ELSE_IF_STATEMENT = "ElseIfStatement"
    ELSE_STATEMENT = "ElseStatement"
    WHILE_STATEMENT = "WhileStatement"
    ASSIGNMENT_STATEMENT = "AssignmentStatement"
    VARIABLE_DEFINITION_STATEMENT = "variable_definition_statement"
    CONNECTOR_DECLARATION = "ConnectorDeclaration"
    RETURN_STATEMENT = "ReturnStatement"
    EXPRESSION_STATEMENT = "ExpressionStatement"
    VARIABLE_DECLARATION = "VariableDeclaration"
    BINARY_EXPR = "BinaryExpr"
    UNARY_EXPR = "UnaryExpr"
    BASIC_LITERAL_EXPR = "BasicLiteralExpr"
    VARIABLE_REFERENCE_EXPR = "VariableReferenceExpr"
    FUNCTION_INVOCATION_EXPR = "FunctionInvocationExpr"
    BRACKETED_EXPR = "BracketedExpr"
    CONNECTOR_INIT_EXPR = "connector_init_expr"


class NodeCategory(str, Enum):
    """Structural category used to validate parent/child relationships."""

    UNIT = "unit"
    STATEMENT = "statement"
    CLAUSE = "clause"
    DECLARATION = "declaration"
    EXPRESSION = "expression"


class ChangeAction(str, Enum):
    """Kind of tree mutation."""

    SET_ATTRIBUTE = "set_attribute"
    ADD_CHILD = "add_child"
    REMOVE_CHILD = "remove_child"
    REPLACE_CHILD = "replace_child"


@dataclass(frozen=True)
class NodeChange:
    """
    Description of a single tree mutation.

    Returned by every mutator and handed to tree observers. For child changes
    `index` is the position in the parent's children; `old_value`/`new_value`
    hold the removed/added nodes.
    """

    action: ChangeAction
    node_id: str
    path: Tuple[PathStep, ...] = ()
    attribute: Optional[str] = None
    index: Optional[int] = None
    old_value: Any = None
    new_value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (nodes are reported by node_id)."""
        result: Dict[str, Any] = {
            "action": self.action.value,
            "node_id": self.node_id,
            "path": list(self.path),
        }
        if self.attribute is not None:
            result["attribute"] = self.attribute
        if self.index is not None:
            result["index"] = self.index
        result["old_value"] = _describe(self.old_value)
        result["new_value"] = _describe(self.new_value)
        return result


def _describe(value: Any) -> Any:
    node_id = getattr(value, "node_id", None)
    return node_id if node_id is not None else value
