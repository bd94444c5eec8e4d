"""
Grammar rules the typed tree must keep so emitted text parses back the same.

Covers the token text written verbatim by the renderer (operators, names,
literal values), operator binding strength for operand slots and the order
of clauses inside an if/else chain. The tables mirror the terminals and the
precedence ladder of `composer_ast.fragments.parser`.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import re
from typing import Any, Dict, FrozenSet, Optional, Sequence

from ...fragments.parser import START_EXPRESSION, parse_text
from ..exceptions import FragmentParseError
from .models import NodeKind

# Binding strength; higher binds tighter.
BINARY_BINDING: Dict[str, int] = {
    "||": 1,
    "&&": 2,
    "==": 3,
    "!=": 3,
    "<": 4,
    "<=": 4,
    ">": 4,
    ">=": 4,
    "+": 5,
    "-": 5,
    "*": 6,
    "/": 6,
    "%": 6,
}
UNARY_BINDING = 7
PRIMARY_BINDING = 8
UNARY_OPERATORS: FrozenSet[str] = frozenset({"!", "-"})

NAME_PATTERN = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")
RESERVED_WORDS: FrozenSet[str] = frozenset(
    {"if", "else", "while", "return", "create", "true", "false"}
)

_NAME_ATTRIBUTES = frozenset(
    {"variable_name", "type_name", "function_name", "connector_name"}
)


def binding(kind: NodeKind, operator: Optional[str]) -> Optional[int]:
    """
    Return how tightly an expression of this kind binds.

    None means unknown (binary expression without a valid operator yet).
    A connector initializer is never a valid operand and gets 0.
    """
    if kind is NodeKind.BINARY_EXPR:
        return BINARY_BINDING.get(operator) if operator is not None else None
    if kind is NodeKind.UNARY_EXPR:
        return UNARY_BINDING
    if kind is NodeKind.CONNECTOR_INIT_EXPR:
        return 0
    return PRIMARY_BINDING


def operand_problem(
    parent_kind: NodeKind,
    parent_operator: Optional[str],
    position: int,
    child_kind: NodeKind,
    child_operator: Optional[str],
) -> Optional[str]:
    """
    Check that an operand renders without brackets and parses back the same.

    Binary operators are left-associative, so the right operand must bind
    strictly tighter than the operator while the left one may bind equally.
    """
    if parent_kind is NodeKind.BINARY_EXPR:
        parent_binding = binding(parent_kind, parent_operator)
        if parent_binding is None:
            return None
        needed = parent_binding if position == 0 else parent_binding + 1
    elif parent_kind is NodeKind.UNARY_EXPR:
        needed = UNARY_BINDING
    else:
        return None
    child_binding = binding(child_kind, child_operator)
    if child_binding is None or child_binding >= needed:
        return None
    shown = f"'{child_operator}' " if child_operator else ""
    if parent_kind is NodeKind.BINARY_EXPR:
        side = "right" if position else "left"
    else:
        side = "operand"
    return (
        f"{child_kind.value} {shown}binds looser than '{parent_operator}' "
        f"in {side} position; wrap it in a BracketedExpr"
    )


def clause_order_problem(kinds: Sequence[NodeKind]) -> Optional[str]:
    """
    Check if/else chain order: IfStatement, ElseIfStatement*, ElseStatement?.

    An empty sequence passes; arity is checked separately.
    """
    for position, kind in enumerate(kinds):
        if position == 0:
            expected = kind is NodeKind.IF_STATEMENT
        elif kind is NodeKind.ELSE_STATEMENT:
            expected = position == len(kinds) - 1
        else:
            expected = kind is NodeKind.ELSE_IF_STATEMENT
        if not expected:
            order = ", ".join(k.value for k in kinds)
            return f"IfElseStatement clauses out of order: {order}"
    return None


def attribute_problem(kind: NodeKind, name: str, value: Any) -> Optional[str]:
    """Check a scalar attribute value against the grammar terminal it renders as."""
    if not isinstance(value, str):
        return f"{kind.value}.{name} must be a string, got {type(value).__name__}"
    if name == "operator":
        allowed = UNARY_OPERATORS if kind is NodeKind.UNARY_EXPR else BINARY_BINDING
        if value not in allowed:
            return f"{value!r} is not a {kind.value} operator"
        return None
    if name in _NAME_ATTRIBUTES:
        if not NAME_PATTERN.fullmatch(value) or value in RESERVED_WORDS:
            return f"{value!r} is not a valid name for {kind.value}.{name}"
        return None
    if name == "value":
        if not _is_literal(value):
            return f"{value!r} is not a literal"
        return None
    if name == "literal_type" and not value:
        return f"{kind.value}.literal_type must not be empty"
    return None


def _is_literal(text: str) -> bool:
    try:
        raw = parse_text(text, START_EXPRESSION)
    except FragmentParseError:
        return False
    return (
        raw.get("type") == NodeKind.BASIC_LITERAL_EXPR.value
        and raw.get("value") == text
        and raw.get("ws", {}).get("0") == ""
    )
