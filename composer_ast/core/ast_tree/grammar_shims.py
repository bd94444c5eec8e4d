"""
Compatibility shims for grammar ambiguities.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from typing import Any, Mapping

from .models import NodeKind


def is_connector_declaration(raw: Any) -> bool:
    """
    Tell a connector declaration apart from a plain variable definition.

    The grammar emits both forms under the `variable_definition_statement`
    production; only the second child (`connector_init_expr`) distinguishes
    them. This check depends on the current grammar version and must be
    dropped once the grammar gives connector declarations their own tag.
    It is applied only while ingesting child statements, never in the
    factory's main dispatch.

    Args:
        raw: Raw JSON node

    Returns:
        True if the raw node must be built as a ConnectorDeclaration
    """
    if not isinstance(raw, Mapping):
        return False
    if raw.get("type") != NodeKind.VARIABLE_DEFINITION_STATEMENT.value:
        return False
    children = raw.get("children")
    if not isinstance(children, list) or len(children) < 2:
        return False
    second = children[1]
    return (
        isinstance(second, Mapping)
        and second.get("type") == NodeKind.CONNECTOR_INIT_EXPR.value
    )
