"""
Per-kind node specifications.

A NodeSpec tells the generic node machinery what a kind looks like: its
category, which child categories it accepts and how many, which scalar
attributes the raw node must carry, and how it renders.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple

from .models import NodeCategory, NodeKind
from .whitespace import (
    AttrText,
    ChildSequence,
    ChildSlot,
    ConditionSlot,
    Keyword,
    NodeLayout,
    Region,
)


@dataclass(frozen=True)
class NodeSpec:
    """Static description of a node kind."""

    kind: NodeKind
    category: NodeCategory
    layout: NodeLayout
    accepts: FrozenSet[NodeCategory] = frozenset()
    attributes: Tuple[str, ...] = ()
    min_children: int = 0
    max_children: Optional[int] = None
    has_condition: bool = False
    wire_type: Optional[str] = None  # tag written by to_json when it differs from kind

    @property
    def type_tag(self) -> str:
        """Tag used on the wire."""
        return self.wire_type or self.kind.value


_STATEMENTS = frozenset({NodeCategory.STATEMENT})
_EXPRESSIONS = frozenset({NodeCategory.EXPRESSION})
_DEFINITION_PARTS = frozenset({NodeCategory.DECLARATION, NodeCategory.EXPRESSION})

_R = Region

_DEFINITION_LAYOUT = NodeLayout(
    template=(ChildSlot(0), Keyword("="), _R(0), ChildSlot(1), Keyword(";"), _R(1)),
    defaults={0: " ", 1: "\n"},
)


NODE_SPECS: Dict[NodeKind, NodeSpec] = {
    spec.kind: spec
    for spec in (
        NodeSpec(
            kind=NodeKind.COMPILATION_UNIT,
            category=NodeCategory.UNIT,
            layout=NodeLayout(template=(_R(0), ChildSequence()), defaults={0: ""}),
            accepts=_STATEMENTS,
        ),
        NodeSpec(
            kind=NodeKind.IF_ELSE_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=NodeLayout(template=(ChildSequence(),)),
            accepts=frozenset({NodeCategory.CLAUSE}),
            min_children=1,
        ),
        NodeSpec(
            kind=NodeKind.IF_STATEMENT,
            category=NodeCategory.CLAUSE,
            layout=NodeLayout(
                template=(
                    Keyword("if"), _R(0), Keyword("("), _R(1), ConditionSlot(),
                    Keyword(")"), _R(2), Keyword("{"), _R(3), ChildSequence(),
                    Keyword("}"), _R(4),
                ),
                defaults={0: " ", 1: "", 2: " ", 3: "\n", 4: " "},
            ),
            accepts=_STATEMENTS,
            has_condition=True,
        ),
        NodeSpec(
            kind=NodeKind.ELSE_IF_STATEMENT,
            category=NodeCategory.CLAUSE,
            layout=NodeLayout(
                template=(
                    Keyword("else"), _R(0), Keyword("if"), _R(1), Keyword("("), _R(2),
                    ConditionSlot(), Keyword(")"), _R(3), Keyword("{"), _R(4),
                    ChildSequence(), Keyword("}"), _R(5),
                ),
                defaults={0: " ", 1: " ", 2: "", 3: " ", 4: "\n", 5: " "},
            ),
            accepts=_STATEMENTS,
            has_condition=True,
        ),
        NodeSpec(
            kind=NodeKind.ELSE_STATEMENT,
            category=NodeCategory.CLAUSE,
            layout=NodeLayout(
                template=(
                    Keyword("else"), _R(0), Keyword("{"), _R(1), ChildSequence(),
                    Keyword("}"), _R(2),
                ),
                defaults={0: " ", 1: "\n", 2: "\n"},
            ),
            accepts=_STATEMENTS,
        ),
        NodeSpec(
            kind=NodeKind.WHILE_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=NodeLayout(
                template=(
                    Keyword("while"), _R(0), Keyword("("), _R(1), ConditionSlot(),
                    Keyword(")"), _R(2), Keyword("{"), _R(3), ChildSequence(),
                    Keyword("}"), _R(4),
                ),
                defaults={0: " ", 1: "", 2: " ", 3: "\n", 4: "\n"},
            ),
            accepts=_STATEMENTS,
            has_condition=True,
        ),
        NodeSpec(
            kind=NodeKind.ASSIGNMENT_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=_DEFINITION_LAYOUT,
            accepts=_EXPRESSIONS,
            min_children=2,
            max_children=2,
        ),
        NodeSpec(
            kind=NodeKind.VARIABLE_DEFINITION_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=_DEFINITION_LAYOUT,
            accepts=_DEFINITION_PARTS,
            min_children=2,
            max_children=2,
        ),
        NodeSpec(
            kind=NodeKind.CONNECTOR_DECLARATION,
            category=NodeCategory.STATEMENT,
            layout=_DEFINITION_LAYOUT,
            accepts=_DEFINITION_PARTS,
            min_children=2,
            max_children=2,
            wire_type=NodeKind.VARIABLE_DEFINITION_STATEMENT.value,
        ),
        NodeSpec(
            kind=NodeKind.RETURN_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=NodeLayout(
                template=(
                    Keyword("return"), _R(0),
                    ChildSequence(separator=",", separator_region=2),
                    Keyword(";"), _R(1),
                ),
                defaults={0: " ", 1: "\n"},
            ),
            accepts=_EXPRESSIONS,
        ),
        NodeSpec(
            kind=NodeKind.EXPRESSION_STATEMENT,
            category=NodeCategory.STATEMENT,
            layout=NodeLayout(
                template=(ChildSlot(0), Keyword(";"), _R(0)), defaults={0: "\n"}
            ),
            accepts=_EXPRESSIONS,
            min_children=1,
            max_children=1,
        ),
        NodeSpec(
            kind=NodeKind.VARIABLE_DECLARATION,
            category=NodeCategory.DECLARATION,
            layout=NodeLayout(
                template=(AttrText("type_name"), _R(0), AttrText("variable_name"), _R(1)),
                defaults={0: " ", 1: " "},
            ),
            attributes=("type_name", "variable_name"),
            max_children=0,
        ),
        NodeSpec(
            kind=NodeKind.BINARY_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(ChildSlot(0), AttrText("operator"), _R(0), ChildSlot(1)),
                defaults={0: " "},
            ),
            accepts=_EXPRESSIONS,
            attributes=("operator",),
            min_children=2,
            max_children=2,
        ),
        NodeSpec(
            kind=NodeKind.UNARY_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(AttrText("operator"), _R(0), ChildSlot(0)), defaults={0: ""}
            ),
            accepts=_EXPRESSIONS,
            attributes=("operator",),
            min_children=1,
            max_children=1,
        ),
        NodeSpec(
            kind=NodeKind.BASIC_LITERAL_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(template=(AttrText("value"), _R(0)), defaults={0: ""}),
            attributes=("literal_type", "value"),
            max_children=0,
        ),
        NodeSpec(
            kind=NodeKind.VARIABLE_REFERENCE_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(AttrText("variable_name"), _R(0)), defaults={0: ""}
            ),
            attributes=("variable_name",),
            max_children=0,
        ),
        NodeSpec(
            kind=NodeKind.FUNCTION_INVOCATION_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(
                    AttrText("function_name"), _R(0), Keyword("("), _R(1),
                    ChildSequence(separator=",", separator_region=3),
                    Keyword(")"), _R(2),
                ),
                defaults={0: "", 1: "", 2: ""},
            ),
            accepts=_EXPRESSIONS,
            attributes=("function_name",),
        ),
        NodeSpec(
            kind=NodeKind.BRACKETED_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(Keyword("("), _R(0), ChildSlot(0), Keyword(")"), _R(1)),
                defaults={0: "", 1: ""},
            ),
            accepts=_EXPRESSIONS,
            min_children=1,
            max_children=1,
        ),
        NodeSpec(
            kind=NodeKind.CONNECTOR_INIT_EXPR,
            category=NodeCategory.EXPRESSION,
            layout=NodeLayout(
                template=(
                    Keyword("create"), _R(0), AttrText("connector_name"), _R(1),
                    Keyword("("), _R(2),
                    ChildSequence(separator=",", separator_region=4),
                    Keyword(")"), _R(3),
                ),
                defaults={0: " ", 1: "", 2: "", 3: ""},
            ),
            accepts=_EXPRESSIONS,
            attributes=("connector_name",),
        ),
    )
}


def get_node_spec(kind: NodeKind) -> NodeSpec:
    """Return the spec of a node kind."""
    return NODE_SPECS[kind]
