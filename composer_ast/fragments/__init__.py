"""
Fragment bridge - turns source text into raw JSON nodes.

This package is designed as a standalone component: it only produces raw JSON
(dicts) and knows nothing about the typed AST.

Public API:
  - create_expression_fragment(text) -> Fragment
  - create_statement_fragment(text) -> Fragment
  - create_source_fragment(text) -> Fragment
  - parse_fragment(fragment) -> dict
  - parse_source(text) -> dict

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from .fragment import (
    Fragment,
    FragmentKind,
    create_expression_fragment,
    create_source_fragment,
    create_statement_fragment,
    parse_fragment,
    parse_source,
)

__all__ = [
    "Fragment",
    "FragmentKind",
    "create_expression_fragment",
    "create_source_fragment",
    "create_statement_fragment",
    "parse_fragment",
    "parse_source",
]
