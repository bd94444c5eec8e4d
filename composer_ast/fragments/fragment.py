"""
Source fragments exchanged with the parser.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

from .parser import (
    START_COMPILATION_UNIT,
    START_EXPRESSION,
    START_STATEMENT,
    parse_text,
)


class FragmentKind(str, Enum):
    """What a fragment is expected to contain."""

    EXPRESSION = "expression"
    STATEMENT = "statement"
    COMPILATION_UNIT = "compilation_unit"


_START_SYMBOLS = {
    FragmentKind.EXPRESSION: START_EXPRESSION,
    FragmentKind.STATEMENT: START_STATEMENT,
    FragmentKind.COMPILATION_UNIT: START_COMPILATION_UNIT,
}


@dataclass(frozen=True)
class Fragment:
    """Syntactically self-contained piece of source text."""

    source: str
    kind: FragmentKind


def create_expression_fragment(text: str) -> Fragment:
    """Wrap a single expression (surrounding whitespace is dropped)."""
    return Fragment(source=text.strip(), kind=FragmentKind.EXPRESSION)


def create_statement_fragment(text: str) -> Fragment:
    """Wrap a single statement (surrounding whitespace is dropped)."""
    return Fragment(source=text.strip(), kind=FragmentKind.STATEMENT)


def create_source_fragment(text: str) -> Fragment:
    """Wrap a whole compilation unit, kept verbatim."""
    return Fragment(source=text, kind=FragmentKind.COMPILATION_UNIT)


def parse_fragment(fragment: Fragment) -> Dict[str, Any]:
    """
    Parse a fragment into a raw JSON node.

    Raises:
        FragmentParseError: If the fragment text is malformed
    """
    return parse_text(fragment.source, _START_SYMBOLS[fragment.kind])


def parse_source(text: str) -> Dict[str, Any]:
    """
    Parse a whole compilation unit into a raw `CompilationUnit` node.

    Raises:
        FragmentParseError: If the text is malformed
    """
    return parse_fragment(create_source_fragment(text))
