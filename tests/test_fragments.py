"""
Tests for the fragment bridge (source text -> raw JSON).

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import pytest

from composer_ast.core.exceptions import FragmentParseError
from composer_ast.fragments import (
    FragmentKind,
    create_expression_fragment,
    create_source_fragment,
    create_statement_fragment,
    parse_fragment,
    parse_source,
)


def test_expression_fragment_strips_surrounding_whitespace() -> None:
    fragment = create_expression_fragment("  x > 5 \n")
    assert fragment.source == "x > 5"
    assert fragment.kind == FragmentKind.EXPRESSION


def test_source_fragment_is_verbatim() -> None:
    fragment = create_source_fragment("\n x = 1;\n")
    assert fragment.source == "\n x = 1;\n"
    assert fragment.kind == FragmentKind.COMPILATION_UNIT


def test_parse_binary_expression() -> None:
    raw = parse_fragment(create_expression_fragment("x > 5"))
    assert raw["type"] == "BinaryExpr"
    assert raw["operator"] == ">"
    left, right = raw["children"]
    assert left == {
        "type": "VariableReferenceExpr",
        "variable_name": "x",
        "ws": {"0": " "},
    }
    assert right["type"] == "BasicLiteralExpr"
    assert right["value"] == "5"
    assert raw["ws"] == {"0": " "}


def test_operator_precedence() -> None:
    raw = parse_fragment(create_expression_fragment("a || b && c == 1 + 2 * 3"))
    assert raw["operator"] == "||"
    and_expr = raw["children"][1]
    assert and_expr["operator"] == "&&"
    eq_expr = and_expr["children"][1]
    assert eq_expr["operator"] == "=="
    add_expr = eq_expr["children"][1]
    assert add_expr["operator"] == "+"
    assert add_expr["children"][1]["operator"] == "*"


def test_unary_and_bracketed() -> None:
    raw = parse_fragment(create_expression_fragment("!(a)"))
    assert raw["type"] == "UnaryExpr"
    assert raw["operator"] == "!"
    assert raw["children"][0]["type"] == "BracketedExpr"


@pytest.mark.parametrize(
    "text,literal_type",
    [("42", "int"), ("1.5", "float"), ('"hi"', "string"), ("true", "boolean")],
)
def test_literal_types(text: str, literal_type: str) -> None:
    raw = parse_fragment(create_expression_fragment(text))
    assert raw["type"] == "BasicLiteralExpr"
    assert raw["literal_type"] == literal_type
    assert raw["value"] == text


def test_identifier_starting_with_keyword_is_a_name() -> None:
    raw = parse_fragment(create_expression_fragment("iffy"))
    assert raw == {
        "type": "VariableReferenceExpr",
        "variable_name": "iffy",
        "ws": {"0": ""},
    }


def test_function_invocation_separator_regions() -> None:
    raw = parse_fragment(create_expression_fragment("f(a ,b,  c)"))
    assert raw["type"] == "FunctionInvocationExpr"
    assert raw["function_name"] == "f"
    assert len(raw["children"]) == 3
    # 0 after name, 1 after '(', 2 after ')', 3.. after each comma
    assert raw["ws"] == {"0": "", "1": "", "2": "", "3": "", "4": "  "}
    assert raw["children"][0]["ws"] == {"0": " "}


def test_parse_return_statement() -> None:
    raw = parse_fragment(create_statement_fragment("return a, b;"))
    assert raw["type"] == "ReturnStatement"
    assert [c["variable_name"] for c in raw["children"]] == ["a", "b"]
    assert raw["ws"] == {"0": " ", "1": "", "2": " "}


def test_parse_connector_definition() -> None:
    raw = parse_fragment(
        create_statement_fragment('Client ep = create Client("http://x", 5);')
    )
    assert raw["type"] == "variable_definition_statement"
    declaration, initializer = raw["children"]
    assert declaration["type_name"] == "Client"
    assert declaration["variable_name"] == "ep"
    assert initializer["type"] == "connector_init_expr"
    assert initializer["connector_name"] == "Client"
    assert len(initializer["children"]) == 2


def test_parse_if_else_chain(if_else_source: str) -> None:
    raw = parse_source(if_else_source)
    assert raw["type"] == "CompilationUnit"
    assert raw["ws"] == {"0": "// pick a branch\n"}
    (chain,) = raw["children"]
    assert chain["type"] == "IfElseStatement"
    assert [c["type"] for c in chain["children"]] == [
        "IfStatement",
        "ElseIfStatement",
        "ElseStatement",
    ]
    else_if = chain["children"][1]
    assert else_if["condition"]["operator"] == "<"
    assert else_if["ws"] == {
        "0": " ",
        "1": " ",
        "2": "",
        "3": " ",
        "4": "\n  ",
        "5": " ",
    }


def test_comments_are_kept_in_trailing_region() -> None:
    raw = parse_source("x = 1; // note\ny = 2;\n")
    first = raw["children"][0]
    assert first["ws"]["1"] == " // note\n"


def test_empty_source() -> None:
    assert parse_source("") == {"type": "CompilationUnit", "children": [], "ws": {"0": ""}}


@pytest.mark.parametrize("text", ["x >", "x = 1", "(a", "x > 5;"])
def test_invalid_expression_fragment(text: str) -> None:
    with pytest.raises(FragmentParseError) as exc_info:
        parse_fragment(create_expression_fragment(text))
    assert exc_info.value.code == "FRAGMENT_PARSE_ERROR"
    assert exc_info.value.fragment == text


def test_invalid_source_reports_position() -> None:
    with pytest.raises(FragmentParseError) as exc_info:
        parse_source("x = 1;\nif (a {\n}\n")
    assert exc_info.value.line == 2
    assert exc_info.value.column is not None
