"""
Tests for the exception hierarchy.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import pytest

from composer_ast.core.exceptions import (
    ComposerError,
    ConfigurationError,
    FragmentParseError,
    InvalidMutationError,
    MalformedTreeError,
    UnrecognizedNodeTypeError,
)


def test_base_error_fields() -> None:
    error = ComposerError("boom", code="X", details={"a": 1})
    assert str(error) == "boom"
    assert error.message == "boom"
    assert error.code == "X"
    assert error.details == {"a": 1}
    assert ComposerError("plain").details == {}


@pytest.mark.parametrize(
    "error,code",
    [
        (UnrecognizedNodeTypeError("m", node_type="Foo"), "UNRECOGNIZED_NODE_TYPE"),
        (FragmentParseError("m", fragment="x >", line=1, column=4), "FRAGMENT_PARSE_ERROR"),
        (MalformedTreeError("m", node_type="IfStatement", field="ws"), "MALFORMED_TREE"),
        (InvalidMutationError("m", operation="add_child"), "INVALID_MUTATION"),
        (ConfigurationError("m", config_key="max_depth"), "CONFIGURATION_ERROR"),
    ],
)
def test_subclass_codes(error, code) -> None:
    assert isinstance(error, ComposerError)
    assert error.code == code


def test_subclass_payloads() -> None:
    parse_error = FragmentParseError("m", fragment="x >", line=1, column=4)
    assert (parse_error.fragment, parse_error.line, parse_error.column) == ("x >", 1, 4)
    assert MalformedTreeError("m", field="children").field == "children"
    assert InvalidMutationError("m", operation="set_condition").operation == "set_condition"
    assert UnrecognizedNodeTypeError("m", node_type="Foo").node_type == "Foo"
    assert ConfigurationError("m", config_key="log_level").config_key == "log_level"
