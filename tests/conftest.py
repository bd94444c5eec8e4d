"""
Pytest fixtures for AST composer tests.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import pytest

from composer_ast.core.ast_tree import AstTree
from composer_ast.core.config import ComposerConfig

IF_ELSE_SOURCE = (
    "// pick a branch\n"
    "if (a) {\n"
    "  b = 1;\n"
    "} else if (c < 2) {\n"
    "  b = 2;\n"
    "} else {\n"
    "  b = 3;\n"
    "}\n"
)


def literal(value, literal_type="int"):
    """Raw BasicLiteralExpr."""
    return {"type": "BasicLiteralExpr", "literal_type": literal_type, "value": value}


def var(name):
    """Raw VariableReferenceExpr."""
    return {"type": "VariableReferenceExpr", "variable_name": name}


def assignment(name, value):
    """Raw AssignmentStatement `name = value;`."""
    return {"type": "AssignmentStatement", "children": [var(name), literal(value)]}


@pytest.fixture
def config():
    """Default configuration."""
    return ComposerConfig()


@pytest.fixture
def tree(config):
    """Empty tree with default configuration."""
    return AstTree.create(config)


@pytest.fixture
def lenient_tree():
    """Empty tree that does not enforce child categories."""
    return AstTree.create(ComposerConfig(strict_structure=False))


@pytest.fixture
def else_if_raw():
    """Raw ElseIfStatement with a binary condition and one assignment."""
    return {
        "type": "ElseIfStatement",
        "condition": {
            "type": "BinaryExpr",
            "operator": ">",
            "children": [var("a"), literal("1")],
            "ws": {"0": " "},
        },
        "children": [assignment("b", "2")],
    }


@pytest.fixture
def connector_raw():
    """Raw variable definition whose initializer creates a connector."""
    return {
        "type": "variable_definition_statement",
        "children": [
            {
                "type": "VariableDeclaration",
                "type_name": "Client",
                "variable_name": "ep",
            },
            {
                "type": "connector_init_expr",
                "connector_name": "Client",
                "children": [literal('"http://localhost:9090"', "string")],
            },
        ],
    }


@pytest.fixture
def if_else_source():
    """Source with an if / else if / else chain."""
    return IF_ELSE_SOURCE


@pytest.fixture
def source_file(tmp_path):
    """Source file on disk containing IF_ELSE_SOURCE."""
    path = tmp_path / "main.bal"
    path.write_text(IF_ELSE_SOURCE, encoding="utf-8")
    return path
