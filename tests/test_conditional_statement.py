"""
Tests for conditional statements (if / else if / while).

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

import pytest

from composer_ast.core.ast_tree import (
    AstTree,
    ChangeAction,
    NodeKind,
    emit_source,
    load_source,
)
from composer_ast.core.exceptions import (
    FragmentParseError,
    InvalidMutationError,
    MalformedTreeError,
)
from composer_ast.fragments import create_statement_fragment, parse_fragment

from conftest import assignment, var


def _else_if(ast_tree):
    return ast_tree.root.children[0].children[1]


class TestIngestion:
    """Tests for building conditional statements from raw JSON."""

    def test_else_if_scenario(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        assert node.type == "ElseIfStatement"
        assert node.get_condition().type == "BinaryExpr"
        assert len(node.children) == 1
        (child,) = node.children
        assert child.type == "AssignmentStatement"
        assert child.parent is node

    def test_condition_is_not_a_child(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        condition = node.get_condition()
        assert condition not in node.children
        assert condition.parent is node

    def test_condition_must_be_an_expression(self, tree, else_if_raw) -> None:
        else_if_raw["condition"] = assignment("a", "1")
        with pytest.raises(MalformedTreeError) as exc_info:
            tree.factory.build(else_if_raw)
        assert exc_info.value.field == "condition"
        assert tree.nodes == {}

    def test_missing_condition_stays_unset(self, tree, else_if_raw) -> None:
        del else_if_raw["condition"]
        node = tree.factory.build(else_if_raw)
        assert node.get_condition() is None
        with pytest.raises(MalformedTreeError) as exc_info:
            node.to_source()
        assert exc_info.value.field == "condition"

    def test_to_json_includes_condition(self, tree, else_if_raw) -> None:
        raw = tree.factory.build(else_if_raw).to_json()
        assert raw["condition"]["type"] == "BinaryExpr"
        assert raw["condition"]["operator"] == ">"
        assert [c["type"] for c in raw["children"]] == ["AssignmentStatement"]


class TestSetCondition:
    """Tests for set_condition."""

    def test_none_is_noop(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        condition = node.get_condition()
        received = []
        tree.subscribe(received.append)
        assert node.set_condition(None) is None
        assert node.get_condition() is condition
        assert received == []

    def test_same_condition_is_noop(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        assert node.set_condition(node.get_condition()) is None

    def test_unset_to_set(self, tree) -> None:
        node = tree.factory.create(NodeKind.WHILE_STATEMENT)
        expr = tree.factory.build(var("running"))
        change = node.set_condition(expr)
        assert node.get_condition() is expr
        assert expr.parent is node
        assert change.action is ChangeAction.SET_ATTRIBUTE
        assert change.attribute == "condition"
        assert change.old_value is None
        assert change.new_value is expr

    def test_replacement_detaches_previous(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        previous = node.get_condition()
        expr = tree.factory.build(var("ready"))
        change = node.set_condition(expr)
        assert change.old_value is previous
        assert previous.parent is None
        assert not any(tree.contains(n) for n in previous.iter_nodes())
        assert node.get_condition() is expr

    def test_observers_see_consistent_links(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        previous = node.get_condition()
        seen = []

        def observer(change):
            seen.append((change.new_value.parent, previous.parent))

        tree.subscribe(observer)
        node.set_condition(tree.factory.build(var("ready")))
        assert seen == [(node, None)]

    def test_rejects_statement(self, tree) -> None:
        node = tree.factory.create(NodeKind.IF_STATEMENT)
        with pytest.raises(InvalidMutationError) as exc_info:
            node.set_condition(tree.factory.build(assignment("a", "1")))
        assert exc_info.value.operation == "set_condition"
        assert node.get_condition() is None

    def test_rejects_attached_expression(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        other = tree.factory.create(NodeKind.IF_STATEMENT)
        with pytest.raises(InvalidMutationError):
            other.set_condition(node.get_condition())

    def test_rejects_expression_of_other_tree(self, tree) -> None:
        node = tree.factory.create(NodeKind.IF_STATEMENT)
        foreign = AstTree.create().factory.build(var("a"))
        with pytest.raises(InvalidMutationError):
            node.set_condition(foreign)


class TestSetConditionFromString:
    """Tests for set_condition_from_string."""

    def test_none_is_noop(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        condition = node.get_condition()
        assert node.set_condition_from_string(None) is None
        assert node.get_condition() is condition

    def test_replaces_condition_keeps_body(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        previous = node.get_condition()
        body = node.children

        node.set_condition_from_string("x > 5")

        condition = node.get_condition()
        assert condition is not previous
        assert condition.type == "BinaryExpr"
        assert condition.get_attribute("operator") == ">"
        left, right = condition.children
        assert left.get_attribute("variable_name") == "x"
        assert right.get_attribute("value") == "5"
        assert condition.parent is node
        assert node.children == body
        assert "(x > 5)" in node.to_source()

    def test_repeated_calls_replace(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        node.set_condition_from_string("x > 5")
        first = node.get_condition()
        node.set_condition_from_string("done")
        assert node.get_condition().type == "VariableReferenceExpr"
        assert first.parent is None

    def test_in_source(self, if_else_source) -> None:
        ast_tree = load_source(if_else_source)
        _else_if(ast_tree).set_condition_from_string("  x > 5 ")
        assert emit_source(ast_tree) == if_else_source.replace("c < 2", "x > 5")

    @pytest.mark.parametrize("text", ["x >", "x = 5", "if (x) {}"])
    def test_parse_failure_leaves_condition(self, if_else_source, text) -> None:
        ast_tree = load_source(if_else_source)
        node = _else_if(ast_tree)
        condition = node.get_condition()
        node_count = len(ast_tree.nodes)
        with pytest.raises(FragmentParseError):
            node.set_condition_from_string(text)
        assert node.get_condition() is condition
        assert condition.parent is node
        assert len(ast_tree.nodes) == node_count
        assert emit_source(ast_tree) == if_else_source

    def test_builds_statement_programmatically(self, tree) -> None:
        loop = tree.factory.create(NodeKind.WHILE_STATEMENT)
        loop.set_condition_from_string("running")
        body = tree.factory.build(parse_fragment(create_statement_fragment("tick();")))
        body.whitespace.set_region(0, "\n")
        loop.add_child(body)
        assert loop.to_source() == "while (running) {\ntick();\n}\n"


class TestConditionSlotAccess:
    """The condition slot is only reachable through set_condition."""

    def test_set_attribute_cannot_write_condition(self, tree, else_if_raw) -> None:
        node = tree.factory.build(else_if_raw)
        previous = node.get_condition()
        expr = tree.factory.build(var("ready"))
        with pytest.raises(InvalidMutationError, match="set_condition") as exc_info:
            node.set_attribute("condition", expr)
        assert exc_info.value.operation == "set_attribute"
        assert node.get_condition() is previous
        assert previous.parent is node
        assert expr.parent is None

    def test_any_binding_fits_the_condition(self, if_else_source) -> None:
        ast_tree = load_source(if_else_source)
        _else_if(ast_tree).set_condition_from_string("a || b && c")
        text = emit_source(ast_tree)
        assert "else if (a || b && c) {" in text
        assert load_source(text).root.to_json() == ast_tree.root.to_json()

    def test_rejects_connector_initializer(self, tree) -> None:
        node = tree.factory.create(NodeKind.WHILE_STATEMENT)
        init = tree.factory.build({"type": "connector_init_expr", "connector_name": "Client"})
        with pytest.raises(InvalidMutationError):
            node.set_condition(init)
        assert node.get_condition() is None
