"""
Conditional statements: If, ElseIf and While.

These kinds share one shape: a condition expression held in a distinguished
slot plus a body of child statements.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional

from ...fragments import create_expression_fragment, parse_fragment
from ..exceptions import InvalidMutationError, MalformedTreeError
from .models import CONDITION_SLOT, NodeCategory, NodeChange
from .node import AstNode
from .token_rules import binding

logger = logging.getLogger(__name__)


class ConditionalStatement(AstNode):
    """
    Statement with a condition and a body.

    The condition slot starts unset. `set_condition` moves it to set and
    every later call replaces the previous condition, which is detached from
    the tree.
    """

    def get_condition(self) -> Optional[AstNode]:
        """Return the condition expression (None while unset)."""
        return self._attributes.get(CONDITION_SLOT)

    def set_condition(
        self, condition: Optional[AstNode], silent: bool = False
    ) -> Optional[NodeChange]:
        """
        Install a condition expression.

        Does nothing when condition is None. The new condition is linked to
        this statement and the previous one detached before the change is
        published, so observers never see a dangling parent link. The slot is
        rendered between parentheses, so operator binding does not matter here.

        Args:
            condition: Expression node from this tree, not attached elsewhere
            silent: Do not notify observers

        Returns:
            Change description, or None for a no-op

        Raises:
            InvalidMutationError: If condition is not an attachable expression
        """
        if condition is None:
            return None
        if condition is self.get_condition():
            return None
        self._check_condition(condition)
        previous = self.get_condition()
        self.tree.adopt(condition, self)
        if previous is not None:
            self.tree.release(previous)
        return self._store_attribute(CONDITION_SLOT, condition, silent)

    def set_condition_from_string(self, text: Optional[str]) -> Optional[NodeChange]:
        """
        Replace the condition with an expression parsed from text.

        Does nothing when text is None. On any parse or build failure the
        current condition is left untouched and the error propagates.

        Raises:
            FragmentParseError: If text is not a valid expression
            UnrecognizedNodeTypeError: If the parsed fragment has unknown types
            MalformedTreeError: If the parsed fragment is malformed
        """
        if text is None:
            return None
        fragment = create_expression_fragment(text)
        parsed = parse_fragment(fragment)
        condition = self.get_factory().build(parsed)
        logger.debug("Setting condition of %s from %r", self.node_id, fragment.source)
        return self.set_condition(condition)

    def restore_condition(self, condition: Optional[AstNode]) -> None:
        """
        Put back a previous condition state without notifying observers.

        Used by the change log; unlike `set_condition` it accepts None to
        return the slot to unset.
        """
        if condition is not None:
            self.set_condition(condition, silent=True)
            return
        previous = self.get_condition()
        if previous is not None:
            self.tree.release(previous)
        self._store_attribute(CONDITION_SLOT, None, True)

    def _check_condition(self, condition: Any) -> None:
        self._check_link(condition, "set_condition")
        if (
            condition.spec.category is not NodeCategory.EXPRESSION
            or binding(condition.kind, None) == 0
        ):
            raise InvalidMutationError(
                f"Condition must be an expression, got {condition.type}",
                operation="set_condition",
            )

    def direct_nodes(self) -> List[AstNode]:
        condition = self.get_condition()
        nodes = super().direct_nodes()
        return [condition] + nodes if condition is not None else nodes

    def init_from_json(self, raw: Mapping[str, Any]) -> None:
        """
        Populate the statement from a raw JSON node.

        The condition is ingested first, then the body statements.
        """
        self._init_own_fields(raw)
        raw_condition = raw.get(CONDITION_SLOT)
        if raw_condition is not None:
            condition = self.get_factory().build(raw_condition)
            if condition.spec.category is not NodeCategory.EXPRESSION:
                self.tree.release(condition)
                raise MalformedTreeError(
                    f"{self.type}: condition must be an expression, got {condition.type}",
                    node_type=self.type,
                    field=CONDITION_SLOT,
                )
            self.set_condition(condition, silent=True)
        self._init_children(raw)

    def to_json(self) -> Dict[str, Any]:
        raw = super().to_json()
        condition = self.get_condition()
        if condition is not None:
            raw[CONDITION_SLOT] = condition.to_json()
        return raw
