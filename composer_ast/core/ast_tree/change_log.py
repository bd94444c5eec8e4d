"""
Undo/redo log built on tree change descriptions.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Deque, List, Optional

from ..exceptions import InvalidMutationError
from .conditional import ConditionalStatement
from .models import CONDITION_SLOT, ChangeAction, NodeChange
from .node import AstNode
from .tree import AstTree

logger = logging.getLogger(__name__)


class ChangeLog:
    """
    Records changes published by a tree and replays them backwards/forwards.

    Replayed mutations are silent, so they are not recorded again. Any new
    change clears the redo history.
    """

    def __init__(self, limit: Optional[int] = None) -> None:
        """
        Initialize change log.

        Args:
            limit: Maximum number of undoable changes (None or 0 = unbounded)
        """
        self._undo: Deque[NodeChange] = deque(maxlen=limit or None)
        self._redo: List[NodeChange] = []
        self._tree: Optional[AstTree] = None

    @classmethod
    def for_tree(cls, tree: AstTree) -> ChangeLog:
        """Create a log sized from tree config and attach it."""
        log = cls(limit=tree.config.undo_limit)
        log.attach(tree)
        return log

    def attach(self, tree: AstTree) -> None:
        """Start recording changes of a tree."""
        self.detach()
        self._tree = tree
        tree.subscribe(self.record)

    def detach(self) -> None:
        """Stop recording."""
        if self._tree is not None:
            self._tree.unsubscribe(self.record)
            self._tree = None

    @property
    def changes(self) -> List[NodeChange]:
        """Undoable changes, oldest first."""
        return list(self._undo)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def record(self, change: NodeChange) -> None:
        """Observer callback."""
        self._undo.append(change)
        self._redo.clear()

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def undo(self) -> Optional[NodeChange]:
        """
        Revert the most recent change.

        Returns:
            The reverted change, or None if there is nothing to undo
        """
        if not self._undo:
            return None
        change = self._undo.pop()
        self._apply(change, reverse=True)
        self._redo.append(change)
        logger.debug("Undo %s on %s", change.action.value, change.node_id)
        return change

    def redo(self) -> Optional[NodeChange]:
        """
        Re-apply the most recently undone change.

        Returns:
            The re-applied change, or None if there is nothing to redo
        """
        if not self._redo:
            return None
        change = self._redo.pop()
        self._apply(change, reverse=False)
        self._undo.append(change)
        logger.debug("Redo %s on %s", change.action.value, change.node_id)
        return change

    def _node(self, node_id: str) -> AstNode:
        node = self._tree.nodes.get(node_id) if self._tree is not None else None
        if node is None:
            raise InvalidMutationError(
                f"Node {node_id} is no longer part of the tree", operation="undo"
            )
        return node

    def _apply(self, change: NodeChange, reverse: bool) -> None:
        node = self._node(change.node_id)
        with node.tree.replay():
            self._replay(node, change, reverse)

    def _replay(self, node: AstNode, change: NodeChange, reverse: bool) -> None:
        before, after = (
            (change.new_value, change.old_value)
            if reverse
            else (change.old_value, change.new_value)
        )
        if change.action is ChangeAction.SET_ATTRIBUTE:
            if change.attribute == CONDITION_SLOT and isinstance(
                node, ConditionalStatement
            ):
                node.restore_condition(after)
            else:
                node.set_attribute(change.attribute, after, silent=True)
        elif change.action is ChangeAction.ADD_CHILD:
            if reverse:
                node.remove_child(change.new_value, silent=True)
            else:
                node.add_child(change.new_value, index=change.index, silent=True)
        elif change.action is ChangeAction.REMOVE_CHILD:
            if reverse:
                node.add_child(change.old_value, index=change.index, silent=True)
            else:
                node.remove_child(change.old_value, silent=True)
        elif change.action is ChangeAction.REPLACE_CHILD:
            node.replace_child(before, after, silent=True)
