"""
Arena-style AST tree.

The tree owns a node store and the parent relation. Nodes never hold a
reference to their parent; `AstNode.parent` is looked up here by node_id.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import itertools
import logging
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Dict, Iterator, List, Optional

from ..config import ComposerConfig
from .models import NodeChange, NodeKind

if TYPE_CHECKING:
    from .factory import NodeFactory
    from .node import AstNode

logger = logging.getLogger(__name__)

ChangeObserver = Callable[[NodeChange], None]


@dataclass(eq=False)
class AstTree:
    """
    AST tree with its node store.

    `nodes` contains every node currently reachable from the root plus nodes
    created but not yet attached. Detached subtrees are dropped from the store.
    """

    tree_id: str
    config: ComposerConfig = field(default_factory=ComposerConfig)
    file_path: Optional[str] = None
    root_id: Optional[str] = None
    nodes: Dict[str, "AstNode"] = field(default_factory=dict)
    parent_map: Dict[str, Optional[str]] = field(default_factory=dict)
    observers: List[ChangeObserver] = field(default_factory=list)
    _ids: Iterator[int] = field(default_factory=lambda: itertools.count(1), repr=False)
    _factory: Optional["NodeFactory"] = field(default=None, repr=False)
    _replaying: bool = field(default=False, repr=False)

    @classmethod
    def create(cls, config: Optional[ComposerConfig] = None) -> AstTree:
        """Create a new empty AstTree with generated tree_id."""
        return cls(tree_id=str(uuid.uuid4()), config=config or ComposerConfig())

    @property
    def factory(self) -> "NodeFactory":
        """Node factory bound to this tree."""
        if self._factory is None:
            from .factory import NodeFactory

            self._factory = NodeFactory(self)
        return self._factory

    @property
    def root(self) -> Optional["AstNode"]:
        """Designated root node."""
        if self.root_id is None:
            return None
        return self.nodes.get(self.root_id)

    @property
    def replaying(self) -> bool:
        """True while a change log puts back a previously recorded state."""
        return self._replaying

    @contextmanager
    def replay(self) -> Iterator[None]:
        """
        Run mutations that restore earlier states of this tree.

        Grammar checks are skipped inside the block: every state reached by
        undo/redo already existed, including partly built nodes.
        """
        previous = self._replaying
        self._replaying = True
        try:
            yield
        finally:
            self._replaying = previous

    def set_root(self, node: "AstNode") -> None:
        """Designate a parentless node of this tree as the root."""
        if node.tree is not self or self.parent_map.get(node.node_id) is not None:
            raise ValueError(f"Node {node.node_id} cannot be the root of this tree")
        self.root_id = node.node_id

    def new_node_id(self, kind: NodeKind) -> str:
        """Generate a node_id unique within this tree."""
        return f"{kind.value}:{next(self._ids)}"

    def register(self, node: "AstNode") -> None:
        """Add a freshly created, parentless node to the store."""
        self.nodes[node.node_id] = node
        self.parent_map[node.node_id] = None

    def contains(self, node: "AstNode") -> bool:
        """Return True if the node is in the store."""
        return self.nodes.get(node.node_id) is node

    def parent_of(self, node_id: str) -> Optional["AstNode"]:
        """Return parent node of node_id (None for root, detached or unknown)."""
        parent_id = self.parent_map.get(node_id)
        if parent_id is None:
            return None
        return self.nodes.get(parent_id)

    def adopt(self, child: "AstNode", parent: "AstNode") -> None:
        """
        Link child to parent.

        A previously released subtree is put back into the store with its
        internal parent links restored.
        """
        if not self.contains(child):
            self._restore(child)
        self.parent_map[child.node_id] = parent.node_id

    def release(self, node: "AstNode") -> None:
        """Detach a subtree and drop it from the store."""
        for descendant in node.iter_nodes():
            self.nodes.pop(descendant.node_id, None)
            self.parent_map.pop(descendant.node_id, None)
        if self.root_id == node.node_id:
            self.root_id = None

    def _restore(self, node: "AstNode") -> None:
        self.register(node)
        for sub in node.direct_nodes():
            self._restore(sub)
            self.parent_map[sub.node_id] = node.node_id

    def subscribe(self, observer: ChangeObserver) -> None:
        """Register a change observer."""
        if observer not in self.observers:
            self.observers.append(observer)

    def unsubscribe(self, observer: ChangeObserver) -> None:
        """Remove a change observer."""
        if observer in self.observers:
            self.observers.remove(observer)

    def notify(self, change: NodeChange) -> None:
        """Hand a change description to every observer."""
        logger.debug(
            "Tree %s change: %s on %s", self.tree_id, change.action.value, change.node_id
        )
        for observer in list(self.observers):
            observer(change)
