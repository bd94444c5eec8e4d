"""
Base AST node.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Mapping, Optional, Tuple

from ..exceptions import InvalidMutationError, MalformedTreeError
from .grammar_shims import is_connector_declaration
from .models import (
    CONDITION_SLOT,
    ChangeAction,
    NodeChange,
    NodeKind,
    PathStep,
)
from .node_specs import NODE_SPECS, NodeSpec
from .token_rules import attribute_problem, clause_order_problem, operand_problem
from .whitespace import WhitespaceDescriptor, render

if TYPE_CHECKING:
    from .factory import NodeFactory
    from .tree import AstTree

logger = logging.getLogger(__name__)


class AstNode:
    """
    Node of an AST tree.

    Holds its attributes, ordered children and whitespace regions. The parent
    relation is kept by the owning AstTree. All mutations go through
    `set_attribute`, `add_child`, `remove_child` and `replace_child`, which
    return a NodeChange and hand it to the tree's observers unless `silent`.
    """

    def __init__(self, kind: NodeKind, tree: AstTree) -> None:
        self.kind = NodeKind(kind)
        self.spec: NodeSpec = NODE_SPECS[self.kind]
        self.tree = tree
        self.node_id = tree.new_node_id(self.kind)
        self.whitespace = WhitespaceDescriptor(self.spec.layout)
        self._attributes: Dict[str, Any] = {}
        self._children: List[AstNode] = []
        tree.register(self)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.node_id}>"

    @property
    def type(self) -> str:
        """Type tag of this node."""
        return self.kind.value

    @property
    def parent(self) -> Optional[AstNode]:
        """Owning node (None for the root and for detached nodes)."""
        return self.tree.parent_of(self.node_id)

    @property
    def children(self) -> Tuple[AstNode, ...]:
        """Ordered children."""
        return tuple(self._children)

    def get_factory(self) -> NodeFactory:
        """Return the factory of the owning tree."""
        return self.tree.factory

    def get_attribute(self, name: str, default: Any = None) -> Any:
        """Return attribute value."""
        return self._attributes.get(name, default)

    def direct_nodes(self) -> List[AstNode]:
        """Nodes owned directly by this node (slots first, then children)."""
        return list(self._children)

    def iter_nodes(self) -> Iterator[AstNode]:
        """Iterate over this subtree depth-first, in source order."""
        yield self
        for sub in self.direct_nodes():
            yield from sub.iter_nodes()

    def index_of(self, child: AstNode) -> int:
        """
        Return position of child (by identity).

        Raises:
            InvalidMutationError: If child is not a child of this node
        """
        position = self._position_of(child)
        if position is not None:
            return position
        raise InvalidMutationError(
            f"{child!r} is not a child of {self!r}", operation="index_of"
        )

    def path(self) -> Tuple[PathStep, ...]:
        """Address from the root: child indices and 'condition' slots."""
        steps: List[PathStep] = []
        node = self
        parent = node.parent
        while parent is not None:
            if parent.get_attribute(CONDITION_SLOT) is node:
                steps.append(CONDITION_SLOT)
            else:
                steps.append(parent.index_of(node))
            node, parent = parent, parent.parent
        return tuple(reversed(steps))

    # Mutation API

    def set_attribute(self, name: str, value: Any, silent: bool = False) -> NodeChange:
        """
        Set attribute value.

        Only the kind's scalar attributes are accepted, and the value must be
        valid text for the grammar terminal it renders as. A new operator must
        still bind correctly with the operands and within the parent.

        Args:
            name: Attribute name
            value: New value
            silent: Do not notify observers (internal/bulk rebuilds)

        Returns:
            Change description

        Raises:
            InvalidMutationError: If the name or value is not accepted
        """
        if not self.tree.replaying:
            problem = self._attribute_change_problem(name, value)
            if problem:
                raise InvalidMutationError(problem, operation="set_attribute")
        return self._store_attribute(name, value, silent)

    def _store_attribute(self, name: str, value: Any, silent: bool) -> NodeChange:
        old_value = self._attributes.get(name)
        self._attributes[name] = value
        change = NodeChange(
            action=ChangeAction.SET_ATTRIBUTE,
            node_id=self.node_id,
            path=self.path(),
            attribute=name,
            old_value=old_value,
            new_value=value,
        )
        self._publish(change, silent)
        return change

    def _attribute_change_problem(self, name: str, value: Any) -> Optional[str]:
        if name not in self.spec.attributes:
            if name == CONDITION_SLOT and self.spec.has_condition:
                return f"Use set_condition to change the condition of {self.type}"
            return f"{self.type} has no attribute '{name}'"
        problem = attribute_problem(self.kind, name, value)
        if problem or name != "operator":
            return problem
        problem = self._arrangement_problem(self._children, operator=value)
        if problem:
            return problem
        parent = self.parent
        if parent is not None:
            position = parent._position_of(self)
            if position is not None:
                return operand_problem(
                    parent.kind,
                    parent.get_attribute("operator"),
                    position,
                    self.kind,
                    value,
                )
        return None

    def add_child(
        self, child: AstNode, index: Optional[int] = None, silent: bool = False
    ) -> NodeChange:
        """
        Append (or insert at index) a child and link it to this node.

        Raises:
            InvalidMutationError: If child cannot be attached here
        """
        self._check_attachable(child, "add_child")
        limit = self.spec.max_children
        if limit is not None and len(self._children) >= limit:
            raise InvalidMutationError(
                f"{self.type} accepts at most {limit} children", operation="add_child"
            )
        position = len(self._children) if index is None else index
        if not 0 <= position <= len(self._children):
            raise InvalidMutationError(
                f"Child index out of range: {index}", operation="add_child"
            )
        arranged = list(self._children)
        arranged.insert(position, child)
        self._check_arrangement(arranged, "add_child")
        self._children.insert(position, child)
        self.tree.adopt(child, self)
        change = NodeChange(
            action=ChangeAction.ADD_CHILD,
            node_id=self.node_id,
            path=self.path(),
            index=position,
            new_value=child,
        )
        self._publish(change, silent)
        return change

    def remove_child(self, child: AstNode, silent: bool = False) -> NodeChange:
        """
        Remove a child; the removed subtree is detached from the tree.

        Raises:
            InvalidMutationError: If child is not a child of this node, or
                removing it would leave fewer children than the kind needs
        """
        position = self.index_of(child)
        if not self.tree.replaying and len(self._children) <= self.spec.min_children:
            raise InvalidMutationError(
                f"{self.type} needs at least {self.spec.min_children} children; "
                "use replace_child instead",
                operation="remove_child",
            )
        arranged = list(self._children)
        del arranged[position]
        self._check_arrangement(arranged, "remove_child")
        del self._children[position]
        self.tree.release(child)
        change = NodeChange(
            action=ChangeAction.REMOVE_CHILD,
            node_id=self.node_id,
            path=self.path(),
            index=position,
            old_value=child,
        )
        self._publish(change, silent)
        return change

    def replace_child(
        self, old: AstNode, new: AstNode, silent: bool = False
    ) -> NodeChange:
        """
        Put `new` in place of `old`; `old` is detached from the tree.

        Raises:
            InvalidMutationError: If old is not a child or new cannot be attached
        """
        position = self.index_of(old)
        self._check_attachable(new, "replace_child")
        arranged = list(self._children)
        arranged[position] = new
        self._check_arrangement(arranged, "replace_child")
        self._children[position] = new
        self.tree.release(old)
        self.tree.adopt(new, self)
        change = NodeChange(
            action=ChangeAction.REPLACE_CHILD,
            node_id=self.node_id,
            path=self.path(),
            index=position,
            old_value=old,
            new_value=new,
        )
        self._publish(change, silent)
        return change

    def _publish(self, change: NodeChange, silent: bool) -> None:
        if not silent:
            self.tree.notify(change)

    def _position_of(self, child: AstNode) -> Optional[int]:
        for i, existing in enumerate(self._children):
            if existing is child:
                return i
        return None

    def _check_arrangement(self, children: List[AstNode], operation: str) -> None:
        if self.tree.replaying:
            return
        problem = self._arrangement_problem(children)
        if problem:
            raise InvalidMutationError(problem, operation=operation)

    def _arrangement_problem(
        self, children: List[AstNode], operator: Optional[str] = None
    ) -> Optional[str]:
        """Order and operand binding problems of a prospective child list."""
        if self.kind is NodeKind.IF_ELSE_STATEMENT:
            if not self.tree.config.strict_structure:
                return None
            return clause_order_problem([child.kind for child in children])
        if operator is None:
            operator = self.get_attribute("operator")
        for position, child in enumerate(children):
            problem = operand_problem(
                self.kind,
                operator,
                position,
                child.kind,
                child.get_attribute("operator"),
            )
            if problem:
                return problem
        return None

    def _check_attachable(self, child: Any, operation: str) -> None:
        self._check_link(child, operation)
        if self.tree.config.strict_structure:
            problem = self._category_problem(child)
            if problem:
                raise InvalidMutationError(problem, operation=operation)

    def _check_link(self, child: Any, operation: str) -> None:
        if child is None:
            raise InvalidMutationError(
                f"Cannot attach None to {self.type}", operation=operation
            )
        if not isinstance(child, AstNode):
            raise InvalidMutationError(
                f"Expected AstNode, got {type(child).__name__}", operation=operation
            )
        if child.tree is not self.tree:
            raise InvalidMutationError(
                f"{child!r} belongs to another tree", operation=operation
            )
        if child.parent is not None:
            raise InvalidMutationError(
                f"{child!r} is already attached to {child.parent!r}",
                operation=operation,
            )
        if child.node_id == self.tree.root_id:
            raise InvalidMutationError(
                "The root node cannot be attached", operation=operation
            )
        node: Optional[AstNode] = self
        while node is not None:
            if node is child:
                raise InvalidMutationError(
                    f"{child!r} is an ancestor of {self!r}", operation=operation
                )
            node = node.parent

    def _category_problem(self, child: AstNode) -> Optional[str]:
        if child.spec.category not in self.spec.accepts:
            return (
                f"{self.type} does not accept {child.spec.category.value} "
                f"{child.type} as a child"
            )
        return None

    # JSON ingestion / emission

    def init_from_json(self, raw: Mapping[str, Any]) -> None:
        """
        Populate this node and its subtree from a raw JSON node.

        Children are obtained from the factory, initialized recursively and
        appended in order. Ingestion does not notify observers.

        Raises:
            MalformedTreeError: If a required field is missing or invalid
            UnrecognizedNodeTypeError: If a child type is not registered
        """
        self._init_own_fields(raw)
        self._init_children(raw)

    def _init_own_fields(self, raw: Mapping[str, Any]) -> None:
        node_type = raw.get("type") if isinstance(raw, Mapping) else None
        if node_type not in (self.kind.value, self.spec.type_tag):
            raise MalformedTreeError(
                f"Cannot initialize {self.type} from raw node of type {node_type!r}",
                node_type=node_type,
                field="type",
            )
        for name in self.spec.attributes:
            value = raw.get(name)
            if value is None:
                raise MalformedTreeError(
                    f"{node_type}: missing required field '{name}'",
                    node_type=node_type,
                    field=name,
                )
            problem = attribute_problem(self.kind, name, value)
            if problem:
                raise MalformedTreeError(
                    f"{node_type}: {problem}", node_type=node_type, field=name
                )
            self._attributes[name] = value
        raw_ws = raw.get("ws")
        if raw_ws is not None:
            self.whitespace.load(raw_ws, node_type)

    def _init_children(self, raw: Mapping[str, Any]) -> None:
        node_type = raw.get("type")
        raw_children = raw.get("children")
        if raw_children is None:
            raw_children = []
        if not isinstance(raw_children, list):
            raise MalformedTreeError(
                f"{node_type}: 'children' must be a list",
                node_type=node_type,
                field="children",
            )
        count = len(raw_children)
        upper = self.spec.max_children
        if count < self.spec.min_children or (upper is not None and count > upper):
            raise MalformedTreeError(
                f"{node_type}: unexpected number of children ({count})",
                node_type=node_type,
                field="children",
            )
        factory = self.get_factory()
        for raw_child in raw_children:
            if is_connector_declaration(raw_child):
                child = factory.create_connector_declaration()
            else:
                child = factory.create_from_json(raw_child)
            try:
                child.init_from_json(raw_child)
                if self.tree.config.strict_structure:
                    problem = self._category_problem(child)
                    if problem:
                        raise MalformedTreeError(
                            problem, node_type=node_type, field="children"
                        )
                problem = self._arrangement_problem(list(self._children) + [child])
                if problem:
                    raise MalformedTreeError(
                        f"{node_type}: {problem}",
                        node_type=node_type,
                        field="children",
                    )
                self.add_child(child, silent=True)
            except Exception:
                self.tree.release(child)
                raise

    def to_json(self) -> Dict[str, Any]:
        """Return the raw JSON representation of this subtree."""
        raw: Dict[str, Any] = {"type": self.spec.type_tag}
        for name in self.spec.attributes:
            if name in self._attributes:
                raw[name] = self._attributes[name]
        if self._children:
            raw["children"] = [child.to_json() for child in self._children]
        ws = self.whitespace.captured()
        if ws:
            raw["ws"] = ws
        return raw

    def to_source(self) -> str:
        """
        Render this subtree back to source text.

        Raises:
            MalformedTreeError: If the subtree is incomplete
        """
        return render(self)
