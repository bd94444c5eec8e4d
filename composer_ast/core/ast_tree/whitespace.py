"""
Whitespace and formatting model.

Every node kind has a rendering template: a fixed sequence of keywords,
attribute text, child slots and whitespace regions. A region holds the literal
text (spaces, newlines, comments) that follows one of the node's own tokens.
Regions captured from the original source override the kind's defaults, so
untouched parts of a tree render back exactly as they were parsed.

Author: Vasiliy Zdanovskiy
email: vasilyvz@gmail.com
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple, Union

from ..exceptions import MalformedTreeError

if TYPE_CHECKING:
    from .node import AstNode


@dataclass(frozen=True)
class Keyword:
    """Fixed token text (keyword or punctuation)."""

    text: str


@dataclass(frozen=True)
class AttrText:
    """Token whose text is a node attribute (name, operator, literal)."""

    name: str


@dataclass(frozen=True)
class Region:
    """Whitespace region by index."""

    index: int


@dataclass(frozen=True)
class ConditionSlot:
    """Position of the condition sub-expression."""


@dataclass(frozen=True)
class ChildSlot:
    """Single child at a fixed position."""

    index: int


@dataclass(frozen=True)
class ChildSequence:
    """
    Children from `start` to the end.

    When `separator` is set, the i-th separator is followed by region
    `separator_region + i`.
    """

    start: int = 0
    separator: Optional[str] = None
    separator_region: Optional[int] = None


TemplatePart = Union[Keyword, AttrText, Region, ConditionSlot, ChildSlot, ChildSequence]


@dataclass(frozen=True)
class NodeLayout:
    """Rendering template and default descriptor of one node kind."""

    template: Tuple[TemplatePart, ...]
    defaults: Mapping[int, str] = field(default_factory=dict)
    separator_default: str = " "

    @property
    def separator_region(self) -> Optional[int]:
        """First region index used by repeated separators (None if none)."""
        for part in self.template:
            if isinstance(part, ChildSequence) and part.separator is not None:
                return part.separator_region
        return None

    def accepts_region(self, index: int) -> bool:
        """Return True if `index` is a region of this template."""
        if index in self.defaults:
            return True
        base = self.separator_region
        return base is not None and index >= base

    def default_for(self, index: int) -> str:
        """Return default text for a region."""
        if index in self.defaults:
            return self.defaults[index]
        if self.accepts_region(index):
            return self.separator_default
        raise KeyError(index)


class WhitespaceDescriptor:
    """Per-node region texts on top of the kind's default descriptor."""

    def __init__(self, layout: NodeLayout) -> None:
        self.layout = layout
        self.regions: Dict[int, str] = {}

    @property
    def default_regions(self) -> Dict[int, str]:
        """Default region texts of the node kind."""
        return dict(self.layout.defaults)

    def region(self, index: int) -> str:
        """Return captured text for a region, falling back to the default."""
        if index in self.regions:
            return self.regions[index]
        return self.layout.default_for(index)

    def set_region(self, index: int, text: str) -> None:
        """Override a single region."""
        if not self.layout.accepts_region(index):
            raise KeyError(index)
        self.regions[index] = text

    def load(self, raw_ws: Any, node_type: str) -> None:
        """
        Load captured whitespace from a raw node's `ws` field.

        Args:
            raw_ws: Mapping of region index (int or numeric string) to text
            node_type: Type tag used in error messages

        Raises:
            MalformedTreeError: If the mapping or one of its entries is invalid
        """
        if not isinstance(raw_ws, Mapping):
            raise MalformedTreeError(
                f"{node_type}: 'ws' must be a mapping", node_type=node_type, field="ws"
            )
        loaded: Dict[int, str] = {}
        for key, text in raw_ws.items():
            try:
                index = int(key)
            except (TypeError, ValueError):
                raise MalformedTreeError(
                    f"{node_type}: invalid whitespace region index {key!r}",
                    node_type=node_type,
                    field="ws",
                ) from None
            if not self.layout.accepts_region(index):
                raise MalformedTreeError(
                    f"{node_type}: unknown whitespace region {index}",
                    node_type=node_type,
                    field="ws",
                )
            if not isinstance(text, str):
                raise MalformedTreeError(
                    f"{node_type}: whitespace region {index} must be a string",
                    node_type=node_type,
                    field="ws",
                )
            loaded[index] = text
        self.regions.update(loaded)

    def captured(self) -> Dict[str, str]:
        """Captured regions in wire form (string keys, sorted)."""
        return {str(i): self.regions[i] for i in sorted(self.regions)}


def render(node: AstNode) -> str:
    """
    Render a node back to source text.

    Raises:
        MalformedTreeError: If the node is incomplete (missing condition,
            child or attribute required by its template)
    """
    out: List[str] = []
    _render_into(node, out)
    return "".join(out)


def _render_into(node: AstNode, out: List[str]) -> None:
    ws = node.whitespace
    children = node.children
    for part in node.spec.layout.template:
        if isinstance(part, Keyword):
            out.append(part.text)
        elif isinstance(part, Region):
            out.append(ws.region(part.index))
        elif isinstance(part, AttrText):
            value = node.get_attribute(part.name)
            if value is None:
                raise MalformedTreeError(
                    f"{node.type} has no '{part.name}' to render",
                    node_type=node.type,
                    field=part.name,
                )
            out.append(str(value))
        elif isinstance(part, ConditionSlot):
            condition = node.get_attribute("condition")
            if condition is None:
                raise MalformedTreeError(
                    f"{node.type} has no condition to render",
                    node_type=node.type,
                    field="condition",
                )
            _render_into(condition, out)
        elif isinstance(part, ChildSlot):
            if part.index >= len(children):
                raise MalformedTreeError(
                    f"{node.type} is missing child {part.index}",
                    node_type=node.type,
                    field="children",
                )
            _render_into(children[part.index], out)
        elif isinstance(part, ChildSequence):
            for i, child in enumerate(children[part.start :]):
                if i and part.separator is not None:
                    out.append(part.separator)
                    out.append(ws.region(part.separator_region + i - 1))
                _render_into(child, out)
