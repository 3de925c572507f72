"""Node: the single element of a checkbox tree.

A Node owns its children exclusively and keeps only a weak reference to its
parent, so ownership flows one way (parent -> children) and no reference
cycle exists between a parent and its children.

Every node carries a reference to the EventBus it emits on. The bus is handed
down to children when they are attached, which means nodes assembled before
they join a Tree can already publish events if they were given a bus.
"""

import logging
import weakref
from typing import (
    Any, Callable, Dict, Iterable, Iterator, List, Mapping, NamedTuple, Optional, Union,
)

from ..errors import InvalidDescriptorError, InvariantViolation, PositionOutOfRangeError
from ..events import (
    EventBus, NodeAdded, NodeChecked, NodeExpanded, NodeIndeterminate, NodeRemoved, TreeEvent,
)
from .adapter import NodeAdapter
from .collector import SnapshotCollector
from .traverser import (
    BreadthFirstTraverser,
    DepthFirstPostOrderTraverser,
    DepthFirstPreOrderTraverser,
)

logger = logging.getLogger(__name__)

NodeId = Union[str, int]

_ADAPTER = NodeAdapter()


class ChildrenCheckState(NamedTuple):
    """Summary of the immediate children's check states.

    Indeterminate children count as neither checked nor unchecked. A node
    without children reports ``all_checked`` and ``all_unchecked`` together.
    """
    all_checked: bool
    all_unchecked: bool
    mixed: bool


def clamp_position(position: int, size: int, strict: bool = False) -> int:
    """Fit ``position`` into the insertion range ``[0, size]``.

    Negative positions mean "before the first child", not Python-style
    indexing from the end.

    Args:
        position: Requested index
        size: Current number of items
        strict: Raise instead of correcting an out-of-range position

    Returns:
        The effective index

    Raises:
        PositionOutOfRangeError: If strict and position is out of range
    """
    if 0 <= position <= size:
        return position
    if strict:
        raise PositionOutOfRangeError(
            f"Position {position} is outside the valid range [0, {size}]"
        )
    return 0 if position < 0 else size


class Node:
    """A tree element with tri-state checkbox semantics.

    Attributes:
        id: Opaque identifier, unique within a tree
        label: Display text
        checked: Checkbox state
        indeterminate: True when the children disagree; never True
            together with ``checked``
        expanded: Whether a view shows the children
        children: Owned child nodes, in display order
        bus: EventBus used to announce changes, or None
    """

    def __init__(self,
                 id: NodeId,
                 label: Optional[str] = None,
                 checked: bool = False,
                 expanded: bool = True,
                 indeterminate: bool = False,
                 children: Optional[Iterable['Node']] = None,
                 bus: Optional[EventBus] = None):
        self.id = id
        self.label = label if label is not None else str(id)
        self.checked = bool(checked)
        self.indeterminate = bool(indeterminate) and not self.checked
        if indeterminate and self.checked:
            logger.debug(f"Node {id!r} was both checked and indeterminate; keeping checked")
        self.expanded = bool(expanded)
        self.bus = bus
        self._parent_ref: Optional[weakref.ref] = None
        self.children: List['Node'] = []

        for child in children or ():
            self._check_attachable(child)
            child.parent = self
            child._adopt_bus(bus)
            self.children.append(child)

    # Construction from plain data

    @classmethod
    def from_descriptor(cls, descriptor: Mapping[str, Any],
                        bus: Optional[EventBus] = None) -> 'Node':
        """Build a node and its subtree from a nested descriptor.

        A descriptor looks like ``{id, label, checked?, expanded?,
        indeterminate?, children?}``. Missing flags take the constructor
        defaults at every depth.

        Raises:
            InvalidDescriptorError: If the descriptor is not a mapping, has no
                id, or its children are not a list
        """
        if not isinstance(descriptor, Mapping):
            raise InvalidDescriptorError(
                f"Node descriptor must be a mapping, got {type(descriptor).__name__}"
            )
        if 'id' not in descriptor:
            raise InvalidDescriptorError(f"Node descriptor has no 'id': {dict(descriptor)!r}")

        children_data = descriptor.get('children') or []
        if not isinstance(children_data, (list, tuple)):
            raise InvalidDescriptorError(
                f"'children' of node {descriptor['id']!r} must be a list"
            )

        return cls(
            id=descriptor['id'],
            label=descriptor.get('label'),
            checked=descriptor.get('checked', False),
            expanded=descriptor.get('expanded', True),
            indeterminate=descriptor.get('indeterminate', False),
            children=[cls.from_descriptor(child, bus=bus) for child in children_data],
            bus=bus,
        )

    def to_dict(self, include_expanded: bool = False) -> Dict[str, Any]:
        """Detached nested-dict copy of this subtree."""
        return SnapshotCollector(_ADAPTER, include_expanded=include_expanded).collect(self, 0)

    # Parent link

    @property
    def parent(self) -> Optional['Node']:
        """The parent node, or None for a root or a detached node."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @parent.setter
    def parent(self, node: Optional['Node']) -> None:
        self._parent_ref = weakref.ref(node) if node is not None else None

    @property
    def depth(self) -> int:
        """Distance to the root (0 for a root)."""
        return _ADAPTER.get_depth(self)

    def is_root(self) -> bool:
        return self.parent is None

    def is_leaf(self) -> bool:
        return not self.children

    def is_intermediate(self) -> bool:
        """True when the check state is indeterminate."""
        return bool(self.indeterminate)

    # Event plumbing

    def _emit(self, event: TreeEvent) -> None:
        if self.bus is not None:
            self.bus.emit(event.kind, event)

    def _adopt_bus(self, bus: Optional[EventBus]) -> None:
        """Give ``bus`` to every node of this subtree that has none yet."""
        if bus is None:
            return
        for node in self.iter_depth_first():
            if node.bus is None:
                node.bus = bus

    def _assign_bus(self, bus: Optional[EventBus]) -> None:
        """Set ``bus`` on every node of this subtree, replacing any other."""
        for node in self.iter_depth_first():
            node.bus = bus

    # Structural operations

    def _check_attachable(self, node: 'Node') -> None:
        if node.parent is not None:
            raise InvariantViolation(
                f"Node {node.id!r} already belongs to {node.parent.id!r}; "
                f"detach or move it instead"
            )
        if node is self or any(ancestor is node for ancestor in _ADAPTER.get_ancestors(self)):
            raise InvariantViolation(
                f"Attaching {node.id!r} under {self.id!r} would create a cycle"
            )

    def index_of(self, node: 'Node') -> Optional[int]:
        """Index of ``node`` among the children (by identity), or None."""
        for index, child in enumerate(self.children):
            if child is node:
                return index
        return None

    def index_in_parent(self) -> Optional[int]:
        parent = self.parent
        return parent.index_of(self) if parent is not None else None

    def add_child(self, node: 'Node') -> int:
        """Append ``node`` as the last child and emit ``nodeAdded``.

        Returns:
            The position the child was added at
        """
        self._check_attachable(node)
        node.parent = self
        node._adopt_bus(self.bus)
        self.children.append(node)

        position = len(self.children) - 1
        self._emit(NodeAdded(node=node, parent=self, position=position))
        return position

    def insert_child_at(self, node: 'Node', position: int, strict: bool = False) -> int:
        """Insert ``node`` at ``position`` without emitting anything.

        Out-of-range positions are clamped into ``[0, len(children)]`` unless
        ``strict`` is set. Callers that need notification emit themselves.

        Returns:
            The effective position
        """
        position = clamp_position(position, len(self.children), strict)
        self._check_attachable(node)
        node.parent = self
        node._adopt_bus(self.bus)
        self.children.insert(position, node)
        return position

    def detach_child(self, node: 'Node') -> Optional[int]:
        """Remove ``node`` from the children without emitting anything."""
        index = self.index_of(node)
        if index is None:
            return None
        del self.children[index]
        node.parent = None
        return index

    def remove_child(self, node: 'Node') -> Optional[int]:
        """Detach ``node`` and emit ``nodeRemoved``; no-op if not a child.

        Returns:
            The index the child had, or None if it was not present
        """
        index = self.detach_child(node)
        if index is not None:
            self._emit(NodeRemoved(node=node, parent=self, position=index))
        return index

    # Traversal

    def iter_depth_first(self) -> Iterator['Node']:
        """Pre-order walk of this subtree, starting with this node."""
        for node, _ in DepthFirstPreOrderTraverser(_ADAPTER).traverse(self):
            yield node

    def iter_breadth_first(self) -> Iterator['Node']:
        """Level-order walk of this subtree, starting with this node."""
        for node, _ in BreadthFirstTraverser(_ADAPTER).traverse(self):
            yield node

    def iter_post_order(self) -> Iterator['Node']:
        """Children-before-parent walk of this subtree."""
        for node, _ in DepthFirstPostOrderTraverser(_ADAPTER).traverse(self):
            yield node

    def traverse_depth_first(self, visit: Callable[['Node'], Any]) -> None:
        for node in self.iter_depth_first():
            visit(node)

    def traverse_breadth_first(self, visit: Callable[['Node'], Any]) -> None:
        for node in self.iter_breadth_first():
            visit(node)

    def find(self, node_id: NodeId) -> Optional['Node']:
        """First node in this subtree (pre-order) whose id equals ``node_id``."""
        for node in self.iter_depth_first():
            if node.id == node_id:
                return node
        return None

    def contains_id(self, node_id: NodeId) -> bool:
        return self.find(node_id) is not None

    def is_descendant_of(self, other: 'Node') -> bool:
        """True if ``other`` is a strict ancestor of this node (compared by id)."""
        return any(ancestor.id == other.id for ancestor in _ADAPTER.get_ancestors(self))

    # Check state

    def children_check_state(self) -> ChildrenCheckState:
        all_checked = all(child.checked and not child.indeterminate for child in self.children)
        all_unchecked = all(
            not child.checked and not child.indeterminate for child in self.children
        )
        return ChildrenCheckState(
            all_checked=all_checked,
            all_unchecked=all_unchecked,
            mixed=not all_checked and not all_unchecked,
        )

    def set_checked(self, checked: bool) -> None:
        """Check or uncheck this node and its whole subtree.

        Every node of the subtree gets ``checked`` and loses its indeterminate
        flag; ``nodeChecked`` is emitted per node in pre-order. The parent
        chain is then recomputed from the children. This node is not
        recomputed from its own children, it was just set explicitly.
        """
        checked = bool(checked)
        for node in list(self.iter_depth_first()):
            node.checked = checked
            node.indeterminate = False
            node._emit(NodeChecked(node=node, checked=checked))

        parent = self.parent
        if parent is not None:
            parent.update_check_state_from_children()

    def update_check_state_from_children(self) -> None:
        """Recompute this node's state from its children, then the ancestors'.

        All children checked gives checked, all unchecked gives unchecked,
        anything else gives indeterminate. Exactly one of ``nodeChecked`` or
        ``nodeIndeterminate`` is emitted per recomputed node. The walk always
        continues to the root, even when a node's state did not change.
        A node without children keeps its own state and emits nothing, but
        its ancestors are still recomputed.
        """
        node: Optional[Node] = self
        while node is not None:
            node.recompute_check_state()
            node = node.parent

    def recompute_check_state(self) -> None:
        """Recompute only this node from its children, without touching ancestors.

        No-op for a node without children.
        """
        if not self.children:
            return
        state = self.children_check_state()
        if state.mixed:
            self.checked = False
            self.indeterminate = True
            self._emit(NodeIndeterminate(node=self, indeterminate=True))
        else:
            self.checked = state.all_checked
            self.indeterminate = False
            self._emit(NodeChecked(node=self, checked=self.checked))

    # Expansion

    def set_expanded(self, expanded: bool) -> None:
        """Set the expanded flag and emit ``nodeExpanded``."""
        self.expanded = bool(expanded)
        self._emit(NodeExpanded(node=self, expanded=self.expanded))

    def toggle_expanded(self) -> bool:
        """Flip the expanded flag; returns the new value."""
        self.set_expanded(not self.expanded)
        return self.expanded

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self.id!r}, label={self.label!r})"
