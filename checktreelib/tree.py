"""Tree: an ordered forest of Nodes sharing one EventBus.

The Tree owns the list of roots, resolves ids, performs drag-and-drop moves
and re-exposes the node events through its subscription surface. Every
mutation completes its structural change before announcing it, and listeners
run inline, so a listener may call back into the Tree.
"""

import json
import logging
from typing import Any, Callable, Iterable, Iterator, List, Mapping, Optional, Set

from .config import TreeConfig
from .core.adapter import NodeAdapter
from .core.node import Node, NodeId, clamp_position
from .errors import ConfigurationError, InvariantViolation
from .events import (
    EventBus, Listener, NodeAdded, NodeMoved, NodeRemoved, TreeEvent, TreeEventKind,
)

logger = logging.getLogger(__name__)

_ADAPTER = NodeAdapter()


class Tree:
    """An ordered forest of checkbox nodes.

    Example:
        >>> tree = Tree.from_descriptors([
        ...     {'id': 'docs', 'label': 'Docs', 'children': [
        ...         {'id': 'a', 'label': 'A'},
        ...         {'id': 'b', 'label': 'B'},
        ...     ]},
        ... ])
        >>> _ = tree.on_node_moved(lambda event: print(event.node.id, event.position))
        >>> moved = tree.move_to(tree.find_node_by_id('b'), None, 0)
        b 0
    """

    def __init__(self,
                 roots: Optional[Iterable[Node]] = None,
                 bus: Optional[EventBus] = None,
                 config: Optional[TreeConfig] = None):
        """Create a tree and attach the given roots in order.

        Args:
            roots: Initial root nodes
            bus: EventBus to publish on (default: a new EventBus)
            config: Behaviour switches (default: TreeConfig())

        Raises:
            ConfigurationError: If the config does not validate
        """
        self.config = config or TreeConfig()
        config_errors = self.config.validate()
        if config_errors:
            raise ConfigurationError(
                f"Invalid configuration: {'; '.join(config_errors)}"
            )

        self.bus = bus or EventBus()
        self.roots: List[Node] = []
        for root in roots or ():
            self.add_root(root)

    @classmethod
    def from_descriptors(cls,
                         descriptors: Iterable[Mapping[str, Any]],
                         bus: Optional[EventBus] = None,
                         config: Optional[TreeConfig] = None) -> 'Tree':
        """Build a tree from a list of nested node descriptors."""
        roots = [Node.from_descriptor(descriptor) for descriptor in descriptors]
        tree = cls(roots, bus=bus, config=config)
        logger.info(f"Built tree with {len(tree.roots)} roots and {len(tree)} nodes")
        return tree

    # A snapshot is a list of descriptors
    from_snapshot = from_descriptors

    @classmethod
    def from_json(cls, text: str, **kwargs) -> 'Tree':
        """Build a tree from the JSON text produced by ``to_json``."""
        return cls.from_descriptors(json.loads(text), **kwargs)

    # Subscription surface

    def on(self, kind: TreeEventKind, listener: Listener) -> Listener:
        """Subscribe to an event kind; returns the listener for later ``off``."""
        self.bus.on(kind, listener)
        return listener

    def once(self, kind: TreeEventKind, listener: Listener) -> Listener:
        self.bus.once(kind, listener)
        return listener

    def off(self, kind: TreeEventKind, listener: Listener) -> None:
        self.bus.off(kind, listener)

    def on_node_added(self, listener: Callable[[NodeAdded], Any]) -> Listener:
        return self.on(TreeEventKind.NODE_ADDED, listener)

    def on_node_removed(self, listener: Callable[[NodeRemoved], Any]) -> Listener:
        return self.on(TreeEventKind.NODE_REMOVED, listener)

    def on_node_moved(self, listener: Callable[[NodeMoved], Any]) -> Listener:
        return self.on(TreeEventKind.NODE_MOVED, listener)

    def on_node_checked(self, listener: Listener) -> Listener:
        return self.on(TreeEventKind.NODE_CHECKED, listener)

    def on_node_indeterminate(self, listener: Listener) -> Listener:
        return self.on(TreeEventKind.NODE_INDETERMINATE, listener)

    def on_node_expanded(self, listener: Listener) -> Listener:
        return self.on(TreeEventKind.NODE_EXPANDED, listener)

    def _emit(self, event: TreeEvent) -> None:
        self.bus.emit(event.kind, event)

    def _verify(self) -> None:
        if self.config.verify_invariants:
            self.check_invariants()

    # Lookup

    def iter_nodes(self) -> Iterator[Node]:
        """Pre-order walk over every root in turn."""
        for root in list(self.roots):
            yield from root.iter_depth_first()

    def __iter__(self) -> Iterator[Node]:
        return self.iter_nodes()

    def __len__(self) -> int:
        return sum(1 for _ in self.iter_nodes())

    def __contains__(self, node: object) -> bool:
        if not isinstance(node, Node):
            return False
        top = node
        while top.parent is not None:
            top = top.parent
        return self.root_index(top) is not None

    def root_index(self, node: Node) -> Optional[int]:
        """Index of ``node`` in ``roots`` (by identity), or None."""
        for index, root in enumerate(self.roots):
            if root is node:
                return index
        return None

    def find_node_by_id(self, node_id: NodeId) -> Optional[Node]:
        """First node (pre-order across roots) whose id equals ``node_id``.

        This is a linear scan; trees are UI-sized so no index is kept.
        """
        for root in self.roots:
            found = root.find(node_id)
            if found is not None:
                return found
        return None

    # Structural operations

    def add_root(self, node: Node) -> int:
        """Append ``node`` as the last root and emit ``nodeAdded``.

        The whole subtree is switched to this tree's bus.

        Returns:
            The position of the new root

        Raises:
            InvariantViolation: If the node is still attached to a parent or
                is already a root of this tree
        """
        if node.parent is not None:
            raise InvariantViolation(
                f"Node {node.id!r} is a child of {node.parent.id!r} and cannot become a root"
            )
        if self.root_index(node) is not None:
            raise InvariantViolation(f"Node {node.id!r} is already a root")

        node._assign_bus(self.bus)
        self.roots.append(node)

        position = len(self.roots) - 1
        self._emit(NodeAdded(node=node, parent=None, position=position))
        self._verify()
        return position

    def _detach(self, node: Node) -> Optional[int]:
        parent = node.parent
        if parent is not None:
            return parent.detach_child(node)
        index = self.root_index(node)
        if index is not None:
            del self.roots[index]
        return index

    def move_to(self, node: Node, new_parent: Optional[Node], position: int) -> bool:
        """Re-parent ``node`` (with its subtree) under ``new_parent`` at ``position``.

        ``new_parent=None`` moves the node to root level. Moves onto the node
        itself, into its own subtree, or beyond ``config.max_depth`` are
        ignored without an event. Otherwise exactly one ``nodeMoved`` is
        emitted after the structural change; its ``position`` is the index
        the node ended up at.

        Check states are not touched by default, so the old and new parents
        keep the state they had before the move even if their children now
        disagree with it. With ``config.recompute_parents`` both parents are
        recomputed after ``nodeMoved`` (see ``reconcile_check_states`` for a
        full pass).

        Returns:
            True if the node was moved

        Raises:
            PositionOutOfRangeError: If ``config.strict_positions`` is set and
                ``position`` is out of range
        """
        if node is new_parent:
            logger.debug(f"Ignoring move of {node.id!r} onto itself")
            return False
        if new_parent is not None and node.contains_id(new_parent.id):
            logger.debug(
                f"Ignoring move of {node.id!r} into its own descendant {new_parent.id!r}"
            )
            return False
        if self.config.max_depth is not None:
            target_depth = 0 if new_parent is None else new_parent.depth + 1
            deepest = target_depth + _ADAPTER.subtree_height(node)
            if not self.config.allows_depth(deepest):
                logger.debug(
                    f"Ignoring move of {node.id!r}: depth {deepest} exceeds "
                    f"max_depth {self.config.max_depth}"
                )
                return False

        if self.config.strict_positions:
            siblings = self.roots if new_parent is None else new_parent.children
            size = sum(1 for sibling in siblings if sibling is not node)
            clamp_position(position, size, strict=True)

        old_parent = node.parent
        old_position = self._detach(node)

        if new_parent is None:
            position = clamp_position(position, len(self.roots))
            self.roots.insert(position, node)
            node.parent = None
            node._assign_bus(self.bus)
        else:
            position = new_parent.insert_child_at(node, position)

        self._emit(NodeMoved(
            node=node,
            new_parent=new_parent,
            position=position,
            old_position=old_position,
        ))
        if self.config.recompute_parents:
            self._recompute_parents(old_parent, new_parent)
        self._verify()
        return True

    def _recompute_parents(self, *parents: Optional[Node]) -> None:
        done: List[Node] = []
        for parent in parents:
            if parent is None or any(parent is seen for seen in done):
                continue
            done.append(parent)
            parent.update_check_state_from_children()

    def remove(self, node: Node) -> Optional[int]:
        """Detach ``node`` from the tree and emit ``nodeRemoved``.

        With ``config.recompute_parents`` the former parent is recomputed
        from its remaining children afterwards.

        Returns:
            The index the node had under its parent (or among the roots), or
            None if the node is not part of this tree
        """
        if node not in self:
            return None

        parent = node.parent
        if parent is not None:
            index = parent.remove_child(node)
            if self.config.recompute_parents:
                self._recompute_parents(parent)
        else:
            index = self.root_index(node)
            del self.roots[index]
            self._emit(NodeRemoved(node=node, parent=None, position=index))
        self._verify()
        return index

    # Bulk state operations

    def expand_all(self) -> int:
        """Expand every collapsed node that has children.

        Returns:
            Number of nodes whose state changed
        """
        return self._set_expanded_everywhere(True)

    def collapse_all(self) -> int:
        """Collapse every expanded node that has children."""
        return self._set_expanded_everywhere(False)

    def _set_expanded_everywhere(self, expanded: bool) -> int:
        changed = 0
        for node in list(self.iter_nodes()):
            if node.children and node.expanded != expanded:
                node.set_expanded(expanded)
                changed += 1
        return changed

    def reconcile_check_states(self) -> None:
        """Make loaded check states consistent with each other.

        Nodes loaded as checked push their state down their subtree. Then
        every node with children is recomputed from its children, bottom-up.
        """
        for node in list(self.iter_nodes()):
            if node.checked and any(
                not descendant.checked for descendant in node.iter_depth_first()
            ):
                node.set_checked(True)

        for root in list(self.roots):
            for node in list(root.iter_post_order()):
                node.recompute_check_state()

    # Snapshot

    def snapshot(self) -> List[dict]:
        """Detached nested-dict copy of the forest.

        Each entry is ``{id, label, checked, indeterminate, children}`` with
        plain values only, safe to serialize.
        """
        return [root.to_dict() for root in self.roots]

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.snapshot(), indent=indent)

    # Invariants

    def check_invariants(self) -> None:
        """Verify the forest and check-state invariants.

        Raises:
            InvariantViolation: On the first violation found
        """
        seen: Set[int] = set()
        for root in self.roots:
            if root.parent is not None:
                raise InvariantViolation(
                    f"Root {root.id!r} has parent {root.parent.id!r}"
                )
            for node in root.iter_depth_first():
                if id(node) in seen:
                    raise InvariantViolation(
                        f"Node {node.id!r} is reachable from more than one place"
                    )
                seen.add(id(node))

                if node.checked and node.indeterminate:
                    raise InvariantViolation(
                        f"Node {node.id!r} is both checked and indeterminate"
                    )
                for child in node.children:
                    if child.parent is not node:
                        raise InvariantViolation(
                            f"Child {child.id!r} of {node.id!r} points to a different parent"
                        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(roots={[root.id for root in self.roots]!r})"
