"""Command side of the view/controller boundary.

The controller turns user intents, addressed by node id, into model calls.
It never touches view state; views learn about every change from events.
"""

import logging
from enum import Enum
from typing import Any, Callable, List, Mapping, Optional

from .core.node import Node, NodeId
from .errors import ContainerNotFoundError
from .tree import Tree
from .view import MirrorView, TreeView

logger = logging.getLogger(__name__)


class DropPosition(str, Enum):
    """Where a dragged node lands relative to the drop target."""
    BEFORE = "before"
    AFTER = "after"
    CHILD = "child"


DropHook = Callable[[Node, Node, DropPosition], Any]


class TreeController:
    """Routes commands to a Tree and owns the view bound to it.

    Each command resolves its ids with ``Tree.find_node_by_id``. An id that
    does not resolve turns the command into a no-op that is logged at DEBUG
    and returns False.
    """

    def __init__(self,
                 tree: Tree,
                 container: Any,
                 view_factory: Callable[[Tree, Any], TreeView] = MirrorView,
                 before_drop: Optional[DropHook] = None,
                 after_drop: Optional[DropHook] = None):
        """Create the controller and its view.

        Args:
            tree: Model to drive
            container: Render target handed to the view
            view_factory: Callable building the view from (tree, container)
            before_drop: Called as (dragged, target, where) before a drop;
                returning False cancels it
            after_drop: Called with the same arguments after a drop moved
                the node

        Raises:
            ContainerNotFoundError: If container is None
        """
        if container is None:
            raise ContainerNotFoundError("TreeController needs a container for its view")
        self.tree = tree
        self.view = view_factory(tree, container)
        self.before_drop = before_drop
        self.after_drop = after_drop

    def _resolve(self, node_id: NodeId, command: str) -> Optional[Node]:
        node = self.tree.find_node_by_id(node_id)
        if node is None:
            logger.debug(f"{command}: no node with id {node_id!r}, ignoring")
        return node

    def add_child(self, parent_id: NodeId, descriptor: Mapping[str, Any]) -> bool:
        """Build a node from ``descriptor`` and append it under ``parent_id``.

        A descriptor is rejected when any id in its subtree already exists in
        the tree or occurs twice within the descriptor itself.
        """
        parent = self._resolve(parent_id, "add_child")
        if parent is None:
            return False

        node = Node.from_descriptor(descriptor)
        seen: List[NodeId] = []
        for new_node in node.iter_depth_first():
            if new_node.id in seen or self.tree.find_node_by_id(new_node.id) is not None:
                logger.debug(f"add_child: id {new_node.id!r} already exists, ignoring")
                return False
            seen.append(new_node.id)

        parent.add_child(node)
        return True

    def toggle_expand(self, node_id: NodeId) -> bool:
        node = self._resolve(node_id, "toggle_expand")
        if node is None:
            return False
        node.toggle_expanded()
        return True

    def move_node(self, node_id: NodeId, new_parent_id: Optional[NodeId], position: int) -> bool:
        """Move a node; ``new_parent_id=None`` moves it to root level.

        Returns:
            True if the tree accepted the move
        """
        node = self._resolve(node_id, "move_node")
        if node is None:
            return False

        new_parent = None
        if new_parent_id is not None:
            new_parent = self._resolve(new_parent_id, "move_node")
            if new_parent is None:
                return False

        return self.tree.move_to(node, new_parent, position)

    def drop_node(self, dragged_id: NodeId, target_id: NodeId, where: str) -> bool:
        """Drop a dragged node before, after or into a target node.

        ``before`` and ``after`` place the node next to the target under the
        target's parent (or among the roots); ``child`` appends it as the
        target's last child. The move itself goes through ``Tree.move_to``,
        so drops onto the node itself or into its own subtree are ignored.

        Returns:
            True if the node was moved

        Raises:
            ValueError: If ``where`` is not a DropPosition
        """
        dragged = self._resolve(dragged_id, "drop_node")
        if dragged is None:
            return False
        target = self._resolve(target_id, "drop_node")
        if target is None:
            return False
        where = DropPosition(where)
        if dragged is target or dragged.contains_id(target.id):
            logger.debug(f"drop_node: {target.id!r} is inside {dragged.id!r}, ignoring")
            return False

        if self.before_drop is not None and self.before_drop(dragged, target, where) is False:
            logger.debug(f"drop_node: drop of {dragged.id!r} on {target.id!r} cancelled")
            return False

        if where is DropPosition.CHILD:
            new_parent: Optional[Node] = target
            position = len(target.children)
        else:
            new_parent = target.parent
            if new_parent is None:
                position = self.tree.root_index(target)
                dragged_index = self.tree.root_index(dragged)
            else:
                position = new_parent.index_of(target)
                dragged_index = new_parent.index_of(dragged)
            if where is DropPosition.AFTER:
                position += 1
            # The dragged node is detached first, shifting later siblings left
            if dragged_index is not None and dragged_index < position:
                position -= 1

        moved = self.tree.move_to(dragged, new_parent, position)
        if moved and self.after_drop is not None:
            self.after_drop(dragged, target, where)
        return moved

    def set_checked(self, node_id: NodeId, checked: bool) -> bool:
        node = self._resolve(node_id, "set_checked")
        if node is None:
            return False
        node.set_checked(checked)
        return True

    def remove_node(self, node_id: NodeId) -> bool:
        node = self._resolve(node_id, "remove_node")
        if node is None:
            return False
        return self.tree.remove(node) is not None

    def expand_all(self) -> bool:
        self.tree.expand_all()
        return True

    def collapse_all(self) -> bool:
        self.tree.collapse_all()
        return True

    def render(self) -> str:
        return self.view.render()
