"""NodeAdapter for checktreelib.

The adapter holds the navigation logic for the Node model. Traversers and
collectors only talk to the adapter, so the walking algorithms stay
independent of how children and parents are stored on a node.
"""

from typing import TYPE_CHECKING, Iterator, List, Optional

if TYPE_CHECKING:
    from .node import Node


class NodeAdapter:
    """Navigation over Node objects.

    Children are read from the node's owned ``children`` list in order;
    parents are read through the node's weak back-reference.
    """

    def get_children(self, node: 'Node') -> Iterator['Node']:
        """Get an iterator of child nodes, left to right.

        The children list is copied first, so a listener that restructures the
        tree while a traversal is paused does not disturb the iteration.

        Args:
            node: The parent node

        Returns:
            Iterator yielding child Node instances
        """
        return iter(list(node.children))

    def get_parent(self, node: 'Node') -> Optional['Node']:
        """Get the parent node of the given node.

        Args:
            node: The child node

        Returns:
            Parent Node or None if node is a root or detached
        """
        return node.parent

    def get_depth(self, node: 'Node') -> int:
        """Calculate the depth of a node by walking up to its root.

        Args:
            node: The node to get depth for

        Returns:
            Depth where root = 0
        """
        depth = 0
        current = self.get_parent(node)
        while current is not None:
            depth += 1
            current = self.get_parent(current)
        return depth

    def get_ancestors(self, node: 'Node') -> List['Node']:
        """Ancestors of a node, nearest first."""
        ancestors = []
        current = self.get_parent(node)
        while current is not None:
            ancestors.append(current)
            current = self.get_parent(current)
        return ancestors

    def get_siblings(self, node: 'Node') -> Iterator['Node']:
        """Get siblings of the given node (excluding the node itself).

        Args:
            node: The node to get siblings for

        Returns:
            Iterator yielding sibling Node instances
        """
        parent = self.get_parent(node)
        if parent is None:
            return iter([])
        return (child for child in self.get_children(parent) if child is not node)

    def subtree_height(self, node: 'Node') -> int:
        """Number of levels below ``node`` (0 for a leaf)."""
        children = list(self.get_children(node))
        if not children:
            return 0
        return 1 + max(self.subtree_height(child) for child in children)
