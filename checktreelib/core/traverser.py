"""Tree traversal strategies for checktreelib.

Traversers implement different algorithms for walking a subtree. They work
through a NodeAdapter and yield ``(node, depth)`` pairs, depth being relative
to the start node.

The forest is acyclic by invariant. Traversers still keep a visited set keyed
by object identity and raise InvariantViolation when a node is reached a
second time, which catches cycles and shared children early.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import TYPE_CHECKING, Deque, Iterator, List, Optional, Set, Tuple

from ..config import TraversalStrategy, parse_strategy
from ..errors import InvariantViolation
from .adapter import NodeAdapter

if TYPE_CHECKING:
    from .node import Node


class TreeTraverser(ABC):
    """Abstract base class for traversal strategies."""

    def __init__(self, adapter: Optional[NodeAdapter] = None):
        """Initialize traverser with an adapter.

        Args:
            adapter: NodeAdapter for navigating the tree (default: NodeAdapter())
        """
        self.adapter = adapter or NodeAdapter()

    @abstractmethod
    def traverse(self,
                 root: 'Node',
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple['Node', int]]:
        """Traverse the subtree starting from root.

        Args:
            root: Starting node for traversal
            max_depth: Maximum depth to traverse (None = unlimited)
            min_depth: Minimum depth before yielding nodes

        Yields:
            Tuples of (node, depth) where depth is relative to root
        """
        pass

    def _should_yield(self, depth: int, min_depth: int, max_depth: Optional[int]) -> bool:
        if depth < min_depth:
            return False
        if max_depth is not None and depth > max_depth:
            return False
        return True

    def _should_explore(self, depth: int, max_depth: Optional[int]) -> bool:
        if max_depth is None:
            return True
        return depth < max_depth

    def _mark_visited(self, node: 'Node', visited: Set[int]) -> None:
        key = id(node)
        if key in visited:
            raise InvariantViolation(
                f"Node {node.id!r} reached twice during traversal; "
                f"the structure is not a forest"
            )
        visited.add(key)


class DepthFirstPreOrderTraverser(TreeTraverser):
    """Depth-first pre-order traversal strategy.

    Visits parent before children, children left to right. This is the
    render order of a tree view and the order check events are emitted in.
    """

    def traverse(self,
                 root: 'Node',
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple['Node', int]]:
        """Traverse tree depth-first, pre-order.

        Uses an explicit stack so very deep chains do not hit the
        recursion limit.
        """
        visited: Set[int] = set()
        stack: List[Tuple['Node', int]] = [(root, 0)]

        while stack:
            node, depth = stack.pop()
            self._mark_visited(node, visited)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(depth, max_depth):
                # Push in reverse so the leftmost child is popped first
                children = list(self.adapter.get_children(node))
                for child in reversed(children):
                    stack.append((child, depth + 1))


class DepthFirstPostOrderTraverser(TreeTraverser):
    """Depth-first post-order traversal strategy.

    Visits children before parent. Used for bottom-up work such as
    recomputing parent check states from their children.
    """

    def traverse(self,
                 root: 'Node',
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple['Node', int]]:
        """Traverse tree depth-first, post-order."""
        visited: Set[int] = set()

        def _traverse_recursive(node: 'Node', depth: int) -> Iterator[Tuple['Node', int]]:
            self._mark_visited(node, visited)

            # First traverse children
            if self._should_explore(depth, max_depth):
                for child in self.adapter.get_children(node):
                    yield from _traverse_recursive(child, depth + 1)

            # Then yield parent
            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

        yield from _traverse_recursive(root, 0)


class BreadthFirstTraverser(TreeTraverser):
    """Breadth-first (level-order) traversal strategy.

    Visits all nodes at depth N before visiting nodes at depth N+1.
    """

    def traverse(self,
                 root: 'Node',
                 max_depth: Optional[int] = None,
                 min_depth: int = 0) -> Iterator[Tuple['Node', int]]:
        """Traverse tree breadth-first using a queue."""
        queue: Deque[Tuple['Node', int]] = deque([(root, 0)])
        visited: Set[int] = set()

        while queue:
            node, depth = queue.popleft()
            self._mark_visited(node, visited)

            if self._should_yield(depth, min_depth, max_depth):
                yield (node, depth)

            if self._should_explore(depth, max_depth):
                for child in self.adapter.get_children(node):
                    queue.append((child, depth + 1))


_TRAVERSERS = {
    TraversalStrategy.DEPTH_FIRST_PRE: DepthFirstPreOrderTraverser,
    TraversalStrategy.DEPTH_FIRST_POST: DepthFirstPostOrderTraverser,
    TraversalStrategy.BREADTH_FIRST: BreadthFirstTraverser,
}


def create_traverser(strategy, adapter: Optional[NodeAdapter] = None) -> TreeTraverser:
    """Create a traverser instance by strategy.

    Args:
        strategy: TraversalStrategy or name (bfs, dfs_pre, dfs_post)
        adapter: NodeAdapter for the tree structure

    Returns:
        TreeTraverser instance

    Raises:
        ValueError: If strategy name is not recognized
    """
    return _TRAVERSERS[parse_strategy(strategy)](adapter)
