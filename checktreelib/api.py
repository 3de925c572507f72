"""High-level API for checktreelib.

This module provides simple, functional interfaces for common read-only
queries over a checkbox tree. These functions wrap the traversers and
collectors for ease of use in simple cases.

Every function accepts either a whole ``Tree`` (each root is walked in turn,
depths start at 0 per root) or a single ``Node`` (its subtree).
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from .config import TraversalStrategy
from .core.adapter import NodeAdapter
from .core.collector import DataCollector, IdentifierCollector, PathCollector
from .core.node import Node, NodeId
from .core.traverser import create_traverser
from .tree import Tree

Start = Union[Tree, Node]

_ADAPTER = NodeAdapter()


def _starts(start: Start) -> List[Node]:
    if isinstance(start, Tree):
        return list(start.roots)
    return [start]


def traverse_tree(
    start: Start,
    strategy: Union[TraversalStrategy, str] = TraversalStrategy.DEPTH_FIRST_PRE,
    max_depth: Optional[int] = None,
    min_depth: int = 0,
    include_filter: Optional[Callable[[Node], bool]] = None,
    exclude_filter: Optional[Callable[[Node], bool]] = None,
) -> Iterator[Tuple[Node, int]]:
    """Simple interface for tree traversal.

    Args:
        start: Tree or node to walk
        strategy: Traversal strategy (dfs_pre, dfs_post, bfs)
        max_depth: Maximum depth to traverse
        min_depth: Minimum depth before yielding nodes
        include_filter: Only yield nodes for which this returns True
        exclude_filter: Skip nodes for which this returns True

    Yields:
        Tuples of (node, depth)

    Raises:
        ValueError: If the strategy name is not recognized

    Example:
        >>> tree = Tree.from_descriptors([{'id': 'a', 'children': [{'id': 'b'}]}])
        >>> [node.id for node, _ in traverse_tree(tree, strategy='dfs_post')]
        ['b', 'a']
    """
    traverser = create_traverser(strategy, _ADAPTER)
    for root in _starts(start):
        for node, depth in traverser.traverse(root, max_depth=max_depth, min_depth=min_depth):
            if include_filter is not None and not include_filter(node):
                continue
            if exclude_filter is not None and exclude_filter(node):
                continue
            yield node, depth


def collect_tree_data(
    start: Start,
    collector: Optional[DataCollector] = None,
    **kwargs
) -> Iterator[Tuple[Node, Any]]:
    """Traverse and collect data from each node.

    Args:
        start: Tree or node to walk
        collector: DataCollector to apply (default: IdentifierCollector)
        **kwargs: Traversal options (see traverse_tree)

    Yields:
        Tuples of (node, collected_data)
    """
    collector = collector or IdentifierCollector(_ADAPTER)
    for node, depth in traverse_tree(start, **kwargs):
        yield node, collector.collect(node, depth)


def count_nodes(start: Start, **kwargs) -> int:
    """Count nodes that match the traversal options."""
    return sum(1 for _ in traverse_tree(start, **kwargs))


def find_nodes(start: Start, predicate: Callable[[Node], bool], **kwargs) -> Iterator[Node]:
    """Yield nodes that match a predicate.

    Example:
        >>> checked = list(find_nodes(tree, lambda node: node.checked))
    """
    kwargs['include_filter'] = predicate
    for node, _ in traverse_tree(start, **kwargs):
        yield node


def get_leaf_nodes(start: Start, **kwargs) -> Iterator[Node]:
    """Yield nodes without children."""
    for node, _ in traverse_tree(start, **kwargs):
        if node.is_leaf():
            yield node


def get_tree_paths(start: Start, **kwargs) -> Iterator[List[NodeId]]:
    """Yield the id path from the top root down to each node."""
    for _, path in collect_tree_data(start, PathCollector(_ADAPTER), **kwargs):
        yield path


def get_checked_ids(start: Start, include_indeterminate: bool = False, **kwargs) -> List[NodeId]:
    """Ids of checked nodes in traversal order.

    Args:
        start: Tree or node to walk
        include_indeterminate: Also list indeterminate nodes
        **kwargs: Traversal options (see traverse_tree)
    """
    def selected(node: Node) -> bool:
        return node.checked or (include_indeterminate and node.indeterminate)

    return [node.id for node in find_nodes(start, selected, **kwargs)]


def get_tree_stats(start: Start, **kwargs) -> Dict[str, Any]:
    """Get statistics about a tree.

    Returns:
        Dictionary with total, leaf and internal node counts, the deepest
        depth reached, a per-depth histogram, and check/expand counts
    """
    stats: Dict[str, Any] = {
        'total_nodes': 0,
        'leaf_nodes': 0,
        'max_depth': 0,
        'depths': {},
        'checked': 0,
        'unchecked': 0,
        'indeterminate': 0,
        'expanded': 0,
    }

    for node, depth in traverse_tree(start, **kwargs):
        stats['total_nodes'] += 1

        if node.is_leaf():
            stats['leaf_nodes'] += 1
        elif node.expanded:
            stats['expanded'] += 1

        if node.indeterminate:
            stats['indeterminate'] += 1
        elif node.checked:
            stats['checked'] += 1
        else:
            stats['unchecked'] += 1

        stats['max_depth'] = max(stats['max_depth'], depth)
        stats['depths'][depth] = stats['depths'].get(depth, 0) + 1

    stats['internal_nodes'] = stats['total_nodes'] - stats['leaf_nodes']
    return stats
