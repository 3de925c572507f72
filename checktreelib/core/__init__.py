"""Core model and traversal machinery for checktreelib.

This package holds the Node model together with the NodeAdapter, the
traversal strategies and the data collectors that walk it.
"""

from .adapter import NodeAdapter
from .node import ChildrenCheckState, Node, NodeId, clamp_position
from .traverser import (
    TreeTraverser,
    DepthFirstPreOrderTraverser,
    DepthFirstPostOrderTraverser,
    BreadthFirstTraverser,
    create_traverser,
)
from .collector import (
    DataCollector,
    IdentifierCollector,
    CheckStateCollector,
    PathCollector,
    SnapshotCollector,
)

__all__ = [
    "Node",
    "NodeId",
    "ChildrenCheckState",
    "clamp_position",
    "NodeAdapter",
    "TreeTraverser",
    "DepthFirstPreOrderTraverser",
    "DepthFirstPostOrderTraverser",
    "BreadthFirstTraverser",
    "create_traverser",
    "DataCollector",
    "IdentifierCollector",
    "CheckStateCollector",
    "PathCollector",
    "SnapshotCollector",
]
