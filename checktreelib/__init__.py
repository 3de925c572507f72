"""checktreelib - Hierarchical checkbox trees with tri-state propagation.

checktreelib models an ordered forest of checkbox nodes. Checking a node
checks its whole subtree; parents follow their children into checked,
unchecked or indeterminate. Nodes can be moved anywhere by drag-and-drop
style re-parenting, and every change is published as a typed event so views
stay in sync without re-rendering the whole tree.

Typical use:
━━━━━━━━━━━━━━━━━━━━━━━━━━
    from checktreelib import Tree, TreeController

    tree = Tree.from_descriptors(descriptors)
    controller = TreeController(tree, sys.stdout)
    controller.set_checked('docs', True)
    controller.render()
━━━━━━━━━━━━━━━━━━━━━━━━━━
"""

__version__ = "0.1.0"

from .errors import (
    TreeError,
    InvariantViolation,
    ContainerNotFoundError,
    PositionOutOfRangeError,
    InvalidDescriptorError,
    ConfigurationError,
)
from .config import TreeConfig, TraversalStrategy
from .events import (
    EventBus,
    TreeEventKind,
    TreeEvent,
    NodeAdded,
    NodeRemoved,
    NodeMoved,
    NodeChecked,
    NodeIndeterminate,
    NodeExpanded,
)
from .core import Node, NodeId, NodeAdapter, create_traverser
from .tree import Tree
from .view import TreeView, MirrorView, ViewRow
from .controller import DropPosition, TreeController
from .api import (
    traverse_tree,
    collect_tree_data,
    count_nodes,
    find_nodes,
    get_leaf_nodes,
    get_tree_paths,
    get_checked_ids,
    get_tree_stats,
)
from .logging_config import setup_logging

__all__ = [
    "__version__",
    # Model
    "Node",
    "NodeId",
    "Tree",
    "TreeConfig",
    # Events
    "EventBus",
    "TreeEventKind",
    "TreeEvent",
    "NodeAdded",
    "NodeRemoved",
    "NodeMoved",
    "NodeChecked",
    "NodeIndeterminate",
    "NodeExpanded",
    # View boundary
    "TreeView",
    "MirrorView",
    "ViewRow",
    "TreeController",
    "DropPosition",
    # Traversal
    "NodeAdapter",
    "TraversalStrategy",
    "create_traverser",
    "traverse_tree",
    "collect_tree_data",
    "count_nodes",
    "find_nodes",
    "get_leaf_nodes",
    "get_tree_paths",
    "get_checked_ids",
    "get_tree_stats",
    # Errors
    "TreeError",
    "InvariantViolation",
    "ContainerNotFoundError",
    "PositionOutOfRangeError",
    "InvalidDescriptorError",
    "ConfigurationError",
    "setup_logging",
]
