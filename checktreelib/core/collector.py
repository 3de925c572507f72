"""Data collection strategies for checktreelib.

DataCollectors define what information to extract from nodes during a
traversal, so the same walk can produce ids, check states, ancestor paths or
detached snapshots.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .adapter import NodeAdapter

if TYPE_CHECKING:
    from .node import Node


class DataCollector(ABC):
    """Abstract base class for data collection strategies."""

    def __init__(self, adapter: Optional[NodeAdapter] = None):
        """Initialize collector with an adapter.

        Args:
            adapter: NodeAdapter for additional node operations
        """
        self.adapter = adapter or NodeAdapter()

    @abstractmethod
    def collect(self, node: 'Node', depth: int) -> Any:
        """Collect data from a node.

        Args:
            node: The node to collect data from
            depth: Current depth in traversal

        Returns:
            Collected data (type depends on collector)
        """
        pass


class IdentifierCollector(DataCollector):
    """Collects only node ids."""

    def collect(self, node: 'Node', depth: int) -> Any:
        return node.id


class CheckStateCollector(DataCollector):
    """Collects the tri-state checkbox state of each node.

    Returns a flat record per node, which makes it easy to compare the
    state of two trees or two moments in time.
    """

    def collect(self, node: 'Node', depth: int) -> Dict[str, Any]:
        return {
            'id': node.id,
            'depth': depth,
            'checked': node.checked,
            'indeterminate': node.indeterminate,
            'is_leaf': node.is_leaf(),
        }


class PathCollector(DataCollector):
    """Collects the ids on the path from the root down to each node."""

    def collect(self, node: 'Node', depth: int) -> List[Any]:
        path = [ancestor.id for ancestor in reversed(self.adapter.get_ancestors(node))]
        path.append(node.id)
        return path


class SnapshotCollector(DataCollector):
    """Collects a detached nested-dict copy of the subtree under each node.

    The result holds plain values only (no live references), in the shape
    ``{id, label, checked, indeterminate, children}``. Set
    ``include_expanded`` to also copy the expanded flag.
    """

    def __init__(self, adapter: Optional[NodeAdapter] = None, include_expanded: bool = False):
        super().__init__(adapter)
        self.include_expanded = include_expanded

    def collect(self, node: 'Node', depth: int) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': node.id,
            'label': node.label,
            'checked': bool(node.checked),
            'indeterminate': bool(node.indeterminate),
        }
        if self.include_expanded:
            data['expanded'] = bool(node.expanded)
        data['children'] = [
            self.collect(child, depth + 1)
            for child in self.adapter.get_children(node)
        ]
        return data
