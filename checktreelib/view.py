"""View layer boundary for checktreelib.

A view never mutates the model. It renders once from the current tree and
then keeps its own presentation state up to date purely from the event
stream. Commands go back through the TreeController.

TreeView is the abstract boundary: it subscribes one handler per event kind
and subclasses must implement all six. MirrorView is the reference
implementation; it mirrors the forest as plain rows and renders them as
indented text into its container.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .core.node import Node, NodeId, clamp_position
from .errors import ContainerNotFoundError
from .events import (
    NodeAdded, NodeChecked, NodeExpanded, NodeIndeterminate, NodeMoved, NodeRemoved,
    TreeEvent, TreeEventKind,
)
from .tree import Tree


class TreeView(ABC):
    """Abstract event consumer bound to one Tree.

    A view should subscribe before any listener that mutates the tree from
    inside an event handler. Listeners run in registration order, so a view
    registered later would see nested events before the outer ones.
    """

    def __init__(self, tree: Tree, container: Any):
        """Bind the view to a tree.

        Args:
            tree: The model to observe
            container: Where the view renders (for MirrorView, a writable
                text stream)

        Raises:
            ContainerNotFoundError: If container is None
        """
        if container is None:
            raise ContainerNotFoundError(
                f"{self.__class__.__name__} needs a container to render into"
            )
        self.tree = tree
        self.container = container
        self._subscriptions: List[Tuple[TreeEventKind, Callable[[Any], Any]]] = []
        self.bind()

    def _handlers(self) -> Dict[TreeEventKind, Callable[[Any], Any]]:
        return {
            TreeEventKind.NODE_ADDED: self.on_node_added,
            TreeEventKind.NODE_REMOVED: self.on_node_removed,
            TreeEventKind.NODE_MOVED: self.on_node_moved,
            TreeEventKind.NODE_CHECKED: self.on_node_checked,
            TreeEventKind.NODE_INDETERMINATE: self.on_node_indeterminate,
            TreeEventKind.NODE_EXPANDED: self.on_node_expanded,
        }

    def bind(self) -> None:
        """Subscribe to every event kind (idempotent)."""
        if self._subscriptions:
            return
        for kind, handler in self._handlers().items():
            self.tree.on(kind, handler)
            self._subscriptions.append((kind, handler))

    def unbind(self) -> None:
        """Stop receiving events."""
        for kind, handler in self._subscriptions:
            self.tree.off(kind, handler)
        self._subscriptions = []

    def handle(self, event: TreeEvent) -> Any:
        """Dispatch a single event to the matching handler."""
        return self._handlers()[event.kind](event)

    @abstractmethod
    def on_node_added(self, event: NodeAdded) -> None:
        pass

    @abstractmethod
    def on_node_removed(self, event: NodeRemoved) -> None:
        pass

    @abstractmethod
    def on_node_moved(self, event: NodeMoved) -> None:
        pass

    @abstractmethod
    def on_node_checked(self, event: NodeChecked) -> None:
        pass

    @abstractmethod
    def on_node_indeterminate(self, event: NodeIndeterminate) -> None:
        pass

    @abstractmethod
    def on_node_expanded(self, event: NodeExpanded) -> None:
        pass

    @abstractmethod
    def render(self) -> str:
        """Write the current presentation into the container."""
        pass


@dataclass
class ViewRow:
    """Presentation state of one node, as a view sees it."""
    id: NodeId
    label: str
    checked: bool
    indeterminate: bool
    expanded: bool
    parent_id: Optional[NodeId]
    child_ids: List[NodeId] = field(default_factory=list)


class MirrorView(TreeView):
    """View whose state is rebuilt only from the initial render and events.

    Events about nodes the view never saw (for instance nodes changed after
    they were removed from the tree) are ignored.
    """

    CHECKBOX_CHECKED = "[x]"
    CHECKBOX_UNCHECKED = "[ ]"
    CHECKBOX_INDETERMINATE = "[-]"

    def __init__(self, tree: Tree, container: Any):
        self.rows: Dict[NodeId, ViewRow] = {}
        self.root_ids: List[NodeId] = []
        super().__init__(tree, container)
        self.reset()

    def reset(self) -> None:
        """Initial render: copy the tree's current state into rows."""
        self.rows.clear()
        self.root_ids = []
        for root in self.tree.roots:
            self.root_ids.append(root.id)
            self._add_rows(root, None)

    def _add_rows(self, node: Node, parent_id: Optional[NodeId]) -> None:
        for current in node.iter_depth_first():
            current_parent = parent_id if current is node else current.parent.id
            self.rows[current.id] = ViewRow(
                id=current.id,
                label=current.label,
                checked=current.checked,
                indeterminate=current.indeterminate,
                expanded=current.expanded,
                parent_id=current_parent,
                child_ids=[child.id for child in current.children],
            )

    def _drop_rows(self, node_id: NodeId) -> None:
        row = self.rows.pop(node_id, None)
        if row is None:
            return
        for child_id in row.child_ids:
            self._drop_rows(child_id)

    def _siblings(self, parent_id: Optional[NodeId]) -> List[NodeId]:
        if parent_id is None:
            return self.root_ids
        return self.rows[parent_id].child_ids

    def _knows_parent(self, parent: Optional[Node]) -> bool:
        return parent is None or parent.id in self.rows

    # Structural events

    def on_node_added(self, event: NodeAdded) -> None:
        if not self._knows_parent(event.parent):
            return
        parent_id = event.parent.id if event.parent is not None else None
        self._add_rows(event.node, parent_id)
        siblings = self._siblings(parent_id)
        siblings.insert(clamp_position(event.position, len(siblings)), event.node.id)

    def on_node_removed(self, event: NodeRemoved) -> None:
        row = self.rows.get(event.node.id)
        if row is None:
            return
        siblings = self._siblings(row.parent_id)
        if event.node.id in siblings:
            siblings.remove(event.node.id)
        self._drop_rows(event.node.id)

    def on_node_moved(self, event: NodeMoved) -> None:
        if not self._knows_parent(event.new_parent):
            return
        new_parent_id = event.new_parent.id if event.new_parent is not None else None

        row = self.rows.get(event.node.id)
        if row is None:
            # Moved in from outside the mirrored forest
            self._add_rows(event.node, new_parent_id)
        else:
            self._siblings(row.parent_id).remove(event.node.id)
            row.parent_id = new_parent_id

        siblings = self._siblings(new_parent_id)
        siblings.insert(clamp_position(event.position, len(siblings)), event.node.id)

    # State events

    def on_node_checked(self, event: NodeChecked) -> None:
        row = self.rows.get(event.node.id)
        if row is not None:
            row.checked = event.checked
            row.indeterminate = False

    def on_node_indeterminate(self, event: NodeIndeterminate) -> None:
        row = self.rows.get(event.node.id)
        if row is not None:
            row.indeterminate = event.indeterminate
            if event.indeterminate:
                row.checked = False

    def on_node_expanded(self, event: NodeExpanded) -> None:
        row = self.rows.get(event.node.id)
        if row is not None:
            row.expanded = event.expanded

    # Output

    def rows_snapshot(self) -> List[dict]:
        """The mirrored forest as nested dicts.

        Same shape as ``Node.to_dict(include_expanded=True)``, so it can be
        compared directly with the model.
        """
        def build(node_id: NodeId) -> dict:
            row = self.rows[node_id]
            return {
                'id': row.id,
                'label': row.label,
                'checked': row.checked,
                'indeterminate': row.indeterminate,
                'expanded': row.expanded,
                'children': [build(child_id) for child_id in row.child_ids],
            }

        return [build(root_id) for root_id in self.root_ids]

    def checkbox(self, node_id: NodeId) -> str:
        row = self.rows[node_id]
        if row.indeterminate:
            return self.CHECKBOX_INDETERMINATE
        return self.CHECKBOX_CHECKED if row.checked else self.CHECKBOX_UNCHECKED

    def render_lines(self) -> List[str]:
        """One line per visible row; collapsed nodes hide their children."""
        lines: List[str] = []

        def render_row(node_id: NodeId, level: int) -> None:
            row = self.rows[node_id]
            if row.child_ids:
                marker = "-" if row.expanded else "+"
            else:
                marker = " "
            lines.append(f"{'  ' * level}{marker} {self.checkbox(node_id)} {row.label}")
            if row.expanded:
                for child_id in row.child_ids:
                    render_row(child_id, level + 1)

        for root_id in self.root_ids:
            render_row(root_id, 0)
        return lines

    def render(self) -> str:
        text = "\n".join(self.render_lines())
        self.container.write(text + "\n")
        return text
