"""Event bus and event types for checktreelib.

Every model mutation is announced through an EventBus. Views subscribe to the
six event kinds below and keep their own presentation state in step with the
model without re-rendering everything.

Event names are a closed set (TreeEventKind). Each kind carries a frozen
payload dataclass, so a view handling the stream can dispatch on
``event.kind`` and rely on the payload's fields.
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import (
    TYPE_CHECKING, Any, Callable, ClassVar, DefaultDict, Dict, List, Optional, Type,
)

if TYPE_CHECKING:
    from .core.node import Node


Listener = Callable[..., Any]


class EventBus:
    """Synchronous named-event publish/subscribe.

    Listeners for a name are kept in registration order. ``emit`` calls them
    inline on the caller's stack; exceptions raised by a listener are not
    caught here and stop delivery to the listeners after it.
    """

    def __init__(self) -> None:
        self._listeners: DefaultDict[str, List[Listener]] = defaultdict(list)

    def on(self, name: str, listener: Listener) -> 'EventBus':
        """Register a listener for an event name.

        The same listener registered twice is called twice.

        Returns:
            The bus itself, for chaining
        """
        name = str(name)
        self._listeners[name].append(listener)
        return self

    def once(self, name: str, listener: Listener) -> 'EventBus':
        """Register a listener that runs at most once.

        The wrapper unregisters itself before calling the listener, so a
        recursive emission of the same name from inside the listener does not
        reach it again.
        """
        fired = False

        def once_wrapper(*args: Any) -> Any:
            nonlocal fired
            if fired:
                return None
            fired = True
            self.off(name, once_wrapper)
            return listener(*args)

        once_wrapper.listener = listener  # type: ignore[attr-defined]
        return self.on(name, once_wrapper)

    def off(self, name: str, listener: Listener) -> 'EventBus':
        """Remove every registration of a listener; no-op if absent.

        Passing the original callable also removes a pending ``once`` wrapper
        created for it.
        """
        name = str(name)
        listeners = self._listeners.get(name)
        if not listeners:
            return self

        remaining = [
            registered for registered in listeners
            if registered != listener
            and getattr(registered, 'listener', None) != listener
        ]
        if remaining:
            self._listeners[name] = remaining
        else:
            del self._listeners[name]
        return self

    def emit(self, name: str, *args: Any) -> bool:
        """Call all listeners currently registered for ``name``.

        Listeners added or removed while the emission is running do not
        affect this delivery.

        Returns:
            True if at least one listener was registered
        """
        name = str(name)
        listeners = self._listeners.get(name)
        if not listeners:
            return False
        for listener in list(listeners):
            listener(*args)
        return True

    def listener_count(self, name: str) -> int:
        """Number of registrations for an event name."""
        name = str(name)
        return len(self._listeners.get(name, ()))

    def event_names(self) -> List[str]:
        """Names that currently have at least one listener."""
        return [name for name, listeners in self._listeners.items() if listeners]

    def remove_all_listeners(self, name: Optional[str] = None) -> 'EventBus':
        """Drop listeners for one name, or for every name when omitted."""
        if name is None:
            self._listeners.clear()
        else:
            self._listeners.pop(str(name), None)
        return self


class TreeEventKind(str, Enum):
    """The closed set of events a Tree publishes.

    Members are strings, so ``bus.on("nodeChecked", ...)`` and
    ``bus.on(TreeEventKind.NODE_CHECKED, ...)`` subscribe to the same event.
    """
    NODE_ADDED = "nodeAdded"
    NODE_REMOVED = "nodeRemoved"
    NODE_MOVED = "nodeMoved"
    NODE_CHECKED = "nodeChecked"
    NODE_INDETERMINATE = "nodeIndeterminate"
    NODE_EXPANDED = "nodeExpanded"

    def __str__(self) -> str:
        return self.value

    @property
    def is_structural(self) -> bool:
        """True for events that change the shape of the forest."""
        return self in _STRUCTURAL_KINDS


_STRUCTURAL_KINDS = frozenset({
    TreeEventKind.NODE_ADDED,
    TreeEventKind.NODE_REMOVED,
    TreeEventKind.NODE_MOVED,
})


@dataclass(frozen=True)
class TreeEvent:
    """Base class for event payloads."""
    kind: ClassVar[TreeEventKind]


@dataclass(frozen=True)
class NodeAdded(TreeEvent):
    """A node was appended under ``parent`` (None for a root)."""
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_ADDED

    node: 'Node'
    parent: Optional['Node']
    position: int


@dataclass(frozen=True)
class NodeRemoved(TreeEvent):
    """A node was detached from ``parent`` (None for a root)."""
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_REMOVED

    node: 'Node'
    parent: Optional['Node']
    position: int


@dataclass(frozen=True)
class NodeMoved(TreeEvent):
    """A node was re-parented.

    ``position`` is the index the node now occupies; ``old_position`` is the
    index it had before the move, or None if it was not attached anywhere.
    """
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_MOVED

    node: 'Node'
    new_parent: Optional['Node']
    position: int
    old_position: Optional[int]


@dataclass(frozen=True)
class NodeChecked(TreeEvent):
    """A node reached a determinate check state."""
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_CHECKED

    node: 'Node'
    checked: bool


@dataclass(frozen=True)
class NodeIndeterminate(TreeEvent):
    """A node's children disagree about their check state."""
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_INDETERMINATE

    node: 'Node'
    indeterminate: bool


@dataclass(frozen=True)
class NodeExpanded(TreeEvent):
    """A node was expanded or collapsed."""
    kind: ClassVar[TreeEventKind] = TreeEventKind.NODE_EXPANDED

    node: 'Node'
    expanded: bool


EVENT_TYPES: Dict[TreeEventKind, Type[TreeEvent]] = {
    TreeEventKind.NODE_ADDED: NodeAdded,
    TreeEventKind.NODE_REMOVED: NodeRemoved,
    TreeEventKind.NODE_MOVED: NodeMoved,
    TreeEventKind.NODE_CHECKED: NodeChecked,
    TreeEventKind.NODE_INDETERMINATE: NodeIndeterminate,
    TreeEventKind.NODE_EXPANDED: NodeExpanded,
}
