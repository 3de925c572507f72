"""Test fixtures for checktreelib consumers.

These fixtures record what a tree announces so tests can assert on the event
stream without writing their own listeners.
"""

from typing import List, Optional, Union

from ..events import EventBus, TreeEvent, TreeEventKind
from ..tree import Tree


class EventRecorder:
    """Records every event published on a tree's bus, in emission order.

    Example:
        tree = Tree.from_descriptors(descriptors)
        recorder = EventRecorder(tree)

        tree.find_node_by_id('a').set_checked(True)
        assert recorder.kinds() == [TreeEventKind.NODE_CHECKED] * 3
    """

    def __init__(self, source: Union[Tree, EventBus]):
        """Start recording.

        Args:
            source: A Tree, or the EventBus to listen on directly
        """
        self.bus: EventBus = source.bus if isinstance(source, Tree) else source
        self.events: List[TreeEvent] = []
        for kind in TreeEventKind:
            self.bus.on(kind, self._record)

    def _record(self, event: TreeEvent) -> None:
        self.events.append(event)

    def kinds(self) -> List[TreeEventKind]:
        return [event.kind for event in self.events]

    def of_kind(self, kind: TreeEventKind) -> List[TreeEvent]:
        return [event for event in self.events if event.kind == kind]

    def node_ids(self, kind: Optional[TreeEventKind] = None) -> list:
        """Ids of the nodes the recorded events are about."""
        events = self.events if kind is None else self.of_kind(kind)
        return [event.node.id for event in events]

    def clear(self) -> None:
        self.events = []

    def detach(self) -> None:
        """Stop recording; already recorded events are kept."""
        for kind in TreeEventKind:
            self.bus.off(kind, self._record)

    def __len__(self) -> int:
        return len(self.events)
