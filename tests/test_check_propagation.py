"""Tests for tri-state checkbox propagation.

Checking a node cascades down its subtree; parents are then recomputed from
their children all the way to the root.
"""

import sys
from pathlib import Path
import unittest

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from checktreelib import (
    EventBus, Node, NodeChecked, NodeIndeterminate, Tree, TreeConfig, TreeEventKind,
)
from checktreelib.testing import EventRecorder


def build_tree():
    """Three-level tree used by most tests.

        root
        ├── docs
        │   ├── a
        │   └── b
        └── src
            └── main
    """
    return Tree.from_descriptors([
        {'id': 'root', 'children': [
            {'id': 'docs', 'children': [{'id': 'a'}, {'id': 'b'}]},
            {'id': 'src', 'children': [{'id': 'main'}]},
        ]},
    ], config=TreeConfig.debug())


def states(tree):
    return {node.id: (node.checked, node.indeterminate) for node in tree}


class TestRecomputeScenarios(unittest.TestCase):
    """A parent recomputed directly from two children."""

    def _parent_with(self, a_checked, b_checked):
        self.bus = EventBus()
        self.recorder = EventRecorder(self.bus)
        self.root = Node("R", children=[
            Node("A", checked=a_checked),
            Node("B", checked=b_checked),
        ], bus=self.bus)
        return self.root

    def test_mixed_children_make_parent_indeterminate(self):
        root = self._parent_with(True, False)

        root.update_check_state_from_children()

        self.assertFalse(root.checked)
        self.assertTrue(root.indeterminate)
        self.assertEqual(self.recorder.events, [NodeIndeterminate(node=root, indeterminate=True)])

    def test_all_checked_children_check_parent(self):
        root = self._parent_with(True, True)

        root.update_check_state_from_children()

        self.assertTrue(root.checked)
        self.assertFalse(root.indeterminate)
        self.assertEqual(self.recorder.events, [NodeChecked(node=root, checked=True)])

    def test_all_unchecked_children_uncheck_parent(self):
        root = self._parent_with(False, False)
        root.checked = True

        root.update_check_state_from_children()

        self.assertFalse(root.checked)
        self.assertEqual(self.recorder.events, [NodeChecked(node=root, checked=False)])

    def test_indeterminate_child_makes_parent_indeterminate(self):
        root = self._parent_with(True, True)
        root.children[0].checked = False
        root.children[0].indeterminate = True

        root.update_check_state_from_children()

        self.assertTrue(root.indeterminate)

    def test_leaf_keeps_its_state_but_parent_is_recomputed(self):
        root = self._parent_with(True, False)
        leaf = root.children[0]

        leaf.update_check_state_from_children()

        self.assertTrue(leaf.checked)
        self.assertEqual(self.recorder.events, [NodeIndeterminate(node=root, indeterminate=True)])


class TestSetChecked:
    """Test the downward cascade and the upward recompute."""

    def test_cascades_down_in_pre_order(self):
        tree = build_tree()
        recorder = EventRecorder(tree)

        tree.find_node_by_id("docs").set_checked(True)

        checked_ids = recorder.node_ids(TreeEventKind.NODE_CHECKED)
        assert checked_ids[:3] == ["docs", "a", "b"]
        assert tree.find_node_by_id("a").checked
        assert tree.find_node_by_id("b").checked

    def test_parent_becomes_indeterminate(self):
        tree = build_tree()
        recorder = EventRecorder(tree)

        tree.find_node_by_id("docs").set_checked(True)

        root = tree.find_node_by_id("root")
        assert root.indeterminate and not root.checked
        assert recorder.kinds()[-1] is TreeEventKind.NODE_INDETERMINATE
        assert recorder.events[-1].node is root

    def test_checking_last_sibling_checks_ancestors(self):
        tree = build_tree()
        tree.find_node_by_id("docs").set_checked(True)

        tree.find_node_by_id("main").set_checked(True)

        assert states(tree) == {node_id: (True, False) for node_id in states(tree)}

    def test_unchecking_clears_indeterminate_below(self):
        tree = build_tree()
        tree.find_node_by_id("a").set_checked(True)
        assert tree.find_node_by_id("docs").indeterminate

        tree.find_node_by_id("root").set_checked(False)

        assert all(state == (False, False) for state in states(tree).values())

    def test_checked_and_indeterminate_never_together(self):
        tree = build_tree()
        for node_id, checked in [("a", True), ("main", True), ("b", True), ("a", False)]:
            tree.find_node_by_id(node_id).set_checked(checked)
            tree.check_invariants()
            for node in tree:
                assert not (node.checked and node.indeterminate)

    def test_idempotent(self):
        once = build_tree()
        twice = build_tree()

        once.find_node_by_id("docs").set_checked(True)
        twice.find_node_by_id("docs").set_checked(True)
        twice.find_node_by_id("docs").set_checked(True)

        assert states(once) == states(twice)
        checked = lambda tree: {node.id for node in tree if node.checked}
        assert checked(once) == checked(twice)


class TestUpwardRecursion:
    """The upward walk always reaches the root, even without a change."""

    def test_emptied_node_still_notifies_ancestors(self):
        bus = EventBus()
        a = Node("A", checked=True)
        p = Node("P", children=[a])
        root = Node("R", children=[p, Node("Q", checked=True)], bus=bus)
        recorder = EventRecorder(bus)

        p.remove_child(a)
        recorder.clear()
        p.update_check_state_from_children()

        assert recorder.node_ids() == ["R"]
        assert (p.checked, p.indeterminate) == (False, False)
        # P is unchecked and Q is checked
        assert root.indeterminate

    def test_recurses_to_root_when_unchanged(self):
        tree = build_tree()
        tree.find_node_by_id("a").set_checked(True)
        recorder = EventRecorder(tree)

        # docs stays indeterminate, root stays indeterminate
        tree.find_node_by_id("docs").update_check_state_from_children()

        assert [(event.kind, event.node.id) for event in recorder.events] == [
            (TreeEventKind.NODE_INDETERMINATE, "docs"),
            (TreeEventKind.NODE_INDETERMINATE, "root"),
        ]

    def test_one_event_per_recomputed_ancestor(self):
        tree = build_tree()
        recorder = EventRecorder(tree)

        tree.find_node_by_id("main").set_checked(True)

        # main itself, then src and root recomputed once each
        assert recorder.node_ids() == ["main", "src", "root"]
        assert tree.find_node_by_id("src").checked
        assert tree.find_node_by_id("root").indeterminate

    @pytest.mark.parametrize("leaf_id", ["a", "b", "main"])
    def test_every_ancestor_is_notified(self, leaf_id):
        tree = build_tree()
        recorder = EventRecorder(tree)
        leaf = tree.find_node_by_id(leaf_id)

        leaf.set_checked(True)

        ancestors = []
        node = leaf.parent
        while node is not None:
            ancestors.append(node.id)
            node = node.parent
        assert recorder.node_ids()[1:] == ancestors


class TestReconcile:
    """Test normalising a freshly loaded forest."""

    def test_loaded_checked_parent_checks_children(self):
        tree = Tree.from_descriptors([
            {'id': 'p', 'checked': True, 'children': [{'id': 'c1'}, {'id': 'c2'}]},
        ])
        tree.reconcile_check_states()
        assert all(node.checked for node in tree)

    def test_loaded_children_decide_parent(self):
        tree = Tree.from_descriptors([
            {'id': 'p', 'children': [
                {'id': 'c1', 'checked': True},
                {'id': 'c2', 'children': [{'id': 'g', 'checked': True}]},
            ]},
        ])
        tree.reconcile_check_states()

        assert tree.find_node_by_id("c2").checked
        assert tree.find_node_by_id("p").checked

    def test_stale_indeterminate_is_corrected(self):
        tree = Tree.from_descriptors([
            {'id': 'p', 'indeterminate': True, 'children': [{'id': 'c'}]},
        ])
        tree.reconcile_check_states()
        assert states(tree) == {'p': (False, False), 'c': (False, False)}


if __name__ == '__main__':
    unittest.main()
