"""Unit tests for traversal strategies, collectors and the functional API."""

import sys
from pathlib import Path
import unittest

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from checktreelib import (
    InvariantViolation, Node, Tree, TraversalStrategy, collect_tree_data, count_nodes,
    create_traverser, find_nodes, get_checked_ids, get_leaf_nodes, get_tree_paths,
    get_tree_stats, traverse_tree,
)
from checktreelib.config import parse_strategy
from checktreelib.core import (
    BreadthFirstTraverser,
    CheckStateCollector,
    DataCollector,
    DepthFirstPostOrderTraverser,
    DepthFirstPreOrderTraverser,
    NodeAdapter,
    PathCollector,
)


def build_tree():
    # Create a tree structure:
    #   root
    #     a
    #       a1
    #       a2
    #     b
    #       b1
    #         b1a
    #     c
    return Tree.from_descriptors([
        {'id': 'root', 'children': [
            {'id': 'a', 'children': [{'id': 'a1', 'checked': True}, {'id': 'a2', 'checked': True}]},
            {'id': 'b', 'children': [{'id': 'b1', 'children': [{'id': 'b1a'}]}]},
            {'id': 'c'},
        ]},
    ])


class TestTraversalStrategies(unittest.TestCase):
    """Test different traversal strategies."""

    def setUp(self):
        self.tree = build_tree()
        self.root = self.tree.roots[0]

    def walk(self, traverser, **kwargs):
        return [(node.id, depth) for node, depth in traverser.traverse(self.root, **kwargs)]

    def test_depth_first_pre_order(self):
        order = [node_id for node_id, _ in self.walk(DepthFirstPreOrderTraverser())]
        self.assertEqual(order, ['root', 'a', 'a1', 'a2', 'b', 'b1', 'b1a', 'c'])

    def test_depth_first_post_order(self):
        order = [node_id for node_id, _ in self.walk(DepthFirstPostOrderTraverser())]
        self.assertEqual(order, ['a1', 'a2', 'a', 'b1a', 'b1', 'b', 'c', 'root'])

    def test_breadth_first_traversal(self):
        nodes = self.walk(BreadthFirstTraverser())
        depths = [depth for _, depth in nodes]
        self.assertEqual(depths, sorted(depths))
        self.assertEqual(nodes[:4], [('root', 0), ('a', 1), ('b', 1), ('c', 1)])

    def test_max_depth(self):
        for traverser in (DepthFirstPreOrderTraverser(), DepthFirstPostOrderTraverser(),
                          BreadthFirstTraverser()):
            nodes = self.walk(traverser, max_depth=1)
            self.assertEqual(max(depth for _, depth in nodes), 1)
            self.assertEqual(len(nodes), 4)

    def test_min_depth(self):
        nodes = self.walk(DepthFirstPreOrderTraverser(), min_depth=2)
        self.assertEqual([node_id for node_id, _ in nodes], ['a1', 'a2', 'b1', 'b1a'])

    def test_depth_is_relative_to_start(self):
        b = self.tree.find_node_by_id('b')
        nodes = [(node.id, depth) for node, depth in DepthFirstPreOrderTraverser().traverse(b)]
        self.assertEqual(nodes, [('b', 0), ('b1', 1), ('b1a', 2)])

    def test_shared_child_is_detected(self):
        shared = Node('shared')
        left = Node('left')
        right = Node('right')
        root = Node('root', children=[left, right])
        # Bypass the attach checks to simulate a corrupted structure
        left.children.append(shared)
        right.children.append(shared)

        with self.assertRaises(InvariantViolation):
            list(DepthFirstPreOrderTraverser().traverse(root))
        with self.assertRaises(InvariantViolation):
            list(BreadthFirstTraverser().traverse(root))


class TestStrategyParsing:

    @pytest.mark.parametrize("name,expected", [
        ('dfs', TraversalStrategy.DEPTH_FIRST_PRE),
        ('DFS_PRE', TraversalStrategy.DEPTH_FIRST_PRE),
        ('dfs_post', TraversalStrategy.DEPTH_FIRST_POST),
        ('bfs', TraversalStrategy.BREADTH_FIRST),
        ('breadth_first', TraversalStrategy.BREADTH_FIRST),
        (TraversalStrategy.DEPTH_FIRST_POST, TraversalStrategy.DEPTH_FIRST_POST),
    ])
    def test_parse(self, name, expected):
        assert parse_strategy(name) is expected

    @pytest.mark.parametrize("name", ['zigzag', 'level', 'level_order'])
    def test_unknown_strategy(self, name):
        with pytest.raises(ValueError):
            create_traverser(name)

    def test_create_traverser(self):
        assert isinstance(create_traverser('bfs'), BreadthFirstTraverser)
        assert isinstance(create_traverser(TraversalStrategy.DEPTH_FIRST_POST),
                          DepthFirstPostOrderTraverser)


class TestCollectors:

    def setup_method(self):
        self.tree = build_tree()
        self.adapter = NodeAdapter()

    def test_check_state_collector(self):
        a1 = self.tree.find_node_by_id('a1')
        data = CheckStateCollector(self.adapter).collect(a1, 2)
        assert data == {'id': 'a1', 'depth': 2, 'checked': True,
                        'indeterminate': False, 'is_leaf': True}

    def test_path_collector(self):
        b1a = self.tree.find_node_by_id('b1a')
        assert PathCollector(self.adapter).collect(b1a, 0) == ['root', 'b', 'b1', 'b1a']

    def test_collector_subclass(self):
        class DepthLabelCollector(DataCollector):
            def collect(self, node, depth):
                return f"{depth}:{node.id}"

        collector = DepthLabelCollector()
        data = [value for _, value in collect_tree_data(self.tree, collector, max_depth=1)]
        assert data == ['0:root', '1:a', '1:b', '1:c']


class TestFunctionalApi:

    def setup_method(self):
        self.tree = build_tree()

    def test_traverse_tree_walks_every_root(self):
        self.tree.add_root(Node('second', children=[Node('s1')]))
        ids = [node.id for node, _ in traverse_tree(self.tree)]
        assert ids[-2:] == ['second', 's1']
        assert dict(traverse_tree(self.tree))[self.tree.find_node_by_id('s1')] == 1

    def test_filters(self):
        leaves_not_c = [node.id for node, _ in traverse_tree(
            self.tree,
            include_filter=lambda node: node.is_leaf(),
            exclude_filter=lambda node: node.id == 'c',
        )]
        assert leaves_not_c == ['a1', 'a2', 'b1a']

    def test_collect_defaults_to_ids(self):
        assert [data for _, data in collect_tree_data(self.tree, strategy='bfs', max_depth=1)] == \
            ['root', 'a', 'b', 'c']

    def test_count_nodes(self):
        assert count_nodes(self.tree) == 8
        assert count_nodes(self.tree.find_node_by_id('b')) == 3
        assert count_nodes(self.tree, max_depth=0) == 1

    def test_find_nodes(self):
        found = list(find_nodes(self.tree, lambda node: node.id.startswith('b')))
        assert [node.id for node in found] == ['b', 'b1', 'b1a']

    def test_get_leaf_nodes(self):
        assert [node.id for node in get_leaf_nodes(self.tree)] == ['a1', 'a2', 'b1a', 'c']

    def test_get_tree_paths(self):
        paths = list(get_tree_paths(self.tree.find_node_by_id('b')))
        assert paths == [['root', 'b'], ['root', 'b', 'b1'], ['root', 'b', 'b1', 'b1a']]

    def test_get_checked_ids(self):
        self.tree.reconcile_check_states()
        assert get_checked_ids(self.tree) == ['a', 'a1', 'a2']
        assert get_checked_ids(self.tree, include_indeterminate=True) == ['root', 'a', 'a1', 'a2']

    def test_get_tree_stats(self):
        self.tree.reconcile_check_states()
        self.tree.find_node_by_id('b').set_expanded(False)

        stats = get_tree_stats(self.tree)

        assert stats['total_nodes'] == 8
        assert stats['leaf_nodes'] == 4
        assert stats['internal_nodes'] == 4
        assert stats['max_depth'] == 3
        assert stats['depths'] == {0: 1, 1: 3, 2: 3, 3: 1}
        assert stats['checked'] == 3
        assert stats['indeterminate'] == 1
        assert stats['unchecked'] == 4
        assert stats['expanded'] == 3

    def test_empty_tree(self):
        stats = get_tree_stats(Tree())
        assert stats['total_nodes'] == 0
        assert list(traverse_tree(Tree())) == []


if __name__ == '__main__':
    unittest.main()
