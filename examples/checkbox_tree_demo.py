#!/usr/bin/env python3
"""Demo script for checktreelib.

Builds a small project tree, drives it through the controller the way a
tree widget would, and prints the mirror view after every step.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path for development
sys.path.insert(0, str(Path(__file__).parent.parent))

from checktreelib import (
    Tree,
    TreeConfig,
    TreeController,
    get_checked_ids,
    get_tree_stats,
    setup_logging,
)

DESCRIPTORS = [
    {'id': 'project', 'label': 'Project', 'children': [
        {'id': 'docs', 'label': 'docs', 'children': [
            {'id': 'readme', 'label': 'README.md'},
            {'id': 'guide', 'label': 'guide.md'},
        ]},
        {'id': 'src', 'label': 'src', 'children': [
            {'id': 'main', 'label': 'main.py', 'checked': True},
            {'id': 'util', 'label': 'util.py'},
        ]},
    ]},
    {'id': 'scratch', 'label': 'scratch', 'children': [
        {'id': 'notes', 'label': 'notes.txt'},
    ]},
]


def show(controller: TreeController, title: str):
    print(f"\n=== {title} ===")
    controller.render()


def main():
    parser = argparse.ArgumentParser(description="checktreelib demo")
    parser.add_argument("--debug", action="store_true", help="Show DEBUG log output")
    args = parser.parse_args()

    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    tree = Tree.from_descriptors(DESCRIPTORS, config=TreeConfig.debug())
    tree.reconcile_check_states()
    controller = TreeController(tree, sys.stdout)
    show(controller, "Loaded")

    controller.set_checked('docs', True)
    show(controller, "Checked docs")

    controller.move_node('notes', 'docs', 0)
    show(controller, "Moved notes.txt into docs")

    controller.drop_node('guide', 'notes', 'before')
    show(controller, "Dropped guide.md before notes.txt")

    # Rejected: a node cannot move into its own subtree
    controller.move_node('project', 'main', 0)

    controller.toggle_expand('src')
    controller.remove_node('scratch')
    show(controller, "Collapsed src, removed scratch")

    stats = get_tree_stats(tree)
    print(f"\nChecked: {', '.join(str(node_id) for node_id in get_checked_ids(tree))}")
    print(f"Nodes: {stats['total_nodes']} "
          f"(checked {stats['checked']}, indeterminate {stats['indeterminate']})")
    print(f"\nSnapshot JSON:\n{tree.to_json()}")


if __name__ == "__main__":
    main()
