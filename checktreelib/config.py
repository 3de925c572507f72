"""Configuration system for checktreelib.

This module defines how users tune the behaviour of a Tree: how lenient
positional inserts are, whether invariants are re-verified after every
structural change, and how deep the forest may grow through moves.
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Union


class TraversalStrategy(Enum):
    """How to walk a subtree.

    Different strategies suit different jobs: pre-order for rendering and
    searching, post-order for bottom-up aggregation, breadth-first for
    level-by-level work.
    """
    DEPTH_FIRST_PRE = "dfs_pre"     # Parent before children
    DEPTH_FIRST_POST = "dfs_post"   # Children before parent
    BREADTH_FIRST = "bfs"           # Level by level


_STRATEGY_ALIASES = {
    'dfs': TraversalStrategy.DEPTH_FIRST_PRE,
    'dfs_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    'depth_first': TraversalStrategy.DEPTH_FIRST_PRE,
    'depth_first_pre': TraversalStrategy.DEPTH_FIRST_PRE,
    'dfs_post': TraversalStrategy.DEPTH_FIRST_POST,
    'depth_first_post': TraversalStrategy.DEPTH_FIRST_POST,
    'bfs': TraversalStrategy.BREADTH_FIRST,
    'breadth_first': TraversalStrategy.BREADTH_FIRST,
}


def parse_strategy(strategy: Union[TraversalStrategy, str]) -> TraversalStrategy:
    """Parse a strategy from an enum member or one of its string aliases.

    Raises:
        ValueError: If the name is not recognized
    """
    if isinstance(strategy, TraversalStrategy):
        return strategy

    strategy_lower = strategy.lower()
    if strategy_lower not in _STRATEGY_ALIASES:
        raise ValueError(
            f"Unknown traversal strategy: {strategy}. "
            f"Choose from: {', '.join(_STRATEGY_ALIASES.keys())}"
        )
    return _STRATEGY_ALIASES[strategy_lower]


@dataclass
class TreeConfig:
    """Behavioural switches for a Tree.

    The defaults reproduce the lenient UI behaviour: out-of-range positions
    are clamped, invariants are trusted, nesting depth is unlimited and
    moves leave check states as they were.
    """

    # Raise PositionOutOfRangeError instead of clamping positions
    strict_positions: bool = False

    # Re-check the forest after every structural mutation (debug/test builds)
    verify_invariants: bool = False

    # Deepest allowed depth for moved nodes (roots are depth 0)
    max_depth: Optional[int] = None

    # Recompute the old and new parents' check state after moves and removals
    recompute_parents: bool = False

    @classmethod
    def debug(cls) -> 'TreeConfig':
        """Config that verifies invariants after every structural change."""
        return cls(verify_invariants=True)

    @classmethod
    def strict(cls, max_depth: Optional[int] = None) -> 'TreeConfig':
        """Config that reports bad positions instead of correcting them.

        Args:
            max_depth: Optional nesting limit for moves

        Returns:
            TreeConfig with strict positioning and invariant checks
        """
        return cls(
            strict_positions=True,
            verify_invariants=True,
            max_depth=max_depth,
        )

    def allows_depth(self, depth: int) -> bool:
        """Check if a node may live at the given depth."""
        if self.max_depth is None:
            return True
        return depth <= self.max_depth

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []

        if self.max_depth is not None:
            if isinstance(self.max_depth, bool) or not isinstance(self.max_depth, int):
                errors.append("max_depth must be an integer or None")
            elif self.max_depth < 0:
                errors.append("max_depth cannot be negative")

        return errors
