"""Exception hierarchy for checktreelib.

The model prefers silent no-ops for "target not found" situations (unresolved
ids, moves onto self or into a descendant). The exceptions below are reserved
for conditions that indicate a programming error or a broken configuration.
"""


class TreeError(Exception):
    """Base class for all checktreelib errors."""
    pass


class InvariantViolation(TreeError):
    """Raised when the forest or check-state invariants are broken.

    Examples: a node reachable twice during traversal (a cycle or a shared
    child), a root that still has a parent, or a node that is both checked
    and indeterminate.
    """
    pass


class ContainerNotFoundError(InvariantViolation):
    """Raised when a view is constructed without a container to render into."""
    pass


class PositionOutOfRangeError(TreeError, IndexError):
    """Raised for out-of-range positions when strict positioning is enabled."""
    pass


class InvalidDescriptorError(TreeError, ValueError):
    """Raised when a node descriptor cannot be turned into a Node."""
    pass


class ConfigurationError(TreeError):
    """Raised when a TreeConfig fails validation."""
    pass
