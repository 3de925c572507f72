"""Testing utilities for checktreelib consumers."""

from .fixtures import EventRecorder

__all__ = ['EventRecorder']
