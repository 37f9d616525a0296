"""Embedded child contexts that answer the child protocol."""

from mypa.child.agent import ChildAgent

__all__ = ["ChildAgent"]
