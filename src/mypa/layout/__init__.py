"""Screen grid layout."""

from mypa.layout.grid import DEFAULT_ALLOWED_COUNTS, Screen, ScreenGrid

__all__ = ["DEFAULT_ALLOWED_COUNTS", "Screen", "ScreenGrid"]
