"""Screen grid: the page's embedded child contexts, addressed by index.

Each screen hosts one child browsing context showing ``url``.  Changing
the layout rebuilds every screen, discarding URLs and attached remote
children, the way the page recreates its iframes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mypa.channel.context import BrowsingContext, origin_of
from mypa.core.errors import LayoutError, UnknownChildError

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

DEFAULT_ALLOWED_COUNTS = (1, 2, 3, 4, 20)


@dataclass(slots=True)
class Screen:
    """One cell of the grid and the child context embedded in it."""

    index: int
    url: str
    context: BrowsingContext

    @property
    def id(self) -> str:
        return f"iframe-{self.index}"

    @property
    def screen_id(self) -> str:
        return f"screen-{self.index}"


def _is_index(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class ScreenGrid:
    """Holds the screens and the scroll position of the page."""

    def __init__(
        self,
        allowed_counts: Iterable[int] = DEFAULT_ALLOWED_COUNTS,
        *,
        grid_max: int = 4,
        base_url: str = "",
    ) -> None:
        self._allowed = tuple(allowed_counts)
        self._grid_max = grid_max
        self._base_url = base_url
        self._screens: list[Screen] = []
        self._position = 0

    # ── Layout ────────────────────────────────────────────────

    @property
    def allowed_counts(self) -> tuple[int, ...]:
        return self._allowed

    def is_allowed(self, count: Any) -> bool:
        return _is_index(count) and count in self._allowed

    @property
    def grid_class(self) -> str:
        """CSS-style class for the layout; large layouts share the widest grid."""
        count = len(self._screens)
        return f"grid-{min(count, self._grid_max)}"

    def set_layout(self, count: Any) -> int:
        """Rebuild the grid with *count* empty screens.

        Raises:
            LayoutError: If *count* is not an allowed screen count.
        """
        if not self.is_allowed(count):
            allowed = ", ".join(str(c) for c in self._allowed)
            msg = f"Screen count not allowed: {count}. Allowed: {allowed}"
            raise LayoutError(msg)
        self._screens = [
            Screen(index=i, url="", context=self._new_context(i, ""))
            for i in range(count)
        ]
        self._position = 0
        logger.debug("Layout set to %d screens (%s)", count, self.grid_class)
        return count

    @property
    def screens(self) -> tuple[Screen, ...]:
        return tuple(self._screens)

    def __len__(self) -> int:
        return len(self._screens)

    # ── Children ──────────────────────────────────────────────

    def require_child(self, index: Any) -> Screen:
        """Return the screen at *index*.

        Raises:
            UnknownChildError: If *index* is not a valid screen index.
        """
        if not _is_index(index) or not 0 <= index < len(self._screens):
            raise UnknownChildError(index, len(self._screens))
        return self._screens[index]

    def list_embedded_contexts(self) -> list[dict[str, Any]]:
        return [{"index": s.index, "id": s.id, "url": s.url} for s in self._screens]

    def set_child_url(self, index: Any, url: str) -> Screen:
        """Point screen *index* at *url* (a fresh in-process child context)."""
        screen = self.require_child(index)
        context = self._new_context(screen.index, url)
        screen.url, screen.context = url, context
        return screen

    def attach(self, index: Any, context: BrowsingContext) -> Screen:
        """Make *context* (e.g. a remote child) the child of screen *index*."""
        screen = self.require_child(index)
        screen.context = context
        return screen

    def detach(self, index: int, context: BrowsingContext) -> None:
        """Undo :meth:`attach` if *context* is still the screen's child."""
        if not _is_index(index) or not 0 <= index < len(self._screens):
            return
        screen = self._screens[index]
        if screen.context is context:
            screen.context = self._new_context(index, screen.url)

    def child_origin(self, url: str) -> str:
        """Origin a child showing *url* runs under (blank children inherit ours)."""
        return origin_of(url, self._base_url) or ""

    def _new_context(self, index: int, url: str) -> BrowsingContext:
        return BrowsingContext(f"iframe-{index}", self.child_origin(url))

    # ── Scrolling ─────────────────────────────────────────────

    @property
    def position(self) -> int:
        """Index of the screen scrolled into view."""
        return self._position

    def scroll_to(self, index: Any) -> int:
        if not _is_index(index) or not 0 <= index < len(self._screens):
            msg = f"Invalid screen index: {index}"
            raise LayoutError(msg)
        self._position = index
        return index

    def scroll_next(self) -> int:
        if self._position + 1 < len(self._screens):
            self._position += 1
        return self._position

    def scroll_prev(self) -> int:
        if self._position > 0:
            self._position -= 1
        return self._position

    # ── State ─────────────────────────────────────────────────

    def snapshot(self) -> dict[str, Any]:
        """Layout summary attached to every dispatch result."""
        return {
            "screens": len(self._screens),
            "iframes": [
                {"index": s.index, "id": s.id, "src": s.url} for s in self._screens
            ],
        }
