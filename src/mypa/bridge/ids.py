"""Correlation ids for outbound child calls."""

from __future__ import annotations

import secrets
import time
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Container


class CorrelationIdGenerator:
    """Produce ``{prefix}:{child}:{epoch_ms}:{hex}`` request ids.

    The child index and timestamp make ids readable in logs; the random
    suffix keeps concurrent calls to the same child apart.
    """

    def __init__(self, prefix: str = "MYPA_KZ", entropy_bytes: int = 6) -> None:
        self._prefix = prefix
        self._entropy_bytes = entropy_bytes

    def new_id(self, child_index: int, taken: Container[str] = ()) -> str:
        """Return an id not present in *taken*."""
        while True:
            stamp = int(time.time() * 1000)
            request_id = (
                f"{self._prefix}:{child_index}:{stamp}:"
                f"{secrets.token_hex(self._entropy_bytes)}"
            )
            if request_id not in taken:
                return request_id
