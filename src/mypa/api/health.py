"""Health check endpoint."""

from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

_START_TIME = time.monotonic()


@router.get("/api/health")
async def health(request: Request) -> dict[str, Any]:
    """Liveness plus a short summary of the page."""
    from mypa import __version__

    page = request.app.state.page
    return {
        "status": "ok",
        "version": __version__,
        "uptime_seconds": round(time.monotonic() - _START_TIME, 1),
        "screens": len(page.grid),
        "pending_child_calls": page.caller.pending_count,
    }
