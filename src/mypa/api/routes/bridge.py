"""Plain HTTP access to discovery and dispatch."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Request
from pydantic import BaseModel, Field

router = APIRouter(prefix="/api", tags=["bridge"])


class CallRequest(BaseModel):
    """Body of ``POST /api/call``."""

    name: str
    arguments: dict[str, Any] = Field(default_factory=dict)


@router.get("/actions")
async def actions(request: Request) -> dict[str, Any]:
    """Tools and current state."""
    return request.app.state.page.list_actions()


@router.post("/call")
async def call(body: CallRequest, request: Request) -> dict[str, Any]:
    """Run one tool; failures come back as ``ok: false`` results, not HTTP errors."""
    return await request.app.state.page.call(body.model_dump())
