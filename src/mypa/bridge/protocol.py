"""Wire shapes shared by the controller and child protocols.

Both protocols use the same two envelopes and differ only in their
``type`` discriminant::

    {"type": <call type>, "requestId": ..., "call": {"name": ..., "arguments": {...}}}
    {"type": <response type>, "requestId": ..., "response": ...}
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ToolCallSpec(BaseModel):
    """The ``call`` member of a call envelope.

    Values are carried as given; the receiving dispatcher decides what a
    bad ``name`` or ``arguments`` means.
    """

    model_config = ConfigDict(extra="allow")

    name: Any = None
    arguments: Any = Field(default_factory=dict)


class CallEnvelope(BaseModel):
    """A request to run one named tool on the receiving context."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    request_id: Any = Field(default=None, alias="requestId")
    call: ToolCallSpec | Any = Field(default=None, union_mode="left_to_right")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ResponseEnvelope(BaseModel):
    """The reply to a :class:`CallEnvelope`, echoing its request id."""

    model_config = ConfigDict(populate_by_name=True)

    type: str
    request_id: Any = Field(default=None, alias="requestId")
    response: Any = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


def is_envelope(data: Any, message_type: str) -> bool:
    """True when *data* is a mapping whose ``type`` is *message_type*."""
    return isinstance(data, dict) and data.get("type") == message_type


def parse_response(data: Any, message_type: str) -> ResponseEnvelope | None:
    """Parse *data* as a response of *message_type*, or return None."""
    if not is_envelope(data, message_type):
        return None
    try:
        return ResponseEnvelope.model_validate(data)
    except ValidationError:
        return None
