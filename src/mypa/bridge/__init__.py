"""Cross-context RPC bridge: registry, dispatcher, inbound and outbound sides."""

from mypa.bridge.dispatcher import TOOL_FAILED, UNKNOWN_TOOL, Dispatcher
from mypa.bridge.ids import CorrelationIdGenerator
from mypa.bridge.inbound import InboundBridge
from mypa.bridge.outbound import NO_RESPONSE, SEND_FAILED, ChildCaller, PendingCall
from mypa.bridge.protocol import CallEnvelope, ResponseEnvelope, ToolCallSpec
from mypa.bridge.registry import ToolDefinition, ToolRegistry, ToolSpec

__all__ = [
    "NO_RESPONSE",
    "SEND_FAILED",
    "TOOL_FAILED",
    "UNKNOWN_TOOL",
    "CallEnvelope",
    "ChildCaller",
    "CorrelationIdGenerator",
    "Dispatcher",
    "InboundBridge",
    "PendingCall",
    "ResponseEnvelope",
    "ToolCallSpec",
    "ToolDefinition",
    "ToolRegistry",
    "ToolSpec",
]
