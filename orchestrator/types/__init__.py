from .messages import Message, Role, ToolCall, ToolDef
from .context import RunContext
from .requests import ChatRequest
from .responses import ChatResponse, Usage
from .transcript import Transcript

__all__ = [
    "Message",
    "Role",
    "ToolCall",
    "ToolDef",
    "RunContext",
    "ChatRequest",
    "ChatResponse",
    "Usage",
    "Transcript",
]
