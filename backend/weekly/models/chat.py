"""Chat and direct tool-call API models."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional


class ChatRequest(BaseModel):
    """Chat request model."""

    message: str = Field(..., min_length=1, description="User message")
    session_id: Optional[str] = Field(None, description="Session ID for conversation history")


class ToolCallRecord(BaseModel):
    """One tool call made while answering a chat message."""

    tool: str
    arguments: Dict[str, Any] = {}
    success: bool


class ChatResponse(BaseModel):
    """Chat response model."""

    message: str = Field(..., description="Assistant response")
    session_id: str = Field(..., description="Session ID")
    tool_calls: List[ToolCallRecord] = Field(default_factory=list, description="Tools called during processing")
    iterations: int = Field(0, description="Model round trips used for this turn")
    cancelled: bool = False


class ToolCallRequest(BaseModel):
    """Direct tool invocation, bypassing the model."""

    arguments: Dict[str, Any] = Field(default_factory=dict, description="Tool arguments")
    session_id: Optional[str] = Field(None, description="Conversation whose data sources to use")


class ToolCallResponse(BaseModel):
    """Envelope returned by a direct tool invocation."""

    tool: str
    session_id: Optional[str] = None
    result: Dict[str, Any] = Field(..., description="The tool's result envelope")
