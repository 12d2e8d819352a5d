"""Direct tool invocation routes."""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends

from weekly.models.chat import ToolCallRequest, ToolCallResponse
from weekly.services.chat_service import ChatService, get_chat_service
from weekly.services.tool_catalog import TOOL_DEFINITIONS

router = APIRouter(prefix="/api/tools", tags=["tools"])


@router.get("")
async def list_tools() -> List[Dict[str, Any]]:
    """Tool catalog as shown to the model."""
    return [
        {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": tool.input_schema,
            "source": tool.source,
        }
        for tool in TOOL_DEFINITIONS
    ]


@router.post("/{tool_name}", response_model=ToolCallResponse)
async def call_tool(
    tool_name: str,
    request: ToolCallRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Invoke one tool through the dispatcher.

    Always answers 200 with the tool's envelope; failures are reported
    inside it (``success: false``), never as HTTP errors.
    """
    conversation, result = await service.call_tool(tool_name, request.arguments, request.session_id)
    return ToolCallResponse(tool=tool_name, session_id=conversation.id, result=result.to_envelope())
