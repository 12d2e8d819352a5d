"""Chat API routes."""

from fastapi import APIRouter, Depends, HTTPException

from weekly.core.logging import get_logger
from weekly.models.chat import ChatRequest, ChatResponse
from weekly.services.chat_service import ChatService, get_chat_service

logger = get_logger(__name__)

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("/message", response_model=ChatResponse)
async def send_message(
    request: ChatRequest,
    service: ChatService = Depends(get_chat_service),
):
    """
    Send a chat message and get a response.

    A new conversation (with its own data source registry) is created
    when no session_id is given or the id is unknown. Model errors are
    rendered by the application error handler.
    """
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="Message cannot be empty")

    conversation, turn = await service.process_message(
        message=request.message,
        session_id=request.session_id,
    )

    return ChatResponse(
        message=turn.text,
        session_id=conversation.id,
        tool_calls=turn.tool_calls,
        iterations=turn.iterations,
        cancelled=turn.cancelled,
    )
