"""Data sources API routes. Every route goes through the tool dispatcher."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from weekly.core.enums import ToolName
from weekly.models.chat import ToolCallResponse
from weekly.models.datasource import CustomDataSourceCreate
from weekly.services.chat_service import ChatService, get_chat_service

router = APIRouter(prefix="/api/datasources", tags=["datasources"])


async def _dispatch(service: ChatService, tool: ToolName, arguments: dict,
                    session_id: Optional[str]) -> ToolCallResponse:
    conversation, result = await service.call_tool(tool.value, arguments, session_id)
    return ToolCallResponse(tool=tool.value, session_id=conversation.id, result=result.to_envelope())


@router.get("", response_model=ToolCallResponse)
async def list_datasources(
    session_id: Optional[str] = None,
    service: ChatService = Depends(get_chat_service),
):
    """
    List data sources and their connection status.

    Never creates a conversation: without a session this shows the
    initial state, and an unknown session is a 404.
    """
    tool = ToolName.LIST_DATA_SOURCES.value
    conversation, result = await service.inspect_tool(tool, {}, session_id)
    return ToolCallResponse(
        tool=tool,
        session_id=conversation.id if conversation else None,
        result=result.to_envelope(),
    )


@router.post("/sync", response_model=ToolCallResponse)
async def sync_datasources(
    session_id: Optional[str] = None,
    service: ChatService = Depends(get_chat_service),
):
    """Stamp a fresh sync time on every connected source."""
    return await _dispatch(service, ToolName.SYNC_ALL_SOURCES, {}, session_id)


@router.post("/custom")
async def add_custom_datasource(
    request: CustomDataSourceCreate,
    service: ChatService = Depends(get_chat_service),
):
    """Register a user-defined data source. It can be listed and synced but not connected."""
    if not request.name.strip():
        raise HTTPException(status_code=400, detail="Data source name cannot be empty")

    conversation = service.get_or_create_conversation(request.session_id)
    async with conversation.lock:
        record = conversation.registry.register_custom(request.name.strip(), request.description)
    return {"session_id": conversation.id, "dataSource": record.to_dict()}


@router.post("/{source}/connect", response_model=ToolCallResponse)
async def connect_datasource(
    source: str,
    session_id: Optional[str] = None,
    service: ChatService = Depends(get_chat_service),
):
    """Connect a data source using the configured credentials."""
    return await _dispatch(service, ToolName.CONNECT_DATA_SOURCE, {"source": source}, session_id)


@router.post("/{source}/disconnect", response_model=ToolCallResponse)
async def disconnect_datasource(
    source: str,
    session_id: Optional[str] = None,
    service: ChatService = Depends(get_chat_service),
):
    return await _dispatch(service, ToolName.DISCONNECT_DATA_SOURCE, {"source": source}, session_id)
