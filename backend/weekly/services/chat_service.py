"""
Chat service: the model tool-calling loop and in-memory conversations.

ChatLoop is an explicit state machine:

    AWAITING_MODEL --tool calls--> EXECUTING_TOOLS --results--> AWAITING_MODEL
    AWAITING_MODEL --final text / cancelled / iterations exhausted--> DONE

Tool calls run serially in the order the model returned them, and every
result goes back into the conversation as a tool_result block.
"""

import asyncio
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Tuple

from weekly.core.config import Settings, settings as default_settings
from weekly.core.enums import ChatLoopState, MessageRole
from weekly.core.exceptions import SessionNotFoundError
from weekly.core.logging import get_logger, request_id_var, set_request_context
from weekly.core.metrics import metrics
from weekly.models.chat import ToolCallRecord
from weekly.models.tools import ToolInvocation, ToolResult
from weekly.services.claude_client import ClaudeClient
from weekly.services.dispatcher import ToolDispatcher, build_dispatcher
from weekly.services.prompt_service import prompt_service
from weekly.services.tool_catalog import to_anthropic_tools

logger = get_logger(__name__)

CancelCheck = Callable[[], Awaitable[bool]]
ToolCallback = Callable[[ToolCallRecord], None]

CANCELLED_TEXT = "Request cancelled."


class ModelClient(Protocol):
    async def create_message(self, messages: List[dict], system_prompt: str,
                             tools: Optional[List[dict]] = None) -> Any:
        ...


@dataclass
class ChatTurn:
    """Outcome of one user message."""

    text: str
    tool_calls: List[ToolCallRecord] = field(default_factory=list)
    state: ChatLoopState = ChatLoopState.DONE
    iterations: int = 0
    cancelled: bool = False


class ChatLoop:
    """Runs one user turn against the model until it stops asking for tools."""

    def __init__(
        self,
        model_client: ModelClient,
        dispatcher: ToolDispatcher,
        system_prompt: str,
        tools: Optional[List[dict]] = None,
        max_iterations: int = 10,
        on_tool_call: Optional[ToolCallback] = None,
    ):
        self.model_client = model_client
        self.dispatcher = dispatcher
        self.system_prompt = system_prompt
        self.tools = tools if tools is not None else to_anthropic_tools()
        self.max_iterations = max_iterations
        self.on_tool_call = on_tool_call

    async def run(self, messages: List[dict], should_cancel: Optional[CancelCheck] = None) -> ChatTurn:
        """
        Drive the loop over ``messages`` (mutated in place).

        The last message must be the user's. ``should_cancel`` is checked
        before every model request, never while a call is in flight.
        """
        state = ChatLoopState.AWAITING_MODEL
        turn = ChatTurn(text="", state=state)
        pending: List[ToolInvocation] = []

        while state != ChatLoopState.DONE:
            if state == ChatLoopState.AWAITING_MODEL:
                if should_cancel is not None and await should_cancel():
                    logger.info("Chat turn cancelled", extra={"iterations": turn.iterations})
                    turn.cancelled = True
                    turn.text = CANCELLED_TEXT
                    state = ChatLoopState.DONE
                    continue

                if turn.iterations >= self.max_iterations:
                    logger.warning("Chat loop hit the iteration limit", extra={"max_iterations": self.max_iterations})
                    turn.text = (
                        f"I'm sorry, I couldn't finish this request within {self.max_iterations} steps. "
                        "Please try again with a more specific request."
                    )
                    state = ChatLoopState.DONE
                    continue

                response = await self.model_client.create_message(
                    messages=messages,
                    system_prompt=self.system_prompt,
                    tools=self.tools,
                )
                turn.iterations += 1

                pending = [
                    ToolInvocation.from_tool_use(block) for block in ClaudeClient.extract_tool_use_blocks(response)
                ]
                turn.text = ClaudeClient.extract_text_blocks(response)
                messages.append({
                    "role": MessageRole.ASSISTANT.value,
                    "content": ClaudeClient.content_to_params(response),
                })
                state = ChatLoopState.EXECUTING_TOOLS if pending else ChatLoopState.DONE

            elif state == ChatLoopState.EXECUTING_TOOLS:
                tool_results = []
                for invocation in pending:
                    result = await self.dispatcher.dispatch_invocation(invocation)
                    record = ToolCallRecord(
                        tool=invocation.name,
                        arguments=invocation.arguments_dict(),
                        success=result.success,
                    )
                    turn.tool_calls.append(record)
                    if self.on_tool_call is not None:
                        self.on_tool_call(record)
                    tool_results.append(
                        ClaudeClient.format_tool_result(invocation.call_id, result.to_json(), is_error=not result.is_ok)
                    )

                messages.append({"role": MessageRole.USER.value, "content": tool_results})
                pending = []
                state = ChatLoopState.AWAITING_MODEL

        turn.state = state
        return turn


@dataclass
class Conversation:
    """One chat session with its own registry, dispatcher and history."""

    id: str
    dispatcher: ToolDispatcher
    messages: List[dict] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    @property
    def registry(self):
        return self.dispatcher.registry


class ChatService:
    """Service for handling chat interactions."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        model_client: Optional[ModelClient] = None,
        dispatcher_factory: Optional[Callable[[], ToolDispatcher]] = None,
    ):
        self.settings = settings or default_settings
        self.sessions: Dict[str, Conversation] = {}  # In-memory, no persistence
        self._model_client = model_client
        self._dispatcher_factory = dispatcher_factory or (lambda: build_dispatcher(self.settings))

    @property
    def model_client(self) -> ModelClient:
        """Created on first use so that tool-only callers never need a model key."""
        if self._model_client is None:
            self._model_client = ClaudeClient(self.settings)
        return self._model_client

    # ============ Conversations ============

    def create_conversation(self, session_id: Optional[str] = None) -> Conversation:
        conversation = Conversation(id=session_id or str(uuid.uuid4()), dispatcher=self._dispatcher_factory())
        self.sessions[conversation.id] = conversation
        logger.info("Created conversation", extra={"session_id": conversation.id[:8]})
        return conversation

    def get_conversation(self, session_id: str) -> Conversation:
        conversation = self.sessions.get(session_id)
        if conversation is None:
            raise SessionNotFoundError(session_id)
        return conversation

    def get_or_create_conversation(self, session_id: Optional[str] = None) -> Conversation:
        if session_id and session_id in self.sessions:
            return self.sessions[session_id]
        return self.create_conversation(session_id)

    # ============ Processing ============

    async def process_message(
        self,
        message: str,
        session_id: Optional[str] = None,
        should_cancel: Optional[CancelCheck] = None,
        on_tool_call: Optional[ToolCallback] = None,
    ) -> Tuple[Conversation, ChatTurn]:
        """
        Process a chat message using Claude and the tool dispatcher.

        History is only committed when the turn completes, so a model
        error leaves the conversation as it was before the message.
        """
        conversation = self.get_or_create_conversation(session_id)
        set_request_context(request_id=request_id_var.get() or None, conversation_id=conversation.id)

        loop = ChatLoop(
            model_client=self.model_client,
            dispatcher=conversation.dispatcher,
            system_prompt=prompt_service.get_system_prompt(),
            max_iterations=self.settings.chat_max_iterations,
            on_tool_call=on_tool_call,
        )

        start = time.perf_counter()
        async with conversation.lock:
            working = list(conversation.messages)
            working.append({"role": MessageRole.USER.value, "content": message})
            turn = await loop.run(working, should_cancel=should_cancel)
            conversation.messages = working

        metrics.record_chat_turn("cancelled" if turn.cancelled else turn.state.value, time.perf_counter() - start)
        logger.info(
            "Chat turn complete",
            extra={"iterations": turn.iterations, "tool_calls": len(turn.tool_calls)},
        )
        return conversation, turn

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
    ) -> Tuple[Conversation, ToolResult]:
        """Dispatch a tool directly against a conversation's data sources."""
        conversation = self.get_or_create_conversation(session_id)
        async with conversation.lock:
            result = await conversation.dispatcher.dispatch(name, arguments)
        return conversation, result

    async def inspect_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        session_id: Optional[str] = None,
    ) -> Tuple[Optional[Conversation], ToolResult]:
        """
        Dispatch a read-only tool without creating a conversation.

        An unknown ``session_id`` raises SessionNotFoundError; no id runs
        against a fresh dispatcher that is not kept.
        """
        if not session_id:
            return None, await self._dispatcher_factory().dispatch(name, arguments)
        conversation = self.get_conversation(session_id)
        async with conversation.lock:
            result = await conversation.dispatcher.dispatch(name, arguments)
        return conversation, result


# Global chat service instance
chat_service = ChatService()


def get_chat_service() -> ChatService:
    """Dependency provider for the global chat service."""
    return chat_service
