"""Claude API client wrapper for chat interactions."""

import time
from typing import Any, Dict, List, Optional

from anthropic import AsyncAnthropic, APIError
from anthropic.types import TextBlock, ToolUseBlock

from weekly.core.config import Settings, settings as default_settings
from weekly.core.exceptions import ModelAPIError
from weekly.core.logging import get_logger, perf_logger
from weekly.core.metrics import metrics

logger = get_logger(__name__)


class ClaudeClient:
    """Wrapper for Anthropic Claude API interactions."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[AsyncAnthropic] = None):
        """
        Initialize the Claude client.

        Raises ConfigurationError when no API key is configured and no
        ready-made client is passed in.
        """
        self.settings = settings or default_settings
        self.client = client or AsyncAnthropic(api_key=self.settings.require_model_api_key())
        self.model = self.settings.llm_model
        self.max_tokens = self.settings.llm_max_tokens

    async def create_message(
        self,
        messages: List[dict],
        system_prompt: str,
        tools: Optional[List[dict]] = None,
    ):
        """Create a non-streaming message."""
        kwargs: Dict[str, Any] = {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "system": system_prompt,
            "messages": messages,
        }
        if tools:
            kwargs["tools"] = tools

        start = time.perf_counter()
        try:
            response = await self.client.messages.create(**kwargs)
        except APIError as e:
            logger.error(f"Model API error: {e}")
            metrics.record_error("MODEL_API_ERROR")
            raise ModelAPIError(str(e))

        usage = getattr(response, "usage", None)
        input_tokens = getattr(usage, "input_tokens", 0) or 0
        output_tokens = getattr(usage, "output_tokens", 0) or 0
        metrics.record_llm_call(self.model, input_tokens, output_tokens)
        perf_logger.log_llm_call(self.model, input_tokens, output_tokens, (time.perf_counter() - start) * 1000)
        return response

    @staticmethod
    def extract_tool_use_blocks(response) -> List[ToolUseBlock]:
        """Extract tool use blocks from a response."""
        return [
            block for block in response.content
            if isinstance(block, ToolUseBlock)
        ]

    @staticmethod
    def extract_text_blocks(response) -> str:
        """Extract text content from a response."""
        text_blocks = [
            block for block in response.content
            if isinstance(block, TextBlock)
        ]
        return "\n".join(block.text for block in text_blocks)

    @staticmethod
    def content_to_params(response) -> List[dict]:
        """Assistant content blocks as plain dicts for the next request."""
        return [block.model_dump(exclude_none=True) for block in response.content]

    @staticmethod
    def format_tool_result(tool_use_id: str, content: str, is_error: bool = False) -> dict:
        """Format a tool result for inclusion in messages."""
        result = {
            "type": "tool_result",
            "tool_use_id": tool_use_id,
            "content": content,
        }
        if is_error:
            result["is_error"] = True
        return result
