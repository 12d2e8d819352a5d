"""
Interactive chat REPL for the weekly update assistant.

Runs the same chat loop and dispatcher as the HTTP API, in a terminal.
"""

import argparse
import asyncio
import sys
from typing import Callable, Optional, TextIO

from weekly.core.config import Settings, settings as default_settings
from weekly.core.exceptions import AppError
from weekly.core.logging import configure_logging, get_logger
from weekly.models.chat import ToolCallRecord
from weekly.services.chat_service import ChatService

logger = get_logger(__name__)

BANNER = """\
===========================================================
            Weekly Update Assistant (Claude)
===========================================================

Type your questions or commands in natural language.
Examples:
  - 'Connect to Slack'
  - 'Show me my data sources'
  - 'Get my Zoom meetings from last week'

Type 'quit' or 'exit' to end the session.
"""

EXIT_COMMANDS = {"quit", "exit"}


class ChatREPL:
    """One terminal session bound to one conversation."""

    def __init__(self, service: ChatService, out: Optional[TextIO] = None):
        self.service = service
        self.out = out or sys.stdout
        self.conversation = service.create_conversation()

    def _print(self, text: str = "") -> None:
        print(text, file=self.out, flush=True)

    def _show_tool_call(self, record: ToolCallRecord) -> None:
        status = "ok" if record.success else "failed"
        self._print(f"  -> {record.tool}({record.arguments}) [{status}]")

    async def handle_line(self, line: str) -> bool:
        """Process one input line. Returns False when the session should end."""
        message = line.strip()
        if not message:
            return True
        if message.lower() in EXIT_COMMANDS:
            self._print("\nGoodbye! Thanks for using Weekly Update Assistant.\n")
            return False

        self._print("\nThinking...")
        try:
            _, turn = await self.service.process_message(
                message,
                session_id=self.conversation.id,
                on_tool_call=self._show_tool_call,
            )
        except AppError as e:
            logger.error(f"Chat turn failed: {e.message}", extra={"error_code": e.code.value})
            self._print(f"\nError: {e.message}")
            return True

        self._print(f"\nAssistant: {turn.text}")
        return True

    async def run(self, read_line: Callable[[str], str] = input) -> None:
        self._print(BANNER)
        loop = asyncio.get_running_loop()
        while True:
            try:
                line = await loop.run_in_executor(None, read_line, "\nYou: ")
            except EOFError:
                self._print()
                break
            if not await self.handle_line(line):
                break


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="weekly-chat",
        description="Chat with the weekly update assistant in your terminal",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level (default: WARNING, so logs do not interleave with the chat)",
    )
    parser.add_argument(
        "--max-iterations",
        type=int,
        default=None,
        help="Maximum model round trips per message",
    )
    return parser


def main(argv=None, settings: Optional[Settings] = None) -> int:
    args = build_parser().parse_args(argv)
    settings = settings or default_settings
    configure_logging(log_level=args.log_level, json_format=settings.log_format == "json", stream=sys.stderr)

    if args.max_iterations:
        settings = settings.model_copy(update={"chat_max_iterations": args.max_iterations})

    try:
        settings.require_model_api_key()
    except AppError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        print("\nPlease add your Anthropic API key to .env:", file=sys.stderr)
        print("  ANTHROPIC_API_KEY=sk-ant-...\n", file=sys.stderr)
        return 1

    repl = ChatREPL(ChatService(settings))
    try:
        asyncio.run(repl.run())
    except KeyboardInterrupt:
        print("\nGoodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
