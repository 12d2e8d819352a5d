#!/usr/bin/env python3
"""
Weekly Update MCP Server

Exposes the tool catalog over the Model Context Protocol on stdio. Tool
calls go through the same ToolDispatcher as the chat REPL and the HTTP
API; results are returned as JSON text content.

stdout carries protocol frames, so logs go to stderr.
"""

import asyncio
import json
import sys
from typing import Any, Iterable, List, Optional

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.types import Resource, TextContent, Tool

from weekly.core.config import Settings, settings as default_settings
from weekly.core.logging import configure_logging, get_logger
from weekly.services import template_service
from weekly.services.dispatcher import ToolDispatcher, build_dispatcher
from weekly.services.tool_catalog import TOOL_DEFINITIONS

logger = get_logger("weekly-mcp-server")

SERVER_NAME = "weekly-update-mcp-server"
STATUS_URI = "datasources://status"
TEMPLATES_URI = "templates://list"


class WeeklyUpdateMCPServer:
    """MCP request handlers bound to one dispatcher (one conversation per process)."""

    def __init__(self, dispatcher: Optional[ToolDispatcher] = None, settings: Optional[Settings] = None):
        self.dispatcher = dispatcher or build_dispatcher(settings or default_settings)
        self.server = Server(SERVER_NAME)
        self._register()

    def _register(self) -> None:
        self.server.list_tools()(self.list_tools)
        self.server.call_tool(validate_input=False)(self.call_tool)
        self.server.list_resources()(self.list_resources)
        self.server.read_resource()(self.read_resource)

    async def list_tools(self) -> List[Tool]:
        return [
            Tool(name=tool.name, description=tool.description, inputSchema=tool.input_schema)
            for tool in TOOL_DEFINITIONS
        ]

    async def call_tool(self, name: str, arguments: Any) -> List[TextContent]:
        """Handle tool calls. Every outcome, failures included, is a JSON envelope."""
        result = await self.dispatcher.dispatch(name, arguments)
        return [TextContent(type="text", text=result.to_json())]

    async def list_resources(self) -> List[Resource]:
        return [
            Resource(
                uri=STATUS_URI,
                name="Data Sources Status",
                description="Current status of all data source connections",
                mimeType="application/json",
            ),
            Resource(
                uri=TEMPLATES_URI,
                name="Weekly Update Templates",
                description="Available weekly update templates",
                mimeType="application/json",
            ),
        ]

    async def read_resource(self, uri: Any) -> Iterable[ReadResourceContents]:
        key = str(uri).rstrip("/")
        if key == STATUS_URI:
            payload = [source.to_dict() for source in self.dispatcher.registry.list_all()]
        elif key == TEMPLATES_URI:
            payload = template_service.list_templates()
        else:
            raise ValueError(f"Unknown resource: {uri}")
        return [ReadResourceContents(content=json.dumps(payload, indent=2, default=str), mime_type="application/json")]

    async def run(self) -> None:
        from mcp.server.stdio import stdio_server

        async with stdio_server() as (read_stream, write_stream):
            logger.info("Weekly Update MCP Server running on stdio")
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options(),
            )


def main():
    """Run the MCP server on stdio."""
    configure_logging(
        log_level=default_settings.log_level,
        json_format=default_settings.log_format == "json",
        stream=sys.stderr,
    )
    asyncio.run(WeeklyUpdateMCPServer().run())


if __name__ == "__main__":
    main()
