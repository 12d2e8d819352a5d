"""
Tool dispatcher.

One dispatch contract shared by every transport (chat REPL, MCP server,
HTTP API): a tool name plus a JSON argument mapping goes in, a
ToolResult comes out. Nothing raised below this boundary escapes it;
application errors and unexpected exceptions alike are turned into
``Err`` results that the caller renders as inert data.
"""

import asyncio
import math
import time
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional

import httpx

from weekly.connectors import BaseConnector, build_connectors
from weekly.core.config import Settings, settings as default_settings
from weekly.core.enums import ToolName
from weekly.core.exceptions import (
    AppError,
    InvalidArgumentsError,
    MissingArgumentsError,
    NotConnectedError,
    ToolTimeoutError,
    UnknownSourceError,
    UnknownToolError,
    UnsupportedSourceError,
)
from weekly.core.logging import datasource_var, get_logger, perf_logger
from weekly.core.metrics import metrics
from weekly.models.datasource import ConnectionResult
from weekly.models.tools import ToolInvocation, ToolResult
from weekly.services import template_service
from weekly.services.registry import BUILTIN_DISPLAY_NAMES, DataSourceRegistry
from weekly.services.tool_catalog import ToolDefinition, get_tool_definition

logger = get_logger(__name__)

Handler = Callable[[ToolDefinition, Dict[str, Any]], Awaitable[ToolResult]]


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ToolDispatcher:
    """Resolves tool invocations against a registry and a set of connectors."""

    def __init__(
        self,
        registry: DataSourceRegistry,
        connectors: Mapping[str, BaseConnector],
        settings: Optional[Settings] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.registry = registry
        self.connectors = dict(connectors)
        self.settings = settings or default_settings
        self.timeout_seconds = timeout_seconds or self.settings.connector_timeout_seconds

        self._handlers: Dict[str, Handler] = {
            ToolName.CONNECT_DATA_SOURCE.value: self._connect,
            ToolName.DISCONNECT_DATA_SOURCE.value: self._disconnect,
            ToolName.LIST_DATA_SOURCES.value: self._list_sources,
            ToolName.GET_SLACK_CONVERSATIONS.value: self._slack_conversations,
            ToolName.GET_SLACK_CONVERSATION_HISTORY.value: self._slack_history,
            ToolName.GET_ZOOM_MEETINGS.value: self._zoom_meetings,
            ToolName.GET_CHORUS_RECORDINGS.value: self._chorus_recordings,
            ToolName.GET_GOOGLE_SHEETS.value: self._google_sheets,
            ToolName.READ_SHEET_DATA.value: self._read_sheet,
            ToolName.GET_SHEET_INFO.value: self._sheet_info,
            ToolName.SYNC_ALL_SOURCES.value: self._sync_all,
            ToolName.LIST_TEMPLATES.value: self._list_templates,
            ToolName.GET_TEMPLATE.value: self._get_template,
        }

    # ============ Entry points ============

    async def dispatch(self, name: Any, arguments: Optional[Mapping[str, Any]] = None) -> ToolResult:
        """
        Run one tool and return its result.

        Order of checks: the tool must exist, its data source (if any)
        must be connected, its required arguments must be present. Only
        then is a connector touched.
        """
        start = time.perf_counter()
        tool = get_tool_definition(name)
        datasource = tool.source if tool and tool.source else "none"
        context_token = datasource_var.set(tool.source if tool and tool.source else "")

        try:
            if tool is None:
                raise UnknownToolError(name)
            args = self._normalize_arguments(tool, arguments)
            if not tool.source and isinstance(args.get("source"), str):
                datasource_var.set(args["source"])
            if tool.source and not self.registry.is_connected(tool.source):
                raise NotConnectedError(self._display_name(tool.source))
            self._check_required(tool, args)
            result = await self._handlers[tool.name](tool, args)
        except AppError as e:
            logger.info(
                f"Tool {name} failed: {e.message}",
                extra={"tool_name": str(name), "error_code": e.code.value},
            )
            metrics.record_error(e.code.value)
            result = ToolResult.err(e.message)
        except Exception as e:
            logger.exception(f"Unexpected error in tool {name}")
            metrics.record_error("INTERNAL_ERROR")
            result = ToolResult.err(str(e) or type(e).__name__)
        finally:
            datasource_var.reset(context_token)

        duration = time.perf_counter() - start
        metrics.record_tool_call(str(name), result.success, duration)
        perf_logger.log_tool_execution(str(name), datasource, duration * 1000, result.success)
        return result

    async def dispatch_invocation(self, invocation: ToolInvocation) -> ToolResult:
        return await self.dispatch(invocation.name, invocation.arguments)

    # ============ Argument handling ============

    @staticmethod
    def _normalize_arguments(tool: ToolDefinition, arguments: Any) -> Dict[str, Any]:
        if arguments is None:
            return {}
        if not isinstance(arguments, Mapping):
            raise InvalidArgumentsError(tool.name, "arguments must be an object")
        return dict(arguments)

    @staticmethod
    def _check_required(tool: ToolDefinition, args: Dict[str, Any]) -> None:
        missing = [key for key in tool.required if _is_blank(args.get(key))]
        if missing:
            raise MissingArgumentsError(tool.name, missing)
        for key in tool.required:
            if not isinstance(args[key], str):
                raise InvalidArgumentsError(tool.name, f"{key} must be a string")

    @staticmethod
    def _limit(tool: ToolDefinition, args: Dict[str, Any]) -> int:
        """
        Coerce ``limit`` to a positive int.

        Missing, null or zero falls back to the tool default; negative or
        non-numeric values are rejected.
        """
        default = tool.defaults["limit"]
        value = args.get("limit")
        if value is None or value == "":
            return default
        if isinstance(value, bool):
            raise InvalidArgumentsError(tool.name, "limit must be a number")
        if isinstance(value, str):
            try:
                value = float(value.strip())
            except ValueError:
                raise InvalidArgumentsError(tool.name, f"limit must be a number, got {args['limit']!r}")
        if not isinstance(value, (int, float)) or (isinstance(value, float) and not math.isfinite(value)):
            raise InvalidArgumentsError(tool.name, "limit must be a number")
        if value < 0:
            raise InvalidArgumentsError(tool.name, "limit must not be negative")
        return int(value) or default

    @staticmethod
    def _optional_str(args: Dict[str, Any], key: str, default: Optional[str] = None) -> Optional[str]:
        value = args.get(key)
        if _is_blank(value):
            return default
        return str(value).strip()

    # ============ Source helpers ============

    def _display_name(self, source_id: str) -> str:
        record = self.registry.get(source_id)
        if record is not None:
            return record.display_name
        return BUILTIN_DISPLAY_NAMES.get(source_id, source_id)

    def _connector(self, source_id: str) -> BaseConnector:
        connector = self.connectors.get(source_id)
        if connector is None:
            raise UnsupportedSourceError(source_id)
        return connector

    async def _bounded(self, tool_name: str, awaitable: Awaitable[Any]) -> Any:
        try:
            return await asyncio.wait_for(awaitable, timeout=self.timeout_seconds)
        except asyncio.TimeoutError:
            raise ToolTimeoutError(tool_name, self.timeout_seconds)

    async def _read(self, tool: ToolDefinition, call: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Invoke a connector read with the stored session, bounded by the timeout."""
        session = self.registry.get_session(tool.source)
        return await self._bounded(tool.name, call(session, *args, **kwargs))

    @staticmethod
    def _records(tool: ToolDefinition, items: List[Any]) -> ToolResult:
        return ToolResult.ok({tool.result_key: [item.to_dict() for item in items]})

    # ============ Connection lifecycle ============

    async def _connect(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        source_id = args["source"]
        record = self.registry.get(source_id)
        if record is None:
            raise UnknownSourceError(source_id)
        connector = self._connector(source_id)

        try:
            result = await self._bounded(tool.name, connector.connect())
        except ToolTimeoutError:
            result = ConnectionResult(
                success=False,
                message=f"Failed to connect to {record.display_name}: timed out after {self.timeout_seconds:g}s",
            )

        if result.success:
            self.registry.mark_connected(source_id, _utcnow(), result.session)
        else:
            self.registry.mark_disconnected(source_id)
        metrics.record_connection_attempt(source_id, result.success)

        return ToolResult.ok({
            "success": result.success,
            "source": record.display_name,
            "message": result.message,
            "connected": self.registry.is_connected(source_id),
        })

    async def _disconnect(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        source_id = args["source"]
        record = self.registry.get(source_id)
        if record is None:
            raise UnknownSourceError(source_id)

        self.registry.mark_disconnected(source_id)
        return ToolResult.ok({
            "source": record.display_name,
            "message": f"Disconnected from {record.display_name}",
            "connected": False,
        })

    async def _list_sources(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        sources = self.registry.list_all()
        return ToolResult.ok({
            "dataSources": [source.to_dict() for source in sources],
            "connectedCount": sum(1 for source in sources if source.connected),
            "totalCount": len(sources),
        })

    async def _sync_all(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        results = []
        for record in self.registry.list_all():
            if not record.connected:
                continue
            synced_at = self.registry.mark_synced(record.id, _utcnow())
            results.append({
                "source": record.display_name,
                "id": record.id,
                "synced": True,
                "lastSync": synced_at.isoformat(),
            })
        return ToolResult.ok({
            "message": f"Synced {len(results)} data sources",
            "count": len(results),
            "results": results,
        })

    # ============ Read tools ============

    async def _slack_conversations(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        items = await self._read(
            tool,
            connector.fetch_conversations,
            limit=self._limit(tool, args),
            types=self._optional_str(args, "types", tool.defaults["types"]),
        )
        return self._records(tool, items)

    async def _slack_history(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        items = await self._read(
            tool,
            connector.fetch_conversation_history,
            channel_id=args["channelId"].strip(),
            limit=self._limit(tool, args),
        )
        return self._records(tool, items)

    async def _zoom_meetings(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        items = await self._read(
            tool,
            connector.fetch_meetings,
            from_date=self._optional_str(args, "from"),
            to_date=self._optional_str(args, "to"),
            limit=self._limit(tool, args),
        )
        return self._records(tool, items)

    async def _chorus_recordings(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        items = await self._read(
            tool,
            connector.fetch_recordings,
            from_date=self._optional_str(args, "from"),
            to_date=self._optional_str(args, "to"),
            limit=self._limit(tool, args),
        )
        return self._records(tool, items)

    async def _google_sheets(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        items = await self._read(tool, connector.list_sheets, limit=self._limit(tool, args))
        return self._records(tool, items)

    async def _read_sheet(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        values = await self._read(
            tool,
            connector.read_range,
            spreadsheet_id=args["spreadsheetId"].strip(),
            range_=args["range"].strip(),
        )
        return ToolResult.ok({tool.result_key: values})

    async def _sheet_info(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        connector = self._connector(tool.source)
        info = await self._read(tool, connector.get_sheet_info, spreadsheet_id=args["spreadsheetId"].strip())
        return ToolResult.ok({tool.result_key: info.to_dict()})

    # ============ Templates ============

    async def _list_templates(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        return ToolResult.ok({tool.result_key: template_service.list_templates()})

    async def _get_template(self, tool: ToolDefinition, args: Dict[str, Any]) -> ToolResult:
        template = template_service.get_template(args["templateId"].strip())
        return ToolResult.ok({tool.result_key: template.to_dict()})


def build_dispatcher(
    settings: Optional[Settings] = None,
    registry: Optional[DataSourceRegistry] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> ToolDispatcher:
    """Dispatcher over a fresh registry of the built-in sources and their connectors."""
    settings = settings or default_settings
    connectors = build_connectors(settings, transport=transport)
    registry = registry or DataSourceRegistry.with_sources(connectors.keys())
    return ToolDispatcher(registry, connectors, settings)
