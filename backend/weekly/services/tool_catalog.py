"""
Fixed catalog of tools the model may call.

Each entry carries the JSON schema shown to the model, the data source
that gates it (if any), the key its result list is wrapped under, and
the defaults applied to optional arguments.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from weekly.core.enums import DataSourceType, ToolName

SOURCE_ENUM = sorted(DataSourceType.builtin())


@dataclass(frozen=True)
class ToolDefinition:
    """One tool in the catalog."""

    name: str
    description: str
    input_schema: Dict[str, Any]
    source: Optional[str] = None  # registry id that must be connected
    result_key: Optional[str] = None
    defaults: Dict[str, Any] = field(default_factory=dict)

    @property
    def required(self) -> List[str]:
        return list(self.input_schema.get("required", []))

    def to_anthropic(self) -> Dict[str, Any]:
        """Tool definition in the Messages API format."""
        return {
            "name": self.name,
            "description": self.description,
            "input_schema": self.input_schema,
        }


def _schema(properties: Optional[Dict[str, Any]] = None, required: Optional[List[str]] = None) -> Dict[str, Any]:
    schema: Dict[str, Any] = {"type": "object", "properties": properties or {}}
    if required:
        schema["required"] = required
    return schema


_DATE_RANGE = {
    "from": {"type": "string", "description": "Start date (YYYY-MM-DD)"},
    "to": {"type": "string", "description": "End date (YYYY-MM-DD)"},
}


TOOL_DEFINITIONS: List[ToolDefinition] = [
    ToolDefinition(
        name=ToolName.CONNECT_DATA_SOURCE.value,
        description="Connect to a data source (slack, zoom, chorus, sheets)",
        input_schema=_schema(
            {"source": {"type": "string", "enum": SOURCE_ENUM, "description": "The data source to connect"}},
            ["source"],
        ),
    ),
    ToolDefinition(
        name=ToolName.DISCONNECT_DATA_SOURCE.value,
        description="Disconnect from a data source",
        input_schema=_schema(
            {"source": {"type": "string", "description": "The data source to disconnect"}},
            ["source"],
        ),
    ),
    ToolDefinition(
        name=ToolName.LIST_DATA_SOURCES.value,
        description="List all available data sources and their connection status",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name=ToolName.GET_SLACK_CONVERSATIONS.value,
        description="Fetch Slack conversations from connected workspace",
        input_schema=_schema({
            "limit": {"type": "number", "description": "Maximum number of conversations to fetch (default: 20)"},
            "types": {
                "type": "string",
                "description": "Types of conversations (public_channel,private_channel,mpim,im)",
            },
        }),
        source=DataSourceType.SLACK.value,
        result_key="conversations",
        defaults={"limit": 20, "types": "public_channel,private_channel"},
    ),
    ToolDefinition(
        name=ToolName.GET_SLACK_CONVERSATION_HISTORY.value,
        description="Read recent messages from a Slack channel",
        input_schema=_schema(
            {
                "channelId": {"type": "string", "description": "The Slack channel ID (e.g., C0123456789)"},
                "limit": {"type": "number", "description": "Maximum number of messages to fetch (default: 100)"},
            },
            ["channelId"],
        ),
        source=DataSourceType.SLACK.value,
        result_key="messages",
        defaults={"limit": 100},
    ),
    ToolDefinition(
        name=ToolName.GET_ZOOM_MEETINGS.value,
        description="Fetch Zoom meetings from connected account",
        input_schema=_schema({
            **_DATE_RANGE,
            "limit": {"type": "number", "description": "Maximum number of meetings to fetch (default: 30)"},
        }),
        source=DataSourceType.ZOOM.value,
        result_key="meetings",
        defaults={"limit": 30},
    ),
    ToolDefinition(
        name=ToolName.GET_CHORUS_RECORDINGS.value,
        description="Fetch Chorus.ai call recordings",
        input_schema=_schema({
            **_DATE_RANGE,
            "limit": {"type": "number", "description": "Maximum number of recordings to fetch (default: 20)"},
        }),
        source=DataSourceType.CHORUS.value,
        result_key="recordings",
        defaults={"limit": 20},
    ),
    ToolDefinition(
        name=ToolName.GET_GOOGLE_SHEETS.value,
        description="List accessible Google Sheets",
        input_schema=_schema({
            "limit": {"type": "number", "description": "Maximum number of sheets to fetch (default: 10)"},
        }),
        source=DataSourceType.SHEETS.value,
        result_key="sheets",
        defaults={"limit": 10},
    ),
    ToolDefinition(
        name=ToolName.READ_SHEET_DATA.value,
        description="Read data from a specific Google Sheet",
        input_schema=_schema(
            {
                "spreadsheetId": {"type": "string", "description": "The ID of the Google Sheet"},
                "range": {"type": "string", "description": "The A1 notation range (e.g., 'Sheet1!A1:D10')"},
            },
            ["spreadsheetId", "range"],
        ),
        source=DataSourceType.SHEETS.value,
        result_key="data",
    ),
    ToolDefinition(
        name=ToolName.GET_SHEET_INFO.value,
        description="Get a Google Sheet's title and the tabs it contains",
        input_schema=_schema(
            {"spreadsheetId": {"type": "string", "description": "The ID of the Google Sheet"}},
            ["spreadsheetId"],
        ),
        source=DataSourceType.SHEETS.value,
        result_key="sheet",
    ),
    ToolDefinition(
        name=ToolName.SYNC_ALL_SOURCES.value,
        description="Sync data from all connected sources",
        input_schema=_schema(),
    ),
    ToolDefinition(
        name=ToolName.LIST_TEMPLATES.value,
        description="List the available weekly update templates",
        input_schema=_schema(),
        result_key="templates",
    ),
    ToolDefinition(
        name=ToolName.GET_TEMPLATE.value,
        description="Get the sections of a weekly update template",
        input_schema=_schema(
            {"templateId": {"type": "string", "description": "Template ID (e.g., 'ai-adoption', '4-box')"}},
            ["templateId"],
        ),
        result_key="template",
    ),
]

_BY_NAME: Dict[str, ToolDefinition] = {tool.name: tool for tool in TOOL_DEFINITIONS}


def get_tool_definition(name: Any) -> Optional[ToolDefinition]:
    if not isinstance(name, str):
        return None
    return _BY_NAME.get(name)


def to_anthropic_tools() -> List[Dict[str, Any]]:
    """All tools in the Messages API format, in catalog order."""
    return [tool.to_anthropic() for tool in TOOL_DEFINITIONS]
