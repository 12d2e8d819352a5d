"""
Enums and constants for the weekly update assistant.

Replaces magic strings with type-safe enums throughout the codebase.
"""

from enum import Enum
from typing import Set


class DataSourceType(str, Enum):
    """Statically known data sources plus the custom marker."""

    SLACK = "slack"
    ZOOM = "zoom"
    CHORUS = "chorus"
    SHEETS = "sheets"
    CUSTOM = "custom"

    @classmethod
    def builtin(cls) -> Set[str]:
        """Sources that ship with a connector."""
        return {member.value for member in cls if member is not cls.CUSTOM}


class ToolName(str, Enum):
    """Names of every tool the model may call."""

    CONNECT_DATA_SOURCE = "connect_data_source"
    DISCONNECT_DATA_SOURCE = "disconnect_data_source"
    LIST_DATA_SOURCES = "list_data_sources"
    GET_SLACK_CONVERSATIONS = "get_slack_conversations"
    GET_SLACK_CONVERSATION_HISTORY = "get_slack_conversation_history"
    GET_ZOOM_MEETINGS = "get_zoom_meetings"
    GET_CHORUS_RECORDINGS = "get_chorus_recordings"
    GET_GOOGLE_SHEETS = "get_google_sheets"
    READ_SHEET_DATA = "read_sheet_data"
    GET_SHEET_INFO = "get_sheet_info"
    SYNC_ALL_SOURCES = "sync_all_sources"
    LIST_TEMPLATES = "list_templates"
    GET_TEMPLATE = "get_template"


class ChatLoopState(str, Enum):
    """States of one chat turn."""

    AWAITING_MODEL = "awaiting_model"
    EXECUTING_TOOLS = "executing_tools"
    DONE = "done"


class MessageRole(str, Enum):
    """Chat message roles."""

    USER = "user"
    ASSISTANT = "assistant"


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"

    @classmethod
    def is_production(cls, env: str) -> bool:
        """Check if environment is production."""
        return env.lower() == cls.PRODUCTION.value
