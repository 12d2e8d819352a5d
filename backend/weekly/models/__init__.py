"""Data models."""

# Export data source models
from weekly.models.datasource import (
    DataSource,
    ConnectionResult,
    CustomDataSourceCreate,
)

# Export domain records
from weekly.models.records import (
    SlackConversation,
    SlackMessage,
    ZoomMeeting,
    ChorusRecording,
    GoogleSheet,
    SheetInfo,
)

# Export tool and chat models
from weekly.models.tools import ToolInvocation, ToolResult
from weekly.models.chat import (
    ChatRequest,
    ChatResponse,
    ToolCallRecord,
    ToolCallRequest,
    ToolCallResponse,
)
from weekly.models.template import Template, TemplateSection
