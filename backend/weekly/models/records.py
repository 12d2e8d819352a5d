"""
Domain records returned by the read tools.

Every vendor returns its own heterogeneous shape; these models pin the
output schema and apply defaults for fields the vendor omits. A vendor
item without an id cannot be referenced later, so ``from_api`` returns
``None`` for it and ``from_api_list`` drops it.
"""

from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field


def _as_int(value: Any, default: int = 0) -> int:
    """Coerce a vendor number (int, float or numeric string) to an int."""
    if value is None or isinstance(value, bool):
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return default


def _as_optional_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def _as_id(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value)


class Record(BaseModel):
    """Base for records serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)

    @classmethod
    def from_api(cls, item: Dict[str, Any]) -> Optional["Record"]:
        raise NotImplementedError

    @classmethod
    def from_api_list(cls, items: Optional[Iterable[Any]]) -> List["Record"]:
        """Map a vendor list, skipping entries that are not objects or have no id."""
        records = []
        for item in items or []:
            if not isinstance(item, dict):
                continue
            record = cls.from_api(item)
            if record is not None:
                records.append(record)
        return records


class SlackConversation(Record):
    """A Slack channel or conversation."""

    id: str
    name: str = "Unknown"
    is_private: bool = Field(default=False, alias="isPrivate")
    member_count: Optional[int] = Field(default=None, alias="memberCount")
    purpose: Optional[str] = None

    @classmethod
    def from_api(cls, channel: Dict[str, Any]) -> Optional["SlackConversation"]:
        channel_id = _as_id(channel.get("id"))
        if channel_id is None:
            return None
        purpose = channel.get("purpose")
        if isinstance(purpose, dict):
            purpose = purpose.get("value")
        return cls(
            id=channel_id,
            name=channel.get("name") or "Unknown",
            is_private=bool(channel.get("is_private", False)),
            member_count=_as_optional_int(channel.get("num_members")),
            purpose=str(purpose) if purpose else None,
        )


class SlackMessage(Record):
    """A single message from a Slack conversation history."""

    ts: str
    user: str = "Unknown"
    text: str = ""
    thread_ts: Optional[str] = Field(default=None, alias="threadTs")
    reply_count: Optional[int] = Field(default=None, alias="replyCount")

    @classmethod
    def from_api(cls, message: Dict[str, Any]) -> "SlackMessage":
        return cls(
            ts=str(message.get("ts") or ""),
            user=message.get("user") or message.get("username") or message.get("bot_id") or "Unknown",
            text=message.get("text") or "",
            thread_ts=message.get("thread_ts"),
            reply_count=_as_optional_int(message.get("reply_count")),
        )


class ZoomMeeting(Record):
    """A scheduled Zoom meeting."""

    id: str
    topic: str = "Untitled Meeting"
    start_time: Optional[str] = Field(default=None, alias="startTime")
    duration: int = 0
    participants: Optional[int] = None

    @classmethod
    def from_api(cls, meeting: Dict[str, Any]) -> Optional["ZoomMeeting"]:
        meeting_id = _as_id(meeting.get("id")) or _as_id(meeting.get("uuid"))
        if meeting_id is None:
            return None
        return cls(
            id=meeting_id,
            topic=meeting.get("topic") or "Untitled Meeting",
            start_time=meeting.get("start_time"),
            duration=_as_int(meeting.get("duration")),
            participants=_as_optional_int(meeting.get("participant_count")),
        )


def _participant_name(participant: Any) -> Optional[str]:
    if isinstance(participant, str):
        return participant.strip() or None
    if isinstance(participant, dict):
        return participant.get("name") or participant.get("email") or None
    return None


class ChorusRecording(Record):
    """A Chorus.ai call recording."""

    id: str
    title: str = "Untitled Call"
    date: Optional[str] = None
    duration: int = 0
    participants: List[str] = Field(default_factory=list)
    transcript_url: Optional[str] = Field(default=None, alias="transcriptUrl")
    insights: List[Any] = Field(default_factory=list)

    @classmethod
    def from_api(cls, call: Dict[str, Any]) -> Optional["ChorusRecording"]:
        call_id = _as_id(call.get("id"))
        if call_id is None:
            return None
        names = (_participant_name(p) for p in call.get("participants") or [])
        insights = call.get("insights")
        return cls(
            id=call_id,
            title=call.get("title") or call.get("subject") or "Untitled Call",
            date=call.get("date") or call.get("start_time"),
            duration=_as_int(call.get("duration_seconds")),
            participants=[name for name in names if name],
            transcript_url=call.get("transcript_url"),
            insights=insights if isinstance(insights, list) else [],
        )


class GoogleSheet(Record):
    """A spreadsheet file listed from Google Drive."""

    id: str
    name: str
    url: Optional[str] = None
    last_modified: Optional[str] = Field(default=None, alias="lastModified")

    @classmethod
    def from_api(cls, file: Dict[str, Any]) -> Optional["GoogleSheet"]:
        file_id = _as_id(file.get("id"))
        if file_id is None:
            return None
        return cls(
            id=file_id,
            name=file.get("name") or "Untitled spreadsheet",
            url=file.get("webViewLink"),
            last_modified=file.get("modifiedTime"),
        )


class SheetTab(Record):
    """One tab of a spreadsheet."""

    title: Optional[str] = None
    sheet_id: Optional[int] = Field(default=None, alias="sheetId")
    row_count: Optional[int] = Field(default=None, alias="rowCount")
    column_count: Optional[int] = Field(default=None, alias="columnCount")


class SheetInfo(Record):
    """Spreadsheet metadata with its tabs."""

    id: str
    title: Optional[str] = None
    sheets: List[SheetTab] = Field(default_factory=list)

    @classmethod
    def from_api(cls, spreadsheet: Dict[str, Any]) -> "SheetInfo":
        tabs = []
        for sheet in spreadsheet.get("sheets") or []:
            props = sheet.get("properties") or {}
            grid = props.get("gridProperties") or {}
            tabs.append(
                SheetTab(
                    title=props.get("title"),
                    sheet_id=_as_optional_int(props.get("sheetId")),
                    row_count=_as_optional_int(grid.get("rowCount")),
                    column_count=_as_optional_int(grid.get("columnCount")),
                )
            )
        return cls(
            id=spreadsheet.get("spreadsheetId", ""),
            title=(spreadsheet.get("properties") or {}).get("title"),
            sheets=tabs,
        )
