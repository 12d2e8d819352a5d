"""Data source models."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class DataSource(BaseModel):
    """Connection record for one data source, owned by the registry."""

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Data source identifier")
    display_name: str = Field(..., alias="displayName", description="Display name")
    connected: bool = Field(default=False, description="Whether the source is connected")
    last_sync_at: Optional[datetime] = Field(
        default=None, alias="lastSyncAt", description="Last successful connect or sync"
    )
    description: Optional[str] = Field(default=None, description="Free-text description")
    custom: bool = Field(default=False, description="User-defined source without a connector")

    def to_dict(self) -> Dict[str, Any]:
        """Wire representation used in tool envelopes."""
        return self.model_dump(by_alias=True, mode="json", exclude_none=True)


@dataclass
class ConnectionResult:
    """
    Outcome of a connector's connect call.

    ``session`` is the opaque vendor handle (token or credentials object)
    that read calls need. The registry keeps it while the source is
    connected; it is never serialized.
    """

    success: bool
    message: str
    session: Any = field(default=None, repr=False)

    def __post_init__(self):
        if not self.message or not self.message.strip():
            raise ValueError("ConnectionResult.message must not be empty")


class CustomDataSourceCreate(BaseModel):
    """Request body for adding a user-defined data source."""

    name: str = Field(..., min_length=1, description="Display name")
    description: Optional[str] = Field(None, description="What the source contains")
    session_id: Optional[str] = Field(None, description="Conversation to add the source to")
