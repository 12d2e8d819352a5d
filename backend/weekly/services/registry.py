"""
In-memory data source registry.

The registry is the single owner of connection state: which sources
exist, whether each one is connected, when it was last synced, and the
vendor session a successful connect produced. Connectors never keep any
of this themselves.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional

from weekly.core.enums import DataSourceType
from weekly.core.exceptions import DuplicateSourceError
from weekly.core.logging import get_logger
from weekly.models.datasource import DataSource

logger = get_logger(__name__)

BUILTIN_DISPLAY_NAMES = {
    DataSourceType.SLACK.value: "Slack",
    DataSourceType.ZOOM.value: "Zoom",
    DataSourceType.CHORUS.value: "Chorus.ai",
    DataSourceType.SHEETS.value: "Google Sheets",
}


class DataSourceRegistry:
    """Registry of data sources for one conversation."""

    def __init__(self):
        # dicts keep insertion order, which is the listing order
        self._sources: Dict[str, DataSource] = {}
        self._sessions: Dict[str, Any] = {}
        self._custom_counter = 0

    def register(self, source_id: str, display_name: str, description: Optional[str] = None,
                 custom: bool = False) -> DataSource:
        """Add a disconnected source. Registering an id twice is a programming error."""
        if source_id in self._sources:
            raise DuplicateSourceError(source_id)
        record = DataSource(
            id=source_id,
            display_name=display_name,
            description=description,
            custom=custom,
        )
        self._sources[source_id] = record
        return record.model_copy()

    def register_custom(self, name: str, description: Optional[str] = None) -> DataSource:
        """Add a user-defined source with a generated ``custom-<n>`` id."""
        self._custom_counter += 1
        source_id = f"{DataSourceType.CUSTOM.value}-{self._custom_counter}"
        while source_id in self._sources:
            self._custom_counter += 1
            source_id = f"{DataSourceType.CUSTOM.value}-{self._custom_counter}"
        logger.info(f"Registered custom data source {source_id}", extra={"name": name})
        return self.register(source_id, name, description=description, custom=True)

    def get(self, source_id: Any) -> Optional[DataSource]:
        """Copy of the record, or None. Callers cannot mutate registry state through it."""
        if not isinstance(source_id, str):
            return None
        record = self._sources.get(source_id)
        return record.model_copy() if record is not None else None

    def mark_connected(self, source_id: str, timestamp: Optional[datetime] = None,
                       session: Any = None) -> None:
        record = self._sources.get(source_id)
        if record is None:
            return
        record.connected = True
        record.last_sync_at = timestamp or datetime.now(timezone.utc)
        self._sessions[source_id] = session

    def mark_disconnected(self, source_id: str) -> None:
        record = self._sources.get(source_id)
        if record is None:
            return
        record.connected = False
        self._sessions.pop(source_id, None)

    def mark_synced(self, source_id: str, timestamp: Optional[datetime] = None) -> Optional[datetime]:
        """Stamp lastSyncAt on a connected source; returns the stamp or None if skipped."""
        record = self._sources.get(source_id)
        if record is None or not record.connected:
            return None
        record.last_sync_at = timestamp or datetime.now(timezone.utc)
        return record.last_sync_at

    def get_session(self, source_id: str) -> Any:
        """Vendor session for a connected source, or None."""
        if not self.is_connected(source_id):
            return None
        return self._sessions.get(source_id)

    def list_all(self) -> List[DataSource]:
        return [record.model_copy() for record in self._sources.values()]

    def is_connected(self, source_id: Any) -> bool:
        if not isinstance(source_id, str):
            return False
        record = self._sources.get(source_id)
        return bool(record and record.connected)

    def connected_count(self) -> int:
        return sum(1 for record in self._sources.values() if record.connected)

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: object) -> bool:
        return isinstance(source_id, str) and source_id in self._sources

    @classmethod
    def with_sources(cls, source_ids: Iterable[str]) -> "DataSourceRegistry":
        """
        Build a registry holding the given sources, all disconnected.

        Built-in ids get their standard display names; anything else is
        shown as its id.
        """
        registry = cls()
        for source_id in source_ids:
            registry.register(source_id, BUILTIN_DISPLAY_NAMES.get(source_id, source_id))
        return registry

    @classmethod
    def default(cls) -> "DataSourceRegistry":
        """Registry of the four built-in sources."""
        return cls.with_sources(BUILTIN_DISPLAY_NAMES.keys())
