"""
Unit tests for the data source registry.
"""

from datetime import datetime, timezone

import pytest

from weekly.core.exceptions import DuplicateSourceError
from weekly.services.registry import DataSourceRegistry


class TestRegistration:
    """Tests for register and register_custom."""

    def test_default_registry_has_four_disconnected_sources(self):
        registry = DataSourceRegistry.default()

        sources = registry.list_all()
        assert [s.id for s in sources] == ["slack", "zoom", "chorus", "sheets"]
        assert [s.display_name for s in sources] == ["Slack", "Zoom", "Chorus.ai", "Google Sheets"]
        assert all(not s.connected for s in sources)
        assert all(s.last_sync_at is None for s in sources)

    def test_duplicate_registration_fails_fast(self):
        registry = DataSourceRegistry()
        registry.register("slack", "Slack")

        with pytest.raises(DuplicateSourceError) as exc_info:
            registry.register("slack", "Slack again")

        assert "slack" in exc_info.value.message
        assert len(registry) == 1

    def test_list_all_keeps_registration_order(self):
        registry = DataSourceRegistry()
        for source_id in ["zeta", "alpha", "mid"]:
            registry.register(source_id, source_id.title())

        assert [s.id for s in registry.list_all()] == ["zeta", "alpha", "mid"]

    def test_register_custom_generates_sequential_ids(self):
        registry = DataSourceRegistry.default()

        first = registry.register_custom("Jira export", "Weekly ticket dump")
        second = registry.register_custom("CRM notes")

        assert first.id == "custom-1"
        assert second.id == "custom-2"
        assert first.custom is True
        assert first.description == "Weekly ticket dump"
        assert registry.list_all()[-1].id == "custom-2"

    def test_register_custom_skips_taken_ids(self):
        registry = DataSourceRegistry()
        registry.register("custom-1", "Manual")

        record = registry.register_custom("Generated")

        assert record.id == "custom-2"


class TestConnectionState:
    """Tests for connection bookkeeping."""

    def test_is_connected_false_for_unknown_id(self, registry):
        assert registry.is_connected("github") is False
        assert registry.is_connected(None) is False

    def test_mark_connected_sets_flag_timestamp_and_session(self, registry):
        stamp = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)

        registry.mark_connected("zoom", stamp, session="token-123")

        record = registry.get("zoom")
        assert record.connected is True
        assert record.last_sync_at == stamp
        assert registry.get_session("zoom") == "token-123"

    def test_mark_disconnected_drops_session(self, registry):
        registry.mark_connected("slack", session="xoxb")
        registry.mark_disconnected("slack")

        assert registry.is_connected("slack") is False
        assert registry.get_session("slack") is None

    def test_mark_on_unknown_id_is_noop(self, registry):
        registry.mark_connected("nope", session="x")
        registry.mark_disconnected("nope")

        assert "nope" not in registry
        assert registry.connected_count() == 0

    def test_mark_synced_skips_disconnected_sources(self, registry):
        assert registry.mark_synced("chorus") is None
        assert registry.get("chorus").last_sync_at is None

    def test_get_returns_a_copy(self, registry):
        record = registry.get("slack")
        record.connected = True

        assert registry.is_connected("slack") is False

    def test_connected_count(self, registry):
        registry.mark_connected("slack")
        registry.mark_connected("sheets")
        registry.mark_disconnected("slack")

        assert registry.connected_count() == 1


class TestDataSourceSerialization:
    """Tests for the wire shape of records."""

    def test_to_dict_uses_camel_case(self, registry):
        stamp = datetime(2025, 1, 6, 9, 0, tzinfo=timezone.utc)
        registry.mark_connected("sheets", stamp)

        data = registry.get("sheets").to_dict()

        assert data["id"] == "sheets"
        assert data["displayName"] == "Google Sheets"
        assert data["connected"] is True
        assert data["lastSyncAt"].startswith("2025-01-06T09:00:00")
