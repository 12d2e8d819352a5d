"""
Unit tests for the tool catalog, templates and system prompt.
"""

from datetime import date

import pytest

from weekly.core.enums import ToolName
from weekly.core.exceptions import UnknownTemplateError
from weekly.services import template_service
from weekly.services.prompt_service import PromptService
from weekly.services.tool_catalog import TOOL_DEFINITIONS, get_tool_definition, to_anthropic_tools


class TestToolCatalog:
    """Tests for TOOL_DEFINITIONS."""

    def test_catalog_matches_tool_names(self):
        assert [t.name for t in TOOL_DEFINITIONS] == [member.value for member in ToolName]

    def test_anthropic_format(self):
        tools = to_anthropic_tools()

        assert len(tools) == 13
        for tool in tools:
            assert set(tool) == {"name", "description", "input_schema"}
            assert tool["input_schema"]["type"] == "object"
            assert tool["description"]

    def test_connect_source_enum(self):
        schema = get_tool_definition("connect_data_source").input_schema

        assert schema["required"] == ["source"]
        assert sorted(schema["properties"]["source"]["enum"]) == ["chorus", "sheets", "slack", "zoom"]

    @pytest.mark.parametrize("name,source", [
        ("get_slack_conversations", "slack"),
        ("get_slack_conversation_history", "slack"),
        ("get_zoom_meetings", "zoom"),
        ("get_chorus_recordings", "chorus"),
        ("get_google_sheets", "sheets"),
        ("read_sheet_data", "sheets"),
        ("get_sheet_info", "sheets"),
        ("connect_data_source", None),
        ("list_templates", None),
    ])
    def test_gating_source(self, name, source):
        assert get_tool_definition(name).source == source

    @pytest.mark.parametrize("name,default", [
        ("get_slack_conversations", 20),
        ("get_slack_conversation_history", 100),
        ("get_zoom_meetings", 30),
        ("get_chorus_recordings", 20),
        ("get_google_sheets", 10),
    ])
    def test_limit_defaults(self, name, default):
        assert get_tool_definition(name).defaults["limit"] == default

    def test_required_arguments(self):
        assert get_tool_definition("read_sheet_data").required == ["spreadsheetId", "range"]
        assert get_tool_definition("list_data_sources").required == []

    @pytest.mark.parametrize("name", ["nope", None, 42, ""])
    def test_lookup_of_unknown_names(self, name):
        assert get_tool_definition(name) is None


class TestTemplates:
    """Tests for the static templates."""

    def test_list_templates(self):
        summaries = template_service.list_templates()

        assert summaries == [
            {
                "id": "ai-adoption",
                "name": "AI Adoption Template",
                "description": "Focused on AI feature incubation, usage data, and customer engagement",
                "sections": ["Incubation Program", "Usage Data", "Customer Engagement"],
            },
            {
                "id": "4-box",
                "name": "4-Box Template",
                "description": "Comprehensive weekly update with updates, interactions, challenges, and priorities",
                "sections": ["Updates", "Customer Interactions", "Lowlights", "Forward Looking Priorities"],
            },
        ]

    def test_get_template_serializes_camel_case(self):
        data = template_service.get_template("ai-adoption").to_dict()

        assert data["sections"][0] == {
            "id": "incubation",
            "title": "Incubation Program",
            "description": "Progress on AI feature development and testing",
            "suggestedSources": ["slack", "sheets"],
        }

    @pytest.mark.parametrize("template_id", ["okr", "", None, 4])
    def test_unknown_template(self, template_id):
        with pytest.raises(UnknownTemplateError):
            template_service.get_template(template_id)

    def test_suggested_sources_are_builtin(self):
        for template in template_service.TEMPLATES:
            for section in template.sections:
                assert set(section.suggested_sources) <= {"slack", "zoom", "chorus", "sheets"}


class TestPromptService:
    """Tests for the system prompt."""

    def test_prompt_includes_date_and_templates(self):
        prompt = PromptService().get_system_prompt(today=date(2025, 1, 6))

        assert "Monday, January 06, 2025" in prompt
        assert "AI Adoption Template (id: ai-adoption)" in prompt
        assert "Forward Looking Priorities" in prompt
        assert "{" not in prompt.split("Available templates:")[1]
