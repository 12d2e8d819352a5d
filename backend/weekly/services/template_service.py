"""Static weekly update templates."""

from typing import Any, Dict, List

from weekly.core.exceptions import UnknownTemplateError
from weekly.models.template import Template, TemplateSection

TEMPLATES: List[Template] = [
    Template(
        id="ai-adoption",
        name="AI Adoption Template",
        description="Focused on AI feature incubation, usage data, and customer engagement",
        sections=[
            TemplateSection(
                id="incubation",
                title="Incubation Program",
                description="Progress on AI feature development and testing",
                suggested_sources=["slack", "sheets"],
            ),
            TemplateSection(
                id="usage-data",
                title="Usage Data",
                description="Metrics and analytics on AI feature adoption",
                suggested_sources=["sheets"],
            ),
            TemplateSection(
                id="customer-engagement",
                title="Customer Engagement",
                description="Customer feedback and engagement with AI features",
                suggested_sources=["chorus", "zoom"],
            ),
        ],
    ),
    Template(
        id="4-box",
        name="4-Box Template",
        description="Comprehensive weekly update with updates, interactions, challenges, and priorities",
        sections=[
            TemplateSection(
                id="updates",
                title="Updates",
                description="Key accomplishments and progress this week",
                suggested_sources=["slack", "sheets"],
            ),
            TemplateSection(
                id="customer-interactions",
                title="Customer Interactions",
                description="Notable customer conversations and feedback",
                suggested_sources=["chorus", "zoom"],
            ),
            TemplateSection(
                id="lowlights",
                title="Lowlights",
                description="Challenges, blockers, and areas needing attention",
                suggested_sources=["slack"],
            ),
            TemplateSection(
                id="forward-looking",
                title="Forward Looking Priorities",
                description="Key priorities and focus areas for next week",
                suggested_sources=["zoom", "sheets"],
            ),
        ],
    ),
]

_BY_ID = {template.id: template for template in TEMPLATES}


def list_templates() -> List[Dict[str, Any]]:
    return [template.summary() for template in TEMPLATES]


def get_template(template_id: Any) -> Template:
    """Look up a template by id; raises UnknownTemplateError."""
    template = _BY_ID.get(template_id) if isinstance(template_id, str) else None
    if template is None:
        raise UnknownTemplateError(template_id)
    return template
