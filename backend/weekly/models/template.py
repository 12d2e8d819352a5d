"""Weekly update template models."""

from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field


class TemplateSection(BaseModel):
    """One section of a weekly update template."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str = Field(..., description="What the section should cover")
    suggested_sources: List[str] = Field(default_factory=list, alias="suggestedSources")


class Template(BaseModel):
    """A weekly update template."""

    id: str
    name: str
    description: str
    sections: List[TemplateSection] = Field(default_factory=list)

    def summary(self) -> Dict[str, Any]:
        """Short form used by listings."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "sections": [section.title for section in self.sections],
        }

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
