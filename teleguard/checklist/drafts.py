from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field, RootModel


class DraftItem(BaseModel):
    description: str = Field(min_length=1)
    standard: str = ""


class DraftSection(BaseModel):
    title: str = Field(min_length=1)
    items: List[DraftItem] = Field(default_factory=list)


class DraftChecklist(RootModel[List[DraftSection]]):
    pass


# Gemini response schema (OpenAPI subset) for a list of DraftSection.
CHECKLIST_RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "title": {
                "type": "STRING",
                "description": "Inspection category, e.g. cabinet installation, cabling, grounding.",
            },
            "items": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "description": {
                            "type": "STRING",
                            "description": "The inspection item.",
                        },
                        "standard": {
                            "type": "STRING",
                            "description": "Acceptance criteria, with technical values where applicable.",
                        },
                    },
                    "required": ["description", "standard"],
                },
            },
        },
        "required": ["title", "items"],
    },
}
