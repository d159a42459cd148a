from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Sequence

from teleguard.checklist.drafts import DraftSection
from teleguard.checklist.errors import ValidationError
from teleguard.checklist.models import ChecklistItem, ChecklistSection, Project, ProjectStatus
from teleguard.utils.ids import new_id


@dataclass
class NewProjectForm:
    name: str
    equipment_type: str
    contractor: str = ""
    site_name: str = ""
    context: str = ""


def validate_form(form: NewProjectForm) -> None:
    missing = []
    if not form.name.strip():
        missing.append("project name")
    if not form.equipment_type.strip():
        missing.append("equipment type")
    if missing:
        raise ValidationError(f"Please fill in the {' and '.join(missing)}.")


def build_project(
    form: NewProjectForm,
    drafts: Sequence[DraftSection],
    date_format: str = "%d/%m/%Y",
    today: Optional[Callable[[], date]] = None,
) -> Project:
    """
    Turn generated draft sections into a fresh Draft project.

    Every section and item gets a new id; items start Pending with an empty
    remark and no images.
    """
    validate_form(form)

    sections = tuple(
        ChecklistSection(
            id=new_id(),
            title=draft.title,
            items=tuple(
                ChecklistItem(
                    id=new_id(),
                    description=draft_item.description,
                    standard_criteria=draft_item.standard,
                )
                for draft_item in draft.items
            ),
        )
        for draft in drafts
    )

    created = (today or date.today)()
    return Project(
        id=new_id(),
        name=form.name.strip(),
        contractor=form.contractor.strip(),
        equipment_type=form.equipment_type.strip(),
        site_name=form.site_name.strip(),
        date_created=created.strftime(date_format),
        status=ProjectStatus.DRAFT,
        progress=0,
        sections=sections,
    )
