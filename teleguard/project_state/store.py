from __future__ import annotations

import logging
from dataclasses import replace
from typing import Awaitable, Callable, Iterator, List, Optional, Tuple, Union

from teleguard.checklist.models import (
    ChecklistItem,
    ChecklistSection,
    InspectionStatus,
    Project,
    recompute,
)
from teleguard.media.image_encoder import ImageSource, encode_data_uri
from teleguard.utils.ids import new_id

logger = logging.getLogger(__name__)

NEW_ITEM_DESCRIPTION = "New inspection item"
NEW_SECTION_TITLE = "New section"

# Editable item fields, keyed by both wire and attribute names.
ITEM_FIELDS = {
    "description": "description",
    "standardCriteria": "standard_criteria",
    "standard_criteria": "standard_criteria",
    "remark": "remark",
    "referenceImage": "reference_image",
    "reference_image": "reference_image",
    "photo": "photo",
}

IMAGE_FIELDS = {
    "reference": "reference_image",
    "photo": "photo",
}

ImageEncoder = Callable[[ImageSource], Awaitable[str]]


class ProjectStore:
    """
    In-memory owner of every Project, newest first.

    Entities are frozen; each mutation installs a path-copied project so
    untouched sections and items keep their identity. Mutations addressing a
    missing project, section or item are silent no-ops and return a falsy
    value.
    """

    def __init__(self, image_encoder: ImageEncoder = encode_data_uri) -> None:
        self._projects: List[Project] = []
        self._image_encoder = image_encoder

    # ---------- reads ----------

    @property
    def projects(self) -> Tuple[Project, ...]:
        return tuple(self._projects)

    def get(self, project_id: str) -> Optional[Project]:
        for project in self._projects:
            if project.id == project_id:
                return project
        return None

    def __len__(self) -> int:
        return len(self._projects)

    def __iter__(self) -> Iterator[Project]:
        return iter(tuple(self._projects))

    # ---------- creation ----------

    def add(self, project: Project) -> None:
        self._projects.insert(0, project)
        logger.info("Project %s (%s) added; %d in store", project.id, project.name, len(self._projects))

    # ---------- item operations ----------

    def set_item_status(
        self,
        project_id: str,
        section_id: str,
        item_id: str,
        status: Union[InspectionStatus, str],
    ) -> bool:
        status = InspectionStatus(status)
        return self._update_item(
            project_id,
            section_id,
            item_id,
            lambda item: replace(item, status=status),
            recompute_after=True,
        )

    def set_item_field(
        self,
        project_id: str,
        section_id: str,
        item_id: str,
        field: str,
        value: Optional[str],
    ) -> bool:
        attr = ITEM_FIELDS.get(field)
        if attr is None:
            raise ValueError(f"Field {field!r} cannot be edited; expected one of {sorted(set(ITEM_FIELDS))}")
        return self._update_item(
            project_id,
            section_id,
            item_id,
            lambda item: replace(item, **{attr: value}),
        )

    def add_item(self, project_id: str, section_id: str) -> Optional[ChecklistItem]:
        item = ChecklistItem(id=new_id(), description=NEW_ITEM_DESCRIPTION)
        added = self._update_section(
            project_id,
            section_id,
            lambda section: replace(section, items=section.items + (item,)),
            recompute_after=True,
        )
        return item if added else None

    def delete_item(self, project_id: str, section_id: str, item_id: str) -> bool:
        def remove(section: ChecklistSection) -> Optional[ChecklistSection]:
            remaining = tuple(item for item in section.items if item.id != item_id)
            if len(remaining) == len(section.items):
                return None
            return replace(section, items=remaining)

        return self._update_section(project_id, section_id, remove, recompute_after=True)

    async def attach_image(
        self,
        project_id: str,
        section_id: str,
        item_id: str,
        kind: str,
        source: ImageSource,
    ) -> bool:
        """
        Encode `source` as a data URI and store it in the item's image slot.

        `kind` is "reference" or "photo". Decode errors propagate before any
        write, so a failed or cancelled attach leaves the item untouched.
        """
        field = IMAGE_FIELDS.get(kind)
        if field is None:
            raise ValueError(f"Unknown image kind {kind!r}; expected one of {sorted(IMAGE_FIELDS)}")

        data_uri = await self._image_encoder(source)
        return self.set_item_field(project_id, section_id, item_id, field, data_uri)

    # ---------- section operations ----------

    def add_section(self, project_id: str) -> Optional[ChecklistSection]:
        section = ChecklistSection(id=new_id(), title=NEW_SECTION_TITLE)
        added = self._update_project(
            project_id,
            lambda project: replace(project, sections=project.sections + (section,)),
        )
        return section if added else None

    def delete_section(self, project_id: str, section_id: str) -> bool:
        def remove(project: Project) -> Optional[Project]:
            remaining = tuple(s for s in project.sections if s.id != section_id)
            if len(remaining) == len(project.sections):
                return None
            return replace(project, sections=remaining)

        return self._update_project(project_id, remove, recompute_after=True)

    def rename_section(self, project_id: str, section_id: str, title: str) -> bool:
        return self._update_section(project_id, section_id, lambda section: replace(section, title=title))

    # ---------- path-copying helpers ----------

    def _update_project(
        self,
        project_id: str,
        update: Callable[[Project], Optional[Project]],
        recompute_after: bool = False,
    ) -> bool:
        for idx, project in enumerate(self._projects):
            if project.id != project_id:
                continue
            updated = update(project)
            if updated is None:
                return False
            self._projects[idx] = recompute(updated) if recompute_after else updated
            return True

        logger.debug("Project %s not found; ignoring update", project_id)
        return False

    def _update_section(
        self,
        project_id: str,
        section_id: str,
        update: Callable[[ChecklistSection], Optional[ChecklistSection]],
        recompute_after: bool = False,
    ) -> bool:
        def apply(project: Project) -> Optional[Project]:
            sections = list(project.sections)
            for idx, section in enumerate(sections):
                if section.id != section_id:
                    continue
                updated = update(section)
                if updated is None:
                    return None
                sections[idx] = updated
                return replace(project, sections=tuple(sections))

            logger.debug("Section %s not found in project %s", section_id, project.id)
            return None

        return self._update_project(project_id, apply, recompute_after)

    def _update_item(
        self,
        project_id: str,
        section_id: str,
        item_id: str,
        update: Callable[[ChecklistItem], ChecklistItem],
        recompute_after: bool = False,
    ) -> bool:
        def apply(section: ChecklistSection) -> Optional[ChecklistSection]:
            items = list(section.items)
            for idx, item in enumerate(items):
                if item.id == item_id:
                    items[idx] = update(item)
                    return replace(section, items=tuple(items))

            logger.debug("Item %s not found in section %s", item_id, section.id)
            return None

        return self._update_section(project_id, section_id, apply, recompute_after)
