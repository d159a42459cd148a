from __future__ import annotations

import asyncio
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, Protocol, TypeVar

from teleguard.checklist.builder import NewProjectForm, build_project, validate_form
from teleguard.checklist.drafts import DraftSection
from teleguard.checklist.errors import InspectionError
from teleguard.checklist.models import Project
from teleguard.media.image_encoder import ImageSource
from teleguard.project_state.store import ProjectStore
from teleguard.utils.config import AppConfig
from teleguard.utils.logger import get_logger

T = TypeVar("T")


class DraftGenerator(Protocol):
    def run(self, equipment_type: str, context: str = "") -> List[DraftSection]:
        ...


class ReportExporter(Protocol):
    def export(self, project: Project) -> Path:
        ...


ConfirmFn = Callable[[str], bool]


def decline(message: str) -> bool:
    return False


DELETE_ITEM_PROMPT = "Delete this item?"
DELETE_SECTION_PROMPT = "Delete this section and all of its items?"


@dataclass
class ActionResult(Generic[T]):
    ok: bool
    message: str = ""
    value: Optional[T] = None


@dataclass
class OrchestratorConfig:
    date_format: str = "%d/%m/%Y"
    confirm: ConfirmFn = decline

    @classmethod
    def from_app_config(cls, cfg: AppConfig, confirm: Optional[ConfirmFn] = None) -> "OrchestratorConfig":
        if confirm is None:
            return cls(date_format=cfg.date_format)
        return cls(date_format=cfg.date_format, confirm=confirm)


class Orchestrator:
    """
    Controller between the presentation layer and the project store.

    - project creation: validate -> draft checklist -> build -> prepend
    - destructive edits only after `confirm` returns True
    - exports run one at a time
    - every InspectionError becomes a failed ActionResult with a message
    """

    def __init__(
        self,
        store: ProjectStore,
        drafter: DraftGenerator,
        exporter: ReportExporter,
        cfg: Optional[OrchestratorConfig] = None,
    ) -> None:
        self.store = store
        self.drafter = drafter
        self.exporter = exporter
        self.cfg = cfg or OrchestratorConfig()
        self.logger = get_logger("Orchestrator")

        self.is_generating = False
        self.is_exporting = False

    # ---------- creation ----------

    async def create_project(self, form: NewProjectForm) -> ActionResult[Project]:
        if self.is_generating:
            return ActionResult(False, "A checklist is already being generated.")

        try:
            validate_form(form)
        except InspectionError as exc:
            return self._failed("create project", exc)

        self.is_generating = True
        try:
            drafts = await asyncio.to_thread(self.drafter.run, form.equipment_type.strip(), form.context)
            project = build_project(form, drafts, date_format=self.cfg.date_format)
        except InspectionError as exc:
            return self._failed("create project", exc)
        finally:
            self.is_generating = False

        self.store.add(project)
        self.logger.info("Created project %s with %d sections", project.id, len(project.sections))
        return ActionResult(True, f"Project '{project.name}' created.", project)

    # ---------- deletes ----------

    def delete_item(self, project_id: str, section_id: str, item_id: str) -> ActionResult[Any]:
        if not self.cfg.confirm(DELETE_ITEM_PROMPT):
            return ActionResult(False, "Deletion cancelled.")
        removed = self.store.delete_item(project_id, section_id, item_id)
        return ActionResult(removed, "Item deleted." if removed else "Item not found.")

    def delete_section(self, project_id: str, section_id: str) -> ActionResult[Any]:
        if not self.cfg.confirm(DELETE_SECTION_PROMPT):
            return ActionResult(False, "Deletion cancelled.")
        removed = self.store.delete_section(project_id, section_id)
        return ActionResult(removed, "Section deleted." if removed else "Section not found.")

    # ---------- images ----------

    async def attach_image(
        self,
        project_id: str,
        section_id: str,
        item_id: str,
        kind: str,
        source: ImageSource,
    ) -> ActionResult[Any]:
        try:
            attached = await self.store.attach_image(project_id, section_id, item_id, kind, source)
        except InspectionError as exc:
            return self._failed("attach image", exc)
        return ActionResult(attached, "Image attached." if attached else "Item not found.")

    # ---------- export ----------

    async def export_report(self, project_id: str) -> ActionResult[Path]:
        if self.is_exporting:
            return ActionResult(False, "An export is already in progress.")

        project = self.store.get(project_id)
        if project is None:
            return ActionResult(False, "Project not found.")

        self.is_exporting = True
        try:
            path = await asyncio.to_thread(self.exporter.export, project)
        except InspectionError as exc:
            return self._failed("export report", exc)
        finally:
            self.is_exporting = False

        return ActionResult(True, f"Report saved to {path}", path)

    def _failed(self, action: str, exc: InspectionError) -> ActionResult[Any]:
        self.logger.warning("Could not %s: %s", action, exc)
        return ActionResult(False, str(exc))
