from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, Optional, Tuple


class InspectionStatus(str, Enum):
    PENDING = "PENDING"
    PASS = "PASS"
    FAIL = "FAIL"
    NA = "NA"


class ProjectStatus(str, Enum):
    DRAFT = "Draft"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


STATUS_LABELS: Dict[InspectionStatus, str] = {
    InspectionStatus.PASS: "Pass",
    InspectionStatus.FAIL: "Fail",
    InspectionStatus.NA: "N/A",
    InspectionStatus.PENDING: "Pending",
}


def status_label(status: InspectionStatus) -> str:
    return STATUS_LABELS[InspectionStatus(status)]


@dataclass(frozen=True)
class ChecklistItem:
    id: str
    description: str
    standard_criteria: str = ""
    status: InspectionStatus = InspectionStatus.PENDING
    remark: str = ""
    reference_image: Optional[str] = None
    photo: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "standardCriteria": self.standard_criteria,
            "status": self.status.value,
            "remark": self.remark,
            "referenceImage": self.reference_image,
            "photo": self.photo,
        }


@dataclass(frozen=True)
class ChecklistSection:
    id: str
    title: str
    items: Tuple[ChecklistItem, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    contractor: str
    equipment_type: str
    site_name: str
    date_created: str
    status: ProjectStatus = ProjectStatus.DRAFT
    progress: int = 0
    sections: Tuple[ChecklistSection, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "contractor": self.contractor,
            "equipmentType": self.equipment_type,
            "siteName": self.site_name,
            "dateCreated": self.date_created,
            "status": self.status.value,
            "progress": self.progress,
            "sections": [section.to_dict() for section in self.sections],
        }

    def iter_items(self):
        for section in self.sections:
            yield from section.items


@dataclass(frozen=True)
class StatusSummary:
    passed: int = 0
    failed: int = 0
    not_applicable: int = 0
    pending: int = 0

    @property
    def total(self) -> int:
        return self.passed + self.failed + self.not_applicable + self.pending

    @property
    def completed(self) -> int:
        return self.total - self.pending


def summarize(project: Project) -> StatusSummary:
    counts = {status: 0 for status in InspectionStatus}
    for item in project.iter_items():
        counts[item.status] += 1
    return StatusSummary(
        passed=counts[InspectionStatus.PASS],
        failed=counts[InspectionStatus.FAIL],
        not_applicable=counts[InspectionStatus.NA],
        pending=counts[InspectionStatus.PENDING],
    )


def compute_progress(completed_items: int, total_items: int) -> int:
    """Integer percentage of completed items, rounding halves up."""
    if total_items == 0:
        return 0
    return (200 * completed_items + total_items) // (2 * total_items)


def derive_project_status(progress: int) -> ProjectStatus:
    return ProjectStatus.COMPLETED if progress == 100 else ProjectStatus.IN_PROGRESS


def recompute(project: Project) -> Project:
    """Return `project` with progress and status derived from its items."""
    summary = summarize(project)
    progress = compute_progress(summary.completed, summary.total)
    return replace(project, progress=progress, status=derive_project_status(progress))
