import io
from datetime import date
from pathlib import Path
from typing import List

import pytest
from PIL import Image

from teleguard.checklist.builder import NewProjectForm, build_project
from teleguard.checklist.drafts import DraftItem, DraftSection
from teleguard.checklist.errors import ExportError, GenerationError
from teleguard.checklist.models import Project
from teleguard.project_state.store import ProjectStore


def make_drafts() -> List[DraftSection]:
    return [
        DraftSection(
            title="Mechanical Installation",
            items=[
                DraftItem(description="Cabinet anchored to floor", standard="4 anchor bolts, torque per vendor spec"),
                DraftItem(description="Door seal intact", standard="No gaps, IP55"),
            ],
        ),
        DraftSection(
            title="Grounding",
            items=[DraftItem(description="Ground bar resistance", standard="< 5 ohm")],
        ),
    ]


class FakeDrafter:
    def __init__(self, drafts=None, error: Exception = None):
        self.drafts = drafts if drafts is not None else make_drafts()
        self.error = error
        self.calls = []

    def run(self, equipment_type: str, context: str = "") -> List[DraftSection]:
        self.calls.append((equipment_type, context))
        if self.error is not None:
            raise self.error
        return self.drafts


class FakeExporter:
    def __init__(self, out_dir: Path, error: Exception = None):
        self.out_dir = out_dir
        self.error = error
        self.exported: List[Project] = []

    def export(self, project: Project) -> Path:
        if self.error is not None:
            raise self.error
        self.exported.append(project)
        return self.out_dir / f"{project.name}_Report.pdf"


@pytest.fixture
def form() -> NewProjectForm:
    return NewProjectForm(
        name="Site A Upgrade",
        equipment_type="DWDM multiplexer",
        contractor="Acme Telecom",
        site_name="Site A",
        context="Tele-protection substation",
    )


@pytest.fixture
def project(form) -> Project:
    return build_project(form, make_drafts(), today=lambda: date(2024, 3, 5))


@pytest.fixture
def store(project) -> ProjectStore:
    s = ProjectStore()
    s.add(project)
    return s


@pytest.fixture
def png_bytes() -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (4, 4), color=(200, 30, 30)).save(buf, format="PNG")
    return buf.getvalue()


@pytest.fixture
def failing_drafter() -> FakeDrafter:
    return FakeDrafter(error=GenerationError("API key not found"))


@pytest.fixture
def failing_exporter(tmp_path) -> FakeExporter:
    return FakeExporter(tmp_path, error=ExportError("renderer crashed"))
