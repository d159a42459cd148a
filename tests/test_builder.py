from datetime import date

import pytest

from teleguard.checklist.builder import NewProjectForm, build_project, validate_form
from teleguard.checklist.errors import ValidationError
from teleguard.checklist.models import InspectionStatus, ProjectStatus

from conftest import make_drafts


def test_build_project_copies_drafts(form):
    project = build_project(form, make_drafts(), today=lambda: date(2024, 3, 5))

    assert project.name == "Site A Upgrade"
    assert project.contractor == "Acme Telecom"
    assert project.site_name == "Site A"
    assert project.equipment_type == "DWDM multiplexer"
    assert project.date_created == "05/03/2024"
    assert project.status == ProjectStatus.DRAFT
    assert project.progress == 0

    assert [s.title for s in project.sections] == ["Mechanical Installation", "Grounding"]
    first = project.sections[0].items[0]
    assert first.description == "Cabinet anchored to floor"
    assert first.standard_criteria == "4 anchor bolts, torque per vendor spec"
    assert first.status == InspectionStatus.PENDING
    assert first.remark == ""
    assert first.reference_image is None
    assert first.photo is None


def test_build_project_assigns_fresh_ids(form):
    project = build_project(form, make_drafts())
    ids = [project.id] + [s.id for s in project.sections] + [i.id for i in project.iter_items()]
    assert len(ids) == len(set(ids))


def test_build_project_honours_date_format(form):
    project = build_project(form, make_drafts(), date_format="%Y-%m-%d", today=lambda: date(2024, 12, 1))
    assert project.date_created == "2024-12-01"


def test_build_project_with_no_sections(form):
    project = build_project(form, [])
    assert project.sections == ()
    assert project.progress == 0


@pytest.mark.parametrize(
    "name,equipment",
    [("Test", ""), ("", "Radio"), ("   ", "Radio"), ("Test", "  ")],
)
def test_validate_form_rejects_missing_fields(name, equipment):
    with pytest.raises(ValidationError):
        validate_form(NewProjectForm(name=name, equipment_type=equipment))


def test_validate_form_message_names_missing_fields():
    with pytest.raises(ValidationError, match="project name and equipment type"):
        validate_form(NewProjectForm(name="", equipment_type=""))
