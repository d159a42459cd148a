import asyncio
import json

import pytest

from teleguard import main as cli
from teleguard.checklist.models import InspectionStatus, ProjectStatus
from teleguard.orchestrator.orchestrator import Orchestrator
from teleguard.project_state.store import ProjectStore
from teleguard.utils.config import ENV_OVERRIDES
from teleguard.utils import logger as logger_module

from conftest import FakeDrafter, FakeExporter


@pytest.fixture(autouse=True)
def isolated(monkeypatch, tmp_path):
    monkeypatch.setattr(logger_module, "_LEVEL", None)
    for name in ENV_OVERRIDES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


def _scripted(answers):
    answers = iter(answers)
    return lambda prompt: next(answers)


def test_parse_args():
    args = cli.parse_args(["--name", "Site A", "--equipment", "OLT", "--export", "--json"])
    assert args.name == "Site A"
    assert args.equipment == "OLT"
    assert args.export and args.json and not args.inspect


def test_parse_args_requires_equipment():
    with pytest.raises(SystemExit):
        cli.parse_args(["--name", "Site A"])


def test_inspect_project_records_answers(tmp_path, store, png_bytes):
    photo = tmp_path / "evidence.png"
    photo.write_bytes(png_bytes)
    orch = Orchestrator(store=store, drafter=FakeDrafter(), exporter=FakeExporter(tmp_path))
    project = store.projects[0]

    answers = [
        "p", "", "",                    # pass, no remark, no photo
        "f", "Seal torn", str(photo),   # fail with remark and photo
        "",                             # skip
    ]
    asyncio.run(cli.inspect_project(orch, project, ask=_scripted(answers)))

    current = store.get(project.id)
    first, second = current.sections[0].items
    assert first.status == InspectionStatus.PASS
    assert second.status == InspectionStatus.FAIL
    assert second.remark == "Seal torn"
    assert second.photo.startswith("data:image/png;base64,")
    assert current.sections[1].items[0].status == InspectionStatus.PENDING
    assert current.progress == 67
    assert current.status == ProjectStatus.IN_PROGRESS


def test_run_creates_exports_and_dumps(tmp_path, monkeypatch, capsys):
    exporter = FakeExporter(tmp_path)
    orch = Orchestrator(store=ProjectStore(), drafter=FakeDrafter(), exporter=exporter)
    monkeypatch.setattr(cli, "build_orchestrator", lambda cfg, confirm=None: orch)

    args = cli.parse_args(["--name", "Site A", "--equipment", "OLT", "--export", "--json"])
    assert asyncio.run(cli.run(args)) == 0

    out = capsys.readouterr().out
    assert "Site A | Draft | 0%" in out
    assert "Report saved to" in out
    dumped = json.loads(out[out.index("{"):])
    assert dumped["name"] == "Site A"
    assert dumped["equipmentType"] == "OLT"
    assert len(exporter.exported) == 1


def test_run_reports_generation_failure(tmp_path, monkeypatch, capsys, failing_drafter):
    orch = Orchestrator(store=ProjectStore(), drafter=failing_drafter, exporter=FakeExporter(tmp_path))
    monkeypatch.setattr(cli, "build_orchestrator", lambda cfg, confirm=None: orch)

    args = cli.parse_args(["--name", "Site A", "--equipment", "OLT"])
    assert asyncio.run(cli.run(args)) == 1
    assert "API key not found" in capsys.readouterr().err


def test_build_orchestrator_wires_config(tmp_path):
    cfg = cli.load_config()
    orch = cli.build_orchestrator(cfg)
    assert orch.drafter.language == cfg.checklist_language
    assert orch.exporter.output_dir == cfg.report_dir
    assert len(orch.store) == 0
