from dotenv import load_dotenv
load_dotenv()

import argparse
import asyncio
import json
import sys
from typing import Callable, List, Optional

from teleguard.agents.checklist_drafter.agent import ChecklistDrafterAgent
from teleguard.checklist.builder import NewProjectForm
from teleguard.checklist.models import InspectionStatus, Project, status_label, summarize
from teleguard.llm.router.llm_router import LLMRouter
from teleguard.orchestrator.orchestrator import ConfirmFn, Orchestrator, OrchestratorConfig
from teleguard.project_state.store import ProjectStore
from teleguard.report.pdf_exporter import PdfReportExporter
from teleguard.utils.config import AppConfig, load_config
from teleguard.utils.logger import get_logger, set_level

STATUS_KEYS = {
    "p": InspectionStatus.PASS,
    "f": InspectionStatus.FAIL,
    "n": InspectionStatus.NA,
}

InputFn = Callable[[str], str]


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="TeleGuard Inspect: AI-drafted installation inspection checklists."
    )
    parser.add_argument("--name", type=str, required=True, help="Project name.")
    parser.add_argument(
        "--equipment",
        type=str,
        required=True,
        help="Equipment type, e.g. 'Huawei OptiX OSN 1800 multiplexer'.",
    )
    parser.add_argument("--contractor", type=str, default="", help="Installation contractor.")
    parser.add_argument("--site", type=str, default="", help="Site name.")
    parser.add_argument("--context", type=str, default="", help="Extra requirements for the checklist.")
    parser.add_argument("--config", type=str, default=None, help="Path to a YAML config file.")
    parser.add_argument("--inspect", action="store_true", help="Walk every item and record results.")
    parser.add_argument("--export", action="store_true", help="Write the PDF report.")
    parser.add_argument("--json", action="store_true", help="Print the project as JSON.")
    return parser.parse_args(argv)


def build_orchestrator(cfg: AppConfig, confirm: Optional[ConfirmFn] = None) -> Orchestrator:
    router = LLMRouter.from_config(cfg)
    drafter = ChecklistDrafterAgent(llm_router=router, language=cfg.checklist_language)
    exporter = PdfReportExporter(
        output_dir=cfg.report_dir,
        font_url=cfg.report_font_url or None,
        font_cache_dir=cfg.font_cache_dir,
    )
    return Orchestrator(
        store=ProjectStore(),
        drafter=drafter,
        exporter=exporter,
        cfg=OrchestratorConfig.from_app_config(cfg, confirm=confirm),
    )


def prompt_confirm(message: str) -> bool:
    return input(f"{message} [y/N] ").strip().lower() == "y"


def print_summary(project: Project) -> None:
    summary = summarize(project)
    print(f"{project.name} | {project.status.value} | {project.progress}%")
    print(
        f"Pass ({summary.passed}) | Fail ({summary.failed}) | "
        f"N/A ({summary.not_applicable}) | Pending ({summary.pending})"
    )


async def inspect_project(orchestrator: Orchestrator, project: Project, ask: InputFn = input) -> None:
    """Prompt for a result, remark and evidence photo on every item."""
    store = orchestrator.store
    for section in project.sections:
        print(f"\n== {section.title}")
        for item in section.items:
            print(f"- {item.description}")
            if item.standard_criteria:
                print(f"  standard: {item.standard_criteria}")

            answer = ask("  [p]ass / [f]ail / [n]/a / Enter to skip: ").strip().lower()
            status = STATUS_KEYS.get(answer[:1])
            if status is None:
                continue
            store.set_item_status(project.id, section.id, item.id, status)

            remark = ask("  remark (optional): ").strip()
            if remark:
                store.set_item_field(project.id, section.id, item.id, "remark", remark)

            photo_path = ask("  evidence photo path (optional): ").strip()
            if photo_path:
                result = await orchestrator.attach_image(project.id, section.id, item.id, "photo", photo_path)
                if not result.ok:
                    print(f"  {result.message}")

            print(f"  -> {status_label(status)}")


async def run(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    set_level(cfg.log_level)
    logger = get_logger("main")
    orchestrator = build_orchestrator(cfg, confirm=prompt_confirm)

    form = NewProjectForm(
        name=args.name,
        equipment_type=args.equipment,
        contractor=args.contractor,
        site_name=args.site,
        context=args.context,
    )
    logger.info("Generating checklist for %s", form.equipment_type)
    created = await orchestrator.create_project(form)
    if not created.ok or created.value is None:
        print(f"Error creating checklist: {created.message}", file=sys.stderr)
        return 1

    project = created.value
    if args.inspect:
        await inspect_project(orchestrator, project)

    project = orchestrator.store.get(project.id) or project
    print_summary(project)

    if args.export:
        exported = await orchestrator.export_report(project.id)
        print(exported.message)
        if not exported.ok:
            return 1

    if args.json:
        print(json.dumps(project.to_dict(), indent=2, ensure_ascii=False))

    return 0


def main() -> None:
    args = parse_args()
    sys.exit(asyncio.run(run(args)))


if __name__ == "__main__":
    main()
