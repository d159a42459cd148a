from __future__ import annotations

import logging
from datetime import datetime
from functools import partial
from pathlib import Path
from typing import Dict, List, Optional
from xml.sax.saxutils import escape

import requests
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.pdfgen import canvas
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from reportlab.platypus.flowables import HRFlowable

from teleguard.checklist.errors import ExportError
from teleguard.checklist.models import (
    ChecklistSection,
    InspectionStatus,
    Project,
    ProjectStatus,
    status_label,
    summarize,
)
from teleguard.utils.file_ops import PathLike, ensure_dir, safe_filename

logger = logging.getLogger(__name__)

REPORT_TITLE = "Installation Inspection Report"
REPORT_SUFFIX = "_Report.pdf"
FOOTER_TEXT = "TeleGuard Inspect System"
FALLBACK_FONT = "Helvetica"
FALLBACK_BOLD_FONT = "Helvetica-Bold"

HEADER_BLUE = colors.Color(41 / 255, 128 / 255, 185 / 255)
FAIL_RED = colors.Color(220 / 255, 53 / 255, 69 / 255)
FAIL_TINT = colors.Color(1.0, 0.93, 0.94)
PASS_GREEN = colors.Color(25 / 255, 135 / 255, 84 / 255)

MARGIN = 14 * mm
# description, standard, status; remark takes the rest of the frame
COLUMN_WIDTHS = [70 * mm, 50 * mm, 25 * mm]

REPORT_STATUS_LABELS: Dict[InspectionStatus, str] = {
    InspectionStatus.FAIL: "Fail (fix)",
}


def report_filename(project: Project) -> str:
    return f"{safe_filename(project.name)}{REPORT_SUFFIX}"


def _text(value: Optional[str], empty: str = "-") -> str:
    if not value:
        return empty
    return escape(value).replace("\n", "<br/>")


class _NumberedCanvas(canvas.Canvas):
    """Canvas that stamps `Page i / N` once the page count is known."""

    def __init__(self, *args, footer_font: str = FALLBACK_FONT, **kwargs):
        super().__init__(*args, **kwargs)
        self._footer_font = footer_font
        self._saved_page_states: List[dict] = []

    def showPage(self):
        self._saved_page_states.append(dict(self.__dict__))
        self._startPage()

    def save(self):
        total = len(self._saved_page_states)
        for state in self._saved_page_states:
            self.__dict__.update(state)
            self._draw_footer(total)
            super().showPage()
        super().save()

    def _draw_footer(self, total: int) -> None:
        self.saveState()
        self.setFont(self._footer_font, 8)
        self.setFillGray(0.6)
        self.drawRightString(
            self._pagesize[0] - MARGIN,
            10 * mm,
            f"Page {self._pageNumber} / {total} - {FOOTER_TEXT}",
        )
        self.restoreState()


class PdfReportExporter:
    """
    Renders a Project snapshot to `<name>_Report.pdf` in `output_dir`.

    A TTF font is downloaded once from `font_url` and cached under
    `font_cache_dir` so non-Latin checklist text renders; when it cannot be
    fetched the report falls back to Helvetica.
    """

    def __init__(
        self,
        output_dir: PathLike,
        font_url: Optional[str] = None,
        font_cache_dir: Optional[PathLike] = None,
        timeout: int = 30,
    ) -> None:
        self.output_dir = Path(output_dir)
        self.font_url = font_url
        self.font_cache_dir = Path(font_cache_dir) if font_cache_dir else self.output_dir / ".fonts"
        self.timeout = timeout

    def export(self, project: Project) -> Path:
        regular, bold = self._resolve_fonts()

        try:
            target = ensure_dir(self.output_dir) / report_filename(project)
            doc = SimpleDocTemplate(
                str(target),
                pagesize=A4,
                leftMargin=MARGIN,
                rightMargin=MARGIN,
                topMargin=20 * mm,
                bottomMargin=20 * mm,
                title=f"{REPORT_TITLE} - {project.name}",
                author=FOOTER_TEXT,
            )
            story = self._build_story(project, regular, bold)
            doc.build(story, canvasmaker=partial(_NumberedCanvas, footer_font=regular))
        except Exception as exc:  # noqa: BLE001
            logger.error("Report rendering failed for project %s: %s", project.id, exc)
            raise ExportError(f"Could not create the PDF report: {exc}") from exc

        logger.info("Report for project %s written to %s", project.id, target)
        return target

    # ---------- fonts ----------

    def _resolve_fonts(self) -> tuple[str, str]:
        if not self.font_url:
            return FALLBACK_FONT, FALLBACK_BOLD_FONT

        font_file = self.font_cache_dir / Path(self.font_url).name
        font_name = font_file.stem
        if font_name in pdfmetrics.getRegisteredFontNames():
            return font_name, font_name

        try:
            if not font_file.exists():
                logger.info("Downloading report font from %s", self.font_url)
                resp = requests.get(self.font_url, timeout=self.timeout)
                resp.raise_for_status()
                ensure_dir(self.font_cache_dir)
                font_file.write_bytes(resp.content)
            pdfmetrics.registerFont(TTFont(font_name, str(font_file)))
        except TTFError as exc:
            # Drop the unusable file so the next export downloads again.
            font_file.unlink(missing_ok=True)
            logger.warning("Cached report font is not a TrueType font (%s). Falling back to %s.", exc, FALLBACK_FONT)
            return FALLBACK_FONT, FALLBACK_BOLD_FONT
        except (requests.RequestException, OSError) as exc:
            logger.warning("Could not load report font (%s). Falling back to %s.", exc, FALLBACK_FONT)
            return FALLBACK_FONT, FALLBACK_BOLD_FONT

        # Single-weight font; bold text uses the same face.
        return font_name, font_name

    # ---------- layout ----------

    def _build_story(self, project: Project, regular: str, bold: str) -> list:
        base = getSampleStyleSheet()
        title_style = ParagraphStyle("ReportTitle", parent=base["Title"], fontName=bold, fontSize=18, leading=22)
        body = ParagraphStyle("ReportBody", parent=base["Normal"], fontName=regular, fontSize=10, leading=14)
        defect = ParagraphStyle("ReportDefect", parent=body, textColor=FAIL_RED)

        summary = summarize(project)
        printed = datetime.now().strftime("%d %B %Y %H:%M")
        status_text = "Completed" if project.status == ProjectStatus.COMPLETED else "In Progress"

        info = Table(
            [
                [Paragraph(f"Project: {_text(project.name)}", body), Paragraph(f"Printed: {printed}", body)],
                [Paragraph(f"Site: {_text(project.site_name)}", body), Paragraph(f"Project status: {status_text}", body)],
                [Paragraph(f"Contractor: {_text(project.contractor)}", body), Paragraph(f"Progress: {project.progress}%", body)],
                [Paragraph(f"Equipment type: {_text(project.equipment_type)}", body), ""],
            ],
            colWidths=[110 * mm, A4[0] - 2 * MARGIN - 110 * mm],
        )
        info.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ]))

        story: list = [
            Paragraph(REPORT_TITLE, title_style),
            Spacer(1, 4 * mm),
            info,
            Spacer(1, 3 * mm),
            HRFlowable(width="100%", thickness=0.5, color=colors.lightgrey),
            Spacer(1, 3 * mm),
            Paragraph(
                f"Summary: Pass ({summary.passed}) | Fail ({summary.failed}) | "
                f"N/A ({summary.not_applicable}) | Pending ({summary.pending})",
                body,
            ),
        ]
        if summary.failed:
            story.append(Paragraph(
                f"* {summary.failed} item(s) failed inspection and need correction. See details below.",
                defect,
            ))
        story.append(Spacer(1, 6 * mm))

        for section in project.sections:
            story.append(self._section_table(section, regular, bold))
            story.append(Spacer(1, 6 * mm))

        return story

    def _section_table(self, section: ChecklistSection, regular: str, bold: str) -> Table:
        cell = ParagraphStyle("Cell", fontName=regular, fontSize=9, leading=12)
        head = ParagraphStyle("Head", parent=cell, fontName=bold, textColor=colors.white)
        fail_cell = ParagraphStyle("FailCell", parent=cell, fontName=bold, textColor=FAIL_RED)
        pass_cell = ParagraphStyle("PassCell", parent=cell, textColor=PASS_GREEN)
        centered = {style.name: ParagraphStyle(f"{style.name}Center", parent=style, alignment=1)
                    for style in (cell, fail_cell, pass_cell)}

        rows: list = [[
            Paragraph(_text(section.title), head),
            Paragraph("Standard / Criteria", head),
            Paragraph("Status", head),
            Paragraph("Remark", head),
        ]]
        commands = [
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("BACKGROUND", (0, 0), (-1, 0), HEADER_BLUE),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("TOPPADDING", (0, 0), (-1, -1), 3),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 3),
        ]

        for row_idx, item in enumerate(section.items, start=1):
            if item.status == InspectionStatus.FAIL:
                style = fail_cell
                commands.append(("BACKGROUND", (0, row_idx), (-1, row_idx), FAIL_TINT))
            elif item.status == InspectionStatus.PASS:
                style = pass_cell
            else:
                style = cell
            label = REPORT_STATUS_LABELS.get(item.status, status_label(item.status))
            rows.append([
                Paragraph(_text(item.description), style),
                Paragraph(_text(item.standard_criteria), style),
                Paragraph(escape(label), centered[style.name]),
                Paragraph(_text(item.remark), style),
            ])

        remark_width = A4[0] - 2 * MARGIN - sum(COLUMN_WIDTHS)
        table = Table(rows, colWidths=COLUMN_WIDTHS + [remark_width], repeatRows=1)
        table.setStyle(TableStyle(commands))
        return table
