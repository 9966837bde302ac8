from __future__ import annotations

import io
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from schoolresults.config.settings import settings
from schoolresults.core.grading import grading_scale, marking_scheme_of
from schoolresults.core.marksheet import group_of
from schoolresults.core.models import Exam, Marksheet, Section
from schoolresults.errors import ValidationError
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)

SUBJECT_HEADERS = ["Subject", "Written", "MCQ", "Practical", "Total", "Grade", "GP"]

_styles = getSampleStyleSheet()
_TITLE = ParagraphStyle("SchoolTitle", parent=_styles["Heading1"], fontSize=20, alignment=TA_CENTER, spaceAfter=2, fontName="Times-Bold")
_SUBTITLE = ParagraphStyle("SchoolSubtitle", parent=_styles["Normal"], fontSize=11, alignment=TA_CENTER, fontName="Times-Roman")
_EXAM = ParagraphStyle("ExamTitle", parent=_styles["Heading2"], fontSize=15, alignment=TA_CENTER, spaceBefore=6, fontName="Times-Bold")

_GRID = TableStyle(
    [
        ("FONTNAME", (0, 0), (-1, 0), "Times-Bold"),
        ("FONTNAME", (0, 1), (-1, -1), "Times-Roman"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E5E7EB")),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
)


def marksheet_filename(sheet: Marksheet) -> str:
    return f"marksheet_{sheet.student.name}_{sheet.exam.value}.pdf"


def section_filename(class_number: int, section: Section | str, exam: Exam | str) -> str:
    return f"marksheet_class{class_number}_section{Section(section).value}_{Exam(exam).value}.pdf"


def _component(value: int, maximum: int) -> str:
    return str(value) if maximum > 0 else "-"


def grading_scale_table() -> Table:
    rows = [["Grade", "Marks", "Point"]]
    rows += [[letter, marks, f"{point:.1f}"] for letter, marks, point in grading_scale()]
    table = Table(rows, colWidths=[22 * mm, 30 * mm, 22 * mm], hAlign="RIGHT")
    table.setStyle(_GRID)
    table.setStyle(TableStyle([("FONTSIZE", (0, 0), (-1, -1), 8), ("ALIGN", (0, 0), (-1, -1), "CENTER")]))
    return table


def marksheet_flowables(sheet: Marksheet, year: int) -> list:
    """Everything printed on one student's page."""
    student = sheet.student
    group = group_of(sheet.marks)
    story: list = [
        Paragraph(escape(settings.school_name), _TITLE),
        Paragraph(escape(settings.school_address), _SUBTITLE),
        Paragraph(f"{escape(sheet.exam.value)} EXAMINATION - {year}", _EXAM),
        Paragraph("ACADEMIC TRANSCRIPT", _SUBTITLE),
        Spacer(1, 6 * mm),
    ]

    info = Table(
        [
            ["Name", student.name, "Roll", str(student.roll)],
            ["Class", str(student.class_number), "Section", student.section.value],
            ["Group", group.value if group else "-", "Subjects", str(sheet.subjects)],
        ],
        colWidths=[25 * mm, 70 * mm, 25 * mm, 50 * mm],
    )
    info.setStyle(_GRID)
    story += [info, Spacer(1, 6 * mm)]

    rows = [SUBJECT_HEADERS]
    for mark in sheet.marks:
        scheme = marking_scheme_of(mark.subject)
        rows.append(
            [
                mark.subject,
                _component(mark.theory, scheme.written),
                _component(mark.mcq, scheme.mcq),
                _component(mark.practical, scheme.practical),
                f"{mark.total}/{scheme.total}",
                mark.grade,
                f"{mark.grade_point:.1f}",
            ]
        )
    rows.append(["Total", "", "", "", f"{sheet.total_obtained}/{sheet.total_possible}", "", f"{sheet.total_grade_points:.1f}"])
    subjects = Table(rows, colWidths=[62 * mm, 20 * mm, 18 * mm, 20 * mm, 22 * mm, 14 * mm, 14 * mm], repeatRows=1)
    subjects.setStyle(_GRID)
    subjects.setStyle(TableStyle([("FONTNAME", (0, -1), (-1, -1), "Times-Bold")]))
    story += [subjects, Spacer(1, 6 * mm)]

    summary = [
        ["Overall GPA", f"{sheet.display_gpa:.2f}"],
        ["Letter Grade", sheet.letter_grade],
        ["Result", sheet.result],
    ]
    if sheet.section_rank and sheet.total_students_in_section:
        summary.append(["Section Rank", f"{sheet.section_rank} of {sheet.total_students_in_section}"])
    summary_table = Table(summary, colWidths=[40 * mm, 40 * mm], hAlign="LEFT")
    summary_table.setStyle(
        TableStyle(
            [
                ("FONTNAME", (0, 0), (-1, -1), "Times-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("TEXTCOLOR", (1, 2), (1, 2), colors.darkgreen if sheet.passed else colors.darkred),
            ]
        )
    )

    # result block beside the grading scale
    final = Table([[summary_table, grading_scale_table()]], colWidths=[95 * mm, 91 * mm])
    final.setStyle(TableStyle([("VALIGN", (0, 0), (-1, -1), "TOP"), ("LEFTPADDING", (0, 0), (0, 0), 0)]))
    story += [final, Spacer(1, 18 * mm)]

    signatures = Table([["Class Teacher", "Guardian", "Head Teacher"]], colWidths=[57 * mm] * 3)
    signatures.setStyle(
        TableStyle(
            [
                ("LINEABOVE", (0, 0), (-1, 0), 0.5, colors.black),
                ("ALIGN", (0, 0), (-1, -1), "CENTER"),
                ("FONTNAME", (0, 0), (-1, -1), "Times-Roman"),
            ]
        )
    )
    story.append(signatures)
    return story


def section_flowables(sheets: Sequence[Marksheet], year: int) -> list:
    story: list = []
    for index, sheet in enumerate(sheets):
        if index > 0:
            story.append(PageBreak())
        story.extend(marksheet_flowables(sheet, year))
    return story


def _build(story: list, target: str | Path | BinaryIO) -> None:
    if isinstance(target, (str, Path)):
        Path(target).parent.mkdir(parents=True, exist_ok=True)
        target = str(target)
    doc = SimpleDocTemplate(
        target,
        pagesize=A4,
        topMargin=12 * mm,
        bottomMargin=12 * mm,
        leftMargin=12 * mm,
        rightMargin=12 * mm,
    )
    doc.build(story)


def render_marksheet(sheet: Marksheet, target: str | Path | BinaryIO, year: int | None = None) -> None:
    _build(marksheet_flowables(sheet, year or datetime.now().year), target)
    log.info("Rendered marksheet for student %s (%s)", sheet.student.id, sheet.exam.value)


def render_section(sheets: Sequence[Marksheet], target: str | Path | BinaryIO, year: int | None = None) -> None:
    if not sheets:
        raise ValidationError("No marksheets to render")
    _build(section_flowables(sheets, year or datetime.now().year), target)
    log.info("Rendered %d marksheets", len(sheets))


def render_to_bytes(sheets: Sequence[Marksheet], year: int | None = None) -> bytes:
    buffer = io.BytesIO()
    render_section(sheets, buffer, year)
    return buffer.getvalue()
