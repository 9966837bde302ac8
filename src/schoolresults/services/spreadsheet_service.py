"""
Bulk student import/export as Excel workbooks.

Export writes one row per student (name, roll, class, section, group).
Import reads the first sheet, validates every row up front and then applies
one of two policies: ``REPLACE`` clears the student table before inserting,
``MERGE`` only adds students that are not already on file. Marks are never
touched by either direction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

import pandas as pd
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from schoolresults.core.models import CLASSES, Section, Student
from schoolresults.errors import ImportFormatError
from schoolresults.services.storage import Storage
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)

EXPORT_COLUMNS = ["name", "roll", "class", "section", "group"]

COLUMN_ALIASES: dict[str, list[str]] = {
    "name": ["name", "student_name", "full_name"],
    "roll": ["roll", "roll_number", "rollno", "roll_no"],
    "class": ["class", "class_number", "class_name", "std"],
    "section": ["section", "sec"],
}

_HEADER_FONT = Font(bold=True, color="FFFFFF", size=12)
_HEADER_FILL = PatternFill("solid", fgColor="2F5496")
_CENTER = Alignment(horizontal="center", vertical="center")


class ImportPolicy(str, Enum):
    REPLACE = "replace"
    MERGE = "merge"


@dataclass
class ImportSummary:
    added: int = 0
    skipped: int = 0
    conflicts: list[str] = field(default_factory=list)


StudentKey = tuple[str, int, int, str]


def _key(student: Student) -> StudentKey:
    return (student.name, student.roll, student.class_number, Section(student.section).value)


def _auto_width(ws) -> None:
    for col_cells in ws.columns:
        col_letter = get_column_letter(col_cells[0].column)
        longest = max(len(str(cell.value or "")) for cell in col_cells)
        ws.column_dimensions[col_letter].width = min(longest + 4, 50)


def _as_int(value, column: str, row_no: int) -> int:
    try:
        number = float(value)
    except (TypeError, ValueError) as exc:
        raise ImportFormatError(f"Row {row_no}: {column} '{value}' is not a number") from exc
    if not number.is_integer():
        raise ImportFormatError(f"Row {row_no}: {column} '{value}' is not a whole number")
    return int(number)


class SpreadsheetService:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def export_students(self, path: str | Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        wb = Workbook()
        ws = wb.active
        ws.title = "Students"
        ws.append(EXPORT_COLUMNS)
        for col in range(1, len(EXPORT_COLUMNS) + 1):
            cell = ws.cell(row=1, column=col)
            cell.font = _HEADER_FONT
            cell.fill = _HEADER_FILL
            cell.alignment = _CENTER

        students = self.store.list_students()
        for student in students:
            group = self.store.group_of_student(student.id)
            ws.append(
                [
                    student.name,
                    student.roll,
                    student.class_number,
                    student.section.value,
                    group.value if group else None,
                ]
            )
        _auto_width(ws)
        wb.save(path)
        log.info("Exported %d students to %s", len(students), path)
        return path

    def read_students(self, path: str | Path) -> list[Student]:
        """Parse and validate the first sheet; duplicates of the same student collapse to one."""
        try:
            df = pd.read_excel(path, sheet_name=0)
        except Exception as exc:
            raise ImportFormatError(f"Could not read spreadsheet: {exc}") from exc

        df.columns = [str(c).strip().lower().replace(" ", "_") for c in df.columns]
        mapped: dict[str, str] = {}
        for wanted, aliases in COLUMN_ALIASES.items():
            found = next((a for a in aliases if a in df.columns), None)
            if found:
                mapped[wanted] = found
        missing = [c for c in COLUMN_ALIASES if c not in mapped]
        if missing:
            raise ImportFormatError(f"Missing columns: {', '.join(missing)}")

        df = df[[mapped[c] for c in COLUMN_ALIASES]]
        df.columns = list(COLUMN_ALIASES)
        df = df.dropna(how="all")
        if df.empty:
            raise ImportFormatError("The spreadsheet has no student rows")

        students: dict[StudentKey, Student] = {}
        slots: dict[tuple[int, int, str], str] = {}
        for index, row in df.iterrows():
            row_no = int(index) + 2
            if row.isna().any():
                raise ImportFormatError(f"Row {row_no}: name, roll, class and section are all required")

            name = str(row["name"]).strip()
            if not name:
                raise ImportFormatError(f"Row {row_no}: name is empty")
            roll = _as_int(row["roll"], "roll", row_no)
            if roll < 1:
                raise ImportFormatError(f"Row {row_no}: roll must be positive")
            class_number = _as_int(row["class"], "class", row_no)
            if class_number not in CLASSES:
                raise ImportFormatError(f"Row {row_no}: class {class_number} is not served")
            try:
                section = Section(str(row["section"]).strip().upper())
            except ValueError as exc:
                raise ImportFormatError(f"Row {row_no}: unknown section '{row['section']}'") from exc

            student = Student(name=name, roll=roll, class_number=class_number, section=section)
            key = _key(student)
            if key in students:
                continue
            slot = (roll, class_number, section.value)
            if slot in slots:
                raise ImportFormatError(
                    f"Row {row_no}: roll {roll} of class {class_number}{section.value} "
                    f"is listed for both {slots[slot]} and {name}"
                )
            slots[slot] = name
            students[key] = student

        return list(students.values())

    def import_students(self, path: str | Path, policy: ImportPolicy | str = ImportPolicy.MERGE) -> ImportSummary:
        policy = ImportPolicy(policy)
        parsed = self.read_students(path)
        summary = ImportSummary()

        if policy is ImportPolicy.REPLACE:
            removed = self.store.delete_all_students()
            summary.added = self.store.add_students(parsed)
            log.info("Replaced %d students with %d imported rows", removed, summary.added)
            return summary

        existing = self.store.list_students()
        known = {_key(s) for s in existing}
        taken = {(s.roll, s.class_number, s.section.value): s.name for s in existing}
        fresh: list[Student] = []
        for student in parsed:
            if _key(student) in known:
                summary.skipped += 1
                continue
            slot = (student.roll, student.class_number, student.section.value)
            if slot in taken:
                summary.conflicts.append(
                    f"{student.name}: roll {student.roll} of class {student.class_number}"
                    f"{student.section.value} already belongs to {taken[slot]}"
                )
                continue
            fresh.append(student)
        summary.added = self.store.add_students(fresh)
        log.info(
            "Merged import: %d added, %d already present, %d conflicts",
            summary.added,
            summary.skipped,
            len(summary.conflicts),
        )
        return summary
