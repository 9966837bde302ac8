from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping

from schoolresults.core.catalog import is_grouped_class, subjects_for
from schoolresults.core.grading import evaluate, validate_components
from schoolresults.core.models import CLASSES, Exam, Group, Mark, Section
from schoolresults.errors import ValidationError
from schoolresults.services.payloads import MarkEntryPayload, parse
from schoolresults.services.storage import Storage
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class EntryRow:
    student_id: int
    student_name: str
    roll: int
    theory: int = 0
    mcq: int = 0
    practical: int = 0

    @property
    def total(self) -> int:
        return self.theory + self.mcq + self.practical


class MarkService:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def entry_sheet(
        self,
        exam: Exam | str,
        class_number: int,
        section: Section | str,
        subject: str,
    ) -> list[EntryRow]:
        """Rows for every student of the section, pre-filled with saved scores."""
        rows: list[EntryRow] = []
        for student in self.store.list_section_students(class_number, section):
            row = EntryRow(student_id=student.id, student_name=student.name, roll=student.roll)
            existing = self.store.find_mark(student.id, subject, exam)
            if existing:
                row.theory, row.mcq, row.practical = existing.theory, existing.mcq, existing.practical
            rows.append(row)
        return rows

    def save_marks(
        self,
        exam: Exam | str,
        class_number: int,
        section: Section | str,
        subject: str,
        rows: Iterable[EntryRow | Mapping],
        group: Group | str | None = None,
    ) -> list[Mark]:
        """
        Validate the whole batch, then upsert one mark per row.

        Nothing is written when any row fails validation. Rows are saved one
        by one afterwards, so a storage failure part way through keeps the
        rows already written.
        """
        rows = list(rows)
        payload = parse(
            MarkEntryPayload,
            exam=exam,
            class_number=class_number,
            section=section,
            group=group,
            subject=subject,
            rows=[
                {"student_id": r.student_id, "theory": r.theory, "mcq": r.mcq, "practical": r.practical}
                if isinstance(r, EntryRow)
                else dict(r)
                for r in rows
            ],
        )
        self._check_target(payload)

        roster = {s.id: s for s in self.store.list_section_students(payload.class_number, payload.section)}
        problems: list[str] = []
        for row in payload.rows:
            student = roster.get(row.student_id)
            if student is None:
                problems.append(
                    f"Student {row.student_id} is not in class {payload.class_number} section {payload.section.value}"
                )
                continue
            for problem in validate_components(payload.subject, row.theory, row.mcq, row.practical):
                problems.append(f"{student.name}: {problem}")
        if problems:
            raise ValidationError(problems)

        saved: list[Mark] = []
        for row in payload.rows:
            total, grade, grade_point = evaluate(payload.subject, row.theory, row.mcq, row.practical)
            mark = Mark(
                student_id=row.student_id,
                subject=payload.subject,
                exam=payload.exam,
                class_number=payload.class_number,
                section=payload.section,
                group=payload.group,
                theory=row.theory,
                mcq=row.mcq,
                practical=row.practical,
                total=total,
                grade=grade,
                grade_point=grade_point,
            )
            self.store.upsert_mark(mark)
            saved.append(mark)

        log.info(
            "Saved %d %s marks for %s, class %s%s",
            len(saved),
            payload.exam.value,
            payload.subject,
            payload.class_number,
            payload.section.value,
        )
        return saved

    @staticmethod
    def _check_target(payload: MarkEntryPayload) -> None:
        if payload.class_number not in CLASSES:
            raise ValidationError(f"Class {payload.class_number} is not served by this school")
        if is_grouped_class(payload.class_number) and payload.group is None:
            raise ValidationError(f"Select a group for class {payload.class_number}")
        if not is_grouped_class(payload.class_number) and payload.group is not None:
            raise ValidationError(f"Class {payload.class_number} has no groups")
        if payload.subject not in subjects_for(payload.class_number, payload.group):
            raise ValidationError(
                f"{payload.subject} is not taught in class {payload.class_number}"
                + (f" ({payload.group.value})" if payload.group else "")
            )
