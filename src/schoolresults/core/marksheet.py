from __future__ import annotations

from typing import Iterable, Sequence

from schoolresults.core.catalog import subjects_for
from schoolresults.core.gpa import calculate_gpa, rank_by_gpa, total_grade_points
from schoolresults.core.models import Exam, Group, Mark, Marksheet, Student


def group_of(marks: Iterable[Mark]) -> Group | None:
    return next((m.group for m in marks if m.group), None)


def placeholder_mark(student: Student, subject: str, exam: Exam, group: Group | None) -> Mark:
    return Mark(
        student_id=student.id,
        subject=subject,
        exam=exam,
        class_number=student.class_number,
        section=student.section,
        group=group,
        theory=0,
        mcq=0,
        practical=0,
        total=0,
        grade="F",
        grade_point=0.0,
    )


def complete_marks(student: Student, exam: Exam, marks: Sequence[Mark]) -> list[Mark]:
    """One mark per catalog subject, zero-filled where nothing was entered."""
    group = group_of(marks)
    by_subject = {m.subject: m for m in marks}
    return [
        by_subject.get(subject) or placeholder_mark(student, subject, exam, group)
        for subject in subjects_for(student.class_number, group)
    ]


def assemble(
    student: Student,
    exam: Exam,
    marks: Sequence[Mark],
    section_peers: Sequence[tuple[int, Sequence[Mark]]] | None = None,
) -> Marksheet:
    """
    Build the marksheet of one student for one exam.

    ``marks`` are the student's stored marks for ``exam``. ``section_peers``
    holds ``(student_id, marks)`` for everyone in the same class and section;
    without it no rank is computed.
    """
    full = complete_marks(student, exam, marks)
    sheet = Marksheet(
        student=student,
        exam=exam,
        marks=full,
        gpa=calculate_gpa(marks),
        total_grade_points=total_grade_points(marks),
        subjects=len(full),
    )

    if section_peers is not None:
        ranks = rank_by_gpa({peer_id: calculate_gpa(peer_marks) for peer_id, peer_marks in section_peers})
        sheet.section_rank = ranks.get(student.id)
        sheet.total_students_in_section = len(ranks)

    return sheet


def assemble_section(exam: Exam, students_with_marks: Sequence[tuple[Student, Sequence[Mark]]]) -> list[Marksheet]:
    sheets = [assemble(student, exam, marks) for student, marks in students_with_marks]
    ranks = rank_by_gpa({sheet.student.id: sheet.gpa for sheet in sheets})
    for sheet in sheets:
        sheet.section_rank = ranks.get(sheet.student.id)
        sheet.total_students_in_section = len(ranks)
    return sheets
