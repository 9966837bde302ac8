from __future__ import annotations

from typing import Iterable, Mapping

from schoolresults.core.models import Mark


def entered_marks(marks: Iterable[Mark]) -> list[Mark]:
    return [m for m in marks if m.is_entered]


def total_grade_points(marks: Iterable[Mark]) -> float:
    return sum(m.grade_point for m in entered_marks(marks))


def calculate_gpa(marks: Iterable[Mark]) -> float:
    """
    GPA = Σ(grade_point) / n over marks with a nonzero total.
    Every subject weighs the same; no entered marks gives 0.0.
    """
    entered = entered_marks(marks)
    if not entered:
        return 0.0
    return sum(m.grade_point for m in entered) / len(entered)


def rank_by_gpa(gpas: Mapping[int, float]) -> dict[int, int]:
    """
    1-based section ranks keyed by student id. Students with GPA 0 are left
    out. Equal GPAs keep their input order and get consecutive ranks.
    """
    ranked = sorted(
        ((student_id, gpa) for student_id, gpa in gpas.items() if gpa > 0),
        key=lambda item: item[1],
        reverse=True,
    )
    return {student_id: position for position, (student_id, _) in enumerate(ranked, start=1)}
