from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from schoolresults.core.grading import FAIL_GRADE, letter_for_gpa, marking_scheme_of


CLASSES: tuple[int, ...] = (6, 7, 8, 9, 10)


class Exam(str, Enum):
    HALF_YEARLY = "Half-Yearly"
    YEARLY = "Yearly"


class Section(str, Enum):
    A = "A"
    B = "B"


class Group(str, Enum):
    SCIENCE = "Science"
    BUSINESS_STUDIES = "Business Studies"
    HUMANITIES = "Humanities"


@dataclass
class Student:
    name: str
    roll: int
    class_number: int
    section: Section
    id: int | None = None


@dataclass
class Mark:
    student_id: int
    subject: str
    exam: Exam
    class_number: int
    section: Section
    group: Group | None
    theory: int
    mcq: int
    practical: int
    total: int
    grade: str
    grade_point: float
    id: int | None = None

    @property
    def is_entered(self) -> bool:
        return self.total > 0


@dataclass
class Marksheet:
    student: Student
    exam: Exam
    marks: list[Mark] = field(default_factory=list)
    gpa: float = 0.0
    total_grade_points: float = 0.0
    subjects: int = 0
    section_rank: int | None = None
    total_students_in_section: int | None = None

    @property
    def total_obtained(self) -> int:
        return sum(m.total for m in self.marks)

    @property
    def total_possible(self) -> int:
        return sum(marking_scheme_of(m.subject).total for m in self.marks)

    @property
    def has_failed_subject(self) -> bool:
        return any(m.grade == FAIL_GRADE[0] for m in self.marks)

    @property
    def passed(self) -> bool:
        return not self.has_failed_subject and self.gpa >= 1.0

    @property
    def result(self) -> str:
        return "PASS" if self.passed else "FAIL"

    @property
    def display_gpa(self) -> float:
        return 0.0 if self.has_failed_subject else self.gpa

    @property
    def letter_grade(self) -> str:
        if self.has_failed_subject:
            return FAIL_GRADE[0]
        return letter_for_gpa(self.gpa)
