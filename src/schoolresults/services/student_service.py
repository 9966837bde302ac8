from __future__ import annotations

from dataclasses import dataclass, field

from schoolresults.core.models import Section, Student
from schoolresults.errors import NotFoundError, ValidationError
from schoolresults.services.payloads import StudentPayload, parse
from schoolresults.services.storage import Storage
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


@dataclass
class DashboardStats:
    total_students: int
    students_by_class: dict[int, int] = field(default_factory=dict)


class StudentService:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def register(self, name: str, roll: int | str, class_number: int | str, section: Section | str) -> Student:
        payload = parse(StudentPayload, name=name, roll=roll, class_number=class_number, section=section)

        existing = self.store.find_student(payload.roll, payload.class_number, payload.section)
        if existing:
            raise ValidationError(
                "A student with this roll number already exists in this class and section"
            )

        student = Student(
            name=payload.name,
            roll=payload.roll,
            class_number=payload.class_number,
            section=payload.section,
        )
        student.id = self.store.add_student(student)
        log.info(
            "Registered student %s (roll %s, class %s%s)",
            student.id,
            student.roll,
            student.class_number,
            student.section.value,
        )
        return student

    def list_students(self) -> list[Student]:
        return self.store.list_students()

    def section_students(self, class_number: int, section: Section | str) -> list[Student]:
        return self.store.list_section_students(class_number, section)

    def get(self, student_id: int) -> Student:
        student = self.store.get_student(student_id)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    def find(self, roll: int, class_number: int, section: Section | str) -> Student:
        student = self.store.find_student(roll, class_number, section)
        if student is None:
            raise NotFoundError("Student not found")
        return student

    def delete(self, student_id: int) -> None:
        if not self.store.delete_student(student_id):
            raise NotFoundError(f"Student {student_id} not found")
        log.info("Deleted student %s and their marks", student_id)

    def dashboard_stats(self) -> DashboardStats:
        return DashboardStats(
            total_students=self.store.count_students(),
            students_by_class=self.store.class_counts(),
        )
