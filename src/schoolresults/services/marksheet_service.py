from __future__ import annotations

from schoolresults.core.marksheet import assemble, assemble_section
from schoolresults.core.models import Exam, Marksheet, Section
from schoolresults.errors import NotFoundError, ValidationError
from schoolresults.services.storage import Storage


def _exam(value: Exam | str) -> Exam:
    try:
        return Exam(value)
    except ValueError as exc:
        raise ValidationError(f"Unknown exam: {value}") from exc


class MarksheetService:
    def __init__(self, store: Storage) -> None:
        self.store = store

    def individual(self, class_number: int, section: Section | str, roll: int, exam: Exam | str) -> Marksheet:
        exam = _exam(exam)
        student = self.store.find_student(roll, class_number, section)
        if student is None:
            raise NotFoundError("Student not found")

        # one query per peer, in roll order
        peers = [
            (peer.id, self.store.list_marks(peer.id, exam))
            for peer in self.store.list_section_students(class_number, section)
        ]
        return assemble(student, exam, dict(peers)[student.id], peers)

    def section(self, class_number: int, section: Section | str, exam: Exam | str) -> list[Marksheet]:
        exam = _exam(exam)
        students = self.store.list_section_students(class_number, section)
        return assemble_section(exam, [(s, self.store.list_marks(s.id, exam)) for s in students])
