import unittest

from schoolresults.core.catalog import subjects_for
from schoolresults.core.grading import evaluate
from schoolresults.core.marksheet import assemble, assemble_section
from schoolresults.core.models import Exam, Group, Mark, Marksheet, Section, Student


def _student(student_id: int, roll: int, class_number: int = 9) -> Student:
    return Student(id=student_id, name=f"Student {roll}", roll=roll, class_number=class_number, section=Section.A)


def _mark(student: Student, subject: str, theory: int, mcq: int = 0, practical: int = 0, group=Group.SCIENCE) -> Mark:
    total, grade, point = evaluate(subject, theory, mcq, practical)
    return Mark(
        student_id=student.id,
        subject=subject,
        exam=Exam.YEARLY,
        class_number=student.class_number,
        section=student.section,
        group=group,
        theory=theory,
        mcq=mcq,
        practical=practical,
        total=total,
        grade=grade,
        grade_point=point,
    )


def _full_marks(student: Student, group=Group.SCIENCE, skip=()) -> list:
    return [
        _mark(student, subject, 100 if subject.startswith("English") else 70, 0 if subject.startswith("English") else 30, group=group)
        for subject in subjects_for(student.class_number, group)
        if subject not in skip
    ]


class AssembleTests(unittest.TestCase):
    def test_no_marks(self):
        student = _student(1, 5)
        sheet = assemble(student, Exam.YEARLY, [], [(1, [])])
        self.assertEqual(sheet.gpa, 0.0)
        self.assertIsNone(sheet.section_rank)
        self.assertEqual(sheet.total_students_in_section, 0)
        self.assertEqual(sheet.subjects, 7)
        self.assertTrue(all(m.grade == "F" and m.total == 0 for m in sheet.marks))
        self.assertEqual(sheet.result, "FAIL")

    def test_placeholders_fill_catalog(self):
        student = _student(1, 5)
        physics = _mark(student, "Physics", 45, 20, 20)
        sheet = assemble(student, Exam.YEARLY, [physics])
        self.assertEqual(sheet.subjects, 12)
        self.assertEqual([m.subject for m in sheet.marks], subjects_for(9, "Science"))
        self.assertIs(sheet.marks[7], physics)
        self.assertEqual(sheet.marks[0].grade, "F")
        self.assertEqual(sheet.marks[0].group, Group.SCIENCE)
        self.assertAlmostEqual(sheet.gpa, 5.0)
        self.assertIsNone(sheet.section_rank)

    def test_missing_subject_fails_despite_perfect_gpa(self):
        student = _student(1, 5)
        marks = _full_marks(student, skip=("Biology",))
        sheet = assemble(student, Exam.YEARLY, marks)
        self.assertAlmostEqual(sheet.gpa, 5.0)
        self.assertTrue(sheet.has_failed_subject)
        self.assertFalse(sheet.passed)
        self.assertEqual(sheet.result, "FAIL")
        self.assertEqual(sheet.display_gpa, 0.0)

    def test_complete_marks_pass(self):
        student = _student(1, 5)
        sheet = assemble(student, Exam.YEARLY, _full_marks(student))
        self.assertEqual(sheet.result, "PASS")
        self.assertAlmostEqual(sheet.display_gpa, 5.0)
        self.assertEqual(sheet.total_obtained, 1200)
        self.assertEqual(sheet.total_possible, 1200)
        self.assertAlmostEqual(sheet.total_grade_points, 60.0)

    def test_letter_grade(self):
        student = _student(1, 5)
        self.assertEqual(assemble(student, Exam.YEARLY, _full_marks(student)).letter_grade, "A+")
        failed = assemble(student, Exam.YEARLY, _full_marks(student, skip=("Biology",)))
        self.assertAlmostEqual(failed.gpa, 5.0)
        self.assertEqual(failed.letter_grade, "F")
        self.assertEqual(Marksheet(student=student, exam=Exam.YEARLY, gpa=3.7).letter_grade, "A-")

    def test_junior_marks_carry_no_group(self):
        student = _student(1, 3, class_number=7)
        sheet = assemble(student, Exam.YEARLY, [_mark(student, "Mathematics", 60, 20, group=None)])
        self.assertEqual(sheet.subjects, 12)
        self.assertTrue(all(m.group is None for m in sheet.marks))

    def test_section_rank(self):
        a, b, c = _student(1, 1), _student(2, 2), _student(3, 3)
        marks_a = [_mark(a, "Mathematics", 50, 10)]
        marks_b = [_mark(b, "Mathematics", 70, 30)]
        peers = [(1, marks_a), (2, marks_b), (3, [])]
        sheet = assemble(a, Exam.YEARLY, marks_a, peers)
        self.assertEqual(sheet.section_rank, 2)
        self.assertEqual(sheet.total_students_in_section, 2)
        self.assertIsNone(assemble(c, Exam.YEARLY, [], peers).section_rank)

    def test_assemble_section_ties(self):
        a, b, c = _student(1, 1), _student(2, 2), _student(3, 3)
        sheets = assemble_section(
            Exam.YEARLY,
            [
                (a, [_mark(a, "Mathematics", 55, 20)]),
                (b, [_mark(b, "Mathematics", 56, 20)]),
                (c, [_mark(c, "Mathematics", 70, 30)]),
            ],
        )
        self.assertEqual([s.section_rank for s in sheets], [2, 3, 1])
        self.assertTrue(all(s.total_students_in_section == 3 for s in sheets))


if __name__ == "__main__":
    unittest.main()
