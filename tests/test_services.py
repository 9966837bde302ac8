import unittest

from schoolresults.core.models import Exam, Group, Section
from schoolresults.errors import NotFoundError, ValidationError
from schoolresults.services.mark_service import EntryRow, MarkService
from schoolresults.services.marksheet_service import MarksheetService
from schoolresults.services.storage import Storage
from schoolresults.services.student_service import StudentService


class StudentServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = Storage(":memory:").open()
        self.students = StudentService(self.store)

    def tearDown(self):
        self.store.close()

    def test_register(self):
        student = self.students.register("  Rahim ", "5", "9", "A")
        self.assertIsNotNone(student.id)
        self.assertEqual(student.name, "Rahim")
        self.assertEqual((student.roll, student.class_number, student.section), (5, 9, Section.A))

    def test_duplicate_roll_rejected_before_write(self):
        self.students.register("Rahim", 5, 9, "A")
        with self.assertRaises(ValidationError):
            self.students.register("Karim", 5, 9, "A")
        self.assertEqual(self.store.count_students(), 1)
        self.students.register("Karim", 5, 9, "B")
        self.assertEqual(self.store.count_students(), 2)

    def test_invalid_fields(self):
        for args in (("", 1, 6, "A"), ("Rahim", 0, 6, "A"), ("Rahim", 1, 11, "A"), ("Rahim", 1, 6, "C")):
            with self.subTest(args=args):
                with self.assertRaises(ValidationError):
                    self.students.register(*args)
        self.assertEqual(self.store.count_students(), 0)

    def test_delete_and_stats(self):
        a = self.students.register("Rahim", 1, 6, "A")
        self.students.register("Karim", 2, 6, "A")
        self.students.register("Salma", 1, 10, "B")
        self.assertEqual(self.students.dashboard_stats().students_by_class, {6: 2, 10: 1})
        self.students.delete(a.id)
        self.assertEqual(self.students.dashboard_stats().total_students, 2)
        with self.assertRaises(NotFoundError):
            self.students.delete(a.id)

    def test_list_ordered_by_class(self):
        self.students.register("Salma", 1, 10, "B")
        self.students.register("Rahim", 3, 6, "A")
        self.assertEqual([s.class_number for s in self.students.list_students()], [6, 10])


class MarkServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = Storage(":memory:").open()
        students = StudentService(self.store)
        self.rahim = students.register("Rahim", 5, 9, "A")
        self.karim = students.register("Karim", 6, 9, "A")
        self.marks = MarkService(self.store)

    def tearDown(self):
        self.store.close()

    def test_physics_scenario(self):
        saved = self.marks.save_marks(
            Exam.YEARLY, 9, "A", "Physics",
            [EntryRow(self.rahim.id, "Rahim", 5, theory=45, mcq=20, practical=20)],
            group="Science",
        )
        self.assertEqual((saved[0].total, saved[0].grade, saved[0].grade_point), (85, "A+", 5.0))
        stored = self.store.find_mark(self.rahim.id, "Physics", Exam.YEARLY)
        self.assertEqual(stored.group, Group.SCIENCE)
        self.assertEqual(stored.grade, "A+")

    def test_resave_overwrites(self):
        for theory in (20, 40):
            self.marks.save_marks(
                "Yearly", 9, "A", "Physics",
                [{"student_id": self.rahim.id, "theory": theory, "mcq": 10, "practical": 10}],
                group=Group.SCIENCE,
            )
        self.assertEqual(self.store.count_marks(self.rahim.id), 1)
        self.assertEqual(self.store.find_mark(self.rahim.id, "Physics", "Yearly").total, 60)

    def test_batch_aborts_on_any_invalid_row(self):
        with self.assertRaises(ValidationError) as ctx:
            self.marks.save_marks(
                Exam.YEARLY, 9, "A", "Mathematics",
                [
                    EntryRow(self.rahim.id, "Rahim", 5, theory=60, mcq=20),
                    EntryRow(self.karim.id, "Karim", 6, theory=75, mcq=20),
                ],
                group="Science",
            )
        self.assertEqual(ctx.exception.problems, ["Karim: Written marks (75) exceed maximum (70)"])
        self.assertEqual(self.store.count_marks(), 0)

    def test_subject_must_belong_to_catalog(self):
        with self.assertRaises(ValidationError):
            self.marks.save_marks(Exam.YEARLY, 9, "A", "Accounting", [], group="Science")
        with self.assertRaises(ValidationError):
            self.marks.save_marks(Exam.YEARLY, 9, "A", "Physics", [])

    def test_student_outside_section_rejected(self):
        other = StudentService(self.store).register("Salma", 1, 9, "B")
        with self.assertRaises(ValidationError):
            self.marks.save_marks(
                Exam.YEARLY, 9, "A", "Physics",
                [EntryRow(other.id, "Salma", 1, theory=10)],
                group="Science",
            )

    def test_non_numeric_scores_rejected_without_overwriting(self):
        self.marks.save_marks(
            Exam.YEARLY, 9, "A", "Physics",
            [EntryRow(self.rahim.id, "Rahim", 5, theory=40, mcq=20, practical=20)],
            group="Science",
        )
        for text in ("abc", "45.5"):
            with self.subTest(text=text):
                with self.assertRaises(ValidationError):
                    self.marks.save_marks(
                        Exam.YEARLY, 9, "A", "Physics",
                        [{"student_id": self.rahim.id, "theory": text, "mcq": "20", "practical": "20"}],
                        group="Science",
                    )
        self.assertEqual(self.store.find_mark(self.rahim.id, "Physics", Exam.YEARLY).total, 80)

    def test_text_scores_parsed_and_blank_is_zero(self):
        saved = self.marks.save_marks(
            Exam.YEARLY, 9, "A", "Physics",
            [{"student_id": self.rahim.id, "theory": " 45 ", "mcq": "", "practical": "20"}],
            group="Science",
        )
        self.assertEqual((saved[0].theory, saved[0].mcq, saved[0].practical), (45, 0, 20))

    def test_entry_sheet_prefills_saved_scores(self):
        self.marks.save_marks(
            Exam.YEARLY, 9, "A", "Physics",
            [EntryRow(self.karim.id, "Karim", 6, theory=40, mcq=15, practical=20)],
            group="Science",
        )
        rows = self.marks.entry_sheet(Exam.YEARLY, 9, "A", "Physics")
        self.assertEqual([r.roll for r in rows], [5, 6])
        self.assertEqual(rows[0].total, 0)
        self.assertEqual((rows[1].theory, rows[1].mcq, rows[1].practical), (40, 15, 20))


class MarksheetServiceTests(unittest.TestCase):
    def setUp(self):
        self.store = Storage(":memory:").open()
        students = StudentService(self.store)
        self.first = students.register("Rahim", 1, 7, "A")
        self.second = students.register("Karim", 2, 7, "A")
        self.third = students.register("Salma", 3, 7, "A")
        marks = MarkService(self.store)
        marks.save_marks(
            Exam.YEARLY, 7, "A", "Mathematics",
            [
                EntryRow(self.first.id, "Rahim", 1, theory=50, mcq=15),
                EntryRow(self.second.id, "Karim", 2, theory=65, mcq=25),
            ],
        )
        self.service = MarksheetService(self.store)

    def tearDown(self):
        self.store.close()

    def test_individual(self):
        sheet = self.service.individual(7, "A", 1, "Yearly")
        self.assertEqual(sheet.student.id, self.first.id)
        self.assertEqual(sheet.subjects, 12)
        self.assertAlmostEqual(sheet.gpa, 3.5)
        self.assertEqual(sheet.section_rank, 2)
        self.assertEqual(sheet.total_students_in_section, 2)
        self.assertEqual(sheet.result, "FAIL")

    def test_unranked_student(self):
        sheet = self.service.individual(7, "A", 3, Exam.YEARLY)
        self.assertEqual(sheet.gpa, 0.0)
        self.assertIsNone(sheet.section_rank)

    def test_other_exam_has_no_marks(self):
        sheet = self.service.individual(7, "A", 2, Exam.HALF_YEARLY)
        self.assertEqual(sheet.gpa, 0.0)
        self.assertIsNone(sheet.section_rank)

    def test_missing_student(self):
        with self.assertRaises(NotFoundError):
            self.service.individual(7, "A", 99, Exam.YEARLY)

    def test_unknown_exam_rejected(self):
        with self.assertRaises(ValidationError):
            self.service.individual(7, "A", 1, "Midterm")
        with self.assertRaises(ValidationError):
            self.service.section(7, "A", "Midterm")

    def test_section(self):
        sheets = self.service.section(7, "A", Exam.YEARLY)
        self.assertEqual([s.student.roll for s in sheets], [1, 2, 3])
        self.assertEqual([s.section_rank for s in sheets], [2, 1, None])
        self.assertEqual(self.service.section(8, "B", Exam.YEARLY), [])


if __name__ == "__main__":
    unittest.main()
