import unittest

from schoolresults.core.models import Exam, Group, Mark, Section, Student
from schoolresults.errors import PersistenceError
from schoolresults.services.storage import Storage


def _mark(student_id: int, theory: int, exam: Exam = Exam.YEARLY) -> Mark:
    return Mark(
        student_id=student_id,
        subject="Physics",
        exam=exam,
        class_number=9,
        section=Section.A,
        group=Group.SCIENCE,
        theory=theory,
        mcq=20,
        practical=20,
        total=theory + 40,
        grade="A+",
        grade_point=5.0,
    )


class StorageTests(unittest.TestCase):
    def setUp(self):
        self.store = Storage(":memory:").open()
        self.student_id = self.store.add_student(Student(name="Rahim", roll=5, class_number=9, section=Section.A))

    def tearDown(self):
        self.store.close()

    def test_find_student_by_slot(self):
        found = self.store.find_student(5, 9, "A")
        self.assertEqual(found.id, self.student_id)
        self.assertEqual(found.section, Section.A)
        self.assertIsNone(self.store.find_student(5, 9, "B"))

    def test_upsert_overwrites_same_triple(self):
        self.store.upsert_mark(_mark(self.student_id, 30))
        self.store.upsert_mark(_mark(self.student_id, 45))
        self.assertEqual(self.store.count_marks(self.student_id), 1)
        mark = self.store.find_mark(self.student_id, "Physics", Exam.YEARLY)
        self.assertEqual(mark.theory, 45)
        self.assertEqual(mark.total, 85)
        self.assertEqual(mark.group, Group.SCIENCE)

    def test_exams_are_kept_apart(self):
        self.store.upsert_mark(_mark(self.student_id, 30, Exam.HALF_YEARLY))
        self.store.upsert_mark(_mark(self.student_id, 45, Exam.YEARLY))
        self.assertEqual(self.store.count_marks(), 2)
        self.assertEqual([m.theory for m in self.store.list_marks(self.student_id, "Half-Yearly")], [30])

    def test_delete_student_removes_marks(self):
        self.store.upsert_mark(_mark(self.student_id, 30))
        self.assertTrue(self.store.delete_student(self.student_id))
        self.assertEqual(self.store.count_marks(), 0)
        self.assertFalse(self.store.delete_student(self.student_id))

    def test_group_and_counts(self):
        self.store.add_student(Student(name="Karim", roll=1, class_number=7, section=Section.B))
        self.assertIsNone(self.store.group_of_student(self.student_id))
        self.store.upsert_mark(_mark(self.student_id, 30))
        self.assertEqual(self.store.group_of_student(self.student_id), Group.SCIENCE)
        self.assertEqual(self.store.count_students(), 2)
        self.assertEqual(self.store.class_counts(), {7: 1, 9: 1})

    def test_closed_store_raises(self):
        self.store.close()
        with self.assertRaises(PersistenceError):
            self.store.list_students()

    def test_context_manager(self):
        with Storage(":memory:") as store:
            self.assertEqual(store.count_students(), 0)
        self.assertIsNone(store.conn)


if __name__ == "__main__":
    unittest.main()
