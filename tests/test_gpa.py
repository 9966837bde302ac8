import unittest

from schoolresults.core.gpa import calculate_gpa, rank_by_gpa, total_grade_points
from schoolresults.core.models import Exam, Mark, Section


def _mark(subject: str, total: int, grade: str, grade_point: float) -> Mark:
    return Mark(
        student_id=1,
        subject=subject,
        exam=Exam.YEARLY,
        class_number=7,
        section=Section.A,
        group=None,
        theory=total,
        mcq=0,
        practical=0,
        total=total,
        grade=grade,
        grade_point=grade_point,
    )


class GPATests(unittest.TestCase):
    def test_gpa_is_unweighted_mean_of_entered_marks(self):
        marks = [_mark("Mathematics", 85, "A+", 5.0), _mark("Agriculture", 55, "B", 3.0), _mark("Bangla 1st Paper", 0, "F", 0.0)]
        self.assertAlmostEqual(calculate_gpa(marks), 4.0)
        self.assertAlmostEqual(total_grade_points(marks), 8.0)

    def test_gpa_without_marks(self):
        self.assertEqual(calculate_gpa([]), 0.0)
        self.assertEqual(calculate_gpa([_mark("Mathematics", 0, "F", 0.0)]), 0.0)

    def test_failed_entered_mark_counts(self):
        marks = [_mark("Mathematics", 20, "F", 0.0), _mark("Agriculture", 80, "A+", 5.0)]
        self.assertAlmostEqual(calculate_gpa(marks), 2.5)

    def test_rank_skips_zero_gpa(self):
        ranks = rank_by_gpa({1: 3.5, 2: 0.0, 3: 5.0})
        self.assertEqual(ranks, {3: 1, 1: 2})

    def test_ties_get_sequential_ranks_in_input_order(self):
        ranks = rank_by_gpa({10: 4.0, 11: 5.0, 12: 4.0, 13: 4.0})
        self.assertEqual(ranks, {11: 1, 10: 2, 12: 3, 13: 4})


if __name__ == "__main__":
    unittest.main()
