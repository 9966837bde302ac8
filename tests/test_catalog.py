import unittest

from schoolresults.core.catalog import groups_for, subjects_for
from schoolresults.core.models import Group


class CatalogTests(unittest.TestCase):
    def test_junior_classes_ignore_group(self):
        subjects = subjects_for(7)
        self.assertEqual(len(subjects), 12)
        self.assertEqual(subjects[0], "Bangla 1st Paper")
        self.assertEqual(subjects[-1], "Arts & Culture / Work & Arts")
        self.assertEqual(subjects_for(7, "Science"), subjects)
        self.assertEqual(subjects_for(6), subjects_for(8))

    def test_secondary_groups(self):
        science = subjects_for(9, "Science")
        self.assertEqual(len(science), 12)
        self.assertEqual(science[7:], [
            "Physics",
            "Chemistry",
            "Biology",
            "Bangladesh & Global Science",
            "Higher Math / Agriculture",
        ])
        self.assertEqual(len(subjects_for(10, Group.BUSINESS_STUDIES)), 10)
        self.assertEqual(subjects_for(10, "Humanities")[-1], "Science")

    def test_secondary_without_group(self):
        self.assertEqual(len(subjects_for(9)), 7)
        self.assertEqual(subjects_for(9, "Arts"), subjects_for(9, None))

    def test_unserved_classes(self):
        self.assertEqual(subjects_for(5), [])
        self.assertEqual(subjects_for(11, "Science"), [])

    def test_groups(self):
        self.assertEqual(groups_for(9), [Group.SCIENCE, Group.BUSINESS_STUDIES, Group.HUMANITIES])
        self.assertEqual(groups_for(10), groups_for(9))
        self.assertEqual(groups_for(8), [])


if __name__ == "__main__":
    unittest.main()
