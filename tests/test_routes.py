import unittest

from schoolresults.ui.app import ROUTES, resolve_route


class RouteTests(unittest.TestCase):
    def test_known_routes(self):
        for route in ("/", "/add-student", "/students", "/mark-entry", "/marksheet"):
            self.assertEqual(resolve_route(route), route)
        self.assertEqual(len(ROUTES), 5)

    def test_normalisation(self):
        self.assertEqual(resolve_route("/students/"), "/students")
        self.assertEqual(resolve_route("/marksheet?roll=5"), "/marksheet")
        self.assertEqual(resolve_route(""), "/")
        self.assertEqual(resolve_route(None), "/")

    def test_unknown_routes(self):
        self.assertIsNone(resolve_route("/reports"))
        self.assertIsNone(resolve_route("/students/5"))


if __name__ == "__main__":
    unittest.main()
