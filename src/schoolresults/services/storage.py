from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterable, Iterator

from schoolresults.core.models import Exam, Group, Mark, Section, Student
from schoolresults.errors import PersistenceError
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)

SCHEMA_VERSION = 1


class Storage:
    """
    SQLite-backed student and mark store.

    The handle is opened explicitly (or via ``with``) and every service takes
    it as a constructor argument. ``":memory:"`` gives a throwaway store.
    """

    def __init__(self, db_path: str = "school_results.db") -> None:
        self.db_path = db_path
        self.conn: sqlite3.Connection | None = None

    def open(self) -> "Storage":
        if self.conn is not None:
            return self
        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
        except sqlite3.Error as exc:
            log.error("Could not open database %s: %s", self.db_path, exc)
            raise PersistenceError(f"Could not open database: {exc}") from exc
        self.conn.row_factory = sqlite3.Row
        self._init_schema()
        return self

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def __enter__(self) -> "Storage":
        return self.open()

    def __exit__(self, *_exc) -> None:
        self.close()

    @contextmanager
    def _guard(self, action: str) -> Iterator[sqlite3.Connection]:
        if self.conn is None:
            raise PersistenceError(f"Cannot {action}: storage is not open")
        try:
            yield self.conn
        except sqlite3.Error as exc:
            self.conn.rollback()
            log.error("Failed to %s: %s", action, exc)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _init_schema(self) -> None:
        with self._guard("initialise schema") as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS students (
                  id INTEGER PRIMARY KEY AUTOINCREMENT,
                  name TEXT NOT NULL,
                  roll INTEGER NOT NULL,
                  class_number INTEGER NOT NULL,
                  section TEXT NOT NULL
                );
                CREATE INDEX IF NOT EXISTS idx_students_slot
                  ON students(class_number, section, roll);

                CREATE TABLE IF NOT EXISTS marks (
                  id INTEGER PRIMARY KEY AUTOINCREMENT,
                  student_id INTEGER NOT NULL,
                  subject TEXT NOT NULL,
                  exam TEXT NOT NULL,
                  class_number INTEGER NOT NULL,
                  section TEXT NOT NULL,
                  group_name TEXT,
                  theory INTEGER NOT NULL DEFAULT 0,
                  mcq INTEGER NOT NULL DEFAULT 0,
                  practical INTEGER NOT NULL DEFAULT 0,
                  total INTEGER NOT NULL,
                  grade TEXT NOT NULL,
                  grade_point REAL NOT NULL,
                  UNIQUE(student_id, subject, exam),
                  FOREIGN KEY(student_id) REFERENCES students(id)
                );
                """
            )
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            conn.commit()

    @staticmethod
    def _to_student(row: sqlite3.Row) -> Student:
        return Student(
            id=int(row["id"]),
            name=row["name"],
            roll=int(row["roll"]),
            class_number=int(row["class_number"]),
            section=Section(row["section"]),
        )

    @staticmethod
    def _to_mark(row: sqlite3.Row) -> Mark:
        return Mark(
            id=int(row["id"]),
            student_id=int(row["student_id"]),
            subject=row["subject"],
            exam=Exam(row["exam"]),
            class_number=int(row["class_number"]),
            section=Section(row["section"]),
            group=Group(row["group_name"]) if row["group_name"] else None,
            theory=int(row["theory"]),
            mcq=int(row["mcq"]),
            practical=int(row["practical"]),
            total=int(row["total"]),
            grade=row["grade"],
            grade_point=float(row["grade_point"]),
        )

    # students

    def add_student(self, student: Student) -> int:
        with self._guard("add student") as conn:
            cur = conn.execute(
                "INSERT INTO students(name, roll, class_number, section) VALUES(?,?,?,?)",
                (student.name, student.roll, student.class_number, Section(student.section).value),
            )
            conn.commit()
        return int(cur.lastrowid)

    def add_students(self, students: Iterable[Student]) -> int:
        rows = [(s.name, s.roll, s.class_number, Section(s.section).value) for s in students]
        with self._guard("add students") as conn:
            conn.executemany(
                "INSERT INTO students(name, roll, class_number, section) VALUES(?,?,?,?)",
                rows,
            )
            conn.commit()
        return len(rows)

    def get_student(self, student_id: int) -> Student | None:
        with self._guard("load student") as conn:
            row = conn.execute("SELECT * FROM students WHERE id=?", (student_id,)).fetchone()
        return self._to_student(row) if row else None

    def find_student(self, roll: int, class_number: int, section: Section | str) -> Student | None:
        with self._guard("look up student") as conn:
            row = conn.execute(
                "SELECT * FROM students WHERE roll=? AND class_number=? AND section=? ORDER BY id LIMIT 1",
                (roll, class_number, Section(section).value),
            ).fetchone()
        return self._to_student(row) if row else None

    def list_students(self) -> list[Student]:
        with self._guard("list students") as conn:
            rows = conn.execute(
                "SELECT * FROM students ORDER BY class_number, section, roll, id"
            ).fetchall()
        return [self._to_student(r) for r in rows]

    def list_section_students(self, class_number: int, section: Section | str) -> list[Student]:
        with self._guard("list section students") as conn:
            rows = conn.execute(
                "SELECT * FROM students WHERE class_number=? AND section=? ORDER BY roll, id",
                (class_number, Section(section).value),
            ).fetchall()
        return [self._to_student(r) for r in rows]

    def count_students(self) -> int:
        with self._guard("count students") as conn:
            row = conn.execute("SELECT COUNT(*) AS n FROM students").fetchone()
        return int(row["n"])

    def class_counts(self) -> dict[int, int]:
        with self._guard("count students by class") as conn:
            rows = conn.execute(
                "SELECT class_number, COUNT(*) AS n FROM students GROUP BY class_number ORDER BY class_number"
            ).fetchall()
        return {int(r["class_number"]): int(r["n"]) for r in rows}

    def delete_student(self, student_id: int) -> bool:
        with self._guard("delete student") as conn:
            conn.execute("DELETE FROM marks WHERE student_id=?", (student_id,))
            cur = conn.execute("DELETE FROM students WHERE id=?", (student_id,))
            conn.commit()
        return cur.rowcount > 0

    def delete_all_students(self) -> int:
        with self._guard("clear students") as conn:
            cur = conn.execute("DELETE FROM students")
            conn.commit()
        return cur.rowcount

    # marks

    def upsert_mark(self, mark: Mark) -> None:
        """Insert or wholesale replace the mark for (student, subject, exam)."""
        with self._guard("save mark") as conn:
            conn.execute(
                """INSERT INTO marks(student_id, subject, exam, class_number, section, group_name,
                                     theory, mcq, practical, total, grade, grade_point)
                   VALUES(?,?,?,?,?,?,?,?,?,?,?,?)
                   ON CONFLICT(student_id, subject, exam) DO UPDATE SET
                       class_number=excluded.class_number,
                       section=excluded.section,
                       group_name=excluded.group_name,
                       theory=excluded.theory,
                       mcq=excluded.mcq,
                       practical=excluded.practical,
                       total=excluded.total,
                       grade=excluded.grade,
                       grade_point=excluded.grade_point""",
                (
                    mark.student_id,
                    mark.subject,
                    Exam(mark.exam).value,
                    mark.class_number,
                    Section(mark.section).value,
                    Group(mark.group).value if mark.group else None,
                    mark.theory,
                    mark.mcq,
                    mark.practical,
                    mark.total,
                    mark.grade,
                    mark.grade_point,
                ),
            )
            conn.commit()

    def find_mark(self, student_id: int, subject: str, exam: Exam | str) -> Mark | None:
        with self._guard("look up mark") as conn:
            row = conn.execute(
                "SELECT * FROM marks WHERE student_id=? AND subject=? AND exam=?",
                (student_id, subject, Exam(exam).value),
            ).fetchone()
        return self._to_mark(row) if row else None

    def list_marks(self, student_id: int, exam: Exam | str) -> list[Mark]:
        with self._guard("list marks") as conn:
            rows = conn.execute(
                "SELECT * FROM marks WHERE student_id=? AND exam=? ORDER BY id",
                (student_id, Exam(exam).value),
            ).fetchall()
        return [self._to_mark(r) for r in rows]

    def count_marks(self, student_id: int | None = None) -> int:
        with self._guard("count marks") as conn:
            if student_id is None:
                row = conn.execute("SELECT COUNT(*) AS n FROM marks").fetchone()
            else:
                row = conn.execute(
                    "SELECT COUNT(*) AS n FROM marks WHERE student_id=?", (student_id,)
                ).fetchone()
        return int(row["n"])

    def group_of_student(self, student_id: int) -> Group | None:
        with self._guard("look up student group") as conn:
            row = conn.execute(
                "SELECT group_name FROM marks WHERE student_id=? AND group_name IS NOT NULL ORDER BY id LIMIT 1",
                (student_id,),
            ).fetchone()
        return Group(row["group_name"]) if row else None
