from __future__ import annotations

from typing import Iterable


class SchoolResultsError(Exception):
    pass


class ValidationError(SchoolResultsError):
    """Input rejected before any write; ``problems`` lists every reason."""

    def __init__(self, problems: str | Iterable[str]) -> None:
        if isinstance(problems, str):
            problems = [problems]
        self.problems: list[str] = list(problems)
        super().__init__("\n".join(self.problems))


class NotFoundError(SchoolResultsError):
    pass


class PersistenceError(SchoolResultsError):
    pass


class ImportFormatError(SchoolResultsError):
    pass
