from __future__ import annotations

from dataclasses import dataclass, field

from schoolresults.config.settings import settings
from schoolresults.services.mark_service import MarkService
from schoolresults.services.marksheet_service import MarksheetService
from schoolresults.services.spreadsheet_service import SpreadsheetService
from schoolresults.services.storage import Storage
from schoolresults.services.student_service import StudentService
from schoolresults.state.selection_state import SelectionState


@dataclass
class AppState:
    store: Storage
    selection: SelectionState = field(default_factory=SelectionState)
    students: StudentService = field(init=False)
    marks: MarkService = field(init=False)
    marksheets: MarksheetService = field(init=False)
    spreadsheets: SpreadsheetService = field(init=False)

    def __post_init__(self) -> None:
        self.students = StudentService(self.store)
        self.marks = MarkService(self.store)
        self.marksheets = MarksheetService(self.store)
        self.spreadsheets = SpreadsheetService(self.store)

    @classmethod
    def from_settings(cls) -> "AppState":
        return cls(Storage(settings.db_path).open())

    def close(self) -> None:
        self.store.close()
