from typing import Callable, Dict, List
import flet as ft

from schoolresults.core.catalog import groups_for, is_grouped_class, subjects_for
from schoolresults.core.grading import marking_scheme_of
from schoolresults.core.models import CLASSES, Exam, Section
from schoolresults.errors import SchoolResultsError, ValidationError
from schoolresults.services.mark_service import EntryRow
from schoolresults.state.app_state import AppState
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


def build_mark_entry_view(page: ft.Page, app_state: AppState, go: Callable[[str], None]) -> ft.View:
    selection = app_state.selection

    exam = ft.Dropdown(width=180, label="Exam", value=selection.exam, options=[ft.dropdown.Option(e.value) for e in Exam])
    class_number = ft.Dropdown(
        width=120,
        label="Class",
        value=str(selection.class_number) if selection.class_number else None,
        options=[ft.dropdown.Option(str(c)) for c in CLASSES],
    )
    section = ft.Dropdown(width=120, label="Section", value=selection.section, options=[ft.dropdown.Option(s.value) for s in Section])
    group = ft.Dropdown(width=200, label="Group", visible=False)
    subject = ft.Dropdown(width=320, label="Subject")
    scheme_text = ft.Text()
    status = ft.Text(color=ft.Colors.RED_400)
    grid = ft.Column(spacing=6)

    rows: List[EntryRow] = []
    fields: Dict[int, Dict[str, ft.TextField]] = {}

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def refresh_subjects() -> None:
        subject.options = []
        subject.value = None
        if not class_number.value:
            return
        cls = int(class_number.value)
        group.visible = is_grouped_class(cls)
        group.options = [ft.dropdown.Option(g.value) for g in groups_for(cls)]
        if not group.visible:
            group.value = None
        if group.visible and not group.value:
            return
        subject.options = [ft.dropdown.Option(s) for s in subjects_for(cls, group.value)]

    def on_class_or_group_change(_):
        refresh_subjects()
        grid.controls.clear()
        page.update()

    def on_subject_change(_):
        if subject.value:
            scheme = marking_scheme_of(subject.value)
            scheme_text.value = (
                f"Written {scheme.written} + MCQ {scheme.mcq} + Practical {scheme.practical} = {scheme.total}"
            )
        page.update()

    def load_students(_):
        if not (exam.value and class_number.value and section.value and subject.value):
            set_status("Select exam, class, section and subject first.")
            page.update()
            return
        selection.exam, selection.class_number = exam.value, int(class_number.value)
        selection.section, selection.group = section.value, group.value
        try:
            rows[:] = app_state.marks.entry_sheet(exam.value, int(class_number.value), section.value, subject.value)
        except SchoolResultsError as exc:
            log.error("Error loading students: %s", exc)
            set_status("Failed to load students")
            page.update()
            return

        scheme = marking_scheme_of(subject.value)
        grid.controls.clear()
        fields.clear()
        if not rows:
            grid.controls.append(ft.Text("No students in this class and section."))
        for row in rows:
            row_fields = {
                "theory": ft.TextField(label=f"Written /{scheme.written}", width=120, value=str(row.theory)),
                "mcq": ft.TextField(label=f"MCQ /{scheme.mcq}", width=110, value=str(row.mcq), disabled=scheme.mcq == 0),
                "practical": ft.TextField(
                    label=f"Practical /{scheme.practical}", width=120, value=str(row.practical), disabled=scheme.practical == 0
                ),
            }
            fields[row.student_id] = row_fields
            grid.controls.append(
                ft.Row(controls=[ft.Text(str(row.roll), width=50), ft.Text(row.student_name, width=220), *row_fields.values()])
            )
        set_status("", is_error=False)
        page.update()

    def on_save(_):
        if not rows:
            set_status("Load students first.")
            page.update()
            return
        # raw field text; the payload rejects anything that is not an integer
        entered = [
            {
                "student_id": row.student_id,
                **{name: field.value for name, field in fields[row.student_id].items()},
            }
            for row in rows
        ]
        try:
            app_state.marks.save_marks(
                exam.value,
                int(class_number.value),
                section.value,
                subject.value,
                entered,
                group=group.value,
            )
        except ValidationError as exc:
            set_status("Validation errors:\n" + str(exc))
            page.update()
            return
        except SchoolResultsError as exc:
            log.error("Error saving marks: %s", exc)
            set_status("Failed to save marks")
            page.update()
            return
        set_status("Marks saved successfully!", is_error=False)
        page.update()

    class_number.on_change = on_class_or_group_change
    group.on_change = on_class_or_group_change
    subject.on_change = on_subject_change
    if selection.group:
        group.value = selection.group
    refresh_subjects()

    return ft.View(
        route="/mark-entry",
        controls=[
            ft.AppBar(title=ft.Text("Mark Entry")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Back to Dashboard", on_click=lambda _: go("/"))]),
                        ft.Row(wrap=True, controls=[exam, class_number, section, group, subject]),
                        scheme_text,
                        ft.Button("Load Students", on_click=load_students),
                        ft.Divider(),
                        grid,
                        ft.Button("Save Marks", on_click=on_save),
                        status,
                    ],
                ),
            ),
        ],
    )
