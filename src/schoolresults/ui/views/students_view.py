from pathlib import Path
from typing import Callable
import flet as ft

from schoolresults.config.settings import settings
from schoolresults.errors import SchoolResultsError
from schoolresults.services.spreadsheet_service import ImportPolicy
from schoolresults.state.app_state import AppState
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


def build_students_view(page: ft.Page, app_state: AppState, go: Callable[[str], None]) -> ft.View:
    status = ft.Text(color=ft.Colors.RED_400)
    list_column = ft.Column(spacing=8)
    import_path = ft.TextField(label="Spreadsheet (.xlsx) to import", width=420)
    policy = ft.Dropdown(
        width=160,
        label="Import mode",
        value=ImportPolicy.MERGE.value,
        options=[
            ft.dropdown.Option(ImportPolicy.MERGE.value, "Merge"),
            ft.dropdown.Option(ImportPolicy.REPLACE.value, "Replace"),
        ],
    )

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def render_students() -> None:
        list_column.controls.clear()
        try:
            students = app_state.students.list_students()
        except SchoolResultsError as exc:
            log.error("Error loading students: %s", exc)
            set_status("Failed to load students")
            page.update()
            return

        if not students:
            list_column.controls.append(ft.Text("No students added yet."))
            page.update()
            return

        def make_delete_handler(student_id: int):
            def handler(_):
                try:
                    app_state.students.delete(student_id)
                    set_status("Student deleted.", is_error=False)
                except SchoolResultsError as exc:
                    set_status(f"Failed to delete student: {exc}")
                render_students()

            return handler

        for student in students:
            list_column.controls.append(
                ft.Row(
                    controls=[
                        ft.Text(str(student.roll), width=60),
                        ft.Text(student.name, width=260),
                        ft.Text(f"Class {student.class_number}", width=90),
                        ft.Text(f"Section {student.section.value}", width=90),
                        ft.TextButton("Delete", on_click=make_delete_handler(student.id)),
                    ]
                )
            )
        page.update()

    def on_export(_):
        try:
            path = app_state.spreadsheets.export_students(Path(settings.export_dir) / "students.xlsx")
            set_status(f"Exported to {path}", is_error=False)
        except SchoolResultsError as exc:
            set_status(f"Export failed: {exc}")
        page.update()

    def on_import(_):
        if not import_path.value:
            set_status("Enter the path of the spreadsheet to import.")
            page.update()
            return
        try:
            summary = app_state.spreadsheets.import_students(import_path.value.strip(), policy.value)
        except SchoolResultsError as exc:
            set_status(f"Import failed: {exc}")
            page.update()
            return
        message = f"Import finished - added: {summary.added}, skipped: {summary.skipped}"
        if summary.conflicts:
            message += f", conflicts: {len(summary.conflicts)}\n" + "\n".join(summary.conflicts)
        set_status(message, is_error=bool(summary.conflicts))
        render_students()

    render_students()

    return ft.View(
        route="/students",
        controls=[
            ft.AppBar(title=ft.Text("Students")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(
                            controls=[
                                ft.Button("Back to Dashboard", on_click=lambda _: go("/")),
                                ft.Button("Add Student", on_click=lambda _: go("/add-student")),
                            ]
                        ),
                        ft.Row(controls=[import_path, policy, ft.Button("Import", on_click=on_import)]),
                        ft.Button("Export to Excel", on_click=on_export),
                        status,
                        ft.Divider(),
                        list_column,
                    ],
                ),
            ),
        ],
    )
