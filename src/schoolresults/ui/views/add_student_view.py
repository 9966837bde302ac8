from typing import Callable
import flet as ft

from schoolresults.core.models import CLASSES, Section
from schoolresults.errors import SchoolResultsError, ValidationError
from schoolresults.state.app_state import AppState
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


def build_add_student_view(page: ft.Page, app_state: AppState, go: Callable[[str], None]) -> ft.View:
    name = ft.TextField(label="Student Name", width=360)
    roll = ft.TextField(label="Roll Number", width=160, keyboard_type=ft.KeyboardType.NUMBER)
    class_number = ft.Dropdown(
        width=160,
        label="Class",
        options=[ft.dropdown.Option(str(c)) for c in CLASSES],
    )
    section = ft.Dropdown(
        width=160,
        label="Section",
        options=[ft.dropdown.Option(s.value) for s in Section],
    )
    status = ft.Text(color=ft.Colors.RED_400)

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def on_submit(_):
        if not name.value or not roll.value or not class_number.value or not section.value:
            set_status("All fields are required")
            page.update()
            return
        try:
            app_state.students.register(name.value, roll.value, class_number.value, section.value)
        except ValidationError as exc:
            set_status(str(exc))
            page.update()
            return
        except SchoolResultsError as exc:
            log.error("Error adding student: %s", exc)
            set_status("Failed to add student")
            page.update()
            return
        go("/students")

    return ft.View(
        route="/add-student",
        controls=[
            ft.AppBar(title=ft.Text("Add New Student")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    controls=[
                        ft.Row(controls=[ft.Button("Back to Dashboard", on_click=lambda _: go("/"))]),
                        name,
                        roll,
                        ft.Row(controls=[class_number, section]),
                        ft.Button("Add Student", on_click=on_submit),
                        status,
                    ],
                ),
            ),
        ],
    )
