from typing import Callable
import flet as ft

from schoolresults.config.settings import settings
from schoolresults.errors import SchoolResultsError
from schoolresults.state.app_state import AppState
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)

QUICK_ACTIONS = [
    ("Add Student", "/add-student"),
    ("Students", "/students"),
    ("Mark Entry", "/mark-entry"),
    ("Marksheets", "/marksheet"),
]


def build_dashboard_view(page: ft.Page, app_state: AppState, go: Callable[[str], None]) -> ft.View:
    status = ft.Text(color=ft.Colors.RED_400)
    class_rows = ft.Column(spacing=6)
    total_text = ft.Text(size=28, weight=ft.FontWeight.BOLD)

    try:
        stats = app_state.students.dashboard_stats()
        total_text.value = str(stats.total_students)
        if not stats.students_by_class:
            class_rows.controls.append(ft.Text("No students registered yet."))
        for class_number, count in sorted(stats.students_by_class.items()):
            class_rows.controls.append(
                ft.Row(controls=[ft.Text(f"Class {class_number}", width=120), ft.Text(f"{count} students")])
            )
    except SchoolResultsError as exc:
        log.error("Dashboard failed to load: %s", exc)
        total_text.value = "-"
        status.value = "Failed to load dashboard data."

    return ft.View(
        route="/",
        controls=[
            ft.AppBar(title=ft.Text(settings.school_name)),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Text("Dashboard", size=22, weight=ft.FontWeight.BOLD),
                        ft.Row(controls=[ft.Text("Total students:"), total_text]),
                        status,
                        ft.Divider(),
                        ft.Text("Students by Class", size=20, weight=ft.FontWeight.BOLD),
                        class_rows,
                        ft.Divider(),
                        ft.Row(
                            wrap=True,
                            controls=[
                                ft.Button(label, on_click=lambda _, r=route: go(r))
                                for label, route in QUICK_ACTIONS
                            ],
                        ),
                    ],
                ),
            ),
        ],
    )
