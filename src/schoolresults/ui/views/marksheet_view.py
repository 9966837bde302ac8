from pathlib import Path
from typing import Callable, List
import flet as ft

from schoolresults.config.settings import settings
from schoolresults.core.models import CLASSES, Exam, Marksheet, Section
from schoolresults.errors import NotFoundError, SchoolResultsError
from schoolresults.services.transcript_renderer import (
    marksheet_filename,
    render_marksheet,
    render_section,
    section_filename,
)
from schoolresults.state.app_state import AppState
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)


def _marksheet_card(sheet: Marksheet) -> ft.Card:
    lines = [
        ft.Text(f"{sheet.student.name} (Roll {sheet.student.roll})", weight=ft.FontWeight.BOLD),
        *[
            ft.Text(f"{m.subject}: {m.theory}/{m.mcq}/{m.practical} = {m.total} • {m.grade} • GP {m.grade_point:.1f}")
            for m in sheet.marks
        ],
        ft.Text(
            f"GPA: {sheet.display_gpa:.2f} | Result: {sheet.result}"
            + (f" | Rank: {sheet.section_rank} of {sheet.total_students_in_section}" if sheet.section_rank else "")
        ),
    ]
    return ft.Card(content=ft.Container(padding=12, content=ft.Column(controls=lines)))


def build_marksheet_view(page: ft.Page, app_state: AppState, go: Callable[[str], None]) -> ft.View:
    selection = app_state.selection

    mode = ft.Dropdown(
        width=160,
        label="Mode",
        value="individual",
        options=[ft.dropdown.Option("individual", "Individual"), ft.dropdown.Option("section", "Whole section")],
    )
    exam = ft.Dropdown(width=180, label="Exam", value=selection.exam, options=[ft.dropdown.Option(e.value) for e in Exam])
    class_number = ft.Dropdown(
        width=120,
        label="Class",
        value=str(selection.class_number) if selection.class_number else None,
        options=[ft.dropdown.Option(str(c)) for c in CLASSES],
    )
    section = ft.Dropdown(width=120, label="Section", value=selection.section, options=[ft.dropdown.Option(s.value) for s in Section])
    roll = ft.TextField(label="Roll", width=100, keyboard_type=ft.KeyboardType.NUMBER)
    status = ft.Text(color=ft.Colors.RED_400)
    results = ft.Column(spacing=8)

    loaded: List[Marksheet] = []

    def set_status(message: str, is_error: bool = True) -> None:
        status.value = message
        status.color = ft.Colors.RED_400 if is_error else ft.Colors.GREEN_400

    def on_mode_change(_):
        roll.visible = mode.value == "individual"
        page.update()

    def on_load(_):
        loaded.clear()
        results.controls.clear()
        if not (exam.value and class_number.value and section.value):
            set_status("Select exam, class and section first.")
            page.update()
            return
        selection.exam, selection.class_number, selection.section = exam.value, int(class_number.value), section.value
        try:
            if mode.value == "individual":
                if not roll.value or not roll.value.strip().isdigit():
                    set_status("Enter a roll number.")
                    page.update()
                    return
                loaded.append(
                    app_state.marksheets.individual(int(class_number.value), section.value, int(roll.value), exam.value)
                )
            else:
                loaded.extend(app_state.marksheets.section(int(class_number.value), section.value, exam.value))
        except NotFoundError as exc:
            set_status(str(exc))
            page.update()
            return
        except SchoolResultsError as exc:
            log.error("Error loading marksheet: %s", exc)
            set_status("Failed to load marksheet")
            page.update()
            return

        if not loaded:
            results.controls.append(ft.Text("No students in this class and section."))
        for sheet in loaded:
            results.controls.append(_marksheet_card(sheet))
        set_status("", is_error=False)
        page.update()

    def on_pdf(_):
        if not loaded:
            set_status("Load a marksheet first.")
            page.update()
            return
        try:
            if mode.value == "individual":
                target = Path(settings.export_dir) / marksheet_filename(loaded[0])
                render_marksheet(loaded[0], target)
            else:
                target = Path(settings.export_dir) / section_filename(int(class_number.value), section.value, exam.value)
                render_section(loaded, target)
            set_status(f"PDF generated successfully: {target}", is_error=False)
        except (SchoolResultsError, OSError) as exc:
            log.error("Error generating PDF: %s", exc)
            set_status("Failed to generate PDF")
        page.update()

    mode.on_change = on_mode_change

    return ft.View(
        route="/marksheet",
        controls=[
            ft.AppBar(title=ft.Text("Marksheet Generator")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    scroll=ft.ScrollMode.AUTO,
                    controls=[
                        ft.Row(controls=[ft.Button("Back to Dashboard", on_click=lambda _: go("/"))]),
                        ft.Row(wrap=True, controls=[mode, exam, class_number, section, roll]),
                        ft.Row(
                            controls=[
                                ft.Button("Load Marksheet", on_click=on_load),
                                ft.Button("Download PDF", on_click=on_pdf),
                            ]
                        ),
                        status,
                        ft.Divider(),
                        results,
                    ],
                ),
            ),
        ],
    )
