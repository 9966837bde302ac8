from __future__ import annotations

from typing import Callable

import flet as ft

from schoolresults.config.settings import settings
from schoolresults.state.app_state import AppState
from schoolresults.ui.views.add_student_view import build_add_student_view
from schoolresults.ui.views.dashboard_view import build_dashboard_view
from schoolresults.ui.views.mark_entry_view import build_mark_entry_view
from schoolresults.ui.views.marksheet_view import build_marksheet_view
from schoolresults.ui.views.not_found_view import build_not_found_view
from schoolresults.ui.views.students_view import build_students_view
from schoolresults.utils.logger import get_logger

log = get_logger(__name__)

ViewBuilder = Callable[[ft.Page, AppState, Callable[[str], None]], ft.View]

ROUTES: dict[str, ViewBuilder] = {
    "/": build_dashboard_view,
    "/add-student": build_add_student_view,
    "/students": build_students_view,
    "/mark-entry": build_mark_entry_view,
    "/marksheet": build_marksheet_view,
}


def resolve_route(route: str | None) -> str | None:
    """Normalise a route (query string and trailing slash dropped); None when unknown."""
    path = (route or "/").split("?", maxsplit=1)[0]
    if len(path) > 1:
        path = path.rstrip("/")
    return path if path in ROUTES else None


class SchoolResultsApp:
    def __init__(self, page: ft.Page, app_state: AppState) -> None:
        self.page = page
        self.app_state = app_state
        self.page.title = settings.school_name
        self.page.scroll = ft.ScrollMode.AUTO
        self.page.on_route_change = self.on_route_change
        self.page.on_disconnect = lambda _: self.app_state.close()

    def run(self) -> None:
        self.page.go(self.page.route or "/")

    def go(self, route: str) -> None:
        self.page.go(route)

    def on_route_change(self, _: ft.RouteChangeEvent) -> None:
        route = self.page.route
        key = resolve_route(route)
        if key is None:
            log.warning("Unknown route %s", route)
            view = build_not_found_view(route, self.go)
        else:
            view = ROUTES[key](self.page, self.app_state, self.go)
        self.page.views.clear()
        self.page.views.append(view)
        self.page.update()


def main(page: ft.Page) -> None:
    SchoolResultsApp(page, AppState.from_settings()).run()
