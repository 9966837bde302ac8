from typing import Callable
import flet as ft


def build_not_found_view(route: str, go: Callable[[str], None]) -> ft.View:
    return ft.View(
        route=route,
        controls=[
            ft.AppBar(title=ft.Text("Page not found")),
            ft.Container(
                padding=20,
                content=ft.Column(
                    controls=[
                        ft.Text("404", size=40, weight=ft.FontWeight.BOLD),
                        ft.Text(f"Oops! {route} does not exist."),
                        ft.Button("Return to Home", on_click=lambda _: go("/")),
                    ]
                ),
            ),
        ],
    )
