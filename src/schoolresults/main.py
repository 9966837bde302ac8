import flet as ft

from schoolresults.config.settings import settings
from schoolresults.ui.app import main


def run() -> None:
    ft.app(
        target=main,
        view=ft.AppView.WEB_BROWSER if settings.web_mode else ft.AppView.FLET_APP,
        port=settings.port,
    )


if __name__ == "__main__":
    run()
