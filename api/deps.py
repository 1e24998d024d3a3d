from typing import Awaitable, Callable

from src.scrapers.x.thread import ThreadExporter, export_with_browser
from src.utils.event_manager import event_manager

# Una sola exportación activa por proceso
_exporter = ThreadExporter(publish=event_manager.publish)


def get_exporter() -> ThreadExporter:
    return _exporter


def get_browser_runner() -> Callable[..., Awaitable]:
    """Devuelve la corrutina que abre el navegador y exporta el hilo."""
    return export_with_browser
