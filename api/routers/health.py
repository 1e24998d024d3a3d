from fastapi import APIRouter, Depends

from ..deps import get_exporter
from ..schemas import HealthResponse
from src.scrapers.selector_registry import registry_version
from src.scrapers.x.thread import ThreadExporter

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
def health(exporter: ThreadExporter = Depends(get_exporter)):
    """
    Health check liviano: el proceso responde y se informa si hay una exportación activa.
    """
    return {
        "status": "ok",
        "is_scrolling": exporter.is_scrolling,
        "registry_version": registry_version('x'),
    }
