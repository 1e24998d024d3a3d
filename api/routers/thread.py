import logging
from typing import Any, Callable

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status

from ..deps import get_browser_runner, get_exporter
from ..schemas import Ack, PingResponse, ThreadExportRequest, ThreadOutcome
from src.scrapers.x.thread import ExportRun, ThreadExporter
from src.utils.exceptions import RunInProgressError
from src.utils.url import is_platform_url, normalize_input_url

router = APIRouter(prefix="/thread", tags=["thread"])
logger = logging.getLogger(__name__)


async def _run_export(runner: Callable[..., Any], exporter: ThreadExporter, url: str, headless: bool, run: ExportRun):
    try:
        await runner(exporter, url, headless=headless, run=run)
    except Exception as e:
        # the error notification was already published by the exporter
        logger.warning(f"thread.export background_failed url={url} error={e}")


@router.post("/export", response_model=Ack, status_code=status.HTTP_202_ACCEPTED)
async def start_export(
    req: ThreadExportRequest,
    background: BackgroundTasks,
    exporter: ThreadExporter = Depends(get_exporter),
    runner: Callable[..., Any] = Depends(get_browser_runner),
):
    """Inicia la exportación en segundo plano; el progreso llega por /realtime/sse/status."""
    if not is_platform_url('x', req.url):
        raise HTTPException(status_code=400, detail="La URL debe ser de x.com o twitter.com")
    url = normalize_input_url('x', req.url)
    try:
        run = exporter.begin(url)
    except RunInProgressError as e:
        raise HTTPException(status_code=409, detail=e.message)
    background.add_task(_run_export, runner, exporter, url, req.headless, run)
    return Ack()


@router.post("/stop", response_model=Ack)
def stop_export(exporter: ThreadExporter = Depends(get_exporter)):
    exporter.stop()
    return Ack()


@router.get("/ping", response_model=PingResponse)
def ping(exporter: ThreadExporter = Depends(get_exporter)):
    return exporter.ping()


@router.get("/result", response_model=ThreadOutcome)
def last_result(exporter: ThreadExporter = Depends(get_exporter)):
    outcome = exporter.last_outcome
    if outcome is None:
        raise HTTPException(status_code=404, detail="Todavía no hay exportaciones")
    return {**outcome.to_dict(), "early_exit": outcome.early_exit}
