from fastapi import APIRouter, Request
from fastapi.responses import StreamingResponse
from src.utils.event_manager import event_manager

router = APIRouter(prefix="/realtime", tags=["Real Time Updates"])

@router.get("/sse/status")
async def sse_status_stream(request: Request):
    """
    Endpoint de Server-Sent Events.
    El cliente se conecta aquí y recibe las notificaciones de la exportación
    (progress, result, early_exit, cancelled, error) como JSON.
    """
    return StreamingResponse(
        event_manager.subscribe(request),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache"},
    )
