import asyncio
import json
import logging
from typing import Any, Dict, List

from fastapi import Request

logger = logging.getLogger(__name__)


class EventManager:
    """
    Administra las colas de mensajes para Server-Sent Events (SSE).
    Patrón Pub/Sub simple en memoria.
    """
    def __init__(self, max_queue: int = 256):
        # Lista de colas activas (clientes escuchando)
        self.listeners: List[asyncio.Queue] = []
        self.max_queue = max_queue

    def open_queue(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_queue)
        self.listeners.append(queue)
        return queue

    def close_queue(self, queue: asyncio.Queue) -> None:
        if queue in self.listeners:
            self.listeners.remove(queue)

    async def subscribe(self, request: Request):
        """
        Generador que entrega mensajes al cliente mientras la conexión siga viva.
        """
        queue = self.open_queue()
        try:
            while True:
                if await request.is_disconnected():
                    break
                try:
                    data = await asyncio.wait_for(queue.get(), timeout=15)
                except asyncio.TimeoutError:
                    # keep-alive para proxies que cortan conexiones inactivas
                    yield ": ping\n\n"
                    continue
                yield f"data: {data}\n\n"
        except asyncio.CancelledError:
            pass
        finally:
            self.close_queue(queue)

    def publish(self, notification: Dict[str, Any]) -> int:
        """
        Envía una notificación a todos los clientes conectados sin bloquear.
        Sin oyentes el mensaje se descarta; una cola llena pierde el mensaje.
        Devuelve cuántas colas lo recibieron.
        """
        try:
            message = json.dumps(notification, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.warning(f"events.publish unserializable type={notification.get('type')} error={e}")
            return 0

        delivered = 0
        # Copia de la lista por si un cliente se desconecta durante la iteración
        for queue in list(self.listeners):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.debug(f"events.publish dropped type={notification.get('type')} reason=queue_full")
        return delivered


# Instancia Global (Singleton)
event_manager = EventManager()
