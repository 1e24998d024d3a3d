import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class CancellationToken:
    """Cooperative stop flag shared between the caller and a running loop.

    The loop polls ``is_cancelled()`` at its own checkpoints; nothing is
    interrupted preemptively.
    """
    __slots__ = ("_cancelled", "reason")

    def __init__(self):
        self._cancelled = False
        self.reason: Optional[str] = None

    def cancel(self, reason: str = "requested") -> None:
        if not self._cancelled:
            logger.info(f"cancellation requested reason={reason}")
        self._cancelled = True
        self.reason = reason

    def is_cancelled(self) -> bool:
        return self._cancelled

    def __repr__(self):
        return f"CancellationToken(cancelled={self._cancelled})"


def fire_and_forget(fn: Optional[Callable[..., Any]], *args: Any, label: str = "callback") -> None:
    """Invoke a notification callback, logging and dropping any failure."""
    if fn is None:
        return
    try:
        fn(*args)
    except Exception as e:  # noqa
        logger.debug(f"notify dropped label={label} error={e}")
