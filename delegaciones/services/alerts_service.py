# delegaciones/services/alerts_service.py
from __future__ import annotations
import asyncio
import logging
from collections import deque
from datetime import datetime, timezone
from typing import Deque, List, Literal, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from delegaciones.repositories.requests_repo import DelegationRequestStore

logger = logging.getLogger(__name__)

NotificationLevel = Literal["info", "success", "warning", "error"]


class Notification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    request_id: Optional[str] = Field(default=None, alias="requestId")
    message: str
    level: NotificationLevel = "info"
    at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class Notifier(Protocol):
    def notify(self, event: Notification) -> None: ...


class LoggingNotifier:
    """Notificador por defecto: solo escribe en el log."""

    _LEVELS = {"info": logging.INFO, "success": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}

    def __init__(self, name: str = "delegaciones.alerts"):
        self.log = logging.getLogger(name)

    def notify(self, event: Notification) -> None:
        self.log.log(self._LEVELS[event.level], "%s (request=%s)", event.message, event.request_id or "-")


class MemoryNotifier(LoggingNotifier):
    """Guarda los últimos eventos para que la capa de presentación los consulte."""

    def __init__(self, maxlen: int = 200, name: str = "delegaciones.alerts"):
        super().__init__(name)
        self._events: Deque[Notification] = deque(maxlen=maxlen)

    def notify(self, event: Notification) -> None:
        super().notify(event)
        self._events.append(event)

    def events(self) -> List[Notification]:
        return list(self._events)

    def clear(self) -> None:
        self._events.clear()


def safe_notify(notifier: Optional[Notifier], event: Notification) -> None:
    # fire-and-forget: un fallo del notificador no afecta a la operación ya hecha
    if notifier is None:
        return
    try:
        notifier.notify(event)
    except Exception:
        logger.exception("Error notificando %r", event.message)


def sweep_overdue(store: DelegationRequestStore, notifier: Optional[Notifier],
                  now: Optional[datetime] = None) -> List[str]:
    """Revisa vencidas y avisa de cada una. Solo lectura; devuelve los ids avisados."""
    now = now or datetime.now(timezone.utc)
    ids = []
    for req in store.overdue(as_of=now):
        safe_notify(notifier, Notification(request_id=req.id, message=f"Solicitud {req.id} vencida", level="warning"))
        ids.append(req.id)
    if ids:
        logger.info("sweep_overdue: %d solicitudes vencidas", len(ids))
    return ids


class OverdueSweeper:
    """Barrido periódico de vencidas sobre el event loop; stop() no deja tareas huérfanas."""

    def __init__(self, store: DelegationRequestStore, notifier: Optional[Notifier], interval: float = 60.0):
        if interval <= 0:
            raise ValueError("interval debe ser positivo")
        self.store = store
        self.notifier = notifier
        self.interval = interval
        self._task: Optional[asyncio.Task] = None
        self.runs = 0

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop(), name="overdue-sweeper")
        logger.info("OverdueSweeper iniciado (cada %ss)", self.interval)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("OverdueSweeper detenido")

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                sweep_overdue(self.store, self.notifier)
            except Exception:
                # un barrido fallido no detiene los siguientes
                logger.exception("Error en el barrido de vencidas")
            self.runs += 1
