# delegaciones/repositories/requests_repo.py
import itertools
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from delegaciones.core.errors import DateOrderViolation, NotFound
from delegaciones.models.common import DEFAULT_STATUS, ensure_status, priority_of
from delegaciones.models.request import (
    DelegationRequest,
    DelegationRequestCreate,
    DelegationRequestUpdate,
    TrazaEvent,
    as_utc,
)

logger = logging.getLogger(__name__)

SORT_FIELDS = {"date", "status"}

# Contador de proceso: dos solicitudes creadas en el mismo milisegundo no colisionan
_seq = itertools.count(1)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_request_id(now: datetime) -> str:
    return f"req-{int(now.timestamp() * 1000)}-{next(_seq)}"


class DelegationRequestStore:
    """
    Colección en memoria de solicitudes de delegación.

    No es thread-safe: quien la compone debe serializar el acceso
    (en la API basta con el event loop, todas las operaciones son síncronas).
    """

    def __init__(self, requests: Optional[Iterable[DelegationRequest]] = None):
        self._items: Dict[str, DelegationRequest] = {}
        if requests is not None:
            self.load(requests)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, request_id: str) -> bool:
        return request_id in self._items

    # --- lectura ---
    def get(self, request_id: str) -> DelegationRequest:
        doc = self._items.get(request_id)
        if doc is None:
            raise NotFound("Solicitud", request_id)
        return doc

    def all(self) -> List[DelegationRequest]:
        return list(self._items.values())

    def list(self, q: Optional[str] = None, sort: Optional[str] = None) -> List[DelegationRequest]:
        items = self.all()
        term = (q or "").strip().lower()
        if term:
            items = [r for r in items if term in r.proposed_delegate.lower()]
        if sort is None:
            return items
        if sort not in SORT_FIELDS:
            raise ValueError(f"Orden no soportado: {sort}")
        # sorted(reverse=True) es estable: los empates conservan el orden previo
        if sort == "date":
            return sorted(items, key=lambda r: r.created_at, reverse=True)
        return sorted(items, key=lambda r: priority_of(r.status), reverse=True)

    def overdue(self, as_of: Optional[datetime] = None) -> List[DelegationRequest]:
        as_of = as_of or _utcnow()
        return [r for r in self._items.values() if r.is_overdue(as_of)]

    # --- escritura ---
    def create(self, candidate: DelegationRequestCreate, requested_by: str,
               now: Optional[datetime] = None) -> DelegationRequest:
        now = as_utc(now or _utcnow())
        doc = DelegationRequest(
            id=new_request_id(now),
            status=DEFAULT_STATUS,
            requested_by=requested_by,
            created_at=now,
            trazabilidad=[TrazaEvent(estado=DEFAULT_STATUS, fecha=now)],
            **candidate.model_dump(),
        )
        self._items[doc.id] = doc
        logger.debug("Solicitud %s creada para instancia %s", doc.id, doc.instance_id)
        return doc

    def update(self, request_id: str, patch: DelegationRequestUpdate,
               now: Optional[datetime] = None) -> DelegationRequest:
        current = self.get(request_id)
        now = as_utc(now or _utcnow())

        changes = patch.model_dump(exclude_unset=True)
        # None solo tiene sentido para borrar la fecha de vencimiento
        changes = {k: v for k, v in changes.items() if v is not None or k == "fecha_vencimiento"}

        if "status" in changes:
            ensure_status(changes["status"])

        if "fecha_designacion" in changes or "fecha_vencimiento" in changes:
            designacion = changes.get("fecha_designacion", current.fecha_designacion)
            vencimiento = changes.get("fecha_vencimiento", current.fecha_vencimiento)
            if vencimiento is not None and vencimiento < designacion:
                raise DateOrderViolation()

        new_status = changes.get("status", current.status)
        if "status" in changes or new_status != current.status:
            changes["trazabilidad"] = [*current.trazabilidad, TrazaEvent(estado=new_status, fecha=now)]

        updated = current.model_copy(update=changes)
        self._items[request_id] = updated
        if new_status != current.status:
            logger.debug("Solicitud %s: %s → %s", request_id, current.status, new_status)
        return updated

    def delete(self, request_id: str) -> None:
        if request_id not in self._items:
            raise NotFound("Solicitud", request_id)
        del self._items[request_id]

    def load(self, requests: Iterable[DelegationRequest]) -> None:
        """Reemplaza el contenido (reconstrucción desde un snapshot)."""
        items: Dict[str, DelegationRequest] = {}
        for r in requests:
            ensure_status(r.status)
            if r.id in items:
                raise ValueError(f"Id de solicitud duplicado: {r.id}")
            items[r.id] = r
        self._items = items
