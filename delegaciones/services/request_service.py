# delegaciones/services/request_service.py
import logging
from datetime import datetime
from typing import Any, Mapping, Optional

from delegaciones.models.common import ensure_status
from delegaciones.models.request import DelegationRequest, DelegationRequestUpdate
from delegaciones.repositories.instances_repo import InstanceRegistry
from delegaciones.repositories.requests_repo import DelegationRequestStore
from delegaciones.services.alerts_service import Notification, Notifier, safe_notify
from delegaciones.services.validation_service import validate, validate_patch

logger = logging.getLogger(__name__)


def submit(store: DelegationRequestStore, registry: InstanceRegistry, candidate: Mapping[str, Any],
           requested_by: str, notifier: Optional[Notifier] = None,
           now: Optional[datetime] = None) -> DelegationRequest:
    """Valida el candidato y lo da de alta como 'solicitada'. Nada se escribe si hay errores."""
    data = validate(candidate, registry)
    doc = store.create(data, requested_by=requested_by, now=now)
    logger.info("Solicitud %s creada por %s (instancia=%s, urgencia=%s)",
                doc.id, requested_by, doc.instance_id, doc.urgency)
    safe_notify(notifier, Notification(request_id=doc.id, message=f"Solicitud {doc.id} creada", level="success"))
    return doc


def update(store: DelegationRequestStore, registry: InstanceRegistry, request_id: str,
           patch: Mapping[str, Any], notifier: Optional[Notifier] = None,
           now: Optional[datetime] = None) -> DelegationRequest:
    """
    Re-envío de una solicitud: fusiona los campos presentes en `patch`.
    Solo se validan los campos enviados; el store revisa el orden de fechas
    y el estado contra el catálogo.
    """
    # 404 antes que 422, como el formulario de edición
    store.get(request_id)
    changes = validate_patch(patch, registry)
    status = patch.get("status")
    if status is not None:
        changes["status"] = ensure_status(status)
    doc = store.update(request_id, DelegationRequestUpdate(**changes), now=now)
    logger.info("Solicitud %s actualizada (%s)", request_id, ", ".join(sorted(changes)) or "sin cambios")
    safe_notify(notifier, Notification(request_id=request_id, message=f"Solicitud {request_id} actualizada", level="success"))
    return doc


def delete(store: DelegationRequestStore, request_id: str, notifier: Optional[Notifier] = None) -> None:
    store.delete(request_id)
    logger.info("Solicitud %s eliminada", request_id)
    safe_notify(notifier, Notification(request_id=request_id, message=f"Solicitud {request_id} eliminada", level="success"))

