from datetime import date

import pytest

from delegaciones.core.errors import DateOrderViolation, NotFound, UnknownStatus, ValidationFailed
from delegaciones.services import request_service


def test_submit_scenario(store, registry, notifier, candidate, now):
    """Enviar una solicitud válida la guarda y notifica."""
    doc = request_service.submit(store, registry, candidate, requested_by="Albert Buitrago", notifier=notifier, now=now)
    assert doc.status == "solicitada"
    assert doc.requested_by == "Albert Buitrago"
    dumped = doc.model_dump(mode="json", by_alias=True)
    assert dumped["trazabilidad"] == [{"estado": "solicitada", "fecha": "2025-01-15T12:00:00Z"}]
    assert dumped["instanceId"] == 1
    assert [(e.request_id, e.message) for e in notifier.events()] == [(doc.id, f"Solicitud {doc.id} creada")]


def test_submit_ignores_status_in_candidate(store, registry, candidate):
    """El estado enviado en el candidato se ignora al crear."""
    doc = request_service.submit(store, registry, {**candidate, "status": "publicado"}, requested_by="X")
    assert doc.status == "solicitada"


def test_invalid_submission_writes_nothing(store, registry, notifier, candidate):
    """Un envío inválido no escribe ni notifica."""
    with pytest.raises(ValidationFailed) as exc:
        request_service.submit(store, registry, {**candidate, "fechaVencimiento": "2025-01-01"},
                               requested_by="X", notifier=notifier)
    assert exc.value.codes_for("fechaVencimiento") == ["DateOrderViolation"]
    assert len(store) == 0
    assert notifier.events() == []


def test_update_merges_and_traces(store, registry, notifier, candidate):
    """Reenviar combina los cambios y registra la trazabilidad."""
    doc = request_service.submit(store, registry, candidate, requested_by="X")
    updated = request_service.update(store, registry, doc.id,
                                     {"status": "autorizadaDG", "justification": "  Nueva justificación extensa  "},
                                     notifier=notifier)
    assert updated.justification == "Nueva justificación extensa"
    assert updated.proposed_delegate == "Juan Perez"
    assert [t.estado for t in updated.trazabilidad] == ["solicitada", "autorizadaDG"]
    assert notifier.events()[-1].message == f"Solicitud {doc.id} actualizada"


def test_update_rejects_invalid_fields(store, registry, candidate):
    """Los campos enviados en una actualización se validan."""
    doc = request_service.submit(store, registry, candidate, requested_by="X")
    with pytest.raises(ValidationFailed):
        request_service.update(store, registry, doc.id, {"instanceId": 2, "status": "firmado"})
    assert store.get(doc.id).status == "solicitada"


def test_update_unknown_status(store, registry, candidate):
    """Un estado fuera del catálogo lanza UnknownStatus."""
    doc = request_service.submit(store, registry, candidate, requested_by="X")
    with pytest.raises(UnknownStatus):
        request_service.update(store, registry, doc.id, {"status": "cerrada"})


def test_update_checks_dates_against_stored_record(store, registry, candidate):
    """El orden de fechas se comprueba contra la solicitud guardada."""
    doc = request_service.submit(store, registry, candidate, requested_by="X")
    with pytest.raises(DateOrderViolation):
        request_service.update(store, registry, doc.id, {"fechaVencimiento": "2025-01-05"})
    ok = request_service.update(store, registry, doc.id, {"fechaVencimiento": "2025-06-30"})
    assert ok.fecha_vencimiento == date(2025, 6, 30)


def test_update_missing_request_is_not_found_before_validation(store, registry):
    """Una solicitud inexistente da NotFound antes de validar."""
    with pytest.raises(NotFound):
        request_service.update(store, registry, "req-0", {"proposedDelegate": "X"})


def test_delete_notifies(store, registry, notifier, candidate):
    """Eliminar una solicitud emite una notificación."""
    doc = request_service.submit(store, registry, candidate, requested_by="X")
    request_service.delete(store, doc.id, notifier=notifier)
    assert len(store) == 0
    assert notifier.events()[-1].message == f"Solicitud {doc.id} eliminada"
    with pytest.raises(NotFound):
        request_service.delete(store, doc.id, notifier=notifier)


def test_broken_notifier_does_not_undo_operation(store, registry, candidate):
    """Un notificador roto no deshace la operación ya hecha."""
    class Broken:
        def notify(self, event):
            raise RuntimeError("sin canal")

    doc = request_service.submit(store, registry, candidate, requested_by="X", notifier=Broken())
    assert doc.id in store
