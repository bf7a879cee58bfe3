import json
from datetime import datetime, timezone

from delegaciones.models.request import DelegationRequestUpdate
from delegaciones.repositories.instances_repo import InstanceRegistry
from delegaciones.repositories.requests_repo import DelegationRequestStore
from delegaciones.services.export_service import (
    dumps,
    export_filename,
    load_snapshot,
    snapshot,
    write_export,
)


def test_snapshot_keeps_collections_verbatim(store, registry, make_request):
    """El snapshot conserva instancias y solicitudes sin alterarlas."""
    req = make_request(fechaVencimiento="2025-02-01", document="acta.pdf")
    store.update(req.id, DelegationRequestUpdate(status="firmado"))
    doc = snapshot(registry.list_instances(), store.all())
    assert set(doc) == {"instances", "requests"}
    assert [i["nombre"] for i in doc["instances"]] == ["Comité Delegable", "Consejo Indelegable", "Junta Inactiva"]
    exported = doc["requests"][0]
    assert exported["id"] == req.id
    assert exported["instanceId"] == 1
    assert exported["proposedDelegate"] == "Juan Perez"
    assert exported["fechaDesignacion"] == "2025-01-10"
    assert exported["fechaVencimiento"] == "2025-02-01"
    assert exported["status"] == "firmado"
    assert [t["estado"] for t in exported["trazabilidad"]] == ["solicitada", "firmado"]
    assert exported["document"] == "acta.pdf"


def test_snapshot_is_read_only(store, registry, make_request):
    """Tomar un snapshot no modifica el store."""
    make_request()
    before = [r.model_dump() for r in store.all()]
    snapshot(registry.list_instances(), store.all())
    assert [r.model_dump() for r in store.all()] == before


def test_dumps_uses_two_space_indent():
    """El JSON exportado usa sangría de dos espacios."""
    text = dumps({"instances": [], "requests": [{"proposedDelegate": "Ñandú"}]})
    assert text.splitlines()[1] == '  "instances": [],'
    assert "Ñandú" in text


def test_export_filename_has_timestamp():
    """El nombre del archivo lleva la marca de tiempo de exportación."""
    name = export_filename(datetime(2025, 1, 15, 12, 30, 5, 250000, tzinfo=timezone.utc))
    assert name == "dnp_data_2025-01-15T12-30-05.250Z.json"


def test_round_trip(tmp_path, store, registry, make_request):
    """Un archivo exportado reconstruye el mismo estado al cargarse."""
    make_request()
    make_request(urgency="Alta", fechaVencimiento="2025-03-01")
    path = write_export(tmp_path, registry.list_instances(), store.all(),
                        now=datetime(2025, 1, 15, tzinfo=timezone.utc))
    assert path.name.startswith("dnp_data_")
    text = path.read_text(encoding="utf-8")
    assert json.loads(text) == snapshot(registry.list_instances(), store.all())

    instances, requests = load_snapshot(text)
    registry2 = InstanceRegistry(instances)
    store2 = DelegationRequestStore(requests)
    assert registry2.list_instances() == registry.list_instances()
    assert store2.all() == store.all()
