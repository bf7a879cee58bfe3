import os
from datetime import datetime, timezone

import pytest

# Configura el entorno antes de importar el paquete (settings se lee al importar).
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from delegaciones.models.instance import Instance  # noqa: E402
from delegaciones.repositories.instances_repo import InstanceRegistry  # noqa: E402
from delegaciones.repositories.requests_repo import DelegationRequestStore  # noqa: E402
from delegaciones.services.alerts_service import MemoryNotifier  # noqa: E402
from delegaciones.services.validation_service import validate  # noqa: E402

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def registry():
    return InstanceRegistry([
        Instance(id=1, nombre="Comité Delegable", delegable="DELEGABLE", status="Activa", createdAt="2025-01-01"),
        Instance(id=2, nombre="Consejo Indelegable", delegable="INDELEGABLE", status="Activa", createdAt="2025-01-01"),
        Instance(id=3, nombre="Junta Inactiva", delegable="DELEGABLE", status="Inactiva", createdAt="2025-01-01"),
    ])


@pytest.fixture
def store():
    return DelegationRequestStore()


@pytest.fixture
def notifier():
    return MemoryNotifier(maxlen=50)


@pytest.fixture
def candidate():
    return {
        "instanceId": 1,
        "proposedDelegate": "Juan Perez",
        "justification": "Cobertura temporal por ausencia",
        "fechaDesignacion": "2025-01-10",
        "urgency": "Normal",
    }


@pytest.fixture
def make_request(store, registry, candidate, now):
    """Crea solicitudes válidas en el store; acepta overrides del candidato y 'now'."""
    def _make(when=None, **overrides):
        data = {**candidate, **overrides}
        return store.create(validate(data, registry), requested_by="Tester", now=when or now)
    return _make
