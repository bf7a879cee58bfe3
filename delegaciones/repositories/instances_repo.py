# delegaciones/repositories/instances_repo.py
import logging
from datetime import datetime, timezone
from typing import Dict, Iterable, List, Optional

from delegaciones.core.errors import NotFound
from delegaciones.models.instance import Instance, InstanceUpdate

logger = logging.getLogger(__name__)

# ------------------------
# Catálogo inicial de instancias
# ------------------------
INITIAL_INSTANCES = [
    {
        "id": 1,
        "nombre": "Consejo de Ministros",
        "delegable": "INDELEGABLE",
        "status": "Activa",
        "createdAt": "2025-01-01",
        "dependenciaResponsable": "Dirección General",
        "miembroPrincipal": "Director General",
        "actoAdministrativo": "Resolución 001-2025",
        "periodicidadReuniones": "Cuando se requiera",
        "powerBIIntegration": True,
        "orfeoIntegration": False,
        "metadata": {"lastUpdated": "2025-01-02", "version": "1.0"},
    },
    {
        "id": 2,
        "nombre": "Consejo Superior de Comercio Exterior",
        "delegable": "DELEGABLE",
        "status": "Activa",
        "createdAt": "2025-01-01",
        "dependenciaResponsable": "Subdirección General",
        "miembroPrincipal": "Subdirector General",
        "actoAdministrativo": "Resolución 002-2025",
        "periodicidadReuniones": "Mensual",
        "powerBIIntegration": True,
        "orfeoIntegration": True,
        "metadata": {"lastUpdated": "2025-01-03", "version": "1.1"},
    },
]

DELEGABLE_FILTERS = {"all", "delegable", "indelegable"}


def seed_instances() -> List[Instance]:
    return [Instance.model_validate(d) for d in INITIAL_INSTANCES]


class InstanceRegistry:
    """Catálogo en memoria de instancias; ids estables y nunca reutilizados."""

    def __init__(self, instances: Optional[Iterable[Instance]] = None):
        self._items: Dict[int, Instance] = {}
        for inst in (seed_instances() if instances is None else instances):
            if inst.id in self._items:
                raise ValueError(f"Id de instancia duplicado: {inst.id}")
            self._items[inst.id] = inst

    def __len__(self) -> int:
        return len(self._items)

    def list_instances(self) -> List[Instance]:
        return list(self._items.values())

    def list_delegable(self) -> List[Instance]:
        return [i for i in self._items.values() if i.delegable == "DELEGABLE"]

    def filter_by_delegable(self, kind: str = "all") -> List[Instance]:
        k = (kind or "all").strip().lower()
        if k not in DELEGABLE_FILTERS:
            raise ValueError(f"Filtro no soportado: {kind}")
        if k == "all":
            return self.list_instances()
        return [i for i in self._items.values() if i.delegable == k.upper()]

    def get_by_id(self, instance_id: int) -> Instance:
        inst = self._items.get(instance_id)
        if inst is None:
            raise NotFound("Instancia", instance_id)
        return inst

    def find(self, instance_id: int) -> Optional[Instance]:
        return self._items.get(instance_id)

    def edit(self, instance_id: int, patch: InstanceUpdate) -> Instance:
        current = self.get_by_id(instance_id)
        changes = patch.model_dump(exclude_unset=True, exclude_none=True)
        if not changes:
            return current
        metadata = dict(current.metadata)
        metadata["lastUpdated"] = datetime.now(timezone.utc).date().isoformat()
        updated = current.model_copy(update={**changes, "metadata": metadata})
        self._items[instance_id] = updated
        logger.info("Instancia %s editada: %s", instance_id, sorted(changes))
        return updated
