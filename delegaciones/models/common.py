# delegaciones/models/common.py
from typing import Dict, List, Literal
from pydantic import BaseModel

from delegaciones.core.errors import UnknownStatus

RequestStatus = Literal["solicitada", "autorizadaDG", "enElaboracion", "firmado", "publicado", "rechazado"]
Urgency = Literal["Normal", "Alta"]
Delegable = Literal["DELEGABLE", "INDELEGABLE"]
InstanceStatus = Literal["Activa", "Inactiva"]

URGENCIES = ("Normal", "Alta")
DEFAULT_STATUS = "solicitada"


class StatusDefinition(BaseModel):
    value: RequestStatus
    label: str
    color: str
    priority: int


STATUS_OPTIONS: List[StatusDefinition] = [
    StatusDefinition(value="solicitada", label="Solicitada", color="blue", priority=1),
    StatusDefinition(value="autorizadaDG", label="Autorizada DG", color="yellow", priority=2),
    StatusDefinition(value="enElaboracion", label="En Elaboración", color="orange", priority=3),
    StatusDefinition(value="firmado", label="Firmado", color="green", priority=4),
    StatusDefinition(value="publicado", label="Publicado", color="green-dark", priority=5),
    StatusDefinition(value="rechazado", label="Rechazado", color="red", priority=0),
]

_BY_VALUE: Dict[str, StatusDefinition] = {s.value: s for s in STATUS_OPTIONS}

APPROVED_STATES = {"firmado", "publicado"}
TERMINAL_STATES = {"publicado", "rechazado"}

# Progresión informativa; update() no la impone (cualquier estado puede seguir a cualquier otro)
LIFECYCLE = ["solicitada", "autorizadaDG", "enElaboracion", "firmado", "publicado"]


def list_statuses() -> List[StatusDefinition]:
    return list(STATUS_OPTIONS)


def ensure_status(value) -> str:
    if not isinstance(value, str) or value not in _BY_VALUE:
        raise UnknownStatus(value)
    return value


def priority_of(status: str) -> int:
    return _BY_VALUE[ensure_status(status)].priority


def label_of(status: str) -> str:
    return _BY_VALUE[ensure_status(status)].label
