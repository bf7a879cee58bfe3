# delegaciones/models/request.py
from pydantic import BaseModel, ConfigDict, Field, field_validator
from datetime import date, datetime, timezone
from typing import Optional, List
from delegaciones.models.common import RequestStatus, Urgency


def as_utc(value: datetime) -> datetime:
    # las marcas sin zona se interpretan como UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class TrazaEvent(BaseModel):
    estado: RequestStatus
    fecha: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @field_validator("fecha")
    @classmethod
    def fecha_utc(cls, v: datetime) -> datetime:
        return as_utc(v)


class DelegationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    instance_id: int = Field(alias="instanceId")
    proposed_delegate: str = Field(alias="proposedDelegate")
    justification: str
    fecha_designacion: date = Field(alias="fechaDesignacion")
    fecha_vencimiento: Optional[date] = Field(default=None, alias="fechaVencimiento")
    urgency: Urgency = "Normal"
    status: RequestStatus = "solicitada"
    requested_by: str = Field(alias="requestedBy")
    created_at: datetime = Field(alias="date")
    trazabilidad: List[TrazaEvent] = Field(default_factory=list)
    document: Optional[str] = None

    @field_validator("created_at")
    @classmethod
    def created_at_utc(cls, v: datetime) -> datetime:
        return as_utc(v)

    def is_overdue(self, as_of: datetime) -> bool:
        if self.fecha_vencimiento is None:
            return False
        # una fecha sin hora vence a las 00:00 UTC de ese día
        due = datetime(
            self.fecha_vencimiento.year, self.fecha_vencimiento.month, self.fecha_vencimiento.day,
            tzinfo=timezone.utc,
        )
        return due < as_utc(as_of)


class DelegationRequestCreate(BaseModel):
    """Candidato ya normalizado por el validador."""

    model_config = ConfigDict(populate_by_name=True)

    instance_id: int = Field(alias="instanceId")
    proposed_delegate: str = Field(alias="proposedDelegate")
    justification: str
    fecha_designacion: date = Field(alias="fechaDesignacion")
    fecha_vencimiento: Optional[date] = Field(default=None, alias="fechaVencimiento")
    urgency: Urgency
    document: Optional[str] = None


class DelegationRequestUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    instance_id: Optional[int] = Field(default=None, alias="instanceId")
    proposed_delegate: Optional[str] = Field(default=None, alias="proposedDelegate")
    justification: Optional[str] = None
    fecha_designacion: Optional[date] = Field(default=None, alias="fechaDesignacion")
    fecha_vencimiento: Optional[date] = Field(default=None, alias="fechaVencimiento")
    urgency: Optional[Urgency] = None
    # str y no RequestStatus: el store responde UnknownStatus para valores fuera del catálogo
    status: Optional[str] = None
    document: Optional[str] = None
