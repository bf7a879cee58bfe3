# delegaciones/models/instance.py
from pydantic import BaseModel, ConfigDict, Field
from datetime import date
from typing import Optional, Dict, Any
from delegaciones.models.common import Delegable, InstanceStatus


class Instance(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str = Field(alias="nombre")
    delegable: Delegable
    status: InstanceStatus = "Activa"
    created_at: date = Field(alias="createdAt")
    dependencia_responsable: Optional[str] = Field(default=None, alias="dependenciaResponsable")
    miembro_principal: Optional[str] = Field(default=None, alias="miembroPrincipal")
    acto_administrativo: Optional[str] = Field(default=None, alias="actoAdministrativo")
    periodicidad_reuniones: Optional[str] = Field(default=None, alias="periodicidadReuniones")
    power_bi_integration: bool = Field(default=False, alias="powerBIIntegration")
    orfeo_integration: bool = Field(default=False, alias="orfeoIntegration")
    metadata: Dict[str, Any] = Field(default_factory=dict)


class InstanceUpdate(BaseModel):
    # id y createdAt no son editables
    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    name: Optional[str] = Field(default=None, alias="nombre")
    delegable: Optional[Delegable] = None
    status: Optional[InstanceStatus] = None
    dependencia_responsable: Optional[str] = Field(default=None, alias="dependenciaResponsable")
    miembro_principal: Optional[str] = Field(default=None, alias="miembroPrincipal")
    acto_administrativo: Optional[str] = Field(default=None, alias="actoAdministrativo")
    periodicidad_reuniones: Optional[str] = Field(default=None, alias="periodicidadReuniones")
    power_bi_integration: Optional[bool] = Field(default=None, alias="powerBIIntegration")
    orfeo_integration: Optional[bool] = Field(default=None, alias="orfeoIntegration")
