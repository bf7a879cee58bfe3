# delegaciones/services/validation_service.py
from __future__ import annotations
import re
from datetime import date, datetime
from typing import Any, Dict, List, Mapping, Optional

from delegaciones.core.errors import ValidationFailed, ValidationIssue
from delegaciones.models.common import URGENCIES
from delegaciones.models.request import DelegationRequestCreate
from delegaciones.repositories.instances_repo import InstanceRegistry

MIN_DELEGATE_LEN = 3
MIN_JUSTIFICATION_LEN = 10

# nombre de campo (alias del formulario) -> atributo
FIELD_NAMES = {
    "instanceId": "instance_id",
    "proposedDelegate": "proposed_delegate",
    "justification": "justification",
    "fechaDesignacion": "fecha_designacion",
    "fechaVencimiento": "fecha_vencimiento",
    "urgency": "urgency",
    "document": "document",
}


def _pick(candidate: Mapping[str, Any], alias: str) -> Any:
    if alias in candidate:
        return candidate[alias]
    return candidate.get(FIELD_NAMES[alias])


def _blank(v: Any) -> bool:
    return v is None or (isinstance(v, str) and not v.strip())


def parse_date(v: Any) -> Optional[date]:
    """Acepta date, datetime o texto ISO ("2025-01-10" o con hora). None si no se puede."""
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    if not isinstance(v, str):
        return None
    s = v.strip()
    try:
        if len(s) > 10:
            return datetime.fromisoformat(s).date()
        return date.fromisoformat(s)
    except ValueError:
        return None


def coerce_instance_id(v: Any) -> Optional[int]:
    if isinstance(v, bool):
        return None
    if isinstance(v, int):
        return v
    if isinstance(v, float) and v.is_integer():
        return int(v)
    if isinstance(v, str) and re.fullmatch(r"-?\d+", v.strip(), re.ASCII):
        return int(v.strip())
    return None


def _check_instance(raw: Any, registry: InstanceRegistry, issues: List[ValidationIssue]) -> Optional[int]:
    if _blank(raw):
        issues.append(ValidationIssue(field="instanceId", code="InvalidInstance", message="Seleccione una instancia"))
        return None
    instance_id = coerce_instance_id(raw)
    if instance_id is None:
        issues.append(ValidationIssue(field="instanceId", code="InvalidInstance", message="Instancia inválida"))
        return None
    inst = registry.find(instance_id)
    if inst is None:
        issues.append(ValidationIssue(field="instanceId", code="InvalidInstance",
                                      message=f"La instancia {instance_id} no existe"))
        return None
    if inst.delegable != "DELEGABLE":
        issues.append(ValidationIssue(field="instanceId", code="InvalidInstance",
                                      message=f"La instancia {instance_id} es indelegable"))
        return None
    return instance_id


def _check_text(field: str, raw: Any, min_len: int, issues: List[ValidationIssue]) -> Optional[str]:
    text = raw.strip() if isinstance(raw, str) else ""
    if len(text) < min_len:
        issues.append(ValidationIssue(field=field, code="TooShort", message=f"Mínimo {min_len} caracteres"))
        return None
    return text


def _check_urgency(raw: Any, issues: List[ValidationIssue]) -> Optional[str]:
    if raw not in URGENCIES:
        issues.append(ValidationIssue(field="urgency", code="InvalidEnum", message="Seleccione urgencia (Normal o Alta)"))
        return None
    return raw


def _check_vencimiento(raw: Any, designacion: Optional[date], issues: List[ValidationIssue]) -> Optional[date]:
    if _blank(raw):
        return None
    vencimiento = parse_date(raw)
    if vencimiento is None:
        issues.append(ValidationIssue(field="fechaVencimiento", code="InvalidDate", message="Fecha inválida"))
        return None
    if designacion is not None and vencimiento < designacion:
        issues.append(ValidationIssue(field="fechaVencimiento", code="DateOrderViolation",
                                      message="Fecha de vencimiento no puede ser anterior a la de designación"))
        return None
    return vencimiento


def collect_issues(candidate: Mapping[str, Any], registry: InstanceRegistry) -> List[ValidationIssue]:
    """Devuelve todos los problemas del candidato (lista vacía si es válido)."""
    issues: List[ValidationIssue] = []
    _normalize(candidate, registry, issues)
    return issues


def _normalize(candidate: Mapping[str, Any], registry: InstanceRegistry,
               issues: List[ValidationIssue]) -> Dict[str, Any]:
    instance_id = _check_instance(_pick(candidate, "instanceId"), registry, issues)
    delegate = _check_text("proposedDelegate", _pick(candidate, "proposedDelegate"), MIN_DELEGATE_LEN, issues)

    designacion = parse_date(_pick(candidate, "fechaDesignacion"))
    if designacion is None:
        issues.append(ValidationIssue(field="fechaDesignacion", code="MissingDate", message="Seleccione una fecha"))
    vencimiento = _check_vencimiento(_pick(candidate, "fechaVencimiento"), designacion, issues)

    urgency = _check_urgency(_pick(candidate, "urgency"), issues)
    justification = _check_text("justification", _pick(candidate, "justification"), MIN_JUSTIFICATION_LEN, issues)

    document = _pick(candidate, "document")
    return {
        "instance_id": instance_id,
        "proposed_delegate": delegate,
        "justification": justification,
        "fecha_designacion": designacion,
        "fecha_vencimiento": vencimiento,
        "urgency": urgency,
        "document": document.strip() if isinstance(document, str) and document.strip() else None,
    }


def validate(candidate: Mapping[str, Any], registry: InstanceRegistry) -> DelegationRequestCreate:
    """Valida y normaliza un candidato; lanza ValidationFailed con todos los problemas."""
    issues: List[ValidationIssue] = []
    data = _normalize(candidate or {}, registry, issues)
    if issues:
        raise ValidationFailed(issues)
    return DelegationRequestCreate(**data)


def validate_patch(patch: Mapping[str, Any], registry: InstanceRegistry) -> Dict[str, Any]:
    """
    Valida solo los campos presentes en un parche de actualización y devuelve
    sus valores normalizados (nombres de atributo). Los campos ya aceptados
    no se revisan; el orden de fechas lo comprueba el store contra el registro
    completo.
    """
    issues: List[ValidationIssue] = []
    out: Dict[str, Any] = {}
    present = {alias for alias, attr in FIELD_NAMES.items() if alias in patch or attr in patch}

    if "instanceId" in present:
        out["instance_id"] = _check_instance(_pick(patch, "instanceId"), registry, issues)
    if "proposedDelegate" in present:
        out["proposed_delegate"] = _check_text("proposedDelegate", _pick(patch, "proposedDelegate"), MIN_DELEGATE_LEN, issues)
    if "justification" in present:
        out["justification"] = _check_text("justification", _pick(patch, "justification"), MIN_JUSTIFICATION_LEN, issues)
    if "urgency" in present:
        out["urgency"] = _check_urgency(_pick(patch, "urgency"), issues)
    if "fechaDesignacion" in present:
        designacion = parse_date(_pick(patch, "fechaDesignacion"))
        if designacion is None:
            issues.append(ValidationIssue(field="fechaDesignacion", code="MissingDate", message="Seleccione una fecha"))
        out["fecha_designacion"] = designacion
    if "fechaVencimiento" in present:
        out["fecha_vencimiento"] = _check_vencimiento(_pick(patch, "fechaVencimiento"), None, issues)
    if "document" in present:
        document = _pick(patch, "document")
        out["document"] = document.strip() if isinstance(document, str) and document.strip() else None

    if issues:
        raise ValidationFailed(issues)
    return out
