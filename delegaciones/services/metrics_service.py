# delegaciones/services/metrics_service.py
from __future__ import annotations
from datetime import datetime, timezone
from typing import Any, Dict, Literal, Optional, Sequence

from delegaciones.models.common import APPROVED_STATES, DEFAULT_STATUS, STATUS_OPTIONS
from delegaciones.models.instance import Instance
from delegaciones.models.request import DelegationRequest

RiskLevel = Literal["Alto", "Bajo"]

# Umbral de proporción de urgencias "Alta" para marcar riesgo de cuello de botella
BOTTLENECK_THRESHOLD = 0.5

# Sin caché: todo se recalcula en cada lectura. Si hiciera falta, el llamador memoiza.


def compute_stats(requests: Sequence[DelegationRequest], instances: Sequence[Instance],
                  now: Optional[datetime] = None) -> Dict[str, int]:
    now = now or datetime.now(timezone.utc)
    return {
        "totalRequests": len(requests),
        "pending": sum(1 for r in requests if r.status == DEFAULT_STATUS),
        "approved": sum(1 for r in requests if r.status in APPROVED_STATES),
        "activeInstances": sum(1 for i in instances if i.status == "Activa"),
        "overdue": sum(1 for r in requests if r.is_overdue(now)),
    }


def urgency_ratio(requests: Sequence[DelegationRequest]) -> float:
    if not requests:
        return 0.0
    return sum(1 for r in requests if r.urgency == "Alta") / len(requests)


def compute_risk(requests: Sequence[DelegationRequest]) -> Dict[str, RiskLevel]:
    risk: RiskLevel = "Alto" if urgency_ratio(requests) > BOTTLENECK_THRESHOLD else "Bajo"
    return {"bottleneckRisk": risk}


def count_by_status(requests: Sequence[DelegationRequest]) -> Dict[str, int]:
    # en el orden del catálogo, incluidos los estados sin solicitudes
    out = {s.value: 0 for s in STATUS_OPTIONS}
    for r in requests:
        out[r.status] += 1
    return out


def dashboard(requests: Sequence[DelegationRequest], instances: Sequence[Instance],
              now: Optional[datetime] = None) -> Dict[str, Any]:
    return {
        "stats": compute_stats(requests, instances, now=now),
        "risk": compute_risk(requests),
        "urgencyRatio": round(urgency_ratio(requests), 4),
        "byStatus": count_by_status(requests),
    }
