# delegaciones/services/export_service.py
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from delegaciones.models.instance import Instance
from delegaciones.models.request import DelegationRequest

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "dnp_data_"
# Formato de los archivos ya exportados: JSON con sangría de 2 espacios
EXPORT_INDENT = 2


def snapshot(instances: Sequence[Instance], requests: Sequence[DelegationRequest]) -> Dict[str, List[Dict[str, Any]]]:
    """Documento con ambas colecciones tal cual (claves camelCase, valores JSON)."""
    return {
        "instances": [i.model_dump(mode="json", by_alias=True) for i in instances],
        "requests": [r.model_dump(mode="json", by_alias=True) for r in requests],
    }


def dumps(doc: Dict[str, Any]) -> str:
    return json.dumps(doc, indent=EXPORT_INDENT, ensure_ascii=False)


def export_filename(now: Optional[datetime] = None) -> str:
    now = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    # ISO sin ':' para que el nombre sea válido en cualquier sistema de archivos
    return f"{EXPORT_PREFIX}{now.strftime('%Y-%m-%dT%H-%M-%S')}.{now.microsecond // 1000:03d}Z.json"


def write_export(directory: Union[str, Path], instances: Sequence[Instance],
                 requests: Sequence[DelegationRequest], now: Optional[datetime] = None) -> Path:
    target = Path(directory)
    target.mkdir(parents=True, exist_ok=True)
    path = target / export_filename(now)
    path.write_text(dumps(snapshot(instances, requests)), encoding="utf-8")
    logger.info("Datos exportados en %s (%d instancias, %d solicitudes)", path, len(instances), len(requests))
    return path


def load_snapshot(doc: Union[str, Dict[str, Any]]) -> Tuple[List[Instance], List[DelegationRequest]]:
    """Reconstruye instancias y solicitudes desde un documento exportado."""
    if isinstance(doc, str):
        doc = json.loads(doc)
    instances = [Instance.model_validate(d) for d in doc.get("instances", [])]
    requests = [DelegationRequest.model_validate(d) for d in doc.get("requests", [])]
    return instances, requests
