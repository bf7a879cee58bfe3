# delegaciones/api/routes/export.py
from fastapi import APIRouter, Depends
from fastapi.responses import Response

from delegaciones.api.deps import get_notifier, get_registry, get_store, require_role
from delegaciones.core.config import settings
from delegaciones.services.alerts_service import Notification, safe_notify
from delegaciones.services.export_service import dumps, export_filename, snapshot, write_export

router = APIRouter()


@router.get("/export")
async def download_export(store=Depends(get_store), registry=Depends(get_registry), notifier=Depends(get_notifier),
                          _admin=Depends(require_role(["Admin"]))):
    body = dumps(snapshot(registry.list_instances(), store.all()))
    safe_notify(notifier, Notification(message="Datos exportados exitosamente", level="success"))
    return Response(
        content=body,
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@router.post("/export")
async def save_export(store=Depends(get_store), registry=Depends(get_registry), notifier=Depends(get_notifier),
                      _admin=Depends(require_role(["Admin"]))):
    path = write_export(settings.export_dir, registry.list_instances(), store.all())
    safe_notify(notifier, Notification(message="Datos exportados exitosamente", level="success"))
    return {"ok": True, "filename": path.name}
