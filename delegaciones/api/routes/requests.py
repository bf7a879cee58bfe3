# delegaciones/api/routes/requests.py
from fastapi import APIRouter, Body, Depends, Query, Request
from typing import Any, Dict, Optional

from delegaciones.api.deps import get_current_user, get_notifier, get_registry, get_store
from delegaciones.core.rate_limit import CREATE_LIMIT, limiter
from delegaciones.services import request_service

router = APIRouter()


def _out(doc) -> Dict[str, Any]:
    return doc.model_dump(mode="json", by_alias=True)


@router.post("", status_code=201)
@limiter.limit(CREATE_LIMIT)
async def create_request(
    request: Request,
    payload: dict = Body(...),
    store=Depends(get_store),
    registry=Depends(get_registry),
    notifier=Depends(get_notifier),
    current=Depends(get_current_user),
):
    doc = request_service.submit(store, registry, payload, requested_by=current["name"], notifier=notifier)
    return _out(doc)


@router.get("")
async def list_requests(
    q: Optional[str] = None,
    sort: str = Query("date", pattern="^(date|status)$"),
    store=Depends(get_store),
    _user=Depends(get_current_user),
):
    items = [_out(d) for d in store.list(q=q, sort=sort)]
    return {"items": items, "total": len(items)}


@router.get("/overdue")
async def list_overdue(store=Depends(get_store), _user=Depends(get_current_user)):
    items = [_out(d) for d in store.overdue()]
    return {"items": items, "total": len(items)}


@router.get("/{request_id}")
async def get_request(request_id: str, store=Depends(get_store), _user=Depends(get_current_user)):
    return _out(store.get(request_id))


@router.patch("/{request_id}")
async def update_request(
    request_id: str,
    payload: dict = Body(...),
    store=Depends(get_store),
    registry=Depends(get_registry),
    notifier=Depends(get_notifier),
    _user=Depends(get_current_user),
):
    return _out(request_service.update(store, registry, request_id, payload, notifier=notifier))


@router.delete("/{request_id}")
async def delete_request(request_id: str, store=Depends(get_store), notifier=Depends(get_notifier),
                         _user=Depends(get_current_user)):
    request_service.delete(store, request_id, notifier=notifier)
    return {"ok": True}
