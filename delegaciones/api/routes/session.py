# delegaciones/api/routes/session.py
from fastapi import APIRouter, Depends

from delegaciones.api.deps import get_current_user, get_notifier
from delegaciones.models.common import list_statuses

router = APIRouter()


@router.get("/me")
async def me(current=Depends(get_current_user)):
    return current


@router.get("/statuses")
async def statuses(_user=Depends(get_current_user)):
    return [s.model_dump() for s in list_statuses()]


@router.get("/notifications")
async def notifications(notifier=Depends(get_notifier), _user=Depends(get_current_user)):
    return [e.model_dump(mode="json", by_alias=True) for e in notifier.events()]
