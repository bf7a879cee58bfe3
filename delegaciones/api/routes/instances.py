# delegaciones/api/routes/instances.py
from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from delegaciones.api.deps import get_current_user, get_registry, require_role
from delegaciones.models.instance import InstanceUpdate

router = APIRouter()


def _out(inst):
    return inst.model_dump(mode="json", by_alias=True)


@router.get("")
async def list_instances(
    delegable: str = Query("all", description="all | delegable | indelegable"),
    registry=Depends(get_registry),
    _admin=Depends(require_role(["Admin"])),
):
    try:
        items = registry.filter_by_delegable(delegable)
    except ValueError as e:
        raise HTTPException(422, str(e))
    return [_out(i) for i in items]


# El formulario de solicitudes lo usa cualquier rol
@router.get("/delegable")
async def list_delegable(registry=Depends(get_registry), _user=Depends(get_current_user)):
    return [_out(i) for i in registry.list_delegable()]


@router.get("/{instance_id}")
async def get_instance(instance_id: int, registry=Depends(get_registry), _admin=Depends(require_role(["Admin"]))):
    return _out(registry.get_by_id(instance_id))


@router.patch("/{instance_id}")
async def edit_instance(instance_id: int, payload: dict, registry=Depends(get_registry),
                        _admin=Depends(require_role(["Admin"]))):
    try:
        patch = InstanceUpdate.model_validate(payload or {})
    except ValidationError as e:
        raise HTTPException(422, e.errors(include_url=False, include_context=False))
    return _out(registry.edit(instance_id, patch))
