# delegaciones/api/deps.py
from fastapi import Depends, HTTPException, Request
from typing import List

from delegaciones.repositories.instances_repo import InstanceRegistry
from delegaciones.repositories.requests_repo import DelegationRequestStore
from delegaciones.services.alerts_service import MemoryNotifier


def get_store(request: Request) -> DelegationRequestStore:
    return request.app.state.store


def get_registry(request: Request) -> InstanceRegistry:
    return request.app.state.registry


def get_notifier(request: Request) -> MemoryNotifier:
    return request.app.state.notifier


async def get_current_user(request: Request) -> dict:
    # Sin autenticación: un único usuario con rol fijo asignado al arrancar
    return request.app.state.current_user


def require_role(roles: List[str]):
    async def checker(user=Depends(get_current_user)):
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail="No autorizado")
        return user
    return checker
