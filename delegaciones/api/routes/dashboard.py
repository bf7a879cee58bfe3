# delegaciones/api/routes/dashboard.py
from fastapi import APIRouter, Depends

from delegaciones.api.deps import get_current_user, get_registry, get_store
from delegaciones.services.metrics_service import compute_risk, compute_stats, dashboard

router = APIRouter()


@router.get("/dashboard")
async def dashboard_summary(store=Depends(get_store), registry=Depends(get_registry), _user=Depends(get_current_user)):
    return dashboard(store.all(), registry.list_instances())


@router.get("/dashboard/stats")
async def dashboard_stats(store=Depends(get_store), registry=Depends(get_registry), _user=Depends(get_current_user)):
    return compute_stats(store.all(), registry.list_instances())


@router.get("/dashboard/risk")
async def dashboard_risk(store=Depends(get_store), _user=Depends(get_current_user)):
    return compute_risk(store.all())
