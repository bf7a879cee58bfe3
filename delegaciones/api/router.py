# delegaciones/api/router.py
from fastapi import APIRouter
from delegaciones.api.routes import session, instances, requests, dashboard, export

api_router = APIRouter(prefix="/api")
api_router.include_router(session.router, tags=["session"])
api_router.include_router(instances.router, prefix="/instances", tags=["instances"])
api_router.include_router(requests.router, prefix="/requests", tags=["requests"])
api_router.include_router(dashboard.router, tags=["dashboard"])
api_router.include_router(export.router, tags=["export"])
