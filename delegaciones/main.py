# delegaciones/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from delegaciones.api.router import api_router
from delegaciones.core.config import settings
from delegaciones.core.errors import DelegationError, NotFound, ValidationFailed
from delegaciones.core.rate_limit import limiter, rate_limit_handler
from delegaciones.repositories.instances_repo import InstanceRegistry
from delegaciones.repositories.requests_repo import DelegationRequestStore
from delegaciones.services.alerts_service import MemoryNotifier, OverdueSweeper

# ---- Logging ----
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# --- CORS: fusiona .env + defaults locales ---
defaults = {
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
}
CORS_ORIGINS = sorted(set((settings.cors_origins or []) + list(defaults)))


async def delegation_error_handler(request: Request, exc: DelegationError):
    if isinstance(exc, ValidationFailed):
        return JSONResponse(status_code=422, content={"detail": [i.model_dump() for i in exc.issues]})
    status_code = 404 if isinstance(exc, NotFound) else 422
    return JSONResponse(status_code=status_code, content={"detail": exc.message, "code": exc.code})


def create_app(
    store: Optional[DelegationRequestStore] = None,
    registry: Optional[InstanceRegistry] = None,
    notifier: Optional[MemoryNotifier] = None,
    current_user: Optional[dict] = None,
) -> FastAPI:
    """
    Compone la aplicación con un store explícito (estado volátil, se pierde al reiniciar).
    Los tests inyectan su propio store/registro/usuario.
    """
    app = FastAPI(title=settings.app_name, version=settings.app_version)

    # --- IMPORTANTE: CORS primero ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1024)

    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, rate_limit_handler)
    app.add_exception_handler(DelegationError, delegation_error_handler)

    app.state.store = store if store is not None else DelegationRequestStore()
    app.state.registry = registry if registry is not None else InstanceRegistry()
    app.state.notifier = notifier if notifier is not None else MemoryNotifier(maxlen=settings.notifications_buffer)
    app.state.current_user = current_user or {"name": settings.current_user_name, "role": settings.current_user_role}
    app.state.sweeper = OverdueSweeper(app.state.store, app.state.notifier, interval=settings.overdue_check_interval)

    app.include_router(api_router)

    @app.get("/health")
    async def health():
        return {"ok": True}

    @app.get("/ready")
    async def ready():
        return {"ready": True, "sweeper": app.state.sweeper.running}

    @app.on_event("startup")
    async def startup():
        logger.info("Arranque: %d instancias, usuario %s (%s)", len(app.state.registry),
                    app.state.current_user["name"], app.state.current_user["role"])
        app.state.sweeper.start()

    # Al cerrar la sesión no deben quedar timers huérfanos
    @app.on_event("shutdown")
    async def shutdown():
        await app.state.sweeper.stop()

    return app


app = create_app()

# Runner local opcional
if __name__ == "__main__":
    import os
    import uvicorn
    uvicorn.run("delegaciones.main:app", reload=True, host="0.0.0.0", port=int(os.getenv("PORT", 8000)))
