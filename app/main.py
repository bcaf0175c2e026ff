# app/main.py
from contextlib import asynccontextmanager
from fastapi import APIRouter, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app import auth as core_auth
from app.config import settings
from app.core.errors import register_error_handlers
from app.core.logging import setup_logging
from app.core.metrics import router_metrics
from app.infrastructure.clients.auth_client import AuthClient
import app.infrastructure.mongo as mongo_mod
from app.middleware.observability import ObservabilityMiddleware
from app.routers import health as health_router
from app.routers import videos as videos_router


router_debug = APIRouter(prefix="/debug", tags=["debug"])

@router_debug.get("/auth-status")
async def auth_status():
    client = core_auth.get_auth_client()
    info = {
        "initialized": client is not None,
        "base_url": getattr(client, "_base_url", None),
        "timeout": getattr(client, "_timeout", None),
        "cache_ttl": getattr(client, "_cache_ttl", None),
    }
    return info



@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    setup_logging(settings.log_level)
    mongo_mod.connect()

    client = AuthClient(
        base_url=settings.auth_base_url,
        timeout_seconds=settings.auth_timeout_seconds,
        cache_ttl=settings.auth_cache_ttl_seconds,
    )
    core_auth.set_auth_client(client)
    app.state.auth_client = client

    try:
        yield
    finally:
        await client.aclose()
        core_auth.set_auth_client(None)
        mongo_mod.close()


# --- App ---
app = FastAPI(
    title="Video Catalog Service",
    version="0.1.0",
    lifespan=lifespan,
    swagger_ui_parameters={"persistAuthorization": True},
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)

# Routers
app.include_router(videos_router.router)
app.include_router(router_debug)
app.include_router(health_router.router)
app.include_router(router_metrics)
