import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

import app.infrastructure.mongo as mongo_mod

router = APIRouter(prefix="", tags=["health"])
logger = logging.getLogger("health")

@router.get("/health", include_in_schema=False)
def health():
    return {"status": "ok"}

@router.get("/health/ready", include_in_schema=False)
async def ready():
    try:
        await mongo_mod.ping()
    except Exception as e:
        logger.warning("MongoDB indisponível: %s", e)
        return JSONResponse(status_code=503, content={"status": "unavailable", "mongodb": "down"})
    return {"status": "ok", "mongodb": "up"}
