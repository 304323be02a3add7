from __future__ import annotations

from fastapi import APIRouter

from app.core.config import settings
from app.services.upstream_client import upstream_client

router = APIRouter(prefix="/health", tags=["health"])


@router.get("")
async def health_check():
    services: dict[str, str] = {
        "upstream": "configured" if upstream_client.initialized else "not_configured",
    }

    all_ok = all(v == "configured" for v in services.values())

    return {
        "status": "healthy" if all_ok else "degraded",
        "version": settings.APP_VERSION,
        "services": services,
    }


@router.get("/ready")
async def readiness_probe():
    return {"ready": True}
