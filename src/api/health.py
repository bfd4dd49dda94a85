from __future__ import annotations

from fastapi import APIRouter

from src.core.config import get_settings
from src.shared.response import ResponseEnvelope, build_system_meta


router = APIRouter(tags=["health"])


@router.get("/health")
def health_check() -> ResponseEnvelope[dict]:
    settings = get_settings()
    return ResponseEnvelope(
        data={
            "status": "ok",
            "environment": settings.environment,
            "version": settings.app_version,
        },
        meta=build_system_meta(),
    )


@router.get("/healthz")
def health_check_liveness() -> ResponseEnvelope[dict]:
    return ResponseEnvelope(data={"status": "ok"}, meta=build_system_meta())
