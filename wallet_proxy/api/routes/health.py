from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter

from wallet_proxy.schemas.common import HealthStatus


router = APIRouter()


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health", response_model=HealthStatus)
async def health_check():
    return HealthStatus(ok=True, timestamp=_utc_now_iso())


@router.get("/healthz")
async def healthz_check():
    return {"ok": True}
