"""Health Route: 생존 확인."""

from typing import Any

from fastapi import APIRouter

api_router = APIRouter()


@api_router.get("/health")
async def health() -> dict[str, Any]:
    """헬스 체크."""
    return {"ok": True}
