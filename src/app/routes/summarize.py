"""
Summarize Route.

POST /api/summarize
- body: {"messages": [{"role": ..., "text": ...}]}
- 응답: {"topics", "sentiment", "hint", "raw"}
"""

from typing import Any

from fastapi import APIRouter, Request

from src.app.services.summarize import SummaryService
from src.domain.schemas import parse_turns

from .common import guard_upstream, read_json_body

api_router = APIRouter()


def get_summary_service(request: Request) -> SummaryService:
    """Request에서 SummaryService 가져오기."""
    return request.app.state.summary_service


@api_router.post("/summarize")
async def summarize(request: Request) -> dict[str, Any]:
    """최근 대화 요약 (업스트림 429 시 기본값)."""
    body = await read_json_body(request)
    turns = parse_turns(body)

    service = get_summary_service(request)
    result = await guard_upstream("summarize", service.summarize(turns))
    return result.to_dict()
