"""
Chat Route.

POST /api/chat
- body: {"messages": [{"role": "user"|"assistant", "text": ...}]}
- 응답: {"reply": ...} (최대 60자)
"""

from typing import Any

from fastapi import APIRouter, Request

from src.app.services.chat import ChatService
from src.domain.schemas import parse_turns

from .common import guard_upstream, read_json_body

api_router = APIRouter()


def get_chat_service(request: Request) -> ChatService:
    """Request에서 ChatService 가져오기."""
    return request.app.state.chat_service


@api_router.post("/chat")
async def chat(request: Request) -> dict[str, Any]:
    """캐주얼 응답 생성 (업스트림 429 시 고정 응답)."""
    body = await read_json_body(request)
    turns = parse_turns(body)

    service = get_chat_service(request)
    reply = await guard_upstream("chat", service.reply(turns))
    return reply.to_dict()
