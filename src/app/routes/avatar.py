"""
Avatar Route.

POST /api/generate-avatar
- body: {"hint": "..."}
- 응답: {"dataUrl": "data:image/png;base64,..."}
- hint 누락/문자열 아님 → 400 (업스트림 호출 안 함)
"""

from typing import Any

from fastapi import APIRouter, Request

from src.app.services.avatar import AvatarService, validate_hint

from .common import guard_upstream, read_json_body

api_router = APIRouter()


def get_avatar_service(request: Request) -> AvatarService:
    """Request에서 AvatarService 가져오기."""
    return request.app.state.avatar_service


@api_router.post("/generate-avatar")
async def generate_avatar(request: Request) -> dict[str, Any]:
    """아바타 이미지 생성."""
    body = await read_json_body(request)
    hint = validate_hint(body)

    service = get_avatar_service(request)
    result = await guard_upstream("generate-avatar", service.generate(hint))
    return result.to_dict()
