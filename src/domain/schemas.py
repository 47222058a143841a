"""
Data schemas for the relay.

규칙:
- 요청 body는 관대하게 파싱 (messages가 없거나 깨져도 빈 대화로 처리)
- 응답 키 이름은 프론트엔드 계약 그대로 (dataUrl 등 camelCase 포함)
"""

from dataclasses import dataclass
from typing import Any

from .constants import AVATAR_DATA_URL_PREFIX, MAX_TURNS

# =============================================================================
# Request Schemas
# =============================================================================

@dataclass
class ChatTurn:
    """대화 한 턴."""
    role: str
    text: str

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChatTurn":
        role = data.get("role")
        text = data.get("text")
        return cls(
            role="" if role is None else str(role),
            text="" if text is None else str(text),
        )


def parse_turns(body: Any, limit: int = MAX_TURNS) -> list[ChatTurn]:
    """
    요청 body에서 최근 대화 턴 추출.

    - body가 dict가 아니거나 messages가 list가 아니면 빈 리스트
    - 마지막 limit개를 먼저 자른 뒤, 그중 dict가 아닌 항목은 건너뜀
      (깨진 항목 때문에 더 오래된 턴이 끌려오지 않음)

    Args:
        body: 파싱된 JSON body
        limit: 유지할 최대 턴 수

    Returns:
        ChatTurn 리스트 (원래 순서 유지)
    """
    if not isinstance(body, dict):
        return []

    messages = body.get("messages")
    if not isinstance(messages, list):
        return []

    if limit <= 0:
        return []
    return [ChatTurn.from_dict(m) for m in messages[-limit:] if isinstance(m, dict)]


# =============================================================================
# Response Schemas
# =============================================================================

@dataclass
class SummaryResult:
    """대화 요약 결과. 네 필드 모두 항상 존재."""
    topics: str
    sentiment: str
    hint: str
    raw: str

    def to_dict(self) -> dict[str, str]:
        return {
            "topics": self.topics,
            "sentiment": self.sentiment,
            "hint": self.hint,
            "raw": self.raw,
        }


@dataclass
class ChatReply:
    reply: str

    def to_dict(self) -> dict[str, str]:
        return {"reply": self.reply}


@dataclass
class AvatarResult:
    """생성된 아바타 이미지 (base64 PNG)."""
    b64_png: str

    @property
    def data_url(self) -> str:
        return f"{AVATAR_DATA_URL_PREFIX}{self.b64_png}"

    def to_dict(self) -> dict[str, str]:
        return {"dataUrl": self.data_url}
