"""
Chat Service: 캐주얼 60자 응답.

- role은 "assistant" 외 모두 "user"로 강제
- 업스트림 429 → 고정 응답
- 모델이 지시를 어겨도 서버에서 60자로 자름 (안전망)
"""

import json
import logging

from src.app.providers.base import GenerativeProvider, completion_text
from src.core.config import ChatConfig
from src.core.logging import mask_sensitive_data
from src.domain.constants import (
    CHAT_EMPTY_REPLY,
    CHAT_PERSONA,
    CHAT_RATE_LIMITED_REPLY,
    MAX_REPLY_CHARS,
)
from src.domain.errors import openai_error, server_error
from src.domain.schemas import ChatReply, ChatTurn

logger = logging.getLogger(__name__)


def to_upstream_message(turn: ChatTurn) -> dict[str, str]:
    role = "assistant" if turn.role == "assistant" else "user"
    return {"role": role, "content": turn.text}


def clamp_reply(text: str, limit: int = MAX_REPLY_CHARS) -> str:
    """앞뒤 공백 제거 → 빈 문자열이면 기본 응답 → limit자로 자름."""
    reply = text.strip() or CHAT_EMPTY_REPLY
    return reply[:limit]


class ChatService:
    """채팅 응답 서비스."""

    def __init__(
        self,
        provider: GenerativeProvider,
        config: ChatConfig | None = None,
        max_reply_chars: int = MAX_REPLY_CHARS,
    ):
        self.provider = provider
        self.config = config or ChatConfig()
        self.max_reply_chars = max_reply_chars

    def build_messages(self, turns: list[ChatTurn]) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": CHAT_PERSONA},
            *(to_upstream_message(turn) for turn in turns),
        ]

    async def reply(self, turns: list[ChatTurn]) -> ChatReply:
        """
        응답 생성.

        Raises:
            RelayError: openai_error, server_error
            ProviderError: 키 누락/전송 실패
        """
        response = await self.provider.create_chat_completion(
            self.build_messages(turns),
            temperature=self.config.temperature,
            max_tokens=self.config.max_tokens,
        )

        if response.rate_limited:
            logger.warning("[chat] 429 rate-limited, returning filler reply")
            return ChatReply(reply=CHAT_RATE_LIMITED_REPLY)

        if not response.ok:
            logger.error(
                f"[chat] OpenAI error {response.status_code}: "
                f"{mask_sensitive_data(response.text)}"
            )
            raise openai_error(response.status_code, response.text)

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            logger.error(f"[chat] invalid JSON from upstream: {e}")
            raise server_error(e) from e

        return ChatReply(reply=clamp_reply(completion_text(payload), self.max_reply_chars))
