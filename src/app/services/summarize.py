"""
Summary Service: 최근 대화 → topics / sentiment / style hint.

흐름:
1. 최근 턴을 "- role: text" 평문 transcript로 변환
2. 고정 지시문과 함께 chat completions 호출
3. 응답 텍스트에서 라벨 줄 파싱 (없으면 기본값)

업스트림 429 → 기본값 응답 (에러 아님)
"""

import json
import logging

from src.app.providers.base import GenerativeProvider, completion_text
from src.core.config import SummaryConfig
from src.core.logging import mask_sensitive_data
from src.domain.constants import (
    DEFAULT_HINT,
    DEFAULT_SENTIMENT,
    DEFAULT_TOPICS,
    SUMMARY_INSTRUCTION,
    SUMMARY_LABEL_HINT,
    SUMMARY_LABEL_SENTIMENT,
    SUMMARY_LABEL_TOPICS,
    SUMMARY_RATE_LIMITED_RAW,
)
from src.domain.errors import openai_error, server_error
from src.domain.schemas import ChatTurn, SummaryResult

logger = logging.getLogger(__name__)


def render_transcript(turns: list[ChatTurn]) -> str:
    """대화 턴 → 평문 transcript (한 줄에 한 턴)."""
    return "\n".join(f"- {turn.role}: {turn.text}" for turn in turns)


def find_label(content: str, label: str) -> str | None:
    """
    라벨로 시작하는 첫 줄의 값 반환.

    대소문자 무시, 줄 앞 공백 무시. 값이 비어 있으면 None.

    Examples:
        find_label("Topics: food, travel", "Topics:") → "food, travel"
    """
    prefix = label.lower()
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.lower().startswith(prefix):
            value = stripped[len(prefix):].strip()
            return value or None
    return None


def parse_summary(content: str) -> SummaryResult:
    """모델 응답 텍스트 → SummaryResult (못 찾은 필드는 기본값)."""
    return SummaryResult(
        topics=find_label(content, SUMMARY_LABEL_TOPICS) or DEFAULT_TOPICS,
        sentiment=find_label(content, SUMMARY_LABEL_SENTIMENT) or DEFAULT_SENTIMENT,
        hint=find_label(content, SUMMARY_LABEL_HINT) or DEFAULT_HINT,
        raw=content,
    )


def rate_limited_summary() -> SummaryResult:
    return SummaryResult(
        topics=DEFAULT_TOPICS,
        sentiment=DEFAULT_SENTIMENT,
        hint=DEFAULT_HINT,
        raw=SUMMARY_RATE_LIMITED_RAW,
    )


class SummaryService:
    """
    대화 요약 서비스.

    Usage:
        service = SummaryService(provider, settings.summary)
        result = await service.summarize(turns)
    """

    def __init__(
        self,
        provider: GenerativeProvider,
        config: SummaryConfig | None = None,
    ):
        self.provider = provider
        self.config = config or SummaryConfig()

    def build_messages(self, turns: list[ChatTurn]) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SUMMARY_INSTRUCTION},
            {"role": "user", "content": render_transcript(turns)},
        ]

    async def summarize(self, turns: list[ChatTurn]) -> SummaryResult:
        """
        대화 요약.

        Raises:
            RelayError: openai_error (업스트림 non-2xx), server_error (응답 JSON 깨짐)
            ProviderError: 키 누락/전송 실패 (라우트에서 server_error로 변환)
        """
        response = await self.provider.create_chat_completion(
            self.build_messages(turns),
            temperature=self.config.temperature,
        )

        if response.rate_limited:
            logger.warning("[summarize] 429 rate-limited, returning defaults")
            return rate_limited_summary()

        if not response.ok:
            logger.error(
                f"[summarize] OpenAI error {response.status_code}: "
                f"{mask_sensitive_data(response.text)}"
            )
            raise openai_error(response.status_code, response.text)

        try:
            payload = response.json()
        except json.JSONDecodeError as e:
            logger.error(f"[summarize] invalid JSON from upstream: {e}")
            raise server_error(e) from e

        return parse_summary(completion_text(payload))
