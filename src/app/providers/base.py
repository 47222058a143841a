"""
Generative AI Provider 추상 인터페이스.

원칙:
- Provider는 HTTP 응답을 해석하지 않는다 (status + 원문 body만 반환)
- 429 fallback, 에러 passthrough 판단은 services 담당
- 전송 실패/설정 누락만 ProviderError로 올림
"""

import json
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

# =============================================================================
# Result Data Classes
# =============================================================================

@dataclass
class UpstreamResponse:
    """
    업스트림 HTTP 응답 (원문 그대로).

    status_code와 text는 에러 passthrough에 그대로 사용됨.
    """
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def rate_limited(self) -> bool:
        return self.status_code == 429

    def json(self) -> Any:
        """
        body JSON 파싱.

        Raises:
            json.JSONDecodeError: body가 JSON이 아닐 때
        """
        return json.loads(self.text)


def completion_text(payload: Any) -> str:
    """chat completions 응답에서 choices[0].message.content 추출 (없으면 "")."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return content if isinstance(content, str) else ""


def image_b64(payload: Any) -> str | None:
    """images 응답에서 data[0].b64_json 추출 (없으면 None)."""
    try:
        b64 = payload["data"][0]["b64_json"]
    except (KeyError, IndexError, TypeError):
        return None
    return b64 if isinstance(b64, str) and b64 else None


# =============================================================================
# Provider Exceptions
# =============================================================================

class ProviderError(Exception):
    """Provider 관련 에러 (전송 실패, 키 누락 등)."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        self.code = code
        self.message = message
        self.context = context
        super().__init__(f"[{code}] {message}")


# =============================================================================
# Abstract Provider
# =============================================================================

class GenerativeProvider(ABC):
    """
    생성형 AI Provider 추상 인터페이스.

    역할: 요청 1건 → 업스트림 호출 1건 (재시도 없음)
    """

    @abstractmethod
    async def create_chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> UpstreamResponse:
        """
        채팅 완성 API 호출.

        Args:
            messages: [{"role": ..., "content": ...}] (system 포함)
            temperature: 샘플링 온도 (None이면 API 기본값)
            max_tokens: 최대 출력 토큰 (None이면 제한 없음)

        Returns:
            UpstreamResponse (status 무관)

        Raises:
            ProviderError: 키 누락, 네트워크 오류, 타임아웃
        """
        ...

    @abstractmethod
    async def create_image(self, prompt: str, size: str) -> UpstreamResponse:
        """
        이미지 생성 API 호출 (1장, b64 응답).

        Args:
            prompt: 이미지 프롬프트
            size: "1024x1024" 형식

        Returns:
            UpstreamResponse (status 무관)

        Raises:
            ProviderError: 키 누락, 네트워크 오류, 타임아웃
        """
        ...

    async def aclose(self) -> None:
        """리소스 정리 (HTTP 클라이언트 등). 기본은 no-op."""
        return None
