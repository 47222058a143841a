"""
OpenAI HTTP Provider (REST 직접 호출).

- SDK 대신 httpx: 업스트림 status/body를 가공 없이 클라이언트에 전달해야 함
- 재시도 없음: 실패는 같은 요청에서 바로 보고
- API 키가 없어도 생성은 가능 (프로세스는 떠야 함), 호출 시점에 실패
"""

import logging
from typing import Any

import httpx

from .base import GenerativeProvider, ProviderError, UpstreamResponse

logger = logging.getLogger(__name__)


class OpenAIProvider(GenerativeProvider):
    """
    OpenAI API Provider.

    Usage:
        provider = OpenAIProvider(api_key="sk-...")
        response = await provider.create_chat_completion(messages, temperature=0.8)
    """

    def __init__(
        self,
        api_key: str | None = None,
        organization: str | None = None,
        base_url: str = "https://api.openai.com/v1",
        chat_model: str = "gpt-4o-mini",
        image_model: str = "gpt-image-1",
        timeout: float = 120.0,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Args:
            api_key: OpenAI API 키 (None이면 호출 시 ProviderError)
            organization: OpenAI-Organization 헤더 값 (선택)
            base_url: API base URL (끝의 "/" 무시)
            chat_model: 채팅 완성 모델
            image_model: 이미지 생성 모델
            timeout: 요청 타임아웃 (초)
            client: 외부에서 주입할 httpx 클라이언트 (테스트용)
        """
        self.api_key = api_key
        self.organization = organization
        self.base_url = base_url.rstrip("/")
        self.chat_model = chat_model
        self.image_model = image_model
        self.timeout = timeout
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        """httpx 클라이언트 (lazy init)."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout)
        return self._client

    def _headers(self) -> dict[str, str]:
        if not self.api_key:
            raise ProviderError(
                "OPENAI_KEY_MISSING",
                "OPENAI_API_KEY is not set. Set it in the environment or .env",
            )
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        if self.organization:
            headers["OpenAI-Organization"] = self.organization
        return headers

    async def _post(self, path: str, payload: dict[str, Any]) -> UpstreamResponse:
        headers = self._headers()
        url = f"{self.base_url}{path}"
        try:
            response = await self._get_client().post(url, headers=headers, json=payload)
        except httpx.TimeoutException as e:
            raise ProviderError(
                "UPSTREAM_TIMEOUT", f"OpenAI request timed out: {e}", url=url
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                "UPSTREAM_UNREACHABLE", f"OpenAI request failed: {e}", url=url
            ) from e

        return UpstreamResponse(status_code=response.status_code, text=response.text)

    async def create_chat_completion(
        self,
        messages: list[dict[str, str]],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> UpstreamResponse:
        payload: dict[str, Any] = {
            "model": self.chat_model,
            "messages": messages,
        }
        # 선택적 파라미터 추가
        if temperature is not None:
            payload["temperature"] = temperature
        if max_tokens is not None:
            payload["max_tokens"] = max_tokens

        return await self._post("/chat/completions", payload)

    async def create_image(self, prompt: str, size: str) -> UpstreamResponse:
        # background는 환경에 따라 거부되므로 보내지 않음
        payload = {
            "model": self.image_model,
            "prompt": prompt,
            "size": size,
            "n": 1,
        }
        return await self._post("/images/generations", payload)

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
