"""
Avatar Service: style hint → 아바타 이미지 (data URL).

- hint는 비어 있지 않은 문자열이어야 함 (아니면 업스트림 호출 없이 400)
- 업스트림 429도 그대로 openai_error (fallback 없음)
- 응답에 b64 이미지가 없으면 no_image (502)
"""

import json
import logging
from typing import Any

from src.app.providers.base import GenerativeProvider, image_b64
from src.core.config import AvatarConfig
from src.core.logging import mask_sensitive_data
from src.domain.constants import AVATAR_PROMPT_TEMPLATE
from src.domain.errors import ErrorCodes, RelayError, bad_request, openai_error
from src.domain.schemas import AvatarResult

logger = logging.getLogger(__name__)


def validate_hint(body: Any) -> str:
    """
    요청 body에서 hint 추출.

    Raises:
        RelayError: bad_request (hint 없음/빈 문자열/문자열 아님)
    """
    hint = body.get("hint") if isinstance(body, dict) else None
    if not hint or not isinstance(hint, str):
        raise bad_request("hint must be a string")
    return hint


def build_prompt(hint: str) -> str:
    return AVATAR_PROMPT_TEMPLATE.format(hint=hint)


class AvatarService:
    """아바타 생성 서비스."""

    def __init__(
        self,
        provider: GenerativeProvider,
        config: AvatarConfig | None = None,
    ):
        self.provider = provider
        self.config = config or AvatarConfig()

    async def generate(self, hint: str) -> AvatarResult:
        """
        아바타 생성.

        Raises:
            RelayError: openai_error, no_image
            ProviderError: 키 누락/전송 실패
        """
        prompt = build_prompt(hint)
        logger.info(f"[generate-avatar] size={self.config.size} prompt={prompt!r}")

        response = await self.provider.create_image(prompt, size=self.config.size)

        if not response.ok:
            logger.error(
                f"[generate-avatar] OpenAI error {response.status_code}: "
                f"{mask_sensitive_data(response.text)}"
            )
            raise openai_error(response.status_code, response.text)

        try:
            payload = response.json()
        except json.JSONDecodeError:
            payload = {}

        b64 = image_b64(payload)
        if not b64:
            logger.error(
                f"[generate-avatar] no b64_json in response: "
                f"{mask_sensitive_data(response.text[:500])}"
            )
            raise RelayError(ErrorCodes.NO_IMAGE, 502)

        return AvatarResult(b64_png=b64)
