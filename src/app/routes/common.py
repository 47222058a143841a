"""라우트 공통: JSON body 읽기, 예외 → server_error 변환."""

import json
import logging
from collections.abc import Awaitable
from typing import Any, TypeVar

from fastapi import Request

from src.domain.errors import (
    RelayError,
    bad_request,
    payload_too_large,
    server_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def get_max_body_bytes(request: Request) -> int:
    """Request에서 body 크기 상한 가져오기."""
    return request.app.state.settings.max_body_bytes


async def read_json_body(request: Request, max_bytes: int | None = None) -> Any:
    """
    요청 body를 JSON으로 파싱.

    빈 body는 빈 dict로 취급.
    Content-Length가 상한을 넘으면 body를 읽지 않고 거절,
    선언이 없거나 틀려도 스트림을 읽는 도중 상한을 넘으면 거절.

    Args:
        request: 요청
        max_bytes: body 상한 (None이면 Settings.max_body_bytes)

    Raises:
        RelayError: payload_too_large (상한 초과), bad_request (JSON 아님)
    """
    if max_bytes is None:
        max_bytes = get_max_body_bytes(request)

    declared = request.headers.get("content-length", "")
    if declared.isdigit() and int(declared) > max_bytes:
        logger.warning(f"Body rejected: content-length={declared} > {max_bytes}")
        raise payload_too_large(max_bytes)

    raw = bytearray()
    async for chunk in request.stream():
        raw.extend(chunk)
        if len(raw) > max_bytes:
            logger.warning(f"Body rejected: more than {max_bytes} bytes streamed")
            raise payload_too_large(max_bytes)

    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise bad_request(f"invalid JSON body: {e}") from e


async def guard_upstream(tag: str, call: Awaitable[T]) -> T:
    """
    업스트림 호출 실행.

    RelayError는 그대로 전파, 그 외 예외(ProviderError 포함)는 server_error.
    """
    try:
        return await call
    except RelayError:
        raise
    except Exception as e:
        logger.error(f"[{tag}] server error: {e}", exc_info=True)
        raise server_error(e) from e
