"""
Pytest fixtures for the relay tests.

구성:
- Settings: 테스트용 고정 설정 (환경변수/.env 영향 없음)
- Provider: 업스트림 호출 없는 mock provider
- App/Client: create_app()으로 만든 앱 + TestClient
"""

import json
from collections.abc import Callable, Generator
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.app.main import create_app
from src.app.providers.base import GenerativeProvider, UpstreamResponse
from src.core.config import Settings

ALLOWED_ORIGIN = "http://localhost:5500"
ALLOWED_ORIGIN_MIXED_CASE = "https://App.Example.com/"
DISALLOWED_ORIGIN = "https://evil.example.net"

# =============================================================================
# Response Factories
# =============================================================================


def make_completion_response(content: str | None, status_code: int = 200) -> UpstreamResponse:
    """chat completions 응답 생성 (content=None이면 message에 content 없음)."""
    message: dict[str, Any] = {"role": "assistant"}
    if content is not None:
        message["content"] = content
    body = {"id": "chatcmpl-test", "choices": [{"index": 0, "message": message}]}
    return UpstreamResponse(status_code=status_code, text=json.dumps(body))


def make_image_response(b64: str | None, status_code: int = 200) -> UpstreamResponse:
    """images 응답 생성 (b64=None이면 data 비어 있음)."""
    data = [{"b64_json": b64}] if b64 is not None else []
    return UpstreamResponse(status_code=status_code, text=json.dumps({"data": data}))


def make_error_response(status_code: int, message: str = "upstream failed") -> UpstreamResponse:
    body = {"error": {"message": message, "type": "test_error"}}
    return UpstreamResponse(status_code=status_code, text=json.dumps(body))


@pytest.fixture
def completion_response() -> Callable[..., UpstreamResponse]:
    return make_completion_response


@pytest.fixture
def image_response() -> Callable[..., UpstreamResponse]:
    return make_image_response


@pytest.fixture
def error_response() -> Callable[..., UpstreamResponse]:
    return make_error_response


# =============================================================================
# Config Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """테스트용 설정."""
    return Settings(
        openai_api_key="sk-test-key-0123456789abcdef",
        allowed_origins=(ALLOWED_ORIGIN, ALLOWED_ORIGIN_MIXED_CASE),
    )


# =============================================================================
# Provider Fixtures
# =============================================================================


@pytest.fixture
def mock_provider() -> MagicMock:
    """
    업스트림 호출 없는 provider.

    기본 동작: 짧은 채팅 응답, 1장짜리 이미지 응답.
    테스트에서 return_value / side_effect로 덮어쓸 것.
    """
    provider = MagicMock(spec=GenerativeProvider)
    provider.create_chat_completion = AsyncMock(
        return_value=make_completion_response("うん、いいね！")
    )
    provider.create_image = AsyncMock(return_value=make_image_response("iVBORw0KGgo="))
    provider.aclose = AsyncMock(return_value=None)
    return provider


# =============================================================================
# App Fixtures
# =============================================================================


@pytest.fixture
def app(settings: Settings, mock_provider: MagicMock) -> FastAPI:
    """mock provider를 주입한 앱."""
    return create_app(settings, provider=mock_provider)


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    """FastAPI TestClient (lifespan 포함)."""
    with TestClient(app) as client:
        yield client
