"""
Settings: 환경변수 + default.yaml → 불변 Settings 객체.

우선순위:
- 비밀값/배포 값 (API 키, origin 목록, 포트): 환경변수 (.env 지원)
- 튜닝 값 (모델, 온도, rate limit, CORS 헤더): default.yaml
- 둘 다 없으면 코드 기본값

Settings는 앱 시작 시 한 번 생성하고 app.state로 전달한다.
모듈 전역 상태로 두지 말 것.
"""

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .origins import OriginPolicy

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "default.yaml"

DEFAULT_ALLOWED_ORIGIN = "http://localhost:5500"
DEFAULT_PORT = 8787
DEFAULT_HOST = "0.0.0.0"
DEFAULT_MAX_BODY_BYTES = 1024 * 1024  # 1 MiB

_TRUTHY = {"1", "true", "yes", "on"}


# =============================================================================
# Config Sections
# =============================================================================

@dataclass(frozen=True)
class UpstreamConfig:
    """OpenAI HTTP API 호출 설정."""
    base_url: str = "https://api.openai.com/v1"
    timeout: float = 120.0
    chat_model: str = "gpt-4o-mini"
    image_model: str = "gpt-image-1"


@dataclass(frozen=True)
class ChatConfig:
    temperature: float = 0.8
    max_tokens: int = 80  # 일본어 60자 기준


@dataclass(frozen=True)
class SummaryConfig:
    temperature: float = 0.4


@dataclass(frozen=True)
class AvatarConfig:
    size: str = "1024x1024"  # 반드시 "WxH" 문자열


@dataclass(frozen=True)
class RateLimitConfig:
    """고정 윈도우 rate limit (/api/* 전체, 클라이언트 주소 기준)."""
    enabled: bool = True
    requests: int = 30
    window_seconds: int = 60

    @property
    def limit_string(self) -> str:
        """slowapi/limits 형식 (예: "30 per 60 seconds")."""
        return f"{self.requests} per {self.window_seconds} seconds"


@dataclass(frozen=True)
class CORSConfig:
    allow_methods: tuple[str, ...] = ("GET", "POST", "OPTIONS")
    allow_headers: tuple[str, ...] = ("Content-Type", "Authorization")
    max_age: int = 600


@dataclass(frozen=True)
class Settings:
    """프로세스 전체 설정 (읽기 전용)."""
    openai_api_key: str | None = None
    openai_org_id: str | None = None
    allowed_origins: tuple[str, ...] = (DEFAULT_ALLOWED_ORIGIN,)
    cors_allow_all: bool = False
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"
    security_headers: bool = True
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES

    upstream: UpstreamConfig = field(default_factory=UpstreamConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)
    summary: SummaryConfig = field(default_factory=SummaryConfig)
    avatar: AvatarConfig = field(default_factory=AvatarConfig)
    rate_limit: RateLimitConfig = field(default_factory=RateLimitConfig)
    cors: CORSConfig = field(default_factory=CORSConfig)

    def origin_policy(self) -> OriginPolicy:
        return OriginPolicy.from_origins(
            self.allowed_origins, allow_all=self.cors_allow_all
        )


# =============================================================================
# Loading
# =============================================================================


def load_config(config_path: Path | None = None) -> dict[str, Any]:
    """YAML 설정 파일 로드. 파일이 없으면 빈 dict."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Config root must be a mapping: {config_path}")
    return data


def load_settings(
    env: Mapping[str, str] | None = None,
    config_path: Path | None = None,
) -> Settings:
    """
    Settings 생성.

    Args:
        env: 환경변수 매핑 (None이면 .env 로드 후 os.environ 사용)
        config_path: YAML 경로 (None이면 RELAY_CONFIG 또는 default.yaml)

    Returns:
        Settings

    Raises:
        ValueError: PORT 등 숫자 값이 잘못된 경우
    """
    if env is None:
        # 실제 환경변수가 .env보다 우선
        load_dotenv(override=False)
        env = os.environ

    if config_path is None and env.get("RELAY_CONFIG"):
        config_path = Path(env["RELAY_CONFIG"])

    config = load_config(config_path)

    allowed_raw = env.get("ALLOWED_ORIGIN") or env.get("ALLOWED_ORIGINS")
    if allowed_raw is None:
        allowed_raw = DEFAULT_ALLOWED_ORIGIN
    allowed = tuple(o.strip() for o in allowed_raw.split(",") if o.strip())

    ai = config.get("ai") or {}
    server = config.get("server") or {}

    return Settings(
        openai_api_key=env.get("OPENAI_API_KEY") or None,
        openai_org_id=env.get("ORG_ID") or env.get("OPENAI_ORG_ID") or None,
        allowed_origins=allowed,
        cors_allow_all=_as_bool(env.get("CORS_ALLOW_ALL"), False),
        host=env.get("HOST") or server.get("host", DEFAULT_HOST),
        port=_as_int(env.get("PORT"), int(server.get("port", DEFAULT_PORT)), "PORT"),
        log_level=(env.get("LOG_LEVEL") or server.get("log_level", "INFO")).upper(),
        security_headers=bool(server.get("security_headers", True)),
        max_body_bytes=int(server.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES)),
        upstream=_section(UpstreamConfig, ai.get("upstream")),
        chat=_section(ChatConfig, ai.get("chat")),
        summary=_section(SummaryConfig, ai.get("summary")),
        avatar=_section(AvatarConfig, ai.get("avatar")),
        rate_limit=_section(RateLimitConfig, config.get("rate_limit")),
        cors=_cors_section(config.get("cors")),
    )


def _section(cls: type, data: dict[str, Any] | None) -> Any:
    """YAML 섹션 → dataclass. 모르는 키는 경고 후 무시."""
    if not data:
        return cls()
    known = set(cls.__dataclass_fields__)
    unknown = set(data) - known
    if unknown:
        logger.warning(f"Ignoring unknown {cls.__name__} keys: {sorted(unknown)}")
    return cls(**{k: v for k, v in data.items() if k in known})


def _cors_section(data: dict[str, Any] | None) -> CORSConfig:
    if not data:
        return CORSConfig()
    defaults = CORSConfig()
    return CORSConfig(
        allow_methods=tuple(data.get("allow_methods", defaults.allow_methods)),
        allow_headers=tuple(data.get("allow_headers", defaults.allow_headers)),
        max_age=int(data.get("max_age", defaults.max_age)),
    )


def _as_bool(value: str | None, default: bool) -> bool:
    if value is None or value == "":
        return default
    return value.strip().lower() in _TRUTHY


def _as_int(value: str | None, default: int, name: str) -> int:
    if value is None or value.strip() == "":
        return default
    try:
        return int(value)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {value!r}") from e
