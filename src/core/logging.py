"""
Logging setup + 민감 정보 마스킹.

규칙:
- 모듈별 logger: logging.getLogger(__name__)
- API 키/토큰은 로그에 원문으로 남기지 않음 (mask_secret 사용)
"""

import logging
import re

LOG_FORMAT = "[%(asctime)s] %(levelname)s %(name)s - %(message)s"

# 마스킹할 패턴들 (API 키, Bearer 토큰)
SENSITIVE_PATTERNS = [
    (r"(sk-[a-zA-Z0-9_-]{4})[a-zA-Z0-9_-]{16,}", r"\1[MASKED]"),  # OpenAI 스타일
    (r"(Bearer\s+)([a-zA-Z0-9._-]{20,})", r"\1[MASKED_TOKEN]"),
]


def resolve_level(level: str) -> int:
    """레벨 이름 → 숫자 (WARN 같은 별칭 포함). 모르는 이름은 INFO."""
    numeric_level = logging.getLevelName(level.strip().upper())
    if not isinstance(numeric_level, int):
        return logging.INFO
    return numeric_level


def uvicorn_log_level(level: str) -> str:
    """
    uvicorn log_level 인자용 정규 이름.

    Examples:
        uvicorn_log_level("WARN") → "warning"
        uvicorn_log_level("bogus") → "info"
    """
    numeric_level = max(resolve_level(level), logging.DEBUG)  # NOTSET → debug
    return logging.getLevelName(numeric_level).lower()


def configure_logging(level: str = "INFO") -> None:
    """
    루트 logger 설정.

    이미 핸들러가 있으면 (uvicorn, pytest 등) 레벨만 맞춘다.
    """
    numeric_level = resolve_level(level)

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
    root.setLevel(numeric_level)


def mask_secret(value: str | None, visible: int = 4) -> str:
    """
    비밀값 앞부분만 남기고 마스킹.

    Examples:
        mask_secret("sk-abcdef123456") → "sk-a…(15 chars)"
        mask_secret(None) → "(not set)"
    """
    if not value:
        return "(not set)"
    if len(value) <= visible:
        return "*" * len(value)
    return f"{value[:visible]}…({len(value)} chars)"


def mask_sensitive_data(content: str) -> str:
    """로그 문자열에서 API 키/토큰 패턴 마스킹."""
    masked = content
    for pattern, replacement in SENSITIVE_PATTERNS:
        masked = re.sub(pattern, replacement, masked)
    return masked
