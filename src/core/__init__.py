"""
Core layer: 프레임워크 독립 모듈.

역할:
- CORS origin 정책 (정규화 + 매칭)
- Settings 로드 (환경변수 + default.yaml)
- 로깅 설정, 비밀값 마스킹
"""

from .config import Settings, load_config, load_settings
from .logging import (
    configure_logging,
    mask_secret,
    mask_sensitive_data,
    resolve_level,
    uvicorn_log_level,
)
from .origins import OriginPolicy, normalize_origin

__all__ = [
    # origins
    "OriginPolicy",
    "normalize_origin",
    # config
    "Settings",
    "load_config",
    "load_settings",
    # logging
    "configure_logging",
    "mask_secret",
    "mask_sensitive_data",
    "resolve_level",
    "uvicorn_log_level",
]
