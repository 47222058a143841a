"""
Rate limiting (slowapi).

고정 윈도우, 클라이언트 주소 기준, /api/* 전체가 카운터 하나를 공유.
- 카운터 저장소/전략은 slowapi Limiter가 관리 (memory://, fixed-window)
- 라우트 매칭 대신 경로 prefix로 판정 (include_router 방식과 무관하게 동작)
- Limiter는 앱마다 새로 만든다 (카운터는 인메모리, 앱 수명과 동일)
"""

import logging

from limits import RateLimitItem, parse
from slowapi import Limiter
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.types import ASGIApp

from src.core.config import RateLimitConfig
from src.domain.errors import ErrorCodes, RelayError

logger = logging.getLogger(__name__)

API_PREFIX = "/api/"
API_SCOPE = "api"


def build_limiter(config: RateLimitConfig) -> Limiter:
    return Limiter(
        key_func=get_remote_address,
        storage_uri="memory://",
        strategy="fixed-window",
        enabled=config.enabled,
    )


def rate_limited_response(request: Request, limit: RateLimitItem) -> JSONResponse:
    logger.warning(
        f"Rate limit exceeded: client={get_remote_address(request)} path={request.url.path}"
    )
    error = RelayError(
        ErrorCodes.RATE_LIMITED, 429, detail=f"Rate limit exceeded: {limit}"
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    /api/* 요청마다 공유 카운터를 1 증가, 한도 초과 시 429.

    Usage:
        app.add_middleware(RateLimitMiddleware, limiter=limiter, config=settings.rate_limit)
    """

    def __init__(self, app: ASGIApp, limiter: Limiter, config: RateLimitConfig) -> None:
        super().__init__(app)
        self.limiter = limiter
        self.limit = parse(config.limit_string)

    async def dispatch(self, request: Request, call_next):
        if not self.limiter.enabled or not request.url.path.startswith(API_PREFIX):
            return await call_next(request)

        key = get_remote_address(request)
        if not self.limiter.limiter.hit(self.limit, API_SCOPE, key):
            return rate_limited_response(request, self.limit)

        return await call_next(request)
