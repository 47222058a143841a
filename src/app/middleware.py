"""Middleware: CORS origin gate, security headers."""

import logging

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from src.core.config import CORSConfig
from src.core.origins import OriginPolicy

logger = logging.getLogger(__name__)

PREFLIGHT_METHOD = "OPTIONS"


class OriginGateMiddleware(BaseHTTPMiddleware):
    """
    Origin allow-list 기반 CORS gate.

    - OPTIONS (preflight): 여기서 바로 응답. 허용 → 204 + allow 헤더, 거부 → 403
    - 그 외: 그대로 처리. 허용 origin이면 Allow-Origin + Vary 헤더 부착
      (거부 origin은 헤더만 생략, 차단은 브라우저가 함)
    - Allow-Credentials는 절대 보내지 않음
    """

    def __init__(
        self,
        app: ASGIApp,
        policy: OriginPolicy,
        cors: CORSConfig | None = None,
    ) -> None:
        super().__init__(app)
        self.policy = policy
        self.cors = cors or CORSConfig()

    def preflight_headers(self, allow_origin: str) -> dict[str, str]:
        return {
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Methods": ",".join(self.cors.allow_methods),
            "Access-Control-Allow-Headers": ",".join(self.cors.allow_headers),
            "Access-Control-Max-Age": str(self.cors.max_age),
            "Vary": "Origin",
        }

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        allow_origin = self.policy.allow_origin_header(origin)

        if request.method == PREFLIGHT_METHOD:
            if allow_origin is None:
                logger.debug(f"Preflight rejected: origin={origin!r} path={request.url.path}")
                return Response(status_code=403)
            return Response(status_code=204, headers=self.preflight_headers(allow_origin))

        response = await call_next(request)

        if allow_origin is not None:
            response.headers["Access-Control-Allow-Origin"] = allow_origin
            _append_vary(response, "Origin")

        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """기본 보안 헤더. 라우트가 이미 설정한 값은 덮어쓰지 않음."""

    HEADERS = {
        "X-Content-Type-Options": "nosniff",
        "X-Frame-Options": "SAMEORIGIN",
        "Referrer-Policy": "no-referrer",
        # 이미지(data URL)를 다른 origin 프론트에서 쓰므로 cross-origin 허용
        "Cross-Origin-Resource-Policy": "cross-origin",
        "X-DNS-Prefetch-Control": "off",
    }

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in self.HEADERS.items():
            response.headers.setdefault(name, value)
        return response


def _append_vary(response: Response, value: str) -> None:
    existing = response.headers.get("Vary")
    if not existing:
        response.headers["Vary"] = value
        return
    tokens = [v.strip().lower() for v in existing.split(",")]
    if value.lower() not in tokens:
        response.headers["Vary"] = f"{existing}, {value}"
