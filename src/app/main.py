"""
FastAPI 애플리케이션 진입점.

실행:
- 개발: uv run uvicorn src.app.main:app --reload --port 8787
- 프로덕션: uv run python -m src.app.main  (HOST/PORT 환경변수 사용)
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from src.app.middleware import OriginGateMiddleware, SecurityHeadersMiddleware
from src.app.providers import GenerativeProvider, OpenAIProvider
from src.app.rate_limit import RateLimitMiddleware, build_limiter

# Routes
from src.app.routes import avatar, chat, health, summarize
from src.app.services import AvatarService, ChatService, SummaryService
from src.core.config import Settings, load_settings
from src.core.logging import configure_logging, mask_secret, uvicorn_log_level
from src.domain.errors import RelayError

logger = logging.getLogger(__name__)


# =============================================================================
# Provider
# =============================================================================


def build_provider(settings: Settings) -> OpenAIProvider:
    """Settings → OpenAIProvider."""
    upstream = settings.upstream
    return OpenAIProvider(
        api_key=settings.openai_api_key,
        organization=settings.openai_org_id,
        base_url=upstream.base_url,
        chat_model=upstream.chat_model,
        image_model=upstream.image_model,
        timeout=upstream.timeout,
    )


# =============================================================================
# Lifespan
# =============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    애플리케이션 생명주기 관리.

    시작 시: 로깅 설정, 설정 요약 출력
    종료 시: 업스트림 HTTP 클라이언트 정리
    """
    # Startup
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)

    if not settings.openai_api_key:
        logger.warning("OPENAI_API_KEY is not set. Set it in .env (requests will fail)")
    if settings.cors_allow_all:
        logger.warning("CORS_ALLOW_ALL is on: origin checks disabled (debug only)")

    logger.info(f"API listening on http://{settings.host}:{settings.port}")
    logger.info(f"Allowed origins: {', '.join(app.state.origin_policy.allowed)}")
    logger.info(
        f"Upstream: {settings.upstream.base_url} "
        f"key={mask_secret(settings.openai_api_key)} "
        f"org={settings.openai_org_id or '(none)'}"
    )

    yield

    # Shutdown
    await app.state.provider.aclose()


# =============================================================================
# Exception Handlers
# =============================================================================


async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """RelayError → {"error": code, "detail": ...}."""
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# =============================================================================
# App Factory
# =============================================================================


def create_app(
    settings: Settings | None = None,
    provider: GenerativeProvider | None = None,
) -> FastAPI:
    """
    앱 생성.

    Settings, origin 정책, limiter, 서비스는 여기서 한 번만 만들고
    app.state로 라우트에 전달한다.

    Args:
        settings: None이면 환경변수/default.yaml에서 로드
        provider: None이면 Settings로 OpenAIProvider 생성 (테스트에서 주입)
    """
    if settings is None:
        settings = load_settings()
    if provider is None:
        provider = build_provider(settings)

    app = FastAPI(
        title="Avatar Chat Relay",
        description="브라우저 → OpenAI 중계 (chat / summarize / avatar)",
        version="0.1.0",
        lifespan=lifespan,
        # /api/* 외 라우트 없음 (rate limit 카운터가 /api 전체를 공유)
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )

    # App state
    app.state.settings = settings
    app.state.origin_policy = settings.origin_policy()
    app.state.provider = provider
    app.state.summary_service = SummaryService(provider, settings.summary)
    app.state.chat_service = ChatService(provider, settings.chat)
    app.state.avatar_service = AvatarService(provider, settings.avatar)

    # Error handlers
    app.add_exception_handler(RelayError, relay_error_handler)

    # Middleware (나중에 추가한 것이 바깥쪽)
    # 요청 순서: SecurityHeaders → OriginGate → RateLimit → route
    app.state.limiter = build_limiter(settings.rate_limit)
    app.add_middleware(
        RateLimitMiddleware,
        limiter=app.state.limiter,
        config=settings.rate_limit,
    )
    app.add_middleware(
        OriginGateMiddleware,
        policy=app.state.origin_policy,
        cors=settings.cors,
    )
    if settings.security_headers:
        app.add_middleware(SecurityHeadersMiddleware)

    # API 라우트
    app.include_router(health.api_router, prefix="/api", tags=["Health"])
    app.include_router(summarize.api_router, prefix="/api", tags=["Summarize"])
    app.include_router(chat.api_router, prefix="/api", tags=["Chat"])
    app.include_router(avatar.api_router, prefix="/api", tags=["Avatar"])

    return app


def run() -> None:
    """CLI 진입점: HOST/PORT 설정으로 uvicorn 실행."""
    import uvicorn

    # 모듈 레벨 app 재사용 (앱은 프로세스당 하나)
    settings: Settings = app.state.settings
    configure_logging(settings.log_level)
    uvicorn.run(
        app,
        host=settings.host,
        port=settings.port,
        log_level=uvicorn_log_level(settings.log_level),
    )


app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

if __name__ == "__main__":
    run()
