#!/usr/bin/env python
"""
업스트림(OpenAI) 연결 확인 스크립트.

실행:
    uv run python scripts/check_upstream.py
    uv run python scripts/check_upstream.py --image   # 이미지 생성도 확인 (과금 주의)
"""

import argparse
import asyncio
import sys
from pathlib import Path

# 프로젝트 루트를 path에 추가
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.app.main import build_provider  # noqa: E402
from src.app.providers.base import (  # noqa: E402
    GenerativeProvider,
    completion_text,
    image_b64,
)
from src.core.config import Settings, load_settings  # noqa: E402
from src.core.logging import mask_secret  # noqa: E402


async def check_chat(provider: GenerativeProvider) -> bool:
    """채팅 완성 API 확인."""
    print("\n" + "=" * 60)
    print("🧪 Chat completions")
    print("=" * 60)

    try:
        print("📤 테스트 요청 전송 중...")
        response = await provider.create_chat_completion(
            [{"role": "user", "content": "Say 'API test successful!' in Japanese."}],
            max_tokens=40,
        )
    except Exception as e:
        print(f"❌ 요청 실패: {type(e).__name__}: {e}")
        return False

    if not response.ok:
        print(f"❌ HTTP {response.status_code}: {response.text[:300]}")
        return False

    print(f"📥 응답: {completion_text(response.json())}")
    print("✅ Chat completions 연결 성공!")
    return True


async def check_image(provider: GenerativeProvider, size: str) -> bool:
    """이미지 생성 API 확인."""
    print("\n" + "=" * 60)
    print("🧪 Image generation")
    print("=" * 60)

    try:
        print("📤 테스트 요청 전송 중...")
        response = await provider.create_image("A plain grey circle, flat style.", size=size)
    except Exception as e:
        print(f"❌ 요청 실패: {type(e).__name__}: {e}")
        return False

    if not response.ok:
        print(f"❌ HTTP {response.status_code}: {response.text[:300]}")
        return False

    b64 = image_b64(response.json())
    if not b64:
        print("❌ 응답에 b64_json 없음")
        return False

    print(f"📥 이미지 수신: {len(b64)} chars (base64)")
    print("✅ Image generation 연결 성공!")
    return True


async def main(settings: Settings, with_image: bool = False) -> int:
    """연결 확인 실행. 종료 코드 반환."""
    print("🚀 업스트림 연결 확인 시작")

    if not settings.openai_api_key:
        print("❌ OPENAI_API_KEY가 설정되지 않았습니다.")
        print("   .env 파일에 실제 API 키를 입력하세요.")
        return 1

    print(f"✅ API 키 발견: {mask_secret(settings.openai_api_key)}")

    provider = build_provider(settings)
    results: dict[str, bool] = {}
    try:
        results["chat"] = await check_chat(provider)
        if with_image:
            results["image"] = await check_image(provider, settings.avatar.size)
    finally:
        await provider.aclose()

    print("\n" + "=" * 60)
    for name, passed in results.items():
        status = "✅ PASS" if passed else "❌ FAIL"
        print(f"  {name}: {status}")
    print("=" * 60)

    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="OpenAI 연결 확인")
    parser.add_argument("--image", action="store_true", help="이미지 생성도 확인")
    args = parser.parse_args()

    exit_code = asyncio.run(main(load_settings(), with_image=args.image))
    sys.exit(exit_code)
