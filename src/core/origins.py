"""
CORS origin 정책: 정규화 + allow-list 매칭.

규칙:
- 정규화: 앞뒤 공백 제거, 끝의 "/" 제거, 소문자화
- 매칭: 정규화 후 완전 일치만 허용 (prefix/suffix/wildcard 금지)
- 첫 번째로 일치한 항목이 이김
- credentials 모드 없음

프레임워크 독립 모듈. HTTP 헤더 부착은 src/app/middleware.py 담당.
"""

from collections.abc import Iterable
from dataclasses import dataclass

WILDCARD_ORIGIN = "*"


def normalize_origin(value: str | None) -> str:
    """
    origin 문자열 정규화.

    Examples:
        "https://Example.com/" → "https://example.com"
        " http://localhost:5500 " → "http://localhost:5500"
    """
    if not value:
        return ""
    return value.strip().rstrip("/").lower()


@dataclass(frozen=True)
class OriginPolicy:
    """
    허용 origin 목록 (프로세스 수명 동안 읽기 전용).

    Usage:
        policy = OriginPolicy.from_csv("http://localhost:5500,https://app.example.com")
        policy.is_allowed("https://App.Example.com/")  # True
    """

    allowed: tuple[str, ...] = ()

    # 진단용 wildcard 모드. 켜면 origin 검사 없이 "*" 응답
    allow_all: bool = False

    @classmethod
    def from_origins(
        cls,
        origins: Iterable[str],
        allow_all: bool = False,
    ) -> "OriginPolicy":
        """origin 목록으로 생성. 정규화 후 중복은 첫 항목만 유지."""
        normalized: list[str] = []
        for origin in origins:
            value = normalize_origin(origin)
            if value and value not in normalized:
                normalized.append(value)
        return cls(allowed=tuple(normalized), allow_all=allow_all)

    @classmethod
    def from_csv(cls, text: str | None, allow_all: bool = False) -> "OriginPolicy":
        """쉼표 구분 문자열로 생성 (빈 항목 무시)."""
        return cls.from_origins((text or "").split(","), allow_all=allow_all)

    def match(self, origin: str | None) -> str | None:
        """
        허용 목록에서 일치하는 항목 반환.

        Returns:
            정규화된 허용 origin, 없으면 None
        """
        candidate = normalize_origin(origin)
        if not candidate:
            return None
        for allowed in self.allowed:
            if allowed == candidate:
                return allowed
        return None

    def is_allowed(self, origin: str | None) -> bool:
        if self.allow_all:
            return True
        return self.match(origin) is not None

    def allow_origin_header(self, origin: str | None) -> str | None:
        """
        Access-Control-Allow-Origin 값 결정.

        - wildcard 모드: "*"
        - 허용된 origin: 요청 origin 원문 그대로 (대소문자 보존)
        - 그 외: None (헤더 생략)
        """
        if self.allow_all:
            return WILDCARD_ORIGIN
        if origin and self.match(origin) is not None:
            return origin
        return None
