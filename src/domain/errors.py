"""
Error definitions for the relay.

규칙:
- 조용한 실패 금지 → RelayError로 명시적 실패
- 업스트림 에러는 status + 원문 body 그대로 전달
- 업스트림 429는 에러가 아님 (chat/summarize는 fallback 응답)
"""

from typing import Any


class RelayError(Exception):
    """
    클라이언트에 JSON 에러로 반환되는 에러.

    응답 형식: {"error": code, "detail": ...}
    detail이 None이면 응답에서 생략됨.

    Usage:
        raise RelayError(ErrorCodes.BAD_REQUEST, 400, detail="hint must be a string")
    """

    def __init__(self, code: str, status_code: int, detail: Any = None) -> None:
        self.code = code
        self.status_code = status_code
        self.detail = detail
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if self.detail is None:
            return f"[{self.code}] status={self.status_code}"
        return f"[{self.code}] status={self.status_code}, detail={self.detail!r}"

    def to_dict(self) -> dict[str, Any]:
        """응답 body / 로그 직렬화용."""
        body: dict[str, Any] = {"error": self.code}
        if self.detail is not None:
            body["detail"] = self.detail
        return body


# =============================================================================
# Error Codes (프론트엔드 계약)
# =============================================================================

class ErrorCodes:
    """에러 코드 상수. 프론트엔드가 문자열로 분기하므로 값 변경 금지."""

    BAD_REQUEST = "bad_request"     # 필수 필드 누락/형식 오류 (400)
    OPENAI_ERROR = "openai_error"   # 업스트림 non-2xx (429 제외, status 그대로)
    NO_IMAGE = "no_image"           # 업스트림 성공했지만 이미지 없음 (502)
    SERVER_ERROR = "server_error"   # 로컬 예외 (500)
    RATE_LIMITED = "rate_limited"   # 로컬 rate limit 초과 (429)
    PAYLOAD_TOO_LARGE = "payload_too_large"  # body 크기 상한 초과 (413)


def bad_request(detail: str) -> RelayError:
    return RelayError(ErrorCodes.BAD_REQUEST, 400, detail=detail)


def payload_too_large(limit: int) -> RelayError:
    return RelayError(
        ErrorCodes.PAYLOAD_TOO_LARGE, 413, detail=f"request body exceeds {limit} bytes"
    )


def openai_error(status_code: int, body_text: str) -> RelayError:
    return RelayError(ErrorCodes.OPENAI_ERROR, status_code, detail=body_text)


def server_error(cause: Exception) -> RelayError:
    return RelayError(ErrorCodes.SERVER_ERROR, 500, detail=str(cause))
