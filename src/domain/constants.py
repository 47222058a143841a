"""
Domain Constants: 릴레이 전역 상수.

프롬프트 템플릿, fallback 값, 길이 제한 등.
프론트엔드 계약에 묶인 값이므로 변경 시 프론트엔드도 확인할 것.
"""

# =============================================================================
# Conversation Limits (대화 제한)
# =============================================================================

# 업스트림에 보내는 최근 턴 수
MAX_TURNS = 10

# 채팅 응답 최대 길이 (문자 수, 서버 측 안전망)
MAX_REPLY_CHARS = 60

# =============================================================================
# Summarize (대화 요약)
# =============================================================================

SUMMARY_INSTRUCTION = (
    "Summarize the last 10 chat turns and respond ONLY with:\n"
    "Topics: <comma-separated>\n"
    "Sentiment: <positive|neutral|negative>\n"
    "Style hint: <short clothing/accessory hint>"
)

# 응답 파싱용 라벨 (대소문자 무시, 줄 시작 매칭)
SUMMARY_LABEL_TOPICS = "Topics:"
SUMMARY_LABEL_SENTIMENT = "Sentiment:"
SUMMARY_LABEL_HINT = "Style hint:"

# 라벨을 못 찾았을 때의 기본값
DEFAULT_TOPICS = "casual"
DEFAULT_SENTIMENT = "neutral"
DEFAULT_HINT = "neutral casual"

# 업스트림 429 시 raw 필드 값
SUMMARY_RATE_LIMITED_RAW = "fallback:429"

# =============================================================================
# Chat (60자 캐주얼 응답)
# =============================================================================

CHAT_PERSONA = "\n".join(
    [
        "あなたはフレンドリーでくだけた雑談相手。",
        "カジュアルで自然体、型にはめすぎない。",
        "絵文字はユーザーが使った時だけ軽く返す。",
        "必ず60文字以内に収める。",
    ]
)

# 업스트림 429 시 고정 응답
CHAT_RATE_LIMITED_REPLY = "ちょっと待って、今混み合ってるみたい。"

# 모델이 빈 응답을 줬을 때
CHAT_EMPTY_REPLY = "うん、わかったよ。"

# =============================================================================
# Avatar (아바타 이미지)
# =============================================================================

AVATAR_PROMPT_TEMPLATE = (
    "Waist-up avatar on a dark background. Keep the same neutral face/identity.\n"
    "Change ONLY clothing/accessories to: {hint}.\n"
    "Clean flat style, centered, high-contrast, no text."
)

AVATAR_DATA_URL_PREFIX = "data:image/png;base64,"
