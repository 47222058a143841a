"""
Application Services.

역할:
- summarize: 대화 → topics/sentiment/style hint
- chat: 60자 캐주얼 응답
- avatar: style hint → 아바타 이미지
"""

from .avatar import AvatarService
from .chat import ChatService
from .summarize import SummaryService

__all__ = [
    "SummaryService",
    "ChatService",
    "AvatarService",
]
