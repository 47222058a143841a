"""Domain layer: errors, schemas and constants."""

from .errors import ErrorCodes, RelayError
from .schemas import (
    AvatarResult,
    ChatReply,
    ChatTurn,
    SummaryResult,
    parse_turns,
)

__all__ = [
    "RelayError",
    "ErrorCodes",
    "ChatTurn",
    "ChatReply",
    "SummaryResult",
    "AvatarResult",
    "parse_turns",
]
