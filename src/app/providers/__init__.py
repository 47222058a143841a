"""
Generative AI Provider Abstraction.

업스트림 교체 가능하게 설계.
모델명은 Settings(default.yaml)만 SSOT.
"""

from .base import GenerativeProvider, ProviderError, UpstreamResponse
from .openai import OpenAIProvider

__all__ = [
    "GenerativeProvider",
    "ProviderError",
    "UpstreamResponse",
    "OpenAIProvider",
]
