"""API Clients"""

from .youtube_api import YouTubeAPIClient, create_youtube_client
from .gemini_api import GeminiAPIClient, create_gemini_client

__all__ = [
    "YouTubeAPIClient",
    "create_youtube_client",
    "GeminiAPIClient",
    "create_gemini_client",
]
