# commentlens/infrastructure/clients/youtube_api.py
"""
YouTube Data API v3 Client
Fetches video metadata and top-level comment threads for analysis.

Features:
- Async HTTP with a shared connection pool
- Sequential page-token pagination for comment threads
- Concurrent details + comments fetch for one analysis run
- Type-safe response mapping with Pydantic
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

import httpx

from commentlens.app.config import get_config
from commentlens.domain.models import AnalysisData, VideoComment, VideoDetails
from commentlens.services.exceptions import TransportError, VideoNotFoundError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100
COMMENTS_DISABLED_REASON = "commentsDisabled"


def _to_int(value: Any) -> int:
    """Statistics arrive as strings; anything unparseable counts as 0."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _error_reason(response: httpx.Response) -> Optional[str]:
    """First ``error.errors[].reason`` of a Google API error body, if any."""
    try:
        errors = response.json().get("error", {}).get("errors", [])
    except (ValueError, AttributeError):
        return None
    if errors and isinstance(errors[0], dict):
        return errors[0].get("reason")
    return None


class YouTubeAPIClient:
    """
    YouTube Data API v3 Client

    Handles:
    - Video metadata retrieval (snippet + statistics)
    - Comment thread fetching with pagination
    - Joined fetch of both for an analysis run
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        page_size: Optional[int] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize YouTube API client

        Args:
            api_key: YouTube Data API key (reads from config if not provided)
            base_url: API base URL
            timeout: Request timeout in seconds, None waits indefinitely
            page_size: commentThreads page size (capped at 100)
            client: Pre-built HTTP client, mainly for tests
        """
        settings = get_config().youtube_api

        self.api_key = api_key or get_config().youtube_api_key
        if not self.api_key:
            raise ValueError(
                "YouTube API key not found. Set YOUTUBE_API_KEY in .env or pass to constructor"
            )

        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.page_size = min(page_size or settings.comments_page_size, MAX_PAGE_SIZE)
        self.comment_order = settings.comment_order
        self.text_format = settings.text_format

        self.client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout,
            limits=httpx.Limits(max_keepalive_connections=5),
        )

        logger.info("✅ YouTube API client initialized")

    async def _request(self, endpoint: str, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Make a single GET request against the API

        Raises:
            TransportError: Non-2xx status, network failure or a non-JSON body
        """
        url = f"{self.base_url}/{endpoint}"
        params = {**params, "key": self.api_key}

        try:
            response = await self.client.get(url, params=params)
            response.raise_for_status()
            payload = response.json()

        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            reason = _error_reason(e.response)
            logger.error(f"❌ YouTube API error {status} on {endpoint}: {reason}")
            raise TransportError(
                f"YouTube API request failed with status: {status}",
                service="youtube",
                status_code=status,
                details={"endpoint": endpoint, "reason": reason},
            ) from e

        except httpx.RequestError as e:
            logger.error(f"❌ Network error on {endpoint}: {e}")
            raise TransportError(
                f"YouTube API request failed: {e}",
                service="youtube",
                details={"endpoint": endpoint},
            ) from e

        except ValueError as e:
            logger.error(f"❌ Unreadable response body from {endpoint}: {e}")
            raise TransportError(
                f"YouTube API returned an unreadable response: {e}",
                service="youtube",
                details={"endpoint": endpoint},
            ) from e

        return _as_dict(payload)

    # ========================================================================
    # Video Operations
    # ========================================================================

    async def fetch_video_details(self, video_id: str) -> VideoDetails:
        """
        Fetch snippet and statistics for one video

        Raises:
            VideoNotFoundError: The API returned no items
            TransportError: Request failed
        """
        params = {"part": "snippet,statistics", "id": video_id}
        response = await self._request("videos", params)

        items = response.get("items") or []
        if not items:
            raise VideoNotFoundError(video_id)

        item = _as_dict(items[0])
        snippet = _as_dict(item.get("snippet"))
        statistics = _as_dict(item.get("statistics"))

        return VideoDetails(
            id=item.get("id", video_id),
            title=snippet.get("title", ""),
            description=snippet.get("description", ""),
            published_at=snippet.get("publishedAt"),
            channel_title=snippet.get("channelTitle", ""),
            view_count=_to_int(statistics.get("viewCount")),
            like_count=_to_int(statistics.get("likeCount")),
            comment_count=_to_int(statistics.get("commentCount")),
            thumbnails=snippet.get("thumbnails", {}),
        )

    # ========================================================================
    # Comment Operations
    # ========================================================================

    async def fetch_comments(
        self, video_id: str, max_results: int = 100
    ) -> List[VideoComment]:
        """
        Fetch up to ``max_results`` top-level comments, ordered by relevance

        Any request failure yields an empty list: a video with comments
        disabled and a failed call look the same to the caller. The two are
        told apart only in the log.
        """
        if max_results < 1:
            return []

        try:
            return await self._fetch_comment_page(video_id, max_results, None, [])
        except (ValueError, TypeError) as e:
            logger.warning(f"⚠️ Malformed comment data for {video_id}: {e}")
            return []
        except TransportError as e:
            if e.details.get("reason") == COMMENTS_DISABLED_REASON:
                logger.warning(f"⚠️ Comments are disabled for {video_id}")
            else:
                logger.warning(f"⚠️ Comment fetch failed for {video_id}: {e.message}")
            return []

    async def _fetch_comment_page(
        self,
        video_id: str,
        max_results: int,
        page_token: Optional[str],
        collected: List[VideoComment],
    ) -> List[VideoComment]:
        """Fetch one page, then recurse on its continuation token."""
        remaining = max_results - len(collected)
        params: Dict[str, Any] = {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": min(remaining, self.page_size),
            "textFormat": self.text_format,
            "order": self.comment_order,
        }
        if page_token:
            params["pageToken"] = page_token

        response = await self._request("commentThreads", params)

        items = response.get("items")
        if not isinstance(items, list):
            return collected

        collected = collected + [self._map_comment(item) for item in items]

        next_token = response.get("nextPageToken")
        if next_token and items and len(collected) < max_results:
            return await self._fetch_comment_page(
                video_id, max_results, next_token, collected
            )

        return collected[:max_results]

    @staticmethod
    def _map_comment(item: Any) -> VideoComment:
        item = _as_dict(item)
        snippet = _as_dict(item.get("snippet"))
        top = _as_dict(_as_dict(snippet.get("topLevelComment")).get("snippet"))

        return VideoComment(
            id=item.get("id", ""),
            author_display_name=top.get("authorDisplayName"),
            author_profile_image_url=top.get("authorProfileImageUrl"),
            author_channel_url=top.get("authorChannelUrl"),
            text_display=top.get("textDisplay"),
            text_original=top.get("textOriginal"),
            like_count=top.get("likeCount"),
            published_at=top.get("publishedAt"),
            updated_at=top.get("updatedAt"),
            replies=[] if _to_int(snippet.get("totalReplyCount")) > 0 else None,
        )

    # ========================================================================
    # Joined Fetch
    # ========================================================================

    async def fetch_analysis_data(
        self, video_id: str, max_comments: int = 100
    ) -> AnalysisData:
        """
        Fetch details and comments concurrently and join them

        A details failure propagates; comment failures were already turned
        into an empty list by ``fetch_comments``.
        """
        details, comments = await asyncio.gather(
            self.fetch_video_details(video_id),
            self.fetch_comments(video_id, max_comments),
        )
        logger.info(f"📥 Fetched '{details.title}' with {len(comments)} comments")
        return AnalysisData(video_details=details, comments=comments)

    # ========================================================================
    # Lifecycle
    # ========================================================================

    async def close(self) -> None:
        """Close HTTP client connection pool"""
        await self.client.aclose()
        logger.info("🔌 YouTube API client closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def create_youtube_client(api_key: Optional[str] = None) -> YouTubeAPIClient:
    """
    Factory function to create YouTube API client

    Args:
        api_key: Optional API key (reads from config if not provided)
    """
    return YouTubeAPIClient(api_key=api_key)
