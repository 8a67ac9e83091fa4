# tests/unit/test_youtube_api.py
"""
Unit Tests for YouTube API Client
Tests response mapping, pagination and failure handling against a mocked transport
"""

import json

import httpx
import pytest

from commentlens.infrastructure.clients.youtube_api import YouTubeAPIClient
from commentlens.services.exceptions import TransportError, VideoNotFoundError


# ============================================================================
# Helpers
# ============================================================================


VIDEO_ITEM = {
    "id": "ABCDEFGHIJK",
    "snippet": {
        "title": "How I Built It",
        "description": "A walkthrough",
        "publishedAt": "2024-03-01T10:00:00Z",
        "channelTitle": "Maker",
        "thumbnails": {"default": {"url": "https://i.ytimg.com/a.jpg", "width": 120, "height": 90}},
    },
    "statistics": {"viewCount": "1500", "likeCount": "120", "commentCount": "not-a-number"},
}


def comment_item(index: int, reply_count: int = 0) -> dict:
    return {
        "id": f"thread{index}",
        "snippet": {
            "totalReplyCount": reply_count,
            "topLevelComment": {
                "snippet": {
                    "authorDisplayName": f"user{index}",
                    "authorProfileImageUrl": f"https://img/{index}",
                    "authorChannelUrl": f"https://yt/{index}",
                    "textDisplay": f"comment {index}",
                    "textOriginal": f"comment {index}",
                    "likeCount": index,
                    "publishedAt": "2024-03-02T10:00:00Z",
                    "updatedAt": "2024-03-02T10:00:00Z",
                }
            },
        },
    }


def make_client(handler) -> YouTubeAPIClient:
    transport = httpx.MockTransport(handler)
    return YouTubeAPIClient(
        api_key="test-key",
        base_url="https://youtube.test/v3",
        client=httpx.AsyncClient(transport=transport),
    )


def endless_comments_handler(requests: list):
    """Every page is full and always advertises another page"""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        size = int(request.url.params["maxResults"])
        start = (len(requests) - 1) * 1000
        items = [comment_item(start + i) for i in range(size)]
        return httpx.Response(200, json={"items": items, "nextPageToken": f"tok{len(requests)}"})

    return handler


# ============================================================================
# Video Details
# ============================================================================


class TestFetchVideoDetails:
    @pytest.mark.asyncio
    async def test_maps_snippet_and_statistics(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"items": [VIDEO_ITEM]})

        async with make_client(handler) as client:
            details = await client.fetch_video_details("ABCDEFGHIJK")

        assert details.id == "ABCDEFGHIJK"
        assert details.title == "How I Built It"
        assert details.channel_title == "Maker"
        assert details.view_count == 1500
        assert details.like_count == 120
        assert details.comment_count == 0
        assert details.thumbnails["default"].url == "https://i.ytimg.com/a.jpg"

        params = seen[0].url.params
        assert seen[0].url.path == "/v3/videos"
        assert params["part"] == "snippet,statistics"
        assert params["id"] == "ABCDEFGHIJK"
        assert params["key"] == "test-key"

    @pytest.mark.asyncio
    async def test_zero_items_is_not_found(self):
        client = make_client(lambda request: httpx.Response(200, json={"items": []}))

        with pytest.raises(VideoNotFoundError) as exc_info:
            await client.fetch_video_details("ABCDEFGHIJK")

        assert "ABCDEFGHIJK" in str(exc_info.value)
        await client.close()

    @pytest.mark.asyncio
    async def test_http_error_is_transport_error(self):
        client = make_client(
            lambda request: httpx.Response(
                403, json={"error": {"errors": [{"reason": "quotaExceeded"}]}}
            )
        )

        with pytest.raises(TransportError) as exc_info:
            await client.fetch_video_details("ABCDEFGHIJK")

        assert exc_info.value.status_code == 403
        assert exc_info.value.details["reason"] == "quotaExceeded"
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_body_is_transport_error(self):
        client = make_client(lambda request: httpx.Response(200, content=b"not json"))

        with pytest.raises(TransportError) as exc_info:
            await client.fetch_video_details("ABCDEFGHIJK")

        assert "unreadable response" in exc_info.value.message
        await client.close()


# ============================================================================
# Comments
# ============================================================================


class TestFetchComments:
    @pytest.mark.asyncio
    async def test_pagination_stops_at_max_results(self):
        requests = []
        client = make_client(endless_comments_handler(requests))

        comments = await client.fetch_comments("ABCDEFGHIJK", 250)

        assert len(requests) == 3
        assert [int(r.url.params["maxResults"]) for r in requests] == [100, 100, 50]
        assert len(comments) == 250
        await client.close()

    @pytest.mark.asyncio
    async def test_page_tokens_chain_sequentially(self):
        requests = []
        client = make_client(endless_comments_handler(requests))

        await client.fetch_comments("ABCDEFGHIJK", 150)

        assert "pageToken" not in requests[0].url.params
        assert requests[1].url.params["pageToken"] == "tok1"
        params = requests[0].url.params
        assert params["order"] == "relevance"
        assert params["textFormat"] == "plainText"
        assert params["part"] == "snippet"
        await client.close()

    @pytest.mark.asyncio
    async def test_stops_without_next_page_token(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"items": [comment_item(1), comment_item(2)]})

        client = make_client(handler)
        comments = await client.fetch_comments("ABCDEFGHIJK", 200)

        assert len(requests) == 1
        assert [c.id for c in comments] == ["thread1", "thread2"]
        await client.close()

    @pytest.mark.asyncio
    async def test_stops_on_empty_page(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(200, json={"items": [], "nextPageToken": "more"})

        client = make_client(handler)
        assert await client.fetch_comments("ABCDEFGHIJK", 200) == []
        assert len(requests) == 1
        await client.close()

    @pytest.mark.asyncio
    async def test_maps_top_level_comment(self):
        client = make_client(
            lambda request: httpx.Response(
                200, json={"items": [comment_item(0, reply_count=4), comment_item(1)]}
            )
        )

        first, second = await client.fetch_comments("ABCDEFGHIJK", 10)

        assert first.id == "thread0"
        assert first.author_display_name == "user0"
        assert first.text_display == "comment 0"
        assert first.like_count == 0
        assert first.replies == []
        assert second.replies is None
        await client.close()

    @pytest.mark.asyncio
    async def test_comments_disabled_returns_empty_list(self, caplog):
        body = {"error": {"code": 403, "errors": [{"reason": "commentsDisabled"}]}}
        client = make_client(lambda request: httpx.Response(403, json=body))

        assert await client.fetch_comments("ABCDEFGHIJK", 100) == []
        assert "Comments are disabled" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_other_failures_return_empty_list(self, caplog):
        def handler(request):
            raise httpx.ConnectError("boom", request=request)

        client = make_client(handler)

        assert await client.fetch_comments("ABCDEFGHIJK", 100) == []
        assert "Comment fetch failed" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_non_json_body_returns_empty_list(self, caplog):
        client = make_client(
            lambda request: httpx.Response(200, content=b"<html>Service Unavailable</html>")
        )

        assert await client.fetch_comments("ABCDEFGHIJK", 100) == []
        assert "Comment fetch failed" in caplog.text
        await client.close()

    @pytest.mark.asyncio
    async def test_null_top_level_comment_is_tolerated(self):
        items = [{"id": "broken", "snippet": {"topLevelComment": None}}, None, comment_item(1)]
        client = make_client(lambda request: httpx.Response(200, json={"items": items}))

        comments = await client.fetch_comments("ABCDEFGHIJK", 10)

        assert [c.id for c in comments] == ["broken", "", "thread1"]
        assert comments[0].author_display_name is None
        assert comments[2].author_display_name == "user1"
        await client.close()

    @pytest.mark.asyncio
    async def test_unmappable_comment_returns_empty_list(self, caplog):
        bad = comment_item(0)
        bad["snippet"]["topLevelComment"]["snippet"]["likeCount"] = "lots"
        client = make_client(lambda request: httpx.Response(200, json={"items": [bad]}))

        assert await client.fetch_comments("ABCDEFGHIJK", 10) == []
        assert "Malformed comment data" in caplog.text
        await client.close()


# ============================================================================
# Joined Fetch
# ============================================================================


class TestFetchAnalysisData:
    @pytest.mark.asyncio
    async def test_joins_details_and_comments(self):
        def handler(request):
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": [VIDEO_ITEM]})
            return httpx.Response(200, json={"items": [comment_item(i) for i in range(3)]})

        async with make_client(handler) as client:
            data = await client.fetch_analysis_data("ABCDEFGHIJK", 200)

        assert data.video_details.title == "How I Built It"
        assert len(data.comments) == 3

    @pytest.mark.asyncio
    async def test_details_failure_propagates(self):
        def handler(request):
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": []})
            return httpx.Response(200, json={"items": [comment_item(1)]})

        async with make_client(handler) as client:
            with pytest.raises(VideoNotFoundError):
                await client.fetch_analysis_data("ABCDEFGHIJK", 200)

    @pytest.mark.asyncio
    async def test_comment_failure_does_not_propagate(self):
        def handler(request):
            if request.url.path.endswith("/videos"):
                return httpx.Response(200, json={"items": [VIDEO_ITEM]})
            return httpx.Response(500, content=json.dumps({"error": {}}).encode())

        async with make_client(handler) as client:
            data = await client.fetch_analysis_data("ABCDEFGHIJK", 200)

        assert data.comments == []


class TestClientInit:
    def test_missing_key_raises(self, monkeypatch):
        from commentlens.app.config import reset_config

        monkeypatch.delenv("YOUTUBE_API_KEY")
        reset_config()

        with pytest.raises(ValueError):
            YouTubeAPIClient()

    def test_page_size_capped(self):
        client = YouTubeAPIClient(api_key="k", page_size=500)
        assert client.page_size == 100
