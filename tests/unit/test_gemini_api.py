# tests/unit/test_gemini_api.py
"""
Unit Tests for the generative API client
Tests prompt assembly, the fallback path and response parsing
"""

import json
import typing

import httpx
import pytest
from pydantic import BaseModel

from commentlens.domain.analysis_schema import ANALYSIS_REPORT_SCHEMA, schema_paths
from commentlens.domain.models import AnalysisReport, VideoComment
from commentlens.infrastructure.clients.gemini_api import (
    MALFORMED_RESPONSE,
    UNDETERMINABLE_SENTIMENT,
    GeminiAPIClient,
    build_prompt,
    format_comment,
)
from commentlens.services.exceptions import GenerationFailedError


# ============================================================================
# Helpers
# ============================================================================


REPORT_JSON = {
    "writtenAnalysis": "Viewers loved it.",
    "atAGlanceSummary": {
        "overallSentiment": "90% Positive / 10% Neutral",
        "topThemes": ["editing", "music"],
        "mostLikedComments": [{"commentText": "Great!", "likeCount": 42}],
    },
    "audienceInsights": {"communityHealthScore": 8, "communityHealthAnalysis": "Healthy"},
    "enhancedActionPlan": {
        "contentIdeas": [
            {"suggestion": "Part two", "supportingEvidence": ["more please"], "priority": "high"}
        ]
    },
}


def gemini_response(report=REPORT_JSON, status=200):
    body = {"candidates": [{"content": {"parts": [{"text": json.dumps(report)}]}}]}
    return httpx.Response(status, json=body)


def make_client(handler) -> GeminiAPIClient:
    return GeminiAPIClient(
        api_key="gem-key",
        base_url="https://gemini.test/v1beta",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


def valid_comments():
    return [
        VideoComment(id="c1", author_display_name="Ada", text_display="Loved the editing", like_count=5),
        {"authorDisplayName": "Linus", "textOriginal": "Music was great", "likeCount": 0},
    ]


def model_paths(model: typing.Type[BaseModel], prefix: str = "") -> typing.List[str]:
    paths = []
    for name, field in model.model_fields.items():
        path = f"{prefix}{field.alias or name}"
        paths.append(path)
        annotation = field.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            paths.extend(model_paths(annotation, f"{path}."))
        elif typing.get_origin(annotation) in (list, typing.List):
            (item,) = typing.get_args(annotation)
            if isinstance(item, type) and issubclass(item, BaseModel):
                paths.extend(model_paths(item, f"{path}[]."))
    return paths


# ============================================================================
# Prompt
# ============================================================================


class TestPrompt:
    def test_format_comment_block(self):
        block = format_comment({"authorDisplayName": "Ada", "textDisplay": "Hi", "likeCount": 3})
        assert block == "Author: Ada\nLikes: 3\nComment: Hi\n---"

    def test_format_comment_defaults(self):
        block = format_comment(VideoComment(id="c", text_original="raw"))
        assert block == "Author: Anonymous\nLikes: 0\nComment: raw\n---"

    def test_prompt_embeds_context_verbatim(self):
        prompt = build_prompt("My {Title}", "Desc \"quoted\"", valid_comments())

        assert '**Title:** "My {Title}"' in prompt
        assert 'Desc "quoted"' in prompt
        assert "Author: Linus\nLikes: 0\nComment: Music was great\n---" in prompt


# ============================================================================
# Generation
# ============================================================================


class TestGenerate:
    @pytest.mark.asyncio
    async def test_fallback_without_valid_comments_makes_no_call(self):
        calls = []

        def handler(request):
            calls.append(request)
            return gemini_response()

        async with make_client(handler) as client:
            report = await client.generate("Title", "Desc", [{"likeCount": 1}, None])

        assert calls == []
        assert report.at_a_glance_summary.overall_sentiment == UNDETERMINABLE_SENTIMENT
        assert report.at_a_glance_summary.top_themes == []
        assert report.key_theme_deep_dive == []
        assert report.emotional_analysis.constructive_criticism == []
        assert report.audience_insights.community_health_score == 0
        assert report.enhanced_action_plan.content_ideas == []
        assert "Title" in report.written_analysis

    @pytest.mark.asyncio
    async def test_success_parses_report(self):
        seen = []

        def handler(request):
            seen.append(request)
            return gemini_response()

        async with make_client(handler) as client:
            report = await client.generate("Title", "Desc", valid_comments())

        assert isinstance(report, AnalysisReport)
        assert report.at_a_glance_summary.top_themes == ["editing", "music"]
        assert report.at_a_glance_summary.most_liked_comments[0].like_count == 42
        assert report.enhanced_action_plan.content_ideas[0].priority == "high"
        assert report.question_identification.questions == []

        request = seen[0]
        assert request.url.path == "/v1beta/models/gemini-2.5-flash:generateContent"
        assert request.url.params["key"] == "gem-key"
        payload = json.loads(request.content)
        assert payload["generationConfig"]["responseMimeType"] == "application/json"
        assert payload["generationConfig"]["responseSchema"] == ANALYSIS_REPORT_SCHEMA
        assert "Loved the editing" in payload["contents"][0]["parts"][0]["text"]

    @pytest.mark.asyncio
    async def test_non_success_status_fails(self):
        async with make_client(lambda request: httpx.Response(429, json={})) as client:
            with pytest.raises(GenerationFailedError) as exc_info:
                await client.generate("Title", "Desc", valid_comments())

        assert exc_info.value.status_code == 429
        assert str(exc_info.value) == "API call failed with status: 429"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            {},
            {"candidates": []},
            {"candidates": [{"content": {"parts": []}}]},
            {"candidates": [{"content": {"parts": [{"text": "not json"}]}}]},
        ],
    )
    async def test_malformed_response_fails(self, body):
        async with make_client(lambda request: httpx.Response(200, json=body)) as client:
            with pytest.raises(GenerationFailedError) as exc_info:
                await client.generate("Title", "Desc", valid_comments())

        assert exc_info.value.message == MALFORMED_RESPONSE

    @pytest.mark.asyncio
    async def test_health_score_clamped(self):
        report = dict(REPORT_JSON, audienceInsights={"communityHealthScore": 14})

        async with make_client(lambda request: gemini_response(report)) as client:
            result = await client.generate("Title", "Desc", valid_comments())

        assert result.audience_insights.community_health_score == 10


# ============================================================================
# Schema
# ============================================================================


class TestResponseSchema:
    def test_schema_matches_report_model(self):
        assert sorted(schema_paths()) == sorted(model_paths(AnalysisReport))

    def test_schema_is_plain_data(self):
        assert json.loads(json.dumps(ANALYSIS_REPORT_SCHEMA)) == ANALYSIS_REPORT_SCHEMA
        assert ANALYSIS_REPORT_SCHEMA["type"] == "OBJECT"
