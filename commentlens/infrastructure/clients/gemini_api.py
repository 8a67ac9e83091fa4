# commentlens/infrastructure/clients/gemini_api.py
"""
Generative Language API Client
Turns a video's context and its comments into a structured AnalysisReport.

The request carries the response schema from ``domain.analysis_schema`` and
asks for a JSON-typed answer. No retries: every failure reaches the caller.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Sequence

import httpx
from pydantic import ValidationError as PydanticValidationError

from commentlens.app.config import get_config
from commentlens.domain.analysis_schema import ANALYSIS_REPORT_SCHEMA
from commentlens.domain.models import (
    AnalysisReport,
    AtAGlanceSummary,
    AudienceInsights,
)
from commentlens.services.exceptions import GenerationFailedError
from commentlens.utils.validators import has_comment_text

logger = logging.getLogger(__name__)

UNDETERMINABLE_SENTIMENT = "Undeterminable due to lack of comment data"
MALFORMED_RESPONSE = "malformed response"

PROMPT_TEMPLATE = """
You are a YouTube channel analyst. Your task is to analyze the comments for a video and generate a structured JSON report.

**Video Context:**
- **Title:** "{title}"
- **Description:** "{description}"

**Comments to Analyze:**
{comments}

**Instructions:**
Based on the video context and the comments provided, generate a JSON object that adheres to the provided schema. The analysis should be insightful and helpful for the YouTube creator.

- **First, write a detailed 'writtenAnalysis'**: a 2-3 paragraph narrative summary of the overall findings, covering the general sentiment, the main topics of discussion and the key opportunities you discovered.
- For 'overallSentiment', provide a percentage breakdown (e.g., "95% Positive / 5% Neutral").
- For 'topThemes', identify the 5 most discussed topics.
- For 'mostLikedComments', list the top 3 comments with the most likes.
- For 'keyThemeDeepDive', create 2-3 detailed sections on the most important themes.
- For 'actionableOpportunities', find specific, actionable suggestions from the comments. If a category has no items, return an empty array.

**Enhanced Analysis Instructions:**

- For 'emotionalAnalysis':
  - Classify comments by emotions (Joy, Humor, Surprise, Confusion, Frustration, Appreciation)
  - For 'constructiveCriticism', include 2-3 examples of both constructive and non-constructive feedback. Set 'type' to 'constructive' or 'non-constructive', and 'actionable' to true when the creator can act on it
  - Identify comments that reference specific timestamps and explain why viewers highlighted them

- For 'questionIdentification':
  - Extract all substantive questions asked in the comments
  - Categorize questions by topic

- For 'audienceInsights':
  - Generate 2-3 viewer personas based on comment patterns
  - Provide a community health score (1-10) and analysis
  - Analyze the language and tone profile of the audience
  - Identify power commenters who drive engagement

- For 'contextualAnalysis':
  - Analyze feedback about the video's title and thumbnail
  - Compare the video's promised content vs. what viewers perceived
  - Suggest keywords for SEO based on comment content

- For 'enhancedActionPlan':
  - Categorize actionable suggestions into content ideas, community engagement tactics, and video optimization tips
  - For each suggestion, provide 2-3 supporting comment quotes as evidence
  - Assign a priority level to each suggestion (high, medium, low)
"""


def _get(record: Any, camel: str, snake: str) -> Any:
    if isinstance(record, dict):
        value = record.get(camel)
        return value if value is not None else record.get(snake)
    value = getattr(record, snake, None)
    return value if value is not None else getattr(record, camel, None)


def format_comment(comment: Any) -> str:
    """Render one comment as an Author/Likes/Comment block."""
    author = _get(comment, "authorDisplayName", "author_display_name") or "Anonymous"
    likes = _get(comment, "likeCount", "like_count")
    if isinstance(likes, bool) or not isinstance(likes, (int, float)):
        likes = 0
    text = (
        _get(comment, "textDisplay", "text_display")
        or _get(comment, "textOriginal", "text_original")
        or "No text"
    )
    return f"Author: {author}\nLikes: {likes}\nComment: {text}\n---"


def build_prompt(title: str, description: str, comments: Sequence[Any]) -> str:
    formatted = "\n".join(format_comment(comment) for comment in comments)
    return PROMPT_TEMPLATE.format(
        title=title, description=description, comments=formatted
    )


def fallback_report(title: str) -> AnalysisReport:
    """Report returned when there is nothing to analyse."""
    return AnalysisReport(
        written_analysis=(
            f'The requested analysis of YouTube comments for the video "{title}" '
            "cannot be performed as no valid comment data was provided. Every "
            "comment entry was missing its author or its text."
        ),
        at_a_glance_summary=AtAGlanceSummary(
            overall_sentiment=UNDETERMINABLE_SENTIMENT
        ),
        audience_insights=AudienceInsights(
            community_health_score=0,
            community_health_analysis="No data available due to lack of comments",
        ),
    )


class GeminiAPIClient:
    """
    Generative Language API client

    Handles:
    - Prompt assembly from video context and comments
    - Schema-constrained JSON generation
    - Deterministic fallback when no usable comments exist
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
        schema: Optional[Dict[str, Any]] = None,
    ):
        settings = get_config().gemini

        self.api_key = api_key or get_config().gemini_api_key
        if not self.api_key:
            raise ValueError(
                "Gemini API key not found. Set GEMINI_API_KEY in .env or pass to constructor"
            )

        self.model = model or settings.model
        self.base_url = (base_url or settings.base_url).rstrip("/")
        self.schema = schema or ANALYSIS_REPORT_SCHEMA
        self.client = client or httpx.AsyncClient(
            timeout=timeout if timeout is not None else settings.request_timeout
        )

        logger.info(f"✅ Gemini API client initialized (model={self.model})")

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/models/{self.model}:generateContent"

    def build_payload(self, prompt: str) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": prompt}]}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": self.schema,
            },
        }

    async def generate(
        self, title: str, description: str, comments: Sequence[Any]
    ) -> AnalysisReport:
        """
        Analyse comments and return a structured report

        Args:
            title: Video title, embedded verbatim in the prompt
            description: Video description, embedded verbatim in the prompt
            comments: Comment records (models or camelCase dicts)

        Raises:
            GenerationFailedError: Non-2xx status or unusable response body
        """
        valid_comments = [c for c in comments if has_comment_text(c)]
        logger.info(f"Formatting {len(valid_comments)} valid comments for Gemini API")

        if not valid_comments:
            logger.warning("⚠️ No valid comments to analyze, using fallback report")
            return fallback_report(title)

        payload = self.build_payload(build_prompt(title, description, valid_comments))

        try:
            response = await self.client.post(
                self.endpoint,
                params={"key": self.api_key},
                json=payload,
            )
        except httpx.RequestError as e:
            logger.error(f"❌ Network error calling Gemini API: {e}")
            raise GenerationFailedError(f"Gemini API request failed: {e}") from e

        if not response.is_success:
            logger.error(f"❌ Gemini API call failed with status: {response.status_code}")
            raise GenerationFailedError(response.status_code)

        report = self.parse_response(response)
        logger.info("🧠 Gemini analysis complete")
        return report

    @staticmethod
    def parse_response(response: httpx.Response) -> AnalysisReport:
        """Read ``candidates[0].content.parts[0].text`` as an AnalysisReport."""
        try:
            result = response.json()
            parts: List[Dict[str, Any]] = result["candidates"][0]["content"]["parts"]
            json_text = parts[0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("❌ Unexpected Gemini API response structure")
            raise GenerationFailedError(MALFORMED_RESPONSE) from e

        try:
            return AnalysisReport.model_validate(json.loads(json_text))
        except (TypeError, ValueError, PydanticValidationError) as e:
            logger.error(f"❌ Gemini API returned unparseable report JSON: {e}")
            raise GenerationFailedError(MALFORMED_RESPONSE) from e

    async def close(self) -> None:
        await self.client.aclose()
        logger.info("🔌 Gemini API client closed")

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


def create_gemini_client(api_key: Optional[str] = None) -> GeminiAPIClient:
    """Factory function to create the generative API client"""
    return GeminiAPIClient(api_key=api_key)
