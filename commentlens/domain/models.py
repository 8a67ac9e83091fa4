"""
Domain models

Type-safe containers for video data, generated reports and account
documents. Field aliases follow the camelCase wire shape used by the
video API, the generative API and the stored report payloads.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

Number = Union[int, float]


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Explicit nulls fall back to field defaults
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


# ============================================================================
# Video Data
# ============================================================================


class Thumbnail(_CamelModel):
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class VideoDetails(_CamelModel):
    """Immutable snapshot of one video's metadata"""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    title: str = ""
    description: str = ""
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    channel_title: str = Field(default="", alias="channelTitle")
    view_count: int = Field(default=0, alias="viewCount")
    like_count: int = Field(default=0, alias="likeCount")
    comment_count: int = Field(default=0, alias="commentCount")
    thumbnails: Dict[str, Thumbnail] = Field(default_factory=dict)


class VideoComment(_CamelModel):
    """A top-level comment thread entry"""

    id: str
    author_display_name: Optional[str] = Field(default=None, alias="authorDisplayName")
    author_profile_image_url: Optional[str] = Field(
        default=None, alias="authorProfileImageUrl"
    )
    author_channel_url: Optional[str] = Field(default=None, alias="authorChannelUrl")
    text_display: Optional[str] = Field(default=None, alias="textDisplay")
    text_original: Optional[str] = Field(default=None, alias="textOriginal")
    like_count: Optional[int] = Field(default=None, alias="likeCount")
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")
    # Replies are never fetched; an empty list only marks that some exist.
    replies: Optional[List["VideoComment"]] = None

    @property
    def text(self) -> str:
        return self.text_display or self.text_original or ""


class AnalysisData(BaseModel):
    """Joined result of the details and comments fetches"""

    video_details: VideoDetails
    comments: List[VideoComment] = Field(default_factory=list)


# ============================================================================
# Analysis Report
# ============================================================================


class MostLikedComment(_CamelModel):
    comment_text: str = Field(default="", alias="commentText")
    like_count: Number = Field(default=0, alias="likeCount")
    author: str = ""


class AtAGlanceSummary(_CamelModel):
    overall_sentiment: str = Field(default="", alias="overallSentiment")
    top_themes: List[str] = Field(default_factory=list, alias="topThemes")
    most_liked_comments: List[MostLikedComment] = Field(
        default_factory=list, alias="mostLikedComments"
    )


class KeyTheme(_CamelModel):
    theme_title: str = Field(default="", alias="themeTitle")
    explanation: str = ""
    supporting_comments: List[str] = Field(
        default_factory=list, alias="supportingComments"
    )


class ActionableOpportunities(_CamelModel):
    content_requests: List[str] = Field(default_factory=list, alias="contentRequests")
    merchandise_ideas: List[str] = Field(default_factory=list, alias="merchandiseIdeas")
    engagement_opportunities: List[str] = Field(
        default_factory=list, alias="engagementOpportunities"
    )
    brand_identity: List[str] = Field(default_factory=list, alias="brandIdentity")


class EmotionCategory(_CamelModel):
    emotion: str = ""
    percentage: Number = 0
    example_comments: List[str] = Field(default_factory=list, alias="exampleComments")


class CriticismItem(_CamelModel):
    comment: str = ""
    type: str = ""  # "constructive" | "non-constructive"
    actionable: bool = False


class TimestampHighlight(_CamelModel):
    timestamp: str = ""
    comment: str = ""
    reaction: str = ""


class EmotionalAnalysis(_CamelModel):
    emotion_breakdown: List[EmotionCategory] = Field(
        default_factory=list, alias="emotionBreakdown"
    )
    constructive_criticism: List[CriticismItem] = Field(
        default_factory=list, alias="constructiveCriticism"
    )
    timestamp_highlights: List[TimestampHighlight] = Field(
        default_factory=list, alias="timestampHighlights"
    )


class QuestionTopic(_CamelModel):
    topic: str = ""
    questions: List[str] = Field(default_factory=list)


class QuestionIdentification(_CamelModel):
    questions: List[str] = Field(default_factory=list)
    topic_categories: List[QuestionTopic] = Field(
        default_factory=list, alias="topicCategories"
    )


class ViewerPersona(_CamelModel):
    persona_name: str = Field(default="", alias="personaName")
    description: str = ""
    characteristics: List[str] = Field(default_factory=list)
    example_comments: List[str] = Field(default_factory=list, alias="exampleComments")


class LanguageToneProfile(_CamelModel):
    formality_level: str = Field(default="Unknown", alias="formalityLevel")
    technical_level: str = Field(default="Unknown", alias="technicalLevel")
    emotional_tone: str = Field(default="Unknown", alias="emotionalTone")
    common_phrases: List[str] = Field(default_factory=list, alias="commonPhrases")


class PowerCommenter(_CamelModel):
    name: str = ""
    comments: Number = 0
    impact: str = ""


class AudienceInsights(_CamelModel):
    viewer_personas: List[ViewerPersona] = Field(
        default_factory=list, alias="viewerPersonas"
    )
    community_health_score: Number = Field(default=0, alias="communityHealthScore")
    community_health_analysis: str = Field(default="", alias="communityHealthAnalysis")
    language_tone_profile: LanguageToneProfile = Field(
        default_factory=LanguageToneProfile, alias="languageToneProfile"
    )
    power_commenters: List[PowerCommenter] = Field(
        default_factory=list, alias="powerCommenters"
    )

    @field_validator("community_health_score", mode="before")
    @classmethod
    def clamp_health_score(cls, v: Any) -> Number:
        """Keep the score inside 0..10 (0 means no data)"""
        if isinstance(v, bool) or not isinstance(v, (int, float, str)):
            return 0
        try:
            score = float(v) if isinstance(v, str) else v
        except ValueError:
            return 0
        return min(max(score, 0), 10)


class ExpectationVsReality(_CamelModel):
    promised: List[str] = Field(default_factory=list)
    delivered: List[str] = Field(default_factory=list)
    gaps: List[str] = Field(default_factory=list)


class ContextualAnalysis(_CamelModel):
    title_feedback: List[str] = Field(default_factory=list, alias="titleFeedback")
    thumbnail_feedback: List[str] = Field(
        default_factory=list, alias="thumbnailFeedback"
    )
    expectation_vs_reality: ExpectationVsReality = Field(
        default_factory=ExpectationVsReality, alias="expectationVsReality"
    )
    seo_suggestions: List[str] = Field(default_factory=list, alias="seoSuggestions")


class ActionItem(_CamelModel):
    suggestion: str = ""
    supporting_evidence: List[str] = Field(
        default_factory=list, alias="supportingEvidence"
    )
    priority: str = ""  # "high" | "medium" | "low"


class EnhancedActionPlan(_CamelModel):
    content_ideas: List[ActionItem] = Field(default_factory=list, alias="contentIdeas")
    community_engagement_tactics: List[ActionItem] = Field(
        default_factory=list, alias="communityEngagementTactics"
    )
    video_optimization_tips: List[ActionItem] = Field(
        default_factory=list, alias="videoOptimizationTips"
    )


class AnalysisReport(_CamelModel):
    """
    Structured output of the report generator.

    Every list defaults to empty so partially filled model output still
    yields a complete document.
    """

    written_analysis: str = Field(default="", alias="writtenAnalysis")
    at_a_glance_summary: AtAGlanceSummary = Field(
        default_factory=AtAGlanceSummary, alias="atAGlanceSummary"
    )
    key_theme_deep_dive: List[KeyTheme] = Field(
        default_factory=list, alias="keyThemeDeepDive"
    )
    actionable_opportunities: ActionableOpportunities = Field(
        default_factory=ActionableOpportunities, alias="actionableOpportunities"
    )
    emotional_analysis: EmotionalAnalysis = Field(
        default_factory=EmotionalAnalysis, alias="emotionalAnalysis"
    )
    question_identification: QuestionIdentification = Field(
        default_factory=QuestionIdentification, alias="questionIdentification"
    )
    audience_insights: AudienceInsights = Field(
        default_factory=AudienceInsights, alias="audienceInsights"
    )
    contextual_analysis: ContextualAnalysis = Field(
        default_factory=ContextualAnalysis, alias="contextualAnalysis"
    )
    enhanced_action_plan: EnhancedActionPlan = Field(
        default_factory=EnhancedActionPlan, alias="enhancedActionPlan"
    )

    def to_document(self) -> Dict[str, Any]:
        """camelCase dict as stored under reportData"""
        return self.model_dump(by_alias=True)


# ============================================================================
# Account Documents
# ============================================================================


class UserProfile(_CamelModel):
    uid: str
    email: str = ""
    full_name: str = Field(default="", alias="fullName")
    youtube_channel_name: str = Field(default="", alias="youtubeChannelName")
    address: str = ""
    phone_number: str = Field(default="", alias="phoneNumber")
    credits: int = 0
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class Report(_CamelModel):
    id: Optional[str] = None
    user_id: str = Field(alias="userId")
    video_id: str = Field(alias="videoId")
    video_title: str = Field(default="", alias="videoTitle")
    video_url: str = Field(default="", alias="videoUrl")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    report_data: Dict[str, Any] = Field(default_factory=dict, alias="reportData")


VideoComment.model_rebuild()

__all__ = [
    "Thumbnail",
    "VideoDetails",
    "VideoComment",
    "AnalysisData",
    "MostLikedComment",
    "AtAGlanceSummary",
    "KeyTheme",
    "ActionableOpportunities",
    "EmotionCategory",
    "CriticismItem",
    "TimestampHighlight",
    "EmotionalAnalysis",
    "QuestionTopic",
    "QuestionIdentification",
    "ViewerPersona",
    "LanguageToneProfile",
    "PowerCommenter",
    "AudienceInsights",
    "ExpectationVsReality",
    "ContextualAnalysis",
    "ActionItem",
    "EnhancedActionPlan",
    "AnalysisReport",
    "UserProfile",
    "Report",
]
