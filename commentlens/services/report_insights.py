# commentlens/services/report_insights.py
"""
Report Insights
Derived views over a stored report payload (charts, badges, splits)
"""

import re
from collections import Counter
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

from commentlens.domain.models import Report

_SENTIMENT_PATTERNS = {
    "positive": re.compile(r"(\d+(?:\.\d+)?)%\s*Positive", re.IGNORECASE),
    "neutral": re.compile(r"(\d+(?:\.\d+)?)%\s*Neutral", re.IGNORECASE),
    "negative": re.compile(r"(\d+(?:\.\d+)?)%\s*Negative", re.IGNORECASE),
}

PRIORITIES = ("high", "medium", "low")


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def parse_sentiment_breakdown(sentiment: Union[str, Mapping[str, Any], None]) -> Dict[str, float]:
    """
    Percentages per sentiment

    Accepts the generated string form ("95% Positive / 5% Neutral") or an
    already split mapping. Missing parts are 0.
    """
    breakdown = {"positive": 0.0, "neutral": 0.0, "negative": 0.0}

    if isinstance(sentiment, str):
        for key, pattern in _SENTIMENT_PATTERNS.items():
            match = pattern.search(sentiment)
            if match:
                breakdown[key] = float(match.group(1))
    elif isinstance(sentiment, Mapping):
        for key in breakdown:
            breakdown[key] = _number(sentiment.get(key))

    return breakdown


def comments_timeline(
    comments: Optional[Sequence[Mapping[str, Any]]], limit: int = 100
) -> List[Tuple[str, int]]:
    """
    Comment counts per day, oldest day first

    Only the first ``limit`` comments are counted; they arrive ordered by
    relevance. Comments without ``publishedAt`` are skipped.
    """
    counts: Counter = Counter()
    for comment in list(comments or [])[:limit]:
        published = comment.get("publishedAt") if isinstance(comment, Mapping) else None
        if published:
            counts[str(published).split("T")[0]] += 1
    return sorted(counts.items())


def split_criticism(
    items: Optional[Sequence[Mapping[str, Any]]],
) -> Tuple[List[Mapping[str, Any]], List[Mapping[str, Any]]]:
    """(constructive, non-constructive); unknown types land in neither"""
    constructive, non_constructive = [], []
    for item in items or []:
        kind = str(item.get("type", "")).lower()
        if kind == "constructive":
            constructive.append(item)
        elif kind == "non-constructive":
            non_constructive.append(item)
    return constructive, non_constructive


def community_health_band(score: Any) -> str:
    value = _number(score)
    if value >= 8:
        return "high"
    if value >= 5:
        return "medium"
    return "low"


def normalize_priority(priority: Any) -> str:
    value = str(priority or "").strip().lower()
    return value if value in PRIORITIES else "unknown"


def _action_plan_view(plan: Mapping[str, Any]) -> Dict[str, List[Dict[str, Any]]]:
    view = {}
    for key in ("contentIdeas", "communityEngagementTactics", "videoOptimizationTips"):
        view[key] = [
            {**item, "priority": normalize_priority(item.get("priority"))}
            for item in plan.get(key) or []
        ]
    return view


def build_report_view(report: Report) -> Dict[str, Any]:
    """Report document plus the derived insights shown on the detail page"""
    data = report.report_data or {}
    glance = data.get("atAGlanceSummary") or {}
    emotional = data.get("emotionalAnalysis") or {}
    audience = data.get("audienceInsights") or {}

    constructive, non_constructive = split_criticism(
        emotional.get("constructiveCriticism")
    )
    health_score = _number(audience.get("communityHealthScore"))

    return {
        "report": report.model_dump(by_alias=True, mode="json"),
        "insights": {
            "sentiment": parse_sentiment_breakdown(glance.get("overallSentiment")),
            "timeline": [
                {"date": day, "count": count}
                for day, count in comments_timeline(data.get("comments"))
            ],
            "constructive_criticism": constructive,
            "non_constructive_criticism": non_constructive,
            "community_health": {
                "score": health_score,
                "band": community_health_band(health_score),
            },
            "action_plan": _action_plan_view(data.get("enhancedActionPlan") or {}),
        },
    }
