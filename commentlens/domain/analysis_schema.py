"""
Response schema sent to the generative API.

Kept as plain data so the contract can be inspected, diffed and evolved
independently of the prompt text. Mirrors ``AnalysisReport`` field by field.
"""
from typing import Any, Dict, List

_STRING = {"type": "STRING"}
_NUMBER = {"type": "NUMBER"}
_BOOLEAN = {"type": "BOOLEAN"}
_STRING_LIST = {"type": "ARRAY", "items": _STRING}


def _object(**properties: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "OBJECT", "properties": properties}


def _list_of(item: Dict[str, Any]) -> Dict[str, Any]:
    return {"type": "ARRAY", "items": item}


_ACTION_ITEM = _object(
    suggestion=_STRING,
    supportingEvidence=_STRING_LIST,
    priority=_STRING,
)

ANALYSIS_REPORT_SCHEMA: Dict[str, Any] = _object(
    writtenAnalysis={
        "type": "STRING",
        "description": (
            "A detailed 2-3 paragraph narrative summary of the overall analysis, "
            "sentiment, themes, and opportunities."
        ),
    },
    atAGlanceSummary=_object(
        overallSentiment=_STRING,
        topThemes=_STRING_LIST,
        mostLikedComments=_list_of(
            _object(commentText=_STRING, likeCount=_NUMBER, author=_STRING)
        ),
    ),
    keyThemeDeepDive=_list_of(
        _object(
            themeTitle=_STRING,
            explanation=_STRING,
            supportingComments=_STRING_LIST,
        )
    ),
    actionableOpportunities=_object(
        contentRequests=_STRING_LIST,
        merchandiseIdeas=_STRING_LIST,
        engagementOpportunities=_STRING_LIST,
        brandIdentity=_STRING_LIST,
    ),
    emotionalAnalysis=_object(
        emotionBreakdown=_list_of(
            _object(emotion=_STRING, percentage=_NUMBER, exampleComments=_STRING_LIST)
        ),
        constructiveCriticism=_list_of(
            _object(comment=_STRING, type=_STRING, actionable=_BOOLEAN)
        ),
        timestampHighlights=_list_of(
            _object(timestamp=_STRING, comment=_STRING, reaction=_STRING)
        ),
    ),
    questionIdentification=_object(
        questions=_STRING_LIST,
        topicCategories=_list_of(_object(topic=_STRING, questions=_STRING_LIST)),
    ),
    audienceInsights=_object(
        viewerPersonas=_list_of(
            _object(
                personaName=_STRING,
                description=_STRING,
                characteristics=_STRING_LIST,
                exampleComments=_STRING_LIST,
            )
        ),
        communityHealthScore=_NUMBER,
        communityHealthAnalysis=_STRING,
        languageToneProfile=_object(
            formalityLevel=_STRING,
            technicalLevel=_STRING,
            emotionalTone=_STRING,
            commonPhrases=_STRING_LIST,
        ),
        powerCommenters=_list_of(
            _object(name=_STRING, comments=_NUMBER, impact=_STRING)
        ),
    ),
    contextualAnalysis=_object(
        titleFeedback=_STRING_LIST,
        thumbnailFeedback=_STRING_LIST,
        expectationVsReality=_object(
            promised=_STRING_LIST,
            delivered=_STRING_LIST,
            gaps=_STRING_LIST,
        ),
        seoSuggestions=_STRING_LIST,
    ),
    enhancedActionPlan=_object(
        contentIdeas=_list_of(_ACTION_ITEM),
        communityEngagementTactics=_list_of(_ACTION_ITEM),
        videoOptimizationTips=_list_of(_ACTION_ITEM),
    ),
)


def schema_paths(schema: Dict[str, Any] = ANALYSIS_REPORT_SCHEMA, prefix: str = "") -> List[str]:
    """Dotted paths of every property in the schema (arrays marked with [])."""
    paths: List[str] = []
    for name, node in schema.get("properties", {}).items():
        path = f"{prefix}{name}"
        paths.append(path)
        if node.get("type") == "OBJECT":
            paths.extend(schema_paths(node, f"{path}."))
        elif node.get("type") == "ARRAY" and node["items"].get("type") == "OBJECT":
            paths.extend(schema_paths(node["items"], f"{path}[]."))
    return paths
