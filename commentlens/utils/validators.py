"""Input validation utilities."""

import logging
import re
from typing import Any, List, Mapping, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)

VIDEO_ID_LENGTH = 11

_VIDEO_URL_PATTERN = re.compile(
    r"^.*(youtu.be/|v/|u/\w/|embed/|watch\?v=|&v=)([^#&?]*).*"
)


def extract_video_id(url: Any) -> Optional[str]:
    """
    Extract the 11-character video identifier from a YouTube URL.

    Recognizes youtu.be/, v/, u/<x>/, embed/, watch?v= and &v= shapes.

    Args:
        url: Free-form string (anything else yields None)

    Returns:
        The identifier, or None when no 11-character token is found
    """
    if not isinstance(url, str):
        return None

    match = _VIDEO_URL_PATTERN.match(url)
    if match and len(match.group(2)) == VIDEO_ID_LENGTH:
        return match.group(2)
    return None


def _field(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def _is_record(record: Any) -> bool:
    return record is not None and not isinstance(record, (str, bytes, int, float, bool))


def has_comment_text(record: Any) -> bool:
    """Author name plus at least one text field."""
    if not _is_record(record):
        return False
    text = _field(record, "textDisplay") or _field(record, "text_display")
    original = _field(record, "textOriginal") or _field(record, "text_original")
    author = _field(record, "authorDisplayName") or _field(
        record, "author_display_name"
    )
    return bool((text or original) and author)


def is_valid_comment(record: Any) -> bool:
    """Author, text and a defined like count (0 counts as defined)."""
    if not has_comment_text(record):
        return False
    like_count = _field(record, "likeCount", _field(record, "like_count"))
    return like_count is not None


def filter_valid_comments(comments: Sequence[Any]) -> Tuple[List[Any], int]:
    """
    Keep only comments carrying the fields the report generator needs.

    Order is preserved and kept records are returned as-is.

    Returns:
        Tuple of (kept comments, number removed)
    """
    kept = [comment for comment in comments if is_valid_comment(comment)]
    removed = len(comments) - len(kept)

    if removed:
        logger.warning(
            f"⚠️ Some comments ({removed}) were filtered out due to missing required fields"
        )

    return kept, removed
