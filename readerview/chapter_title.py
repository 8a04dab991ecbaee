import re

from .config import CHAPTER_TITLE_MAX_LENGTH, ELLIPSIS


def truncate_title(text: str, limit: int = CHAPTER_TITLE_MAX_LENGTH) -> str:
    """Collapse whitespace and cut to ``limit`` characters, marking the cut with an ellipsis."""
    title = re.sub(r"\s+", " ", text or "").strip()
    if len(title) <= limit:
        return title
    return title[:limit].rstrip() + ELLIPSIS


def preformatted_title(text: str, number: int, limit: int = CHAPTER_TITLE_MAX_LENGTH) -> str:
    normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n").strip()
    first_line = normalized.split("\n", 1)[0] if normalized else ""
    return truncate_title(first_line, limit) or f"Chapter {number}"
