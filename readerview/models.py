from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List


@dataclass(frozen=True)
class ExtractionResult:
    title: str
    # Raw, unsanitized HTML
    content: str


@dataclass(frozen=True)
class ArticleRecord:
    id: str
    source_url: str
    title: str
    content: str
    fetched_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def timestamp(self) -> int:
        """Fetch time as epoch milliseconds."""
        return int(self.fetched_at.timestamp() * 1000)


@dataclass(frozen=True)
class ChapterEntry:
    id: str
    title: str

    def to_dict(self) -> dict:
        return {"id": self.id, "title": self.title}


@dataclass
class SegmentResult:
    html: str
    chapters: List[ChapterEntry] = field(default_factory=list)


@dataclass
class RenderedArticle:
    record: ArticleRecord
    # Segmented and sanitized; the only form handed to clients
    html: str
    chapters: List[ChapterEntry] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "url": self.record.source_url,
            "title": self.record.title,
            "content": self.html,
            "timestamp": self.record.timestamp,
            "chapters": [c.to_dict() for c in self.chapters],
        }
