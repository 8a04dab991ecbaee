import secrets
import threading
from typing import Dict, Optional, Protocol

from .models import ArticleRecord

ID_BYTES = 16


class IdGenerator(Protocol):
    def __call__(self) -> str: ...


def token_id_generator() -> str:
    """128-bit URL-safe identifier from the OS random source."""
    return secrets.token_urlsafe(ID_BYTES)


class ArticleStore(Protocol):
    def put(self, record: ArticleRecord) -> str: ...

    def get(self, article_id: str) -> Optional[ArticleRecord]: ...


class InMemoryArticleStore:
    """Process-local store. Records are write-once and are never evicted."""

    def __init__(self) -> None:
        self._records: Dict[str, ArticleRecord] = {}
        self._lock = threading.Lock()

    def put(self, record: ArticleRecord) -> str:
        with self._lock:
            if record.id in self._records:
                raise ValueError(f"Duplicate article id {record.id!r}")
            self._records[record.id] = record
        return record.id

    def get(self, article_id: str) -> Optional[ArticleRecord]:
        with self._lock:
            return self._records.get(article_id)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, article_id: object) -> bool:
        with self._lock:
            return article_id in self._records
