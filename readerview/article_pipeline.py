import logging
from typing import Callable, Optional

from .chapter_discovery import segment_chapters
from .errors import NotFound, TransportFailure
from .extractor import extract_main_content
from .fixtures import demo_document
from .http_client import Fetcher
from .models import ArticleRecord, ExtractionResult, RenderedArticle
from .sanitizer import sanitize_html
from .store import ArticleStore, IdGenerator, InMemoryArticleStore, token_id_generator
from .url_analysis import is_demo_url, validate_url

logger = logging.getLogger("readerview.article_pipeline")


def render_content(content: str):
    """Segment raw content into chapters, then sanitize the result.

    Sanitizing last covers the markup added by segmentation.
    """
    segmented = segment_chapters(content)
    return sanitize_html(segmented.html), segmented.chapters


class ArticlePipeline:
    def __init__(
        self,
        fetcher: Optional[Fetcher] = None,
        store: Optional[ArticleStore] = None,
        id_generator: IdGenerator = token_id_generator,
        log_fn: Optional[Callable[[str], None]] = None,
    ):
        self.fetcher = fetcher or Fetcher()
        self.store = store if store is not None else InMemoryArticleStore()
        self.id_generator = id_generator
        self.log_fn = log_fn or logger.info

    def extract(self, url: str) -> ExtractionResult:
        """Validate ``url`` and produce its title and raw content.

        Demo URLs never touch the network. Transport failures fall back to the
        demo document with a marked title; upstream HTTP errors propagate.
        """
        url = validate_url(url)
        if is_demo_url(url):
            self.log_fn(f"Serving demo document for {url}")
            return demo_document()
        try:
            fetched = self.fetcher.fetch(url)
        except TransportFailure as exc:
            logger.warning("Fetch failed for %s, using demo content: %s", url, exc)
            return demo_document(fetch_failed=True)
        return extract_main_content(fetched.html)

    def ingest(self, url: str) -> ArticleRecord:
        url = (url or "").strip()
        extracted = self.extract(url)
        record = ArticleRecord(
            id=self.id_generator(),
            source_url=url,
            title=extracted.title,
            content=extracted.content,
        )
        self.store.put(record)
        self.log_fn(f"Stored {record.id}: {record.title}")
        return record

    def load(self, article_id: str) -> ArticleRecord:
        record = self.store.get(article_id)
        if record is None:
            raise NotFound("Content not found")
        return record

    def render(self, article_id: str) -> RenderedArticle:
        record = self.load(article_id)
        html, chapters = render_content(record.content)
        return RenderedArticle(record=record, html=html, chapters=chapters)
