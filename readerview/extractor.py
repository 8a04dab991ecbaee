import logging
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from .config import CONTENT_SELECTORS, MIN_CONTENT_TEXT_LENGTH
from .content_cleanup import resolve_title, strip_noise
from .models import ExtractionResult

logger = logging.getLogger("readerview.extractor")


@dataclass(frozen=True)
class ContentRule:
    """One main-content strategy: a name and a function yielding candidate tags."""

    name: str
    select: Callable[[BeautifulSoup], Iterable[Tag]]


def selector_rule(css: str) -> ContentRule:
    return ContentRule(name=css, select=lambda soup: soup.select(css))


CONTENT_RULES: List[ContentRule] = [selector_rule(css) for css in CONTENT_SELECTORS]


def text_length(tag: Tag) -> int:
    return len(tag.get_text().strip())


def select_content_node(
    soup: BeautifulSoup,
    rules: Sequence[ContentRule] = CONTENT_RULES,
    min_length: int = MIN_CONTENT_TEXT_LENGTH,
) -> Optional[Tag]:
    """Return the first candidate, in rule order, with more than ``min_length`` characters.

    First match wins; a later rule with a longer candidate never overrides it.
    """
    for rule in rules:
        for candidate in rule.select(soup):
            if text_length(candidate) > min_length:
                logger.debug("Content selected by rule %s", rule.name)
                return candidate
    return None


def clean_fragment(fragment: str) -> str:
    soup = BeautifulSoup(fragment, "html.parser")
    strip_noise(soup)
    return str(soup)


def extract_main_content(html: str, rules: Sequence[ContentRule] = CONTENT_RULES) -> ExtractionResult:
    soup = BeautifulSoup(html or "", "html.parser")
    strip_noise(soup)
    title = resolve_title(soup)

    node = select_content_node(soup, rules)
    if node is not None:
        content = node.decode_contents()
    else:
        logger.debug("No content rule qualified; using the whole body")
        content = soup.body.decode_contents() if soup.body else str(soup)

    return ExtractionResult(title=title, content=clean_fragment(content))
