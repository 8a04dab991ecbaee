import bleach
from bs4 import BeautifulSoup, Comment

from .config import ALLOWED_ATTRIBUTES, ALLOWED_PROTOCOLS, ALLOWED_TAGS, DROP_WITH_CONTENT


def drop_executable_content(html: str) -> str:
    """Remove script-like elements together with their text, plus comments."""
    soup = BeautifulSoup(html or "", "html.parser")
    for tag in soup(list(DROP_WITH_CONTENT)):
        tag.decompose()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()
    return str(soup)


def sanitize_html(html: str) -> str:
    """Filter HTML down to the configured tag and attribute allow-lists.

    Everything else is stripped: unknown tags, event handlers, style and
    data-* attributes, and URLs with non-http(s)/mailto protocols.
    """
    pre = drop_executable_content(html)
    return bleach.clean(
        pre,
        tags=ALLOWED_TAGS,
        attributes=list(ALLOWED_ATTRIBUTES),
        protocols=ALLOWED_PROTOCOLS,
        strip=True,
        strip_comments=True,
    )
