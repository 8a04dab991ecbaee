import re

from bs4 import BeautifulSoup

from .config import NOISE_CLASSES, NOISE_TAGS


def strip_noise(soup: BeautifulSoup) -> None:
    for tag in soup(list(NOISE_TAGS)):
        tag.decompose()
    for cls in NOISE_CLASSES:
        for tag in soup.select(f".{cls}"):
            tag.decompose()


def collapse_whitespace(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def resolve_title(soup: BeautifulSoup) -> str:
    """<title> text, else the first <h1>, else "Untitled"."""
    if soup.title:
        title = collapse_whitespace(soup.title.get_text())
        if title:
            return title
    h1 = soup.find("h1")
    if h1:
        title = collapse_whitespace(h1.get_text())
        if title:
            return title
    return "Untitled"
