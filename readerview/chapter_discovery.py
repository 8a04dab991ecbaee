from typing import Dict, List, Set

from bs4 import BeautifulSoup, Tag

from .chapter_title import preformatted_title, truncate_title
from .config import CHAPTER_ID_PREFIX, CHAPTER_MARKER_RE, PARAGRAPH_BREAK_RE, SPACE_RUN_RE
from .models import ChapterEntry, SegmentResult


def reflow_text(text: str) -> List[str]:
    """Turn line-broken preformatted text into paragraphs.

    Blank lines separate paragraphs; single newlines become spaces.
    """
    normalized = (text or "").replace("\r\n", "\n").replace("\r", "\n")
    paragraphs: List[str] = []
    for block in PARAGRAPH_BREAK_RE.split(normalized):
        flowed = SPACE_RUN_RE.sub(" ", block.replace("\n", " ")).strip()
        if flowed:
            paragraphs.append(flowed)
    return paragraphs


def is_chapter_marker(text: str) -> bool:
    return bool(CHAPTER_MARKER_RE.match(text or ""))


class _ChapterBuilder:
    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self.count = 0
        self.used_ids: Set[str] = {str(tag["id"]) for tag in soup.find_all(id=True)}
        # id(section) -> entry, for the sections this builder created
        self.sections: Dict[int, ChapterEntry] = {}

    def next_number(self) -> int:
        self.count += 1
        return self.count

    def anchor_id(self, number: int) -> str:
        anchor = f"{CHAPTER_ID_PREFIX}{number}"
        suffix = 2
        while anchor in self.used_ids:
            anchor = f"{CHAPTER_ID_PREFIX}{number}-{suffix}"
            suffix += 1
        self.used_ids.add(anchor)
        return anchor

    def new_section(self, number: int, title: str) -> Tag:
        anchor = self.anchor_id(number)
        section = self.soup.new_tag("section", attrs={"class": "chapter", "id": anchor})
        heading = self.soup.new_tag("h2", attrs={"class": "chapter-title"})
        heading.string = title
        section.append(heading)
        self.sections[id(section)] = ChapterEntry(id=anchor, title=title)
        return section

    def inside_chapter(self, tag: Tag) -> bool:
        return any(id(parent) in self.sections for parent in tag.parents)


def _convert_preformatted(builder: _ChapterBuilder) -> None:
    soup = builder.soup
    for pre in soup.find_all("pre"):
        if pre.find_parent("pre") is not None:
            continue
        text = pre.get_text()
        number = builder.next_number()
        section = builder.new_section(number, preformatted_title(text, number))
        for paragraph in reflow_text(text):
            p = soup.new_tag("p")
            p.string = paragraph
            section.append(p)
        pre.replace_with(section)


def _promote_markers(builder: _ChapterBuilder) -> None:
    for p in builder.soup.find_all("p"):
        if builder.inside_chapter(p):
            continue
        # Stripped text is only used for matching and the heading; the paragraph keeps its markup
        text = p.get_text()
        if not is_chapter_marker(text):
            continue
        number = builder.next_number()
        p.wrap(builder.new_section(number, truncate_title(text)))


def segment_chapters(html: str) -> SegmentResult:
    """Convert <pre> blocks and "Chapter N"/"Part N" paragraphs into titled chapter sections."""
    soup = BeautifulSoup(html or "", "html.parser")
    builder = _ChapterBuilder(soup)
    _convert_preformatted(builder)
    _promote_markers(builder)

    chapters = [
        builder.sections[id(section)]
        for section in soup.find_all("section")
        if id(section) in builder.sections
    ]
    return SegmentResult(html=str(soup), chapters=chapters)
