from __future__ import annotations

import html
from datetime import datetime
from typing import List, Optional

from bs4 import BeautifulSoup
from bs4.dammit import EntitySubstitution
from bs4.element import Comment, Tag
from bs4.formatter import HTMLFormatter

from .dates import parse_date
from .field_sets import HtmlFieldSet
from .tag_strip import strip_tags

BDSM_ATTR = "data-bdsm"
HEADINGS = ["h1", "h2", "h3", "h4", "h5", "h6"]
UNWANTED_TAGS = ["script", "style", "noscript"]


class DoubleQuotedFormatter(HTMLFormatter):
    """
    Minimal entity substitution, with every attribute value written inside double quotes.
    """

    def __init__(self):
        super().__init__(entity_substitution=EntitySubstitution.substitute_xml)

    def attribute_value(self, value):
        return super().attribute_value(value).replace('"', "&quot;")


INNER_MARKUP_FORMATTER = DoubleQuotedFormatter()


def _marked(kind: str) -> str:
    return f'[{BDSM_ATTR}="{kind}"]'


def normalize_text(text: str) -> str:
    return " ".join(text.split())


def drop_comments(root) -> None:
    for comment in root.find_all(string=lambda node: isinstance(node, Comment)):
        comment.extract()


def drop_unwanted_nodes(root) -> None:
    for tag in root.find_all(UNWANTED_TAGS):
        tag.decompose()


def element_text(tag: Optional[Tag]) -> str:
    """
    Inner text of ``tag``, obtained by stripping the tags of its inner markup.
    """
    if tag is None:
        return ""
    return html.unescape(strip_tags(tag.decode_contents(formatter=INNER_MARKUP_FORMATTER))).strip()


def parse_title(soup: BeautifulSoup) -> str:
    return normalize_text(element_text(soup.select_one(_marked("title"))))


def parse_date_field(soup: BeautifulSoup) -> Optional[datetime]:
    return parse_date(element_text(soup.select_one(_marked("date"))))


def parse_tags(soup: BeautifulSoup) -> List[str]:
    container = soup.select_one(_marked("tags"))
    if container is None:
        return []
    return [normalize_text(element_text(li)) for li in container.find_all("li")]


def parse_sections(soup: BeautifulSoup) -> List[str]:
    return [
        normalize_text(element_text(heading))
        for heading in soup.find_all(HEADINGS)
        if heading.get(BDSM_ATTR) != "title"
    ]


def parse_summary(soup: BeautifulSoup) -> str:
    return element_text(soup.select_one(_marked("summary")))


def parse_paragraphs(soup: BeautifulSoup) -> List[str]:
    return [element_text(p) for p in soup.find_all("p")]


def parse_snippets(soup: BeautifulSoup) -> List[str]:
    return [element_text(code) for code in soup.find_all("code")]


DEFAULT_HTML_FIELDS = HtmlFieldSet(
    title=parse_title,
    date=parse_date_field,
    tags=parse_tags,
    sections=parse_sections,
    summary=parse_summary,
    paragraphs=parse_paragraphs,
    snippets=parse_snippets,
)
