from datetime import datetime, timezone

import pytest
from bs4.builder import ParserRejectedMarkup

import blog_docs_index.extract.extractors as extractors_mod
from blog_docs_index.errors import MalformedMarkupError
from blog_docs_index.extract.extractors import HtmlExtractor, new_extractor
from blog_docs_index.extract.types import CanonicalDocument


def test_html_document_fields(load_fixture):
    doc = HtmlExtractor("/blog/").parse(load_fixture("html_sample.html"), "post")
    assert doc.url == "/blog/post"
    assert doc.title == "Sample title"
    assert doc.published_date == datetime(2025, 1, 1, 10, 30, tzinfo=timezone.utc)
    assert doc.tags == ("tag", "test")
    assert doc.summary == "Sample summary"
    assert doc.sections == ("Section 1", "Sub-section")
    assert doc.paragraphs == (
        "2025-01-01T10:30:00.000Z",
        "Paragraph 1 with a link.",
        "Paragraph 2 continued.",
        "Paragraph 3 uses <tags> & entities.",
    )
    assert doc.snippets == ('if a < b:\n    print("ok")',)


def test_html_without_marked_elements_gives_empty_fields(load_fixture):
    doc = HtmlExtractor("/blog").parse(load_fixture("html_no_data.html"), "nodata")
    assert doc == CanonicalDocument(url="/blog/nodata")


def test_html_parse_failure_returns_url_only(monkeypatch):
    def _reject(*_args, **_kwargs):
        raise ParserRejectedMarkup("boom")

    monkeypatch.setattr(extractors_mod, "BeautifulSoup", _reject)
    doc = HtmlExtractor("/blog").parse("<p>whatever</p>", "broken")
    assert doc == CanonicalDocument.empty("/blog/broken")


def test_html_empty_content_returns_url_only():
    assert HtmlExtractor("/blog").parse("", "empty") == CanonicalDocument.empty("/blog/empty")


def test_html_title_heading_excluded_from_sections():
    content = "<h1 data-bdsm='title'>Main</h1><h1>Other top</h1><h4>Deep</h4><h6>Deepest</h6>"
    doc = HtmlExtractor("/blog").parse(content, "s")
    assert doc.title == "Main"
    assert doc.sections == ("Other top", "Deep", "Deepest")


def test_html_missing_or_bad_date_is_absent():
    assert HtmlExtractor("/blog").parse("<p>No date</p>", "a").published_date is None
    assert HtmlExtractor("/blog").parse('<time data-bdsm="date">yesterday</time>', "b").published_date is None


def test_html_tags_come_only_from_marked_list():
    content = '<ul><li>not a tag</li></ul><ol data-bdsm="tags"><li>one</li><li>two</li></ol>'
    assert HtmlExtractor("/blog").parse(content, "t").tags == ("one", "two")


def test_html_override_changes_only_that_field(load_fixture):
    content = load_fixture("html_sample.html")
    default = HtmlExtractor("/blog").parse(content, "doc")
    custom = new_extractor("html", "/blog", {"snippets": lambda soup: ["custom"]}).parse(content, "doc")
    assert custom.snippets == ("custom",)
    assert custom.title == default.title
    assert custom.paragraphs == default.paragraphs
    assert custom.tags == default.tags


def test_html_override_errors_propagate():
    def _broken(soup):
        raise MalformedMarkupError("custom parser failed", 0)

    extractor = HtmlExtractor("/blog", {"summary": _broken})
    with pytest.raises(MalformedMarkupError):
        extractor.parse("<p>text</p>", "x")


def test_html_attribute_with_double_quote_is_not_malformed():
    content = """<h1 data-bdsm="title">T</h1><p>Buy the <a title='15" screen'>laptop</a> now.</p>"""
    doc = HtmlExtractor("/blog").parse(content, "q")
    assert doc.title == "T"
    assert doc.paragraphs == ("Buy the laptop now.",)


def test_html_attribute_with_both_quote_kinds_is_not_malformed():
    content = """<p>A <span data-note="it's 15&quot; wide > 14">mixed</span> quote.</p>"""
    assert HtmlExtractor("/blog").parse(content, "q").paragraphs == ("A mixed quote.",)


def test_html_script_and_style_text_is_dropped():
    content = (
        '<div data-bdsm="summary">Intro<script>if (a<b && c>d) { x(1); }</script>'
        "<style>p > em { color: red; }</style> text</div>"
    )
    assert HtmlExtractor("/blog").parse(content, "s").summary == "Intro text"
