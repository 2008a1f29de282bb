"""Tests for common.text module."""

import pytest

from common.text import (
    ELLIPSIS,
    detect_language,
    is_arabic,
    normalize_text,
    normalize_url,
    strip_html,
)


class TestNormalizeText:
    def test_collapses_whitespace(self) -> None:
        assert normalize_text("  a \n\t b   c  ", 50) == "a b c"

    def test_short_text_unchanged(self) -> None:
        assert normalize_text("hello world", 11) == "hello world"

    def test_truncates_with_ellipsis(self) -> None:
        result = normalize_text("abcdefghij", 5)
        assert result == "abcd" + ELLIPSIS
        assert len(result) == 5

    @pytest.mark.parametrize("text", ["", "x" * 10, "word " * 100, " \n spaced   out \t "])
    @pytest.mark.parametrize("max_len", [1, 5, 20, 220])
    def test_never_exceeds_max_len(self, text: str, max_len: int) -> None:
        assert len(normalize_text(text, max_len)) <= max_len

    def test_none_is_empty(self) -> None:
        assert normalize_text(None, 10) == ""


class TestStripHtml:
    def test_strips_tags(self) -> None:
        assert strip_html("<h1>Title</h1> <p>Body</p>") == "Title Body"

    def test_keeps_entities(self) -> None:
        assert strip_html("<b>Tom &amp; Jerry</b>") == "Tom &amp; Jerry"

    def test_tags_with_attributes(self) -> None:
        assert strip_html('<a href="x">link</a>\n\n<img src="y"/>text') == "link text"

    def test_none_returns_empty(self) -> None:
        assert strip_html(None) == ""


class TestNormalizeUrl:
    def test_drops_fragment(self) -> None:
        assert normalize_url("https://example.com/a?b=1#section") == "https://example.com/a?b=1"

    def test_leaves_url_without_fragment(self) -> None:
        assert normalize_url("https://example.com/feed.xml") == "https://example.com/feed.xml"

    def test_relative_url_returned_unchanged(self) -> None:
        assert normalize_url("/news/story#top") == "/news/story#top"

    def test_garbage_returned_unchanged(self) -> None:
        assert normalize_url("not a url") == "not a url"

    def test_unparseable_host_returned_unchanged(self) -> None:
        assert normalize_url("http://[::1/x#y") == "http://[::1/x#y"

    @pytest.mark.parametrize(
        "url",
        [
            "https://example.com/a#b",
            "https://example.com/a",
            "  https://example.com/a#b  ",
            "relative/path#x",
            "",
        ],
    )
    def test_idempotent(self, url: str) -> None:
        assert normalize_url(normalize_url(url)) == normalize_url(url)


class TestScriptDetection:
    def test_arabic_text(self) -> None:
        assert is_arabic("فوز الفريق في المباراة")

    def test_mixed_text(self) -> None:
        assert is_arabic("Match report: الأهلي")

    def test_latin_text(self) -> None:
        assert not is_arabic("Team wins match")

    def test_empty(self) -> None:
        assert not is_arabic(None)

    def test_detect_language(self) -> None:
        assert detect_language("خبر عاجل") == "ar"
        assert detect_language("Breaking news") == "en"
