"""Tests for filter_articles.blacklist module."""

import pytest

from filter_articles.blacklist import compile_blacklist


class TestCompileBlacklist:
    @pytest.mark.parametrize("blacklist", [None, {}, {"ar": [], "en": [], "adult": [], "violence": []}])
    @pytest.mark.parametrize("text", ["", "anything", "porn", "خبر"])
    def test_empty_lists_never_block(self, blacklist, text: str) -> None:
        assert compile_blacklist(blacklist)(text) is False

    def test_blocks_whole_word_case_insensitive(self) -> None:
        is_blocked = compile_blacklist({"en": ["casino"]})
        assert is_blocked("New CASINO opens downtown")
        assert not is_blocked("casinos are not matched")

    def test_combines_all_buckets(self) -> None:
        is_blocked = compile_blacklist({"ar": ["قمار"], "en": ["spam"], "adult": ["xxx"], "violence": ["gore"]})
        assert is_blocked("خبر عن قمار اليوم")
        assert is_blocked("spam alert")
        assert is_blocked("xxx")
        assert is_blocked("graphic gore")
        assert not is_blocked("ordinary headline")

    def test_escapes_regex_characters(self) -> None:
        is_blocked = compile_blacklist({"en": ["c++", "a.b"]})
        assert not is_blocked("axb")
        assert is_blocked("a.b is here")

    def test_ignores_unknown_buckets(self) -> None:
        assert not compile_blacklist({"other": ["word"]})("word")

    def test_none_text(self) -> None:
        assert not compile_blacklist({"en": ["x"]})(None)
