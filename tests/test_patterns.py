"""
Tests for wordfilter/filtering/patterns.py: phrase-list compilation.

Covers:
* Partial vs whole-word matching (the "ass" / "classic" collision)
* Case sensitivity
* Literal matching of regex metacharacters
* Empty phrase lists, compile_all() table shape
"""

from __future__ import annotations

import re

import pytest

from wordfilter.filtering.patterns import PatternCompiler, find_matches


@pytest.fixture
def partial():
    return PatternCompiler(case_sensitive=False, partial_match=True)


@pytest.fixture
def whole():
    return PatternCompiler(case_sensitive=False, partial_match=False)


class TestMatchingModes:
    def test_partial_matches_inside_words(self, partial):
        p = partial.compile(["ass"])
        assert find_matches(p, "a classic film") == ["ass"]

    def test_whole_word_ignores_inside_words(self, whole):
        p = whole.compile(["ass"])
        assert find_matches(p, "a classic film") == []

    def test_whole_word_matches_standalone(self, whole):
        p = whole.compile(["ass"])
        assert find_matches(p, "what an ass!") == ["ass"]

    def test_multi_word_phrase(self, whole):
        p = whole.compile(["click here"])
        assert find_matches(p, "Please CLICK HERE now") == ["CLICK HERE"]

    def test_cjk_partial(self, partial):
        p = partial.compile(["垃圾"])
        assert find_matches(p, "这真的很垃圾") == ["垃圾"]


class TestCaseSensitivity:
    def test_ignores_case_by_default(self, partial):
        p = partial.compile(["shit"])
        assert find_matches(p, "SHIT and Shit") == ["SHIT", "Shit"]
        assert p.flags & re.IGNORECASE

    def test_case_sensitive(self):
        p = PatternCompiler(case_sensitive=True).compile(["shit"])
        assert find_matches(p, "SHIT and shit") == ["shit"]


class TestCompile:
    def test_metacharacters_are_literal(self, partial):
        p = partial.compile(["a.b", "(x)"])
        assert find_matches(p, "axb a.b (x) x") == ["a.b", "(x)"]

    def test_empty_list_gives_none(self, partial):
        assert partial.compile([]) is None

    def test_blank_phrases_skipped(self, partial):
        assert partial.compile(["", ""]) is None

    def test_duplicates_do_not_change_matches(self, partial):
        p = partial.compile(["hell", "hell"])
        assert find_matches(p, "hell") == ["hell"]

    def test_compile_all_skips_empty_categories(self, partial):
        table = partial.compile_all({"a": ["x"], "b": []})
        assert set(table) == {"a"}

    def test_recompiling_replaces(self, partial):
        first = partial.compile(["one"])
        second = partial.compile(["two"])
        assert find_matches(second, "one two") == ["two"]
        assert find_matches(first, "one two") == ["one"]
