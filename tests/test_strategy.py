"""
Tests for wordfilter/filtering/strategy.py: block / replace / warn.
"""

from __future__ import annotations

import pytest

from wordfilter.filtering.patterns import PatternCompiler
from wordfilter.filtering.ruleset import Strategy
from wordfilter.filtering.strategy import WARNING_MARKER, StrategyApplier
from wordfilter.filtering.whitelist import WhitelistGuard


@pytest.fixture
def patterns():
    return PatternCompiler().compile_all({
        "profanity": ["shit", "ass"],
        "spam": ["click here"],
        "custom": [],
    })


@pytest.fixture
def whitelist():
    return WhitelistGuard(["class"])


class TestReplace:
    def test_masks_match_preserving_length(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.REPLACE, "*")
        assert applier.apply("this is shit", ["profanity"], patterns, whitelist) == "this is ****"

    def test_masks_across_categories(self, patterns, whitelist):
        applier = StrategyApplier("replace", "#")
        text = "shit, click here"
        out = applier.apply(text, ["profanity", "spam"], patterns, whitelist)
        assert out == "####, ##########"
        assert len(out) == len(text)

    def test_only_given_categories(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.REPLACE)
        assert applier.apply("shit click here", ["spam"], patterns, whitelist) == "shit **********"

    def test_keeps_case_of_surroundings(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.REPLACE)
        assert applier.apply("Oh SHIT!", ["profanity"], patterns, whitelist) == "Oh ****!"

    def test_unknown_category_ignored(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.REPLACE)
        assert applier.apply("shit", ["nope", "custom"], patterns, whitelist) == "shit"


class TestBlock:
    def test_text_untouched(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.BLOCK)
        assert applier.apply("this is shit", ["profanity"], patterns, whitelist) == "this is shit"


class TestWarn:
    def test_prefixes_marker(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.WARN)
        out = applier.apply("this is shit", ["profanity"], patterns, whitelist)
        assert out == f"{WARNING_MARKER} this is shit"

    def test_marker_applied_once_for_many_categories(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.WARN)
        out = applier.apply("shit click here", ["profanity", "spam"], patterns, whitelist)
        assert out.count(WARNING_MARKER) == 1

    def test_no_marker_without_pattern_match(self, patterns, whitelist):
        applier = StrategyApplier(Strategy.WARN)
        assert applier.apply("SHOUTING!!!!!", ["profanity"], patterns, whitelist) == "SHOUTING!!!!!"
