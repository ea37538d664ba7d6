"""
Vocabulary-independent presentation heuristics.

Three checks, each independent of the others and of the whitelist:

* ``excessive_repeat_chars``: a run of the same character at least
  ``repeat_char_limit`` long ("aaaaa").
* ``excessive_caps``: uppercase share of ASCII letters above
  ``caps_limit_percentage``.  Text without letters never trips.
* ``excessive_punctuation``: a run of at least ``punctuation_limit``
  characters from a fixed punctuation set ("?!?!?").
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import List, Optional

from .ruleset import SpecialRuleThresholds

REPEAT_CHARS = "excessive_repeat_chars"
EXCESSIVE_CAPS = "excessive_caps"
EXCESSIVE_PUNCTUATION = "excessive_punctuation"

PUNCTUATION_CHARS = '!@#$%^&*(),.?":{}|<>'

_UPPER_RE = re.compile(r"[A-Z]")
_LETTER_RE = re.compile(r"[A-Za-z]")


@dataclass
class SpecialRuleResult:
    issues: List[str] = field(default_factory=list)

    @property
    def has_issues(self) -> bool:
        return bool(self.issues)


class SpecialRuleDetector:

    def __init__(self, thresholds: Optional[SpecialRuleThresholds] = None):
        self.thresholds = thresholds or SpecialRuleThresholds()
        extra_repeats = max(self.thresholds.repeat_char_limit - 1, 0)
        self._repeat_re = re.compile(r"(.)\1{%d,}" % extra_repeats)
        self._punct_re = re.compile(
            "[%s]{%d,}" % (re.escape(PUNCTUATION_CHARS), max(self.thresholds.punctuation_limit, 1))
        )

    def check(self, text: str) -> SpecialRuleResult:
        result = SpecialRuleResult()

        if self._repeat_re.search(text):
            result.issues.append(REPEAT_CHARS)

        if self.caps_ratio(text) > self.thresholds.caps_limit_percentage:
            result.issues.append(EXCESSIVE_CAPS)

        if self._punct_re.search(text):
            result.issues.append(EXCESSIVE_PUNCTUATION)

        return result

    @staticmethod
    def caps_ratio(text: str) -> float:
        """Uppercase letters as a percentage of ASCII letters (0 when none)."""
        letters = len(_LETTER_RE.findall(text))
        if letters == 0:
            return 0.0
        return len(_UPPER_RE.findall(text)) / letters * 100
