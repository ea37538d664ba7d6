"""
Compiles each category's phrase list into a single regex.

Phrases are matched literally (``re.escape``) and joined by
alternation.  In partial mode a phrase matches anywhere, so ``ass``
also hits ``class``; the whitelist is what keeps that usable.  In
whole-word mode the alternation is wrapped in ``\\b`` anchors.  Python's
``\\b`` is Unicode-aware, so CJK characters count as word characters.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Mapping, Optional, Pattern

logger = logging.getLogger(__name__)


class PatternCompiler:
    """
    Builds one pattern per category from the matcher settings.

    The compiler holds no pattern state of its own; callers keep the
    ``{category: pattern}`` table and replace entries wholesale.
    """

    def __init__(self, case_sensitive: bool = False, partial_match: bool = True):
        self.case_sensitive = case_sensitive
        self.partial_match = partial_match

    @property
    def flags(self) -> int:
        return 0 if self.case_sensitive else re.IGNORECASE

    def compile(self, phrases: Iterable[str]) -> Optional[Pattern[str]]:
        """Return one pattern covering *phrases*, or ``None`` if there are none."""
        escaped: List[str] = []
        seen = set()
        for phrase in phrases:
            if not phrase or phrase in seen:
                continue
            seen.add(phrase)
            escaped.append(re.escape(phrase))
        if not escaped:
            return None

        alternation = "|".join(escaped)
        if self.partial_match:
            source = f"({alternation})"
        else:
            source = rf"\b({alternation})\b"
        return re.compile(source, self.flags)

    def compile_all(
        self,
        phrase_map: Mapping[str, Iterable[str]],
    ) -> Dict[str, Pattern[str]]:
        """Build a fresh table; categories without phrases are left out."""
        table: Dict[str, Pattern[str]] = {}
        for category, phrases in phrase_map.items():
            pattern = self.compile(phrases)
            if pattern is not None:
                table[category] = pattern
        logger.debug(
            "Compiled %d pattern(s) (case_sensitive=%s, partial_match=%s)",
            len(table), self.case_sensitive, self.partial_match,
        )
        return table


def find_matches(pattern: Pattern[str], text: str) -> List[str]:
    """All matched substrings in order of appearance, as found in *text*."""
    return [m.group(0) for m in pattern.finditer(text)]
