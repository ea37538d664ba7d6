"""
Turns a filtered text into its outgoing form.

* ``replace``: every non-whitelisted match becomes ``replace_char``
  repeated to the match length, so length and positions are kept.
* ``block``: text is returned untouched; the caller drops the message.
* ``warn``: ``[CONTENT WARNING] `` is prefixed once when any given
  category still matches the original text.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Match, Pattern

from .ruleset import Strategy
from .whitelist import WhitelistGuard

WARNING_MARKER = "[CONTENT WARNING]"


class StrategyApplier:

    def __init__(self, strategy: Strategy, replace_char: str = "*"):
        self.strategy = Strategy(strategy)
        self.replace_char = replace_char

    def apply(
        self,
        text: str,
        categories: Iterable[str],
        patterns: Mapping[str, Pattern[str]],
        whitelist: WhitelistGuard,
    ) -> str:
        active = [patterns[c] for c in categories if c in patterns]

        if self.strategy is Strategy.REPLACE:
            def _mask(m: Match[str]) -> str:
                found = m.group(0)
                if whitelist.is_whitelisted(found):
                    return found
                return self.replace_char * len(found)

            # Later categories see the text already masked by earlier ones.
            filtered = text
            for pattern in active:
                filtered = pattern.sub(_mask, filtered)
            return filtered

        if self.strategy is Strategy.WARN:
            if any(pattern.search(text) for pattern in active):
                return f"{WARNING_MARKER} {text}"
            return text

        return text
