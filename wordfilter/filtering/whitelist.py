"""
Curated exceptions to the word lists.

Partial matching flags ``ass`` inside ``class`` and 草 inside unrelated
text.  Rather than disambiguate by context, any input that *is* or
*contains* a whitelist entry is exempt from word-list filtering as a
whole.  The same test is reused on individual matched substrings.
"""

from __future__ import annotations

from typing import Any, FrozenSet, Iterable, Iterator

from .ruleset import as_word_list


class WhitelistGuard:
    """
    Immutable set of lower-cased exception strings.

    ``add`` / ``remove`` return a new guard so the engine can swap the
    reference while concurrent checks keep reading the old one.
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: Iterable[str] = ()):
        self._entries: FrozenSet[str] = frozenset(e.lower() for e in entries if e)

    def is_whitelisted(self, text: str) -> bool:
        lowered = text.lower()
        if lowered in self._entries:
            return True
        return any(entry in lowered for entry in self._entries)

    def add(self, words: Any) -> "WhitelistGuard":
        return WhitelistGuard(self._entries | {w.lower() for w in as_word_list(words)})

    def remove(self, words: Any) -> "WhitelistGuard":
        return WhitelistGuard(self._entries - {w.lower() for w in as_word_list(words)})

    @property
    def entries(self) -> FrozenSet[str]:
        return self._entries

    def __contains__(self, word: object) -> bool:
        return isinstance(word, str) and word.lower() in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
