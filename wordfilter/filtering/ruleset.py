"""
Rule-set definitions: categories, word lists, whitelist, presets and
special-rule thresholds.

A ``RuleSet`` is the static input structure handed to the engine at
construction.  It is never mutated; engines copy the word lists out of
it (``RuleSet.phrases()``) so several engines built from the same rule
set stay independent.

Each category's phrases may be grouped into named sub-lists
(``profanity.english``, ``profanity.chinese`` ...).  The sub-lists are
concatenated in declaration order; grouping has no effect on matching.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


# ------------------------------------------------------------------
# Strategy
# ------------------------------------------------------------------

class Strategy(str, Enum):
    BLOCK = "block"       # leave text alone, caller rejects the message
    REPLACE = "replace"   # mask matched spans with replace_char
    WARN = "warn"         # prefix a warning marker


# ------------------------------------------------------------------
# Active settings
# ------------------------------------------------------------------

DEFAULT_ENABLED_CATEGORIES: Tuple[str, ...] = ("profanity", "spam", "hate", "custom")

# Settings that change what the compiled patterns look like.
MATCHER_FIELDS = frozenset({"case_sensitive", "partial_match"})


def as_word_list(words: Any) -> List[str]:
    """Accept a single string or an iterable of strings."""
    if isinstance(words, str):
        return [words]
    result = list(words)
    for w in result:
        if not isinstance(w, str):
            raise TypeError(f"expected str, got {type(w).__name__}: {w!r}")
    return result


def _as_categories(value: Any) -> Optional[Tuple[str, ...]]:
    if value is None:
        return None
    if isinstance(value, str):
        raise TypeError("enabled_categories must be a collection of names, not a str")
    return tuple(as_word_list(value))


@dataclass(frozen=True, slots=True)
class FilterSettings:
    """
    Immutable snapshot of the engine's active configuration.

    ``enabled_categories = None`` means every known category is checked;
    an empty tuple means nothing is.  Unknown names are ignored at check
    time, never rejected here.
    """
    strategy: Strategy = Strategy.BLOCK
    replace_char: str = "*"
    case_sensitive: bool = False
    partial_match: bool = True
    enabled_categories: Optional[Tuple[str, ...]] = DEFAULT_ENABLED_CATEGORIES

    def __post_init__(self) -> None:
        try:
            strategy = Strategy(self.strategy)
        except ValueError:
            raise ValueError(
                f"Unknown strategy: {self.strategy!r}. "
                f"Available: {[s.value for s in Strategy]}"
            ) from None
        if not isinstance(self.replace_char, str) or len(self.replace_char) != 1:
            raise ValueError(f"replace_char must be a single character, got {self.replace_char!r}")
        for flag in ("case_sensitive", "partial_match"):
            value = getattr(self, flag)
            if not isinstance(value, bool):
                raise TypeError(f"{flag} must be bool, got {type(value).__name__}")
        object.__setattr__(self, "strategy", strategy)
        object.__setattr__(self, "enabled_categories", _as_categories(self.enabled_categories))

    def merged(self, **changes: Any) -> "FilterSettings":
        """Return a copy with *changes* applied.  Unknown keys raise ``TypeError``."""
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "strategy": self.strategy.value,
            "replace_char": self.replace_char,
            "case_sensitive": self.case_sensitive,
            "partial_match": self.partial_match,
            "enabled_categories": (
                list(self.enabled_categories)
                if self.enabled_categories is not None else None
            ),
        }


# ------------------------------------------------------------------
# Presets / environment profiles / thresholds
# ------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Preset:
    name: str
    strategy: Strategy
    enabled_categories: Tuple[str, ...]
    description: str = ""
    strictness: str = "medium"         # "low" | "medium" | "high"

    def describe(self) -> Dict[str, str]:
        return {
            "description": self.description,
            "strategy": self.strategy.value,
            "strictness": self.strictness,
        }


@dataclass(frozen=True, slots=True)
class SpecialRuleThresholds:
    repeat_char_limit: int = 5          # identical consecutive characters
    caps_limit_percentage: float = 70   # uppercase share of ASCII letters
    punctuation_limit: int = 5          # consecutive punctuation characters
    # Carried for completeness; no detector evaluates it.
    random_text_threshold: float = 0.8


# ------------------------------------------------------------------
# Rule set
# ------------------------------------------------------------------

@dataclass(frozen=True)
class RuleSet:
    word_lists: Mapping[str, Mapping[str, Tuple[str, ...]]]
    whitelist: Tuple[str, ...] = ()
    presets: Mapping[str, Preset] = field(default_factory=dict)
    environments: Mapping[str, Preset] = field(default_factory=dict)
    special_rules: SpecialRuleThresholds = field(default_factory=SpecialRuleThresholds)
    default_settings: FilterSettings = field(default_factory=FilterSettings)

    @property
    def categories(self) -> List[str]:
        return list(self.word_lists)

    def phrases(self) -> Dict[str, List[str]]:
        """Flatten sub-lists into a fresh ``{category: [phrase, ...]}`` dict."""
        flat: Dict[str, List[str]] = {}
        for category, groups in self.word_lists.items():
            words: List[str] = []
            for group in groups.values():
                words.extend(group)
            flat[category] = words
        return flat


def _preset(name: str, strategy: str, categories: Iterable[str],
            description: str = "", strictness: str = "medium") -> Preset:
    return Preset(
        name=name,
        strategy=Strategy(strategy),
        enabled_categories=tuple(categories),
        description=description,
        strictness=strictness,
    )


# ------------------------------------------------------------------
# Default catalogue
# ------------------------------------------------------------------

_WORD_LISTS: Dict[str, Dict[str, Tuple[str, ...]]] = {
    # ── Profanity ────────────────────────────────────────────
    "profanity": {
        "english": (
            "damn", "hell", "shit", "fuck", "bitch", "ass", "bastard",
            "crap", "piss", "bloody", "goddamn",
        ),
        "chinese": (
            "操", "草", "妈的", "傻逼", "白痴", "混蛋", "垃圾",
            "他妈的", "狗屎", "婊子", "贱人",
        ),
    },

    # ── Political ────────────────────────────────────────────
    "political": {
        "general": (
            "politics", "government", "election", "vote", "politician",
            "政治", "政府", "选举", "投票", "政客",
        ),
        "sensitive": (),
    },

    # ── Spam / advertising ───────────────────────────────────
    "spam": {
        "sales": (
            "buy now", "click here", "make money", "free money", "get rich",
            "limited time", "act now", "guaranteed", "no risk",
        ),
        "chinese_sales": (
            "买", "免费", "赚钱", "点击", "广告", "购买", "优惠",
            "限时", "保证", "无风险", "立即行动",
        ),
        "crypto": (
            "bitcoin", "cryptocurrency", "trading", "investment scam",
            "比特币", "加密货币", "投资骗局", "理财",
        ),
    },

    # ── Hate speech ──────────────────────────────────────────
    "hate": {
        "discrimination": (
            "racist", "sexist", "homophobic", "hate", "discrimination",
            "仇恨", "歧视", "种族", "性别歧视",
        ),
        "violence": (
            "kill", "murder", "violence", "hurt", "attack",
            "杀", "暴力", "攻击", "伤害",
        ),
    },

    # ── Inappropriate ────────────────────────────────────────
    "inappropriate": {
        "sexual": ("sex", "porn", "nude", "xxx"),
        "drugs": (
            "drug", "cocaine", "marijuana", "weed",
            "毒品", "大麻", "可卡因",
        ),
    },

    # ── Custom (filled at runtime via add_words) ─────────────
    "custom": {
        "company_specific": (),
        "community_rules": (),
    },
}

# "grass" vs 草, "class"/"classic" vs "ass"
_WHITELIST: Tuple[str, ...] = ("grass", "class", "classic")

_PRESETS: Dict[str, Preset] = {
    p.name: p for p in (
        _preset("family_friendly", "replace",
                ["profanity", "hate", "inappropriate", "spam"],
                "Family friendly: filter all inappropriate content", "high"),
        _preset("business", "block",
                ["spam", "inappropriate", "hate"],
                "Business: filter spam and inappropriate content", "medium"),
        _preset("casual", "warn",
                ["hate", "inappropriate"],
                "Casual: only filter serious inappropriate content", "low"),
        _preset("gaming", "replace",
                ["hate", "spam"],
                "Gaming: allow mild profanity but filter hate speech", "medium"),
    )
}

_ENVIRONMENTS: Dict[str, Preset] = {
    p.name: p for p in (
        _preset("strict", "block", ["profanity", "political", "spam", "hate", "custom"]),
        _preset("moderate", "replace", ["profanity", "spam", "hate"]),
        _preset("lenient", "warn", ["profanity"]),
    )
}

DEFAULT_RULESET = RuleSet(
    word_lists=_WORD_LISTS,
    whitelist=_WHITELIST,
    presets=_PRESETS,
    environments=_ENVIRONMENTS,
    special_rules=SpecialRuleThresholds(),
    default_settings=FilterSettings(),
)
