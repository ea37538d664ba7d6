"""
Filter engine: the pipeline every inbound chat message goes through.

Per check:
    1. **Whitelist**: whitelisted text is returned clean immediately.
    2. **Special rules**: repetition / caps / punctuation heuristics.
    3. **Categories**: each enabled category's compiled pattern is run,
       individually whitelisted matches are dropped, severity is folded.
    4. **Strategy**: block / replace / warn produces ``filtered_text``.

The engine owns the mutable state (word lists, compiled patterns,
whitelist, settings).  Mutations build new tables and swap them in under
a lock; checks read a consistent snapshot and never block each other.

Live reconfiguration arrives over the ``EventBus``
(``filter_preset_selected``, ``filter_config_changed``) and active
settings are persisted to ``Config`` under ``filter.*``.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Mapping, Optional, Pattern

from .filter_log import FilterLogger, build_log_entry
from .patterns import PatternCompiler, find_matches
from .ruleset import (
    DEFAULT_RULESET,
    MATCHER_FIELDS,
    FilterSettings,
    Preset,
    RuleSet,
    Strategy,
    as_word_list,
)
from .special_rules import SpecialRuleDetector, SpecialRuleResult
from .strategy import StrategyApplier
from .whitelist import WhitelistGuard

logger = logging.getLogger(__name__)


# ------------------------------------------------------------------
# Severity
# ------------------------------------------------------------------

class Severity(str, Enum):
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Severity.NONE: 0,
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}

HIGH_SEVERITY_CATEGORIES = frozenset({"hate", "inappropriate"})
MEDIUM_SEVERITY_CATEGORIES = frozenset({"profanity", "political"})


def fold_severity(current: Severity, category: str) -> Severity:
    """Severity after *category* matched, given the severity so far."""
    if category in HIGH_SEVERITY_CATEGORIES:
        return Severity.HIGH
    if category in MEDIUM_SEVERITY_CATEGORIES:
        return Severity.HIGH if current is Severity.HIGH else Severity.MEDIUM
    if current is Severity.NONE:
        return Severity.LOW
    return current


# ------------------------------------------------------------------
# Verdict
# ------------------------------------------------------------------

@dataclass
class Verdict:
    """Result of running one text through the engine."""
    filtered_text: str
    is_filtered: bool = False
    filtered_categories: List[str] = field(default_factory=list)
    matches: Dict[str, List[str]] = field(default_factory=dict)
    special_rule_violations: List[str] = field(default_factory=list)
    severity: Severity = Severity.NONE
    # strategy in force when this verdict was produced
    strategy: Strategy = Strategy.BLOCK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_filtered": self.is_filtered,
            "filtered_categories": list(self.filtered_categories),
            "matches": {k: list(v) for k, v in self.matches.items()},
            "special_rule_violations": list(self.special_rule_violations),
            "filtered_text": self.filtered_text,
            "severity": self.severity.value,
            "strategy": self.strategy.value,
        }


def _dedupe(items: Iterable[str]) -> List[str]:
    return list(dict.fromkeys(items))


# ------------------------------------------------------------------
# Filter Engine
# ------------------------------------------------------------------

class FilterEngine:
    """
    Categorized word filter.

    Usage::

        engine = FilterEngine(preset="family_friendly")

        verdict = engine.check("this is shit")
        if verdict.is_filtered and verdict.strategy == "block":
            reject()
        else:
            relay(verdict.filtered_text)

        engine.add_words("custom", ["spoiler"])
        engine.add_to_whitelist("scunthorpe")
    """

    def __init__(
        self,
        settings: Optional[FilterSettings] = None,
        *,
        preset: Optional[str] = None,
        ruleset: RuleSet = DEFAULT_RULESET,
        event_bus: Optional[Any] = None,
        config: Optional[Any] = None,
        filter_logger: Optional[FilterLogger] = None,
        **overrides: Any,
    ):
        self.bus = event_bus
        self.config = config
        self.ruleset = ruleset
        self.logger = filter_logger or FilterLogger(event_bus)

        self._lock = threading.RLock()
        # serializes Config writes; each write reads the latest settings
        self._persist_lock = threading.RLock()
        self._current_preset: Optional[str] = None

        # Settings: rule-set defaults < saved config < explicit < preset
        resolved = settings or ruleset.default_settings
        saved_preset: Optional[str] = None
        if self.config is not None and settings is None:
            resolved = self._load_saved_settings(resolved)
            saved_preset = self.config.get("filter.preset")
        if overrides:
            resolved = resolved.merged(**overrides)
        self._settings: FilterSettings = resolved

        self._detector = SpecialRuleDetector(ruleset.special_rules)
        self._whitelist = WhitelistGuard(ruleset.whitelist)
        self._phrases: Dict[str, List[str]] = ruleset.phrases()
        self._compiler = self._make_compiler(self._settings)
        self._patterns: Dict[str, Pattern[str]] = self._compiler.compile_all(self._phrases)

        if preset is not None:
            self.apply_preset(preset)
        elif saved_preset in ruleset.presets:
            self._current_preset = saved_preset

        # Subscribe to live config changes
        if self.bus is not None:
            self.bus.subscribe("filter_preset_selected", self._on_preset_selected)
            self.bus.subscribe("filter_config_changed", self._on_config_changed)

    # ── Checks ───────────────────────────────────────────────

    def check(self, text: str, categories: Optional[Iterable[str]] = None) -> Verdict:
        """
        Run *text* through whitelist, special rules and category patterns.

        *categories* restricts the check to an explicit subset; by default
        the enabled categories are used (every known category when
        ``enabled_categories`` is ``None``).  Unknown names are skipped.
        """
        if not isinstance(text, str):
            raise TypeError(f"text must be str, got {type(text).__name__}")
        if isinstance(categories, str):
            raise TypeError("categories must be a collection of names, not a str")

        with self._lock:
            settings = self._settings
            patterns = self._patterns
            whitelist = self._whitelist
            known = list(self._phrases)

        verdict = Verdict(filtered_text=text, strategy=settings.strategy)

        if whitelist.is_whitelisted(text):
            self._log(verdict, text, settings)
            return verdict

        special = self._detector.check(text)
        if special.has_issues:
            verdict.is_filtered = True
            verdict.special_rule_violations = list(special.issues)
            verdict.severity = Severity.LOW

        if categories is not None:
            to_check = as_word_list(categories)
        elif settings.enabled_categories is not None:
            to_check = list(settings.enabled_categories)
        else:
            to_check = known

        for category in _dedupe(to_check):
            pattern = patterns.get(category)
            if pattern is None:
                continue
            found = [m for m in find_matches(pattern, text) if not whitelist.is_whitelisted(m)]
            if not found:
                continue
            verdict.is_filtered = True
            verdict.filtered_categories.append(category)
            verdict.matches[category] = _dedupe(found)
            verdict.severity = fold_severity(verdict.severity, category)

        if verdict.is_filtered:
            applier = StrategyApplier(settings.strategy, settings.replace_char)
            verdict.filtered_text = applier.apply(
                text, verdict.filtered_categories, patterns, whitelist,
            )

        self._log(verdict, text, settings)
        return verdict

    def is_profane(self, text: str, categories: Optional[Iterable[str]] = None) -> bool:
        return self.check(text, categories).is_filtered

    def is_whitelisted(self, text: str) -> bool:
        with self._lock:
            whitelist = self._whitelist
        return whitelist.is_whitelisted(text)

    def check_special_rules(self, text: str) -> SpecialRuleResult:
        """Run only the presentation heuristics on *text*; nothing is logged."""
        return self._detector.check(text)

    # ── Word lists ───────────────────────────────────────────

    def add_words(self, category: str, words: Any) -> None:
        """Append *words* to *category*, creating the category if needed."""
        if not isinstance(category, str):
            raise TypeError(f"category must be str, got {type(category).__name__}")
        new_words = as_word_list(words)
        with self._lock:
            updated = list(self._phrases.get(category, []))
            updated.extend(new_words)
            self._replace_category(category, updated)
        self._publish("add_words", category=category, words=new_words)

    def remove_words(self, category: str, words: Any) -> None:
        """Remove the first occurrence of each word.  Missing words are ignored."""
        if not isinstance(category, str):
            raise TypeError(f"category must be str, got {type(category).__name__}")
        old_words = as_word_list(words)
        with self._lock:
            if category not in self._phrases:
                return
            updated = list(self._phrases[category])
            for word in old_words:
                if word in updated:
                    updated.remove(word)
            self._replace_category(category, updated)
        self._publish("remove_words", category=category, words=old_words)

    def _replace_category(self, category: str, words: List[str]) -> None:
        # Caller holds the lock.  Both tables are swapped, never edited.
        phrases = dict(self._phrases)
        phrases[category] = words
        patterns = dict(self._patterns)
        pattern = self._compiler.compile(words)
        if pattern is None:
            patterns.pop(category, None)
        else:
            patterns[category] = pattern
        self._phrases = phrases
        self._patterns = patterns
        logger.debug("Recompiled category %r (%d phrase(s))", category, len(words))

    # ── Whitelist ────────────────────────────────────────────

    def add_to_whitelist(self, words: Any) -> None:
        entries = as_word_list(words)
        with self._lock:
            self._whitelist = self._whitelist.add(entries)
        self._publish("add_to_whitelist", words=entries)

    def remove_from_whitelist(self, words: Any) -> None:
        entries = as_word_list(words)
        with self._lock:
            self._whitelist = self._whitelist.remove(entries)
        self._publish("remove_from_whitelist", words=entries)

    # ── Settings / presets ───────────────────────────────────

    def get_settings(self) -> FilterSettings:
        return self._settings

    def set_config(self, changes: Optional[Mapping[str, Any]] = None, **kwargs: Any) -> None:
        """Merge *changes* into the active settings.

        Patterns are recompiled only when ``case_sensitive`` or
        ``partial_match`` actually changed.
        """
        merged_changes = dict(changes or {})
        merged_changes.update(kwargs)
        with self._lock:
            new_settings = self._settings.merged(**merged_changes)
            self._swap_settings(new_settings)
        self._save_config()
        self._publish("set_config", config=new_settings.to_dict())

    def apply_preset(self, name: str) -> None:
        """Overlay a named preset's strategy and categories.  Unknown names are ignored."""
        preset = self.ruleset.presets.get(name)
        if preset is None:
            logger.debug("Ignoring unknown preset %r", name)
            return
        with self._lock:
            self._apply_profile(preset)
            self._current_preset = name
        logger.info("Applied preset %r (strategy=%s)", name, preset.strategy.value)
        self._save_config()
        self._publish("apply_preset", preset=name)

    def apply_environment(self, name: str) -> None:
        """Overlay a strict / moderate / lenient profile.  Unknown names are ignored."""
        profile = self.ruleset.environments.get(name)
        if profile is None:
            logger.debug("Ignoring unknown environment %r", name)
            return
        with self._lock:
            self._apply_profile(profile)
        logger.info("Applied environment %r (strategy=%s)", name, profile.strategy.value)
        self._save_config()
        self._publish("apply_environment", environment=name)

    def _apply_profile(self, profile: Preset) -> None:
        self._swap_settings(self._settings.merged(
            strategy=profile.strategy,
            enabled_categories=profile.enabled_categories,
        ))

    def _swap_settings(self, new_settings: FilterSettings) -> None:
        # Caller holds the lock.
        old = self._settings
        self._settings = new_settings
        if any(getattr(old, f) != getattr(new_settings, f) for f in MATCHER_FIELDS):
            self._compiler = self._make_compiler(new_settings)
            self._patterns = self._compiler.compile_all(self._phrases)

    @staticmethod
    def _make_compiler(settings: FilterSettings) -> PatternCompiler:
        return PatternCompiler(
            case_sensitive=settings.case_sensitive,
            partial_match=settings.partial_match,
        )

    # ── Introspection ────────────────────────────────────────

    def get_stats(self) -> Dict[str, Any]:
        with self._lock:
            settings = self._settings
            phrases = self._phrases
            whitelist_size = len(self._whitelist)
            current = self._current_preset
        return {
            "current_preset": current,
            "total_categories": len(phrases),
            "enabled_categories": (
                list(settings.enabled_categories)
                if settings.enabled_categories is not None else list(phrases)
            ),
            "word_counts": {c: len(words) for c, words in phrases.items()},
            "whitelist_size": whitelist_size,
            "config": settings.to_dict(),
        }

    def get_available_presets(self) -> Dict[str, Dict[str, str]]:
        return {name: p.describe() for name, p in self.ruleset.presets.items()}

    def has_pattern(self, category: str) -> bool:
        return category in self._patterns

    # ── Logging ──────────────────────────────────────────────

    def _log(self, verdict: Verdict, text: str, settings: FilterSettings) -> None:
        action = settings.strategy.value if verdict.is_filtered else "allow"
        entry = build_log_entry(
            action=action,
            original_text=text,
            severity=verdict.severity.value,
            strategy=settings.strategy.value,
            categories=verdict.filtered_categories,
            violations=verdict.special_rule_violations,
            filtered_text=verdict.filtered_text,
            matched=verdict.matches or None,
            store_original=self.logger.store_original_text,
        )
        self.logger.log(entry)

    def _publish(self, change: str, **data: Any) -> None:
        if self.bus is not None:
            self.bus.publish("filter_rules_changed", {"change": change, **data})

    # ── Config persistence ───────────────────────────────────

    def _load_saved_settings(self, base: FilterSettings) -> FilterSettings:
        saved = self.config.section("filter")
        result = base
        for key in ("strategy", "replace_char", "case_sensitive",
                    "partial_match", "enabled_categories"):
            if key not in saved:
                continue
            try:
                result = result.merged(**{key: saved[key]})
            except (TypeError, ValueError) as exc:
                logger.warning("Ignoring saved filter.%s=%r: %s", key, saved[key], exc)
        return result

    def _save_config(self) -> None:
        if self.config is None:
            return
        with self._persist_lock:
            with self._lock:
                settings = self._settings
                preset = self._current_preset
            for key, value in settings.to_dict().items():
                self.config.set(f"filter.{key}", value, save=False)
            self.config.set("filter.preset", preset)

    # ── Event handlers ───────────────────────────────────────

    def _on_preset_selected(self, data: Dict[str, Any]) -> None:
        name = data.get("preset")
        if isinstance(name, str):
            self.apply_preset(name)

    def _on_config_changed(self, data: Dict[str, Any]) -> None:
        try:
            self.set_config(data)
        except (TypeError, ValueError) as exc:
            logger.warning("Rejected filter_config_changed %r: %s", data, exc)
