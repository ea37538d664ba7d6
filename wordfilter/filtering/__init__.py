"""
Categorized word filter: per-category phrase patterns, whitelist
overrides, special-rule heuristics, severity levels and
block / replace / warn strategies.
"""

from .ruleset import (
    DEFAULT_RULESET, FilterSettings, Preset, RuleSet, SpecialRuleThresholds, Strategy,
)
from .patterns import PatternCompiler
from .whitelist import WhitelistGuard
from .special_rules import SpecialRuleDetector, SpecialRuleResult
from .strategy import StrategyApplier, WARNING_MARKER
from .filter_engine import FilterEngine, Severity, Verdict
from .filter_log import FilterLogger
