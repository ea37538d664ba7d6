from .events import EventBus
from .config import Config
from .filtering import (
    DEFAULT_RULESET,
    FilterEngine,
    FilterLogger,
    FilterSettings,
    RuleSet,
    Severity,
    Strategy,
    Verdict,
)
from .relay import MessageGate, RelayDecision, BLOCKED_REASON
