"""
Chat-relay boundary.

The chat server calls ``MessageGate.screen()`` once per inbound message
and acts on the returned ``RelayDecision``:

* ``deliver=False``: do not broadcast; send ``reason`` back to the sender.
* ``deliver=True``: broadcast ``text`` (masked / annotated when the
  strategy is replace / warn, the original otherwise).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .filtering.filter_engine import FilterEngine, Verdict
from .filtering.ruleset import Strategy

logger = logging.getLogger(__name__)

BLOCKED_REASON = "Profanity is not allowed! Your message has been blocked."


@dataclass
class RelayDecision:
    deliver: bool
    text: Optional[str]
    verdict: Verdict
    reason: str = ""


class MessageGate:

    def __init__(self, engine: FilterEngine):
        self.engine = engine

    def screen(
        self,
        message: str,
        *,
        username: Optional[str] = None,
        room: Optional[str] = None,
    ) -> RelayDecision:
        verdict = self.engine.check(message)

        if not verdict.is_filtered:
            return RelayDecision(deliver=True, text=message, verdict=verdict)

        if verdict.strategy is Strategy.BLOCK:
            logger.info(
                "Message blocked for user %s in room %s (severity=%s, categories=%s)",
                username or "?", room or "?",
                verdict.severity.value, ",".join(verdict.filtered_categories) or "-",
            )
            return RelayDecision(
                deliver=False,
                text=None,
                verdict=verdict,
                reason=BLOCKED_REASON,
            )

        return RelayDecision(deliver=True, text=verdict.filtered_text, verdict=verdict)
