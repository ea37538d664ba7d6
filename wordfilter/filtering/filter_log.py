"""
Structured filter logging.

Every checked message, whether allowed or filtered, produces one log
entry that goes to:

1. A JSON-Lines file (``<log_dir>/filter_log.jsonl``) for post-hoc
   auditing, when a log directory is configured.
2. The ``EventBus`` as a ``log_entry`` event, so a moderation console
   can display it live.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

LOG_FILENAME = "filter_log.jsonl"

# action -> category shown by log consumers
_UI_CATEGORIES = {
    "allow": "Allowed",
    "block": "Filtered",
    "replace": "Rewritten",
    "warn": "Flagged",
}


# ------------------------------------------------------------------
# Log entry builder
# ------------------------------------------------------------------

def build_log_entry(
    action: str,                     # "allow" | "block" | "replace" | "warn"
    original_text: str,
    severity: str,
    strategy: str,
    categories: Optional[List[str]] = None,
    violations: Optional[List[str]] = None,
    filtered_text: Optional[str] = None,
    matched: Optional[Dict[str, List[str]]] = None,
    store_original: bool = True,
) -> Dict[str, Any]:
    """Build a structured log entry dict."""
    entry: Dict[str, Any] = {
        "id": uuid.uuid4().hex[:12],
        "timestamp": time.time(),
        "timestamp_iso": time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime()),
        "action": action,
        "severity": severity,
        "strategy": strategy,
        "categories": list(categories or []),
        "violations": list(violations or []),
    }

    if store_original:
        entry["original_text"] = original_text
    else:
        entry["original_text"] = f"[redacted, length={len(original_text)}]"

    if filtered_text is not None and filtered_text != original_text:
        entry["filtered_text"] = filtered_text if store_original else "[redacted]"

    if matched:
        if store_original:
            entry["matched"] = matched
        else:
            entry["matched"] = {cat: ["[redacted]"] * len(words) for cat, words in matched.items()}

    return entry


# ------------------------------------------------------------------
# Log writer
# ------------------------------------------------------------------

class FilterLogger:
    """
    Append-only JSON-Lines logger for filter decisions.

    Without a ``log_dir`` nothing is written to disk; entries are still
    published on the bus.
    """

    def __init__(self, event_bus: Optional[Any] = None, log_dir: Optional[Path | str] = None):
        self._bus = event_bus
        self._dir = Path(log_dir) if log_dir is not None else None
        self._file = self._dir / LOG_FILENAME if self._dir is not None else None
        if self._dir is not None:
            self._dir.mkdir(parents=True, exist_ok=True)
        self._store_original = True   # can be toggled off for privacy

    @property
    def path(self) -> Optional[Path]:
        return self._file

    @property
    def store_original_text(self) -> bool:
        return self._store_original

    @store_original_text.setter
    def store_original_text(self, val: bool) -> None:
        self._store_original = val

    def log(self, entry: Dict[str, Any]) -> None:
        """Write one log entry to disk and publish to EventBus."""
        if self._file is not None:
            try:
                with self._file.open("a", encoding="utf-8") as f:
                    f.write(json.dumps(entry, ensure_ascii=False) + "\n")
            except OSError as exc:
                logger.warning("Could not append to %s: %s", self._file, exc)

        if self._bus is not None:
            action = entry.get("action", "allow")
            summary = f"{action.upper()} severity={entry.get('severity', 'none')}"
            if entry.get("categories"):
                summary += ": " + ", ".join(entry["categories"])
            if entry.get("violations"):
                summary += " [" + ", ".join(entry["violations"]) + "]"

            self._bus.publish("log_entry", {
                "category": _UI_CATEGORIES.get(action, "Filtered"),
                "text": summary,
                "detail": entry,
            })

    def read_recent(self, n: int = 50) -> List[Dict[str, Any]]:
        """Read the last *n* log entries from disk."""
        if self._file is None or not self._file.exists():
            return []
        try:
            lines = self._file.read_text(encoding="utf-8").strip().split("\n")
            entries = []
            for line in lines[-n:]:
                if line.strip():
                    entries.append(json.loads(line))
            return entries
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read %s: %s", self._file, exc)
            return []

    def clear(self) -> None:
        """Clear the log file."""
        if self._file is None:
            return
        try:
            self._file.write_text("", encoding="utf-8")
        except OSError as exc:
            logger.warning("Could not clear %s: %s", self._file, exc)
