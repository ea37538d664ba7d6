"""
Settings store backed by a JSON file.

The filter engine persists its active settings under the ``filter``
namespace (``filter.strategy``, ``filter.enabled_categories`` ...) so a
restarted server comes back with the same preset and strategy.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .events import EventBus

logger = logging.getLogger(__name__)

_DEFAULT_PATH = Path("wordfilter.json")


class Config:
    """
    Hierarchical configuration backed by a JSON file.

    Keys use dot notation: ``"filter.strategy"``, ``"filter.preset"``.
    """

    def __init__(self, event_bus: EventBus, path: Path | str = _DEFAULT_PATH):
        self._bus = event_bus
        self._path = Path(path)
        self._data: dict[str, Any] = {}
        self._load()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        parts = key.split(".")
        node = self._data
        for p in parts[:-1]:
            node = node.get(p, {})
            if not isinstance(node, dict):
                return default
        return node.get(parts[-1], default)

    def set(self, key: str, value: Any, *, save: bool = True) -> None:
        parts = key.split(".")
        node = self._data
        for p in parts[:-1]:
            child = node.get(p)
            if not isinstance(child, dict):
                child = node[p] = {}
            node = child
        node[parts[-1]] = value

        if save:
            self._save()

        self._bus.publish("config_changed", {"key": key, "value": value})

    def section(self, prefix: str) -> dict[str, Any]:
        """Return a shallow copy of everything under *prefix*."""
        parts = prefix.split(".")
        node = self._data
        for p in parts:
            node = node.get(p, {})
            if not isinstance(node, dict):
                return {}
        return dict(node)

    def save(self) -> None:
        self._save()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def _load(self) -> None:
        if self._path.exists():
            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError) as exc:
                logger.warning("Ignoring unreadable config %s: %s", self._path, exc)
                data = {}
            self._data = data if isinstance(data, dict) else {}

    def _save(self) -> None:
        try:
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
        except OSError as exc:
            logger.warning("Could not write config %s: %s", self._path, exc)
