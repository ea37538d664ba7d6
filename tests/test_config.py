"""
Tests for wordfilter/config.py: JSON-backed hierarchical configuration store.

Covers:
* get(): single-level, nested, missing keys, non-dict intermediaries
* set(): nested, overwrite, save=False behaviour, scalar replaced by section
* Persistence: round-trip load/save, corrupt / non-object file recovery
* section(): subtree extraction, shallow-copy semantics
* Events: config_changed published on every set()
"""

from __future__ import annotations

import pytest

from wordfilter.config import Config


@pytest.fixture
def cfg(tmp_path, bus):
    """Fresh Config backed by a temp file for each test."""
    return Config(bus, path=tmp_path / "config.json")


# ── get() ─────────────────────────────────────────────────────────────

class TestGet:
    def test_missing_key_returns_none(self, cfg):
        assert cfg.get("nonexistent") is None

    def test_missing_key_custom_default(self, cfg):
        assert cfg.get("nonexistent", "block") == "block"

    def test_nested_key(self, cfg):
        cfg.set("filter.strategy", "replace", save=False)
        assert cfg.get("filter.strategy") == "replace"

    def test_intermediate_non_dict_returns_default(self, cfg):
        cfg.set("filter", "string", save=False)
        assert cfg.get("filter.strategy", "fallback") == "fallback"

    def test_list_value(self, cfg):
        cfg.set("filter.enabled_categories", ["hate", "spam"], save=False)
        assert cfg.get("filter.enabled_categories") == ["hate", "spam"]


# ── set() ─────────────────────────────────────────────────────────────

class TestSet:
    def test_overwrite_existing(self, cfg):
        cfg.set("filter.strategy", "block", save=False)
        cfg.set("filter.strategy", "warn", save=False)
        assert cfg.get("filter.strategy") == "warn"

    def test_scalar_parent_replaced_by_section(self, cfg):
        cfg.set("filter", "flat", save=False)
        cfg.set("filter.strategy", "warn", save=False)
        assert cfg.get("filter.strategy") == "warn"

    def test_save_false_does_not_write_file(self, tmp_path, bus):
        path = tmp_path / "cfg.json"
        c = Config(bus, path=path)
        c.set("x", 1, save=False)
        assert not path.exists()

    def test_save_true_writes_file(self, tmp_path, bus):
        path = tmp_path / "cfg.json"
        c = Config(bus, path=path)
        c.set("x", 1)
        assert path.exists()

    def test_publishes_config_changed_event(self, bus, cfg):
        received = []
        bus.subscribe("config_changed", received.append)
        cfg.set("filter.preset", "gaming", save=False)
        assert received == [{"key": "filter.preset", "value": "gaming"}]


# ── Persistence ───────────────────────────────────────────────────────

class TestPersistence:
    def test_round_trip(self, tmp_path, bus):
        path = tmp_path / "cfg.json"
        Config(bus, path=path).set("filter.replace_char", "#")
        assert Config(bus, path=path).get("filter.replace_char") == "#"

    def test_unicode_survives(self, tmp_path, bus):
        path = tmp_path / "cfg.json"
        Config(bus, path=path).set("notes", "草地")
        assert "草地" in path.read_text(encoding="utf-8")

    def test_corrupt_json_resets_to_empty(self, tmp_path, bus):
        path = tmp_path / "bad.json"
        path.write_text("{not valid json}", encoding="utf-8")
        assert Config(bus, path=path).get("anything") is None

    def test_non_object_json_resets_to_empty(self, tmp_path, bus):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        assert Config(bus, path=path).section("filter") == {}


# ── section() ─────────────────────────────────────────────────────────

class TestSection:
    def test_returns_correct_subtree(self, cfg):
        cfg.set("filter.a", 1, save=False)
        cfg.set("filter.b", 2, save=False)
        assert cfg.section("filter") == {"a": 1, "b": 2}

    def test_is_shallow_copy(self, cfg):
        cfg.set("filter.val", 10, save=False)
        sec = cfg.section("filter")
        sec["val"] = 999
        assert cfg.get("filter.val") == 10

    def test_missing_section_returns_empty_dict(self, cfg):
        assert cfg.section("does_not_exist") == {}
