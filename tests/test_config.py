"""Tests for configuration loading."""

import json

from bases_bridge.config import BasesBridgeConfig, ConfigManager


def test_defaults(monkeypatch):
    monkeypatch.delenv("BASES_BRIDGE_ENGINE_ENABLED", raising=False)
    config = BasesBridgeConfig(vault_path="/tmp/vault")
    assert config.config_dir == ".obsidian"
    assert config.engine_enabled is False
    assert config.default_limit == 20
    assert config.max_limit == 500
    assert config.max_warnings == 200
    assert config.vector_cache_ttl_ms == 60_000
    assert config.snippet_length == 300
    assert str(config.vault_root) == "/tmp/vault"


def test_query_embedder_is_normalized():
    assert BasesBridgeConfig(query_embedder=" OpenAI ").query_embedder == "openai"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("BASES_BRIDGE_MAX_LIMIT", "50")
    assert BasesBridgeConfig().max_limit == 50


def test_config_manager_round_trip(tmp_path, monkeypatch):
    monkeypatch.delenv("BASES_BRIDGE_ENGINE_ENABLED", raising=False)
    manager = ConfigManager(config_dir=tmp_path)
    assert manager.config.engine_enabled is False

    manager.set_engine_enabled(True)

    saved = json.loads((tmp_path / "config.json").read_text(encoding="utf-8"))
    assert saved["engine_enabled"] is True
    assert ConfigManager(config_dir=tmp_path).config.engine_enabled is True


def test_environment_wins_over_file(tmp_path, monkeypatch):
    (tmp_path / "config.json").write_text(json.dumps({"max_limit": 100, "config_dir": "_cfg"}), encoding="utf-8")
    monkeypatch.setenv("BASES_BRIDGE_MAX_LIMIT", "30")

    config = ConfigManager(config_dir=tmp_path).config

    assert config.max_limit == 30
    assert config.config_dir == "_cfg"


def test_invalid_config_file_is_ignored(tmp_path):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    config = ConfigManager(config_dir=tmp_path).config
    assert config.config_dir == ".obsidian"
