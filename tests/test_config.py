"""Tests for configuration loading: defaults, YAML, env overrides."""

from __future__ import annotations

import pytest
import yaml

from bytesink.config import BytesinkConfig, get_config, reset_config
from bytesink.sinks import MemorySink


class TestDefaults:
    def test_defaults(self):
        cfg = BytesinkConfig()
        assert cfg.log_formatter == "structlog"
        assert cfg.log_destination == "stderr"
        assert cfg.log_level == "INFO"
        assert cfg.log_format == "json"
        assert cfg.jsonl_path is None
        assert cfg.surrogate_policy == "replace"

    def test_to_dict(self):
        d = BytesinkConfig().to_dict()
        assert d["surrogate_policy"] == "replace"
        assert set(d) == {
            "log_formatter",
            "log_destination",
            "log_level",
            "log_format",
            "jsonl_path",
            "surrogate_policy",
        }

    def test_invalid_policy_rejected(self):
        with pytest.raises(ValueError, match="surrogate policy"):
            BytesinkConfig(surrogate_policy="lossy")


class TestYAMLLoading:
    def test_load_from_yaml(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"log_level": "DEBUG", "surrogate_policy": "strict"}))

        cfg = BytesinkConfig.load(path)
        assert cfg.log_level == "DEBUG"
        assert cfg.surrogate_policy == "strict"
        assert cfg.log_formatter == "structlog"  # default

    def test_missing_file_uses_defaults(self, tmp_path):
        cfg = BytesinkConfig.load(tmp_path / "nope.yaml")
        assert cfg == BytesinkConfig()

    def test_empty_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert BytesinkConfig.load(path) == BytesinkConfig()

    def test_non_mapping_rejected(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        with pytest.raises(ValueError, match="expected a mapping"):
            BytesinkConfig.load(path)

    def test_unknown_keys_ignored(self, tmp_path, caplog):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"colour": "blue", "log_format": "console"}))
        cfg = BytesinkConfig.load(path)
        assert cfg.log_format == "console"
        assert "colour" in caplog.text

    def test_bad_policy_in_file(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"surrogate_policy": "whatever"}))
        with pytest.raises(ValueError):
            BytesinkConfig.load(path)

    def test_path_from_env(self, tmp_path, monkeypatch):
        path = tmp_path / "elsewhere.yaml"
        path.write_text(yaml.dump({"log_destination": "jsonl"}))
        monkeypatch.setenv("BYTESINK_CONFIG", str(path))
        assert BytesinkConfig.load().log_destination == "jsonl"


class TestEnvOverrides:
    def test_env_beats_yaml(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"log_level": "DEBUG"}))
        monkeypatch.setenv("BYTESINK_LOG_LEVEL", "ERROR")
        assert BytesinkConfig.load(path).log_level == "ERROR"

    def test_env_without_file(self, monkeypatch):
        monkeypatch.setenv("BYTESINK_SURROGATE_POLICY", "strict")
        assert BytesinkConfig.load().surrogate_policy == "strict"


class TestSingleton:
    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reset(self, monkeypatch):
        first = get_config()
        reset_config()
        monkeypatch.setenv("BYTESINK_LOG_LEVEL", "WARNING")
        second = get_config()
        assert second is not first
        assert second.log_level == "WARNING"

    def test_sinks_pick_up_configured_policy(self, monkeypatch):
        monkeypatch.setenv("BYTESINK_SURROGATE_POLICY", "strict")
        reset_config()
        sink = MemorySink()
        assert sink.surrogate_policy == "strict"
        with pytest.raises(UnicodeEncodeError):
            sink.write_string("\udfff")

    def test_explicit_policy_beats_config(self, monkeypatch):
        monkeypatch.setenv("BYTESINK_SURROGATE_POLICY", "strict")
        reset_config()
        sink = MemorySink(surrogate_policy="replace")
        sink.write_string("\udfff")
        assert sink.getvalue() == b"\x03\xef\xbf\xbd"
