"""Tests for configuration loading."""

import json
import tempfile
from pathlib import Path

import pytest

from secret_puller_injector.core.config import (
    InjectorConfig,
    get_config_value,
    load_config,
    load_injector_config,
    parse_bool,
)

ENV_KEYS = ("VAULT_ADDR", "VAULT_SSL_VERIFY", "INJECTOR_GATE_PODS")


def clear_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self):
        """Test a missing file gives an empty dict."""
        with tempfile.TemporaryDirectory() as tmpdir:
            assert load_config(str(Path(tmpdir) / "config.json")) == {}

    def test_invalid_json(self):
        """Test invalid JSON gives an empty dict."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text("{not json", encoding="utf-8")

            assert load_config(str(path)) == {}

    def test_non_object(self):
        """Test a top-level list is ignored."""
        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text("[1, 2]", encoding="utf-8")

            assert load_config(str(path)) == {}


class TestGetConfigValue:
    """Tests for get_config_value."""

    def test_nested_lookup(self, monkeypatch):
        """Test nested keys are resolved from the config dict."""
        clear_env(monkeypatch)
        config = {"vault": {"addr": "https://from-file:8200"}}

        assert get_config_value(["vault", "addr"], config=config) == "https://from-file:8200"

    def test_env_fallback(self, monkeypatch):
        """Test environment variables back missing keys."""
        monkeypatch.setenv("VAULT_ADDR", "https://from-env:8200")

        assert get_config_value(["vault", "addr"], config={}) == "https://from-env:8200"

    def test_file_wins_over_env(self, monkeypatch):
        """Test config file values take precedence."""
        monkeypatch.setenv("VAULT_ADDR", "https://from-env:8200")
        config = {"vault": {"addr": "https://from-file:8200"}}

        assert get_config_value(["vault", "addr"], config=config) == "https://from-file:8200"

    def test_default(self, monkeypatch):
        """Test default is returned when nothing is set."""
        clear_env(monkeypatch)

        assert get_config_value(["vault", "addr"], default="x", config={}) == "x"

    def test_non_dict_intermediate(self, monkeypatch):
        """Test a scalar in the middle of the path falls through to env/default."""
        clear_env(monkeypatch)

        assert get_config_value(["vault", "addr"], default="d", config={"vault": "oops"}) == "d"


class TestParseBool:
    """Tests for parse_bool."""

    def test_values(self):
        """Test common spellings."""
        assert parse_bool(True) is True
        assert parse_bool("true") is True
        assert parse_bool("1") is True
        assert parse_bool("False") is False
        assert parse_bool("off") is False
        assert parse_bool(None, default=True) is True
        assert parse_bool("maybe", default=True) is True


class TestLoadInjectorConfig:
    """Tests for load_injector_config."""

    def test_from_env(self, monkeypatch):
        """Test configuration from the environment."""
        clear_env(monkeypatch)
        monkeypatch.setenv("VAULT_ADDR", "https://vault.internal:8200")
        monkeypatch.setenv("VAULT_SSL_VERIFY", "true")
        monkeypatch.setenv("INJECTOR_GATE_PODS", "false")

        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_injector_config(str(Path(tmpdir) / "missing.json"))

        assert config == InjectorConfig(
            vault_addr="https://vault.internal:8200", vault_verify_tls=True, gate_pods=False
        )

    def test_defaults(self, monkeypatch):
        """Test unset configuration gives a blank address and safe defaults."""
        clear_env(monkeypatch)

        with tempfile.TemporaryDirectory() as tmpdir:
            config = load_injector_config(str(Path(tmpdir) / "missing.json"))

        assert config == InjectorConfig(vault_addr="", vault_verify_tls=False, gate_pods=True)

    def test_from_file(self, monkeypatch):
        """Test configuration from config.json."""
        clear_env(monkeypatch)
        data = {"vault": {"addr": "https://vault:8200", "ssl_verify": True},
                "injector": {"gate_pods": False}}

        with tempfile.TemporaryDirectory() as tmpdir:
            path = Path(tmpdir) / "config.json"
            path.write_text(json.dumps(data), encoding="utf-8")
            config = load_injector_config(str(path))

        assert config.vault_addr == "https://vault:8200"
        assert config.vault_verify_tls is True
        assert config.gate_pods is False

    def test_config_is_frozen(self):
        """Test InjectorConfig cannot be modified."""
        config = InjectorConfig(vault_addr="https://vault:8200")

        with pytest.raises(AttributeError):
            config.vault_addr = "other"
