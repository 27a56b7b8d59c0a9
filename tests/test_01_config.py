"""Tests for settings loading, environment overrides and config validation."""
from __future__ import annotations

import pytest

from sarvam_gateway.core.config import (
    ConfigValidationError,
    Defaults,
    GatewayConfig,
    Settings,
    apply_env_overrides,
    load_settings,
)

_ENV_VARS = ("SARVAM_API_KEY", "PORT", "APP_ENV", "SARVAM_GATEWAY_AUDIO_DIR")


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Empty settings resolve to the documented defaults."""

    def test_server_defaults(self):
        cfg = GatewayConfig.from_settings(Settings(raw={}))
        assert cfg.server.port == 3000
        assert cfg.server.environment == "development"
        assert cfg.server.public_base_url is None

    def test_document_defaults(self):
        cfg = GatewayConfig.from_settings(Settings(raw={}))
        assert cfg.document.allowed_extensions == (".pdf", ".zip")
        assert cfg.document.max_upload_bytes == 200 * 1024 * 1024
        assert cfg.document.default_language == "en-IN"
        assert cfg.document.default_output_format == "html"
        assert cfg.document.wait_timeout_s == 0

    def test_speech_defaults(self):
        cfg = GatewayConfig.from_settings(Settings(raw={}))
        assert cfg.speech.default_target_language_code == "en-IN"
        assert cfg.speech.default_speaker == "shubh"
        assert cfg.speech.default_pace == 1.0
        assert cfg.speech.default_speech_sample_rate == 22050
        assert cfg.speech.default_enable_preprocessing is True
        assert cfg.speech.default_model == "bulbul:v3"
        assert cfg.speech.ttl_seconds == 0

    def test_provider_defaults(self):
        cfg = GatewayConfig.from_settings(Settings(raw={}))
        assert cfg.provider.name == Defaults.PROVIDER_NAME
        assert cfg.provider.api_key is None

    def test_settings_properties(self):
        settings = Settings(raw={})
        assert settings.port == 3000
        assert settings.environment == "development"
        assert settings.api_key is None
        assert settings.audio_dir == "./audio"


class TestValidation:
    """Invalid values raise ConfigValidationError."""

    @pytest.mark.parametrize("raw", [
        {"server": {"port": 0}},
        {"server": {"port": 70000}},
        {"provider": {"timeout_s": 0}},
        {"document": {"max_upload_bytes": 0}},
        {"document": {"wait_timeout_s": -1}},
        {"document": {"allowed_extensions": []}},
        {"speech": {"default_pace": 0}},
        {"speech": {"ttl_seconds": -5}},
        {"logging": {"level": 5}},
    ])
    def test_rejects_invalid(self, raw):
        with pytest.raises(ConfigValidationError):
            GatewayConfig.from_settings(Settings(raw=raw))

    def test_extensions_normalized(self):
        cfg = GatewayConfig.from_settings(Settings(raw={"document": {"allowed_extensions": ["PDF", ".Zip"]}}))
        assert cfg.document.allowed_extensions == (".pdf", ".zip")

    def test_string_log_level(self):
        cfg = GatewayConfig.from_settings(Settings(raw={"logging": {"level": "verbose"}}))
        assert cfg.logging.level == 3

    def test_provider_name_lowercased(self):
        cfg = GatewayConfig.from_settings(Settings(raw={"provider": {"name": " Sarvam "}}))
        assert cfg.provider.name == "sarvam"


class TestEnvOverrides:
    """Environment variables win over file values."""

    def test_api_key(self, monkeypatch):
        monkeypatch.setenv("SARVAM_API_KEY", "sk_test")
        raw = apply_env_overrides({})
        assert Settings(raw=raw).api_key == "sk_test"

    def test_port_and_env(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("APP_ENV", "production")
        settings = Settings(raw=apply_env_overrides({"server": {"port": 3000}}))
        assert settings.port == 8080
        assert settings.environment == "production"

    def test_audio_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv("SARVAM_GATEWAY_AUDIO_DIR", str(tmp_path))
        settings = Settings(raw=apply_env_overrides({}))
        assert settings.audio_dir == str(tmp_path)

    def test_unset_env_keeps_file_values(self):
        raw = apply_env_overrides({"server": {"port": 4000}})
        assert raw == {"server": {"port": 4000}}


class TestLoadSettings:
    """load_settings() reads YAML and applies overrides."""

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(str(tmp_path / "nope.yaml"))

    def test_loads_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("server:\n  port: 5050\nspeech:\n  default_speaker: anushka\n", encoding="utf-8")
        settings = load_settings(str(path))
        cfg = settings.get_gateway_config()
        assert cfg.server.port == 5050
        assert cfg.speech.default_speaker == "anushka"

    def test_empty_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(str(path)).raw == {}

    def test_env_applied_on_load(self, tmp_path, monkeypatch):
        path = tmp_path / "settings.yaml"
        path.write_text("server:\n  port: 5050\n", encoding="utf-8")
        monkeypatch.setenv("PORT", "6060")
        assert load_settings(str(path)).port == 6060

    def test_shipped_settings_file_is_valid(self):
        from pathlib import Path

        path = Path(__file__).resolve().parent.parent / "config" / "settings.yaml"
        cfg = load_settings(str(path)).get_gateway_config()
        assert cfg.server.port == 3000
        assert cfg.speech.default_model == "bulbul:v3"
