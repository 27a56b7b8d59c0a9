"""
Configuration Management for sarvam-gateway.

This module provides centralized configuration handling with:
    - Default values (Defaults class)
    - Dataclass-based configuration objects
    - YAML file loading with environment variable overrides
    - Validation with meaningful error messages

Configuration Hierarchy (highest priority first):
    1. Environment variables (SARVAM_API_KEY, PORT, APP_ENV, ...)
    2. YAML config file (config/settings.yaml)
    3. Defaults class values

Example settings.yaml:
    server:
      port: 3000
      environment: development

    document:
      max_upload_bytes: 209715200
      default_output_format: html

    speech:
      audio_dir: ./audio
      default_speaker: shubh
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple
import os
import yaml


class ConfigValidationError(Exception):
    """Raised when a configuration value is outside acceptable bounds."""
    pass


class Defaults:
    """
    Centralized default configuration values.

    Sections:
        - Server: Listen address and environment name
        - Provider: Hosted API credentials and client timeout
        - Document: Upload constraints and job defaults
        - Speech: Synthesis defaults and audio storage
        - Logging: Log level and formatting
    """

    # ─────────────────────────────────────────────────────────────────────────
    # Server
    # ─────────────────────────────────────────────────────────────────────────
    SERVER_HOST = "0.0.0.0"
    SERVER_PORT = 3000
    SERVER_ENVIRONMENT = "development"

    # ─────────────────────────────────────────────────────────────────────────
    # Provider
    # ─────────────────────────────────────────────────────────────────────────
    PROVIDER_NAME = "sarvam"
    PROVIDER_TIMEOUT_S = 60.0           # Per HTTP call made by the SDK

    # ─────────────────────────────────────────────────────────────────────────
    # Document Intelligence
    # ─────────────────────────────────────────────────────────────────────────
    DOCUMENT_ALLOWED_EXTENSIONS = (".pdf", ".zip")
    DOCUMENT_MAX_UPLOAD_BYTES = 200 * 1024 * 1024   # Provider maximum
    DOCUMENT_DEFAULT_LANGUAGE = "en-IN"
    DOCUMENT_DEFAULT_OUTPUT_FORMAT = "html"
    DOCUMENT_TEMP_DIR = "."
    DOCUMENT_WAIT_TIMEOUT_S = 0.0       # 0 = wait until the job is terminal

    # ─────────────────────────────────────────────────────────────────────────
    # Text-to-Speech
    # ─────────────────────────────────────────────────────────────────────────
    SPEECH_AUDIO_DIR = "./audio"
    SPEECH_TARGET_LANGUAGE_CODE = "en-IN"
    SPEECH_SPEAKER = "shubh"
    SPEECH_PACE = 1.0
    SPEECH_SAMPLE_RATE = 22050
    SPEECH_ENABLE_PREPROCESSING = True
    SPEECH_MODEL = "bulbul:v3"
    SPEECH_TTL_SECONDS = 0              # 0 = keep audio files forever
    SPEECH_CLEANUP_INTERVAL_SECONDS = 3600

    # ─────────────────────────────────────────────────────────────────────────
    # Logging
    # ─────────────────────────────────────────────────────────────────────────
    LOGGING_TEXT_PREVIEW_CHARS = 80
    LOGGING_LEVEL = 2                   # 1=MINIMAL, 2=NORMAL, 3=VERBOSE, 4=DEBUG


@dataclass
class ServerConfig:
    """HTTP server configuration."""
    host: str = Defaults.SERVER_HOST
    port: int = Defaults.SERVER_PORT
    environment: str = Defaults.SERVER_ENVIRONMENT
    public_base_url: Optional[str] = None


@dataclass
class ProviderConfig:
    """
    Hosted AI provider configuration.

    The API key normally comes from the SARVAM_API_KEY environment
    variable rather than the YAML file.
    """
    name: str = Defaults.PROVIDER_NAME
    api_key: Optional[str] = None
    timeout_s: float = Defaults.PROVIDER_TIMEOUT_S


@dataclass
class DocumentConfig:
    """Document intelligence upload constraints and job defaults."""
    allowed_extensions: Tuple[str, ...] = Defaults.DOCUMENT_ALLOWED_EXTENSIONS
    max_upload_bytes: int = Defaults.DOCUMENT_MAX_UPLOAD_BYTES
    default_language: str = Defaults.DOCUMENT_DEFAULT_LANGUAGE
    default_output_format: str = Defaults.DOCUMENT_DEFAULT_OUTPUT_FORMAT
    temp_dir: str = Defaults.DOCUMENT_TEMP_DIR
    wait_timeout_s: float = Defaults.DOCUMENT_WAIT_TIMEOUT_S


@dataclass
class SpeechConfig:
    """
    Text-to-speech defaults and audio storage.

    Default synthesis parameters are applied when the request omits them.
    """
    audio_dir: str = Defaults.SPEECH_AUDIO_DIR
    default_target_language_code: str = Defaults.SPEECH_TARGET_LANGUAGE_CODE
    default_speaker: str = Defaults.SPEECH_SPEAKER
    default_pace: float = Defaults.SPEECH_PACE
    default_speech_sample_rate: int = Defaults.SPEECH_SAMPLE_RATE
    default_enable_preprocessing: bool = Defaults.SPEECH_ENABLE_PREPROCESSING
    default_model: str = Defaults.SPEECH_MODEL
    ttl_seconds: int = Defaults.SPEECH_TTL_SECONDS
    cleanup_interval_seconds: int = Defaults.SPEECH_CLEANUP_INTERVAL_SECONDS


@dataclass
class LoggingConfig:
    """
    Logging configuration.

    Log levels:
        1 = MINIMAL: Startup, shutdown, critical errors only
        2 = NORMAL: Request lifecycle (default)
        3 = VERBOSE: Per-step timing, detailed flow
        4 = DEBUG: Internal state, full tracing
    """
    text_preview_chars: int = Defaults.LOGGING_TEXT_PREVIEW_CHARS
    level: int = Defaults.LOGGING_LEVEL


@dataclass
class GatewayConfig:
    """
    Validated configuration for the gateway services.

    Usage:
        settings = load_settings("config/settings.yaml")
        config = GatewayConfig.from_settings(settings)
        print(config.speech.audio_dir)
    """
    server: ServerConfig = field(default_factory=ServerConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    document: DocumentConfig = field(default_factory=DocumentConfig)
    speech: SpeechConfig = field(default_factory=SpeechConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_settings(cls, settings: "Settings") -> "GatewayConfig":
        """
        Create GatewayConfig from Settings with validation.

        Args:
            settings: Raw Settings object loaded from YAML.

        Returns:
            Validated GatewayConfig instance.

        Raises:
            ConfigValidationError: If any value fails validation.
        """
        raw = settings.raw

        # ─────────────────────────────────────────────────────────────────────
        # Server
        # ─────────────────────────────────────────────────────────────────────
        server_raw = raw.get("server", {}) or {}
        server = ServerConfig(
            host=str(server_raw.get("host", Defaults.SERVER_HOST)),
            port=int(server_raw.get("port", Defaults.SERVER_PORT)),
            environment=str(server_raw.get("environment", Defaults.SERVER_ENVIRONMENT)),
            public_base_url=server_raw.get("public_base_url") or None,
        )
        cls._validate_range("server.port", server.port, 1, 65535)

        # ─────────────────────────────────────────────────────────────────────
        # Provider
        # ─────────────────────────────────────────────────────────────────────
        provider_raw = raw.get("provider", {}) or {}
        provider = ProviderConfig(
            name=str(provider_raw.get("name", Defaults.PROVIDER_NAME)).strip().lower(),
            api_key=provider_raw.get("api_key") or None,
            timeout_s=float(provider_raw.get("timeout_s", Defaults.PROVIDER_TIMEOUT_S)),
        )
        cls._validate_positive("provider.timeout_s", provider.timeout_s)

        # ─────────────────────────────────────────────────────────────────────
        # Document intelligence
        # ─────────────────────────────────────────────────────────────────────
        document_raw = raw.get("document", {}) or {}
        extensions = document_raw.get("allowed_extensions", Defaults.DOCUMENT_ALLOWED_EXTENSIONS)
        document = DocumentConfig(
            allowed_extensions=tuple(cls._normalize_extension(e) for e in extensions),
            max_upload_bytes=int(document_raw.get("max_upload_bytes", Defaults.DOCUMENT_MAX_UPLOAD_BYTES)),
            default_language=str(document_raw.get("default_language", Defaults.DOCUMENT_DEFAULT_LANGUAGE)),
            default_output_format=str(
                document_raw.get("default_output_format", Defaults.DOCUMENT_DEFAULT_OUTPUT_FORMAT)
            ),
            temp_dir=str(document_raw.get("temp_dir", Defaults.DOCUMENT_TEMP_DIR)),
            wait_timeout_s=float(document_raw.get("wait_timeout_s", Defaults.DOCUMENT_WAIT_TIMEOUT_S)),
        )
        if not document.allowed_extensions:
            raise ConfigValidationError("document.allowed_extensions must not be empty")
        cls._validate_positive("document.max_upload_bytes", document.max_upload_bytes)
        cls._validate_non_negative("document.wait_timeout_s", document.wait_timeout_s)

        # ─────────────────────────────────────────────────────────────────────
        # Text-to-speech
        # ─────────────────────────────────────────────────────────────────────
        speech_raw = raw.get("speech", {}) or {}
        speech = SpeechConfig(
            audio_dir=str(speech_raw.get("audio_dir", Defaults.SPEECH_AUDIO_DIR)),
            default_target_language_code=str(
                speech_raw.get("default_target_language_code", Defaults.SPEECH_TARGET_LANGUAGE_CODE)
            ),
            default_speaker=str(speech_raw.get("default_speaker", Defaults.SPEECH_SPEAKER)),
            default_pace=float(speech_raw.get("default_pace", Defaults.SPEECH_PACE)),
            default_speech_sample_rate=int(
                speech_raw.get("default_speech_sample_rate", Defaults.SPEECH_SAMPLE_RATE)
            ),
            default_enable_preprocessing=bool(
                speech_raw.get("default_enable_preprocessing", Defaults.SPEECH_ENABLE_PREPROCESSING)
            ),
            default_model=str(speech_raw.get("default_model", Defaults.SPEECH_MODEL)),
            ttl_seconds=int(speech_raw.get("ttl_seconds", Defaults.SPEECH_TTL_SECONDS)),
            cleanup_interval_seconds=int(
                speech_raw.get("cleanup_interval_seconds", Defaults.SPEECH_CLEANUP_INTERVAL_SECONDS)
            ),
        )
        cls._validate_positive("speech.default_pace", speech.default_pace)
        cls._validate_positive("speech.default_speech_sample_rate", speech.default_speech_sample_rate)
        cls._validate_non_negative("speech.ttl_seconds", speech.ttl_seconds)
        cls._validate_positive("speech.cleanup_interval_seconds", speech.cleanup_interval_seconds)

        # ─────────────────────────────────────────────────────────────────────
        # Logging
        # ─────────────────────────────────────────────────────────────────────
        logging_raw = raw.get("logging", {}) or {}
        log_level_raw = logging_raw.get("level", Defaults.LOGGING_LEVEL)

        # Handle string log levels (e.g., "INFO", "DEBUG")
        if isinstance(log_level_raw, str):
            level_map = {
                "MINIMAL": 1, "1": 1,
                "NORMAL": 2, "INFO": 2, "2": 2,
                "VERBOSE": 3, "3": 3,
                "DEBUG": 4, "TRACE": 4, "4": 4,
            }
            log_level = level_map.get(log_level_raw.upper(), Defaults.LOGGING_LEVEL)
        else:
            log_level = int(log_level_raw)

        logging_cfg = LoggingConfig(
            text_preview_chars=int(logging_raw.get("text_preview_chars", Defaults.LOGGING_TEXT_PREVIEW_CHARS)),
            level=log_level,
        )
        cls._validate_non_negative("logging.text_preview_chars", logging_cfg.text_preview_chars)
        cls._validate_range("logging.level", logging_cfg.level, 1, 4)

        return cls(
            server=server,
            provider=provider,
            document=document,
            speech=speech,
            logging=logging_cfg,
        )

    @staticmethod
    def _normalize_extension(ext: Any) -> str:
        """Lower-case an extension and make sure it starts with a dot."""
        ext = str(ext).strip().lower()
        return ext if ext.startswith(".") else f".{ext}"

    @staticmethod
    def _validate_positive(name: str, value: int | float) -> None:
        """Validate that a value is positive (> 0)."""
        if value <= 0:
            raise ConfigValidationError(f"{name} must be positive, got {value}")

    @staticmethod
    def _validate_non_negative(name: str, value: int | float) -> None:
        """Validate that a value is non-negative (>= 0)."""
        if value < 0:
            raise ConfigValidationError(f"{name} must be non-negative, got {value}")

    @staticmethod
    def _validate_range(name: str, value: int | float, min_val: int | float, max_val: int | float) -> None:
        """Validate that a value is within a range [min_val, max_val]."""
        if not (min_val <= value <= max_val):
            raise ConfigValidationError(f"{name} must be between {min_val} and {max_val}, got {value}")


@dataclass(frozen=True)
class Settings:
    """
    Immutable settings container loaded from YAML.

    This is the raw settings object before validation. Use
    get_gateway_config() to get the validated GatewayConfig.

    Attributes:
        raw: Dictionary of raw configuration values.
    """
    raw: Dict[str, Any]

    @property
    def environment(self) -> str:
        """Get the deployment environment name."""
        return str(self.raw.get("server", {}).get("environment", Defaults.SERVER_ENVIRONMENT))

    @property
    def port(self) -> int:
        """Get the HTTP listen port."""
        return int(self.raw.get("server", {}).get("port", Defaults.SERVER_PORT))

    @property
    def api_key(self) -> Optional[str]:
        """Get the provider API key (None when unset)."""
        return self.raw.get("provider", {}).get("api_key") or None

    @property
    def audio_dir(self) -> str:
        """Get the directory holding generated audio files."""
        return str(self.raw.get("speech", {}).get("audio_dir", Defaults.SPEECH_AUDIO_DIR))

    def get_gateway_config(self) -> GatewayConfig:
        """
        Get validated GatewayConfig from these settings.

        Raises:
            ConfigValidationError: If validation fails.
        """
        return GatewayConfig.from_settings(self)


def apply_env_overrides(raw: Dict[str, Any]) -> Dict[str, Any]:
    """
    Apply environment variable overrides to a raw settings dict.

    Environment variables:
        - SARVAM_API_KEY: provider.api_key
        - PORT: server.port
        - APP_ENV: server.environment
        - SARVAM_GATEWAY_AUDIO_DIR: speech.audio_dir
    """
    api_key = os.getenv("SARVAM_API_KEY")
    if api_key:
        raw.setdefault("provider", {})["api_key"] = api_key

    port = os.getenv("PORT")
    if port:
        raw.setdefault("server", {})["port"] = int(port)

    env_name = os.getenv("APP_ENV")
    if env_name:
        raw.setdefault("server", {})["environment"] = env_name

    audio_dir = os.getenv("SARVAM_GATEWAY_AUDIO_DIR")
    if audio_dir:
        raw.setdefault("speech", {})["audio_dir"] = audio_dir

    return raw


def load_settings(path: str = "config/settings.yaml") -> Settings:
    """
    Load settings from a YAML configuration file.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Settings object with loaded configuration and environment overrides.

    Raises:
        FileNotFoundError: If the settings file doesn't exist.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"settings file not found: {p.resolve()}")

    with p.open("r", encoding="utf-8") as f:
        raw: Dict[str, Any] = yaml.safe_load(f) or {}

    return Settings(raw=apply_env_overrides(raw))
