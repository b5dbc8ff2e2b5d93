"""Configuration management for synthcache.

Loads configuration from ~/.config/synthcache/config.toml.
Priority chain: CLI flags > env vars > config file > defaults.

The resulting SynthCacheConfig is built once and passed explicitly to the
cache manager; nothing below the CLI reads the environment.
"""

import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

CONFIG_DIR = Path.home() / ".config" / "synthcache"
CONFIG_PATH = CONFIG_DIR / "config.toml"

DEFAULT_TTL_SECONDS = 24 * 60 * 60

DEFAULT_CONFIG = """\
# synthcache configuration

[cache]
# How long synthesized audio stays cached, in seconds (refreshed on every hit)
ttl_seconds = 86400

# Skip cache lookups entirely (results are still written)
disabled = false

# Directory where synthesized audio artifacts are written
artifact_dir = "/tmp"

[streaming]
# Never hand requests off to a downstream streaming engine
disabled = false

[audio]
# Downstream engine trims leading/trailing silence (forces raw PCM for Microsoft)
trim_silence = false

[redis]
url = "redis://localhost:6379/0"

[http]
# Timeout in seconds for provider and token endpoint calls
timeout = 5.0

# Optional outbound proxy, e.g. "http://proxy.internal:3128"
# proxy = ""

# Provider credentials used by the CLI, one table per provider:
# [credentials.elevenlabs]
# api_key = "..."
# model_id = "eleven_turbo_v2_5"
"""


class ConfigError(Exception):
    """Raised when a configuration value is missing or invalid."""

    pass


@dataclass(frozen=True)
class CacheConfig:
    """Result cache configuration."""

    ttl_seconds: int = DEFAULT_TTL_SECONDS
    disabled: bool = False
    artifact_dir: Path = Path("/tmp")


@dataclass(frozen=True)
class StreamingConfig:
    """Streaming handoff configuration."""

    disabled: bool = False


@dataclass(frozen=True)
class AudioConfig:
    """Audio post-processing switches honoured by the format normalizer."""

    trim_silence: bool = False


@dataclass(frozen=True)
class RedisConfig:
    """Cache service connection configuration."""

    url: str = "redis://localhost:6379/0"


@dataclass(frozen=True)
class HTTPConfig:
    """Outbound HTTP configuration for provider calls."""

    timeout: float = 5.0
    proxy: str | None = None


@dataclass(frozen=True)
class SynthCacheConfig:
    """Top-level synthcache configuration."""

    cache: CacheConfig = field(default_factory=CacheConfig)
    streaming: StreamingConfig = field(default_factory=StreamingConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    redis: RedisConfig = field(default_factory=RedisConfig)
    http: HTTPConfig = field(default_factory=HTTPConfig)
    credentials: Mapping[str, Mapping[str, Any]] = field(default_factory=dict)

    def credentials_for(self, provider: str) -> dict[str, Any]:
        """Get configured credentials for a provider (empty if none)."""
        return dict(self.credentials.get(provider, {}))


def generate_config(path: Path = CONFIG_PATH) -> Path:
    """Generate default config file at ~/.config/synthcache/config.toml."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
    return path


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _positive_int(value: Any, name: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be an integer, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def _positive_float(value: Any, name: str) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{name} must be a number, got {value!r}") from e
    if number <= 0:
        raise ConfigError(f"{name} must be positive, got {number}")
    return number


def load_config(path: Path | None = None) -> SynthCacheConfig:
    """Load configuration from config file with env var overrides.

    A missing config file is not an error: defaults apply and env vars
    still override them.

    Args:
        path: Config file to read (defaults to ~/.config/synthcache/config.toml)

    Returns:
        Loaded and validated SynthCacheConfig.

    Raises:
        ConfigError: If the file cannot be parsed or a value is invalid.
    """
    config_path = path or CONFIG_PATH
    data: dict[str, Any] = {}
    if config_path.exists():
        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    cache = data.get("cache", {})
    streaming = data.get("streaming", {})
    audio = data.get("audio", {})
    redis_cfg = data.get("redis", {})
    http_cfg = data.get("http", {})
    credentials = data.get("credentials", {})

    if not isinstance(credentials, dict):
        raise ConfigError("credentials must be a table of provider tables")

    # Env vars override config file values
    ttl = os.getenv(
        "SYNTHCACHE_CACHE_TTL_SECONDS", cache.get("ttl_seconds", DEFAULT_TTL_SECONDS)
    )
    proxy = os.getenv("SYNTHCACHE_HTTP_PROXY", http_cfg.get("proxy") or "")

    return SynthCacheConfig(
        cache=CacheConfig(
            ttl_seconds=_positive_int(ttl, "cache.ttl_seconds"),
            disabled=_env_bool(
                "SYNTHCACHE_DISABLE_CACHE", bool(cache.get("disabled", False))
            ),
            artifact_dir=Path(
                os.getenv("SYNTHCACHE_ARTIFACT_DIR", cache.get("artifact_dir", "/tmp"))
            ),
        ),
        streaming=StreamingConfig(
            disabled=_env_bool(
                "SYNTHCACHE_DISABLE_STREAMING", bool(streaming.get("disabled", False))
            ),
        ),
        audio=AudioConfig(
            trim_silence=_env_bool(
                "SYNTHCACHE_TRIM_SILENCE", bool(audio.get("trim_silence", False))
            ),
        ),
        redis=RedisConfig(
            url=os.getenv(
                "SYNTHCACHE_REDIS_URL",
                redis_cfg.get("url", "redis://localhost:6379/0"),
            ),
        ),
        http=HTTPConfig(
            timeout=_positive_float(http_cfg.get("timeout", 5.0), "http.timeout"),
            proxy=proxy or None,
        ),
        credentials={name: dict(values) for name, values in credentials.items()},
    )
