"""Synthesis data models with validation."""

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

from .errors import ValidationError

# Tenants and salts end up in cache key patterns and artifact filenames
SAFE_SEGMENT_RE = re.compile(r"^[A-Za-z0-9_.-]+$")


def check_segment(name: str, value: str | None) -> None:
    """Reject a tenant or salt that is unsafe in keys and filenames.

    Raises:
        ValidationError: If value has characters outside ``[A-Za-z0-9_.-]``
            or contains ``..``
    """
    if not value:
        return
    if not SAFE_SEGMENT_RE.match(value) or ".." in value:
        raise ValidationError(
            f"{name} may only contain [A-Za-z0-9_.-] without '..', got {value!r}"
        )


@dataclass(frozen=True)
class SynthesisRequest:
    """A request to turn text into speech.

    Args:
        provider: Provider discriminator (e.g., "google", "aws", "custom:acme")
        text: Plain text or SSML markup to synthesize
        language: Language code (e.g., "en-US")
        voice: Provider voice identifier
        deployment_id: Custom deployment used in place of a voice (Microsoft)
        engine: Provider engine (e.g., "neural" for Polly)
        model: Provider model identifier
        instructions: Optional prompt steering the delivery (OpenAI)
        gender: Optional voice gender hint (Google)
        tenant: Optional tenant identifier, scopes the cache key
        credentials: Provider-specific credential fields
        disable_cache: Skip the cache lookup (results are still persisted)
        render_for_caching: Always render audio, never hand off to streaming
        disable_streaming: Never hand off to streaming for this request
        salt: Optional artifact filename salt for concurrent identical calls
    """

    provider: str
    text: str
    language: str | None = None
    voice: str | None = None
    deployment_id: str | None = None
    engine: str | None = None
    model: str | None = None
    instructions: str | None = None
    gender: str | None = None
    tenant: str | None = None
    credentials: Mapping[str, Any] = field(default_factory=dict)
    disable_cache: bool = False
    render_for_caching: bool = False
    disable_streaming: bool = False
    salt: str | None = None

    def __post_init__(self) -> None:
        """Validate the request shape."""
        if not self.provider or not self.provider.strip():
            raise ValidationError("provider cannot be empty")
        if not isinstance(self.text, str) or not self.text.strip():
            raise ValidationError("text cannot be empty")
        check_segment("tenant", self.tenant)
        check_segment("salt", self.salt)

    @property
    def voice_or_deployment(self) -> str:
        """Voice identifier, falling back to the deployment id."""
        return self.voice or self.deployment_id or ""


@dataclass(frozen=True)
class AudioFormat:
    """Container extension and sample rate of synthesized audio."""

    extension: str
    sample_rate: int


@dataclass(frozen=True)
class ProviderAudio:
    """Audio returned by a provider adapter."""

    audio: bytes
    extension: str
    sample_rate: int


@dataclass
class SynthesisResult:
    """Outcome of a synthesis request.

    Either rendered audio (``audio`` and ``artifact_path`` set) or a
    streaming directive for a downstream real-time engine (``directive``
    set). ``elapsed_ms`` measures the provider round trip and is ``None``
    when no provider was called.
    """

    served_from_cache: bool
    elapsed_ms: float | None = None
    artifact_path: Path | None = None
    audio: bytes | None = None
    extension: str | None = None
    sample_rate: int | None = None
    directive: str | None = None

    @property
    def is_streaming(self) -> bool:
        return self.directive is not None


@dataclass
class VoiceInfo:
    """Information about an available voice.

    Args:
        voice_id: Unique identifier for the voice
        name: Human-readable name of the voice
        provider: Provider the voice belongs to
        language: Optional language code the voice speaks
        gender: Optional voice gender
    """

    voice_id: str
    name: str
    provider: str
    language: str | None = None
    gender: str | None = None

    def __post_init__(self) -> None:
        """Validate voice information."""
        if not self.voice_id or not self.voice_id.strip():
            raise ValueError("voice_id cannot be empty")
        if not self.name or not self.name.strip():
            raise ValueError("name cannot be empty")


@dataclass
class VoiceSettings:
    """ElevenLabs voice generation settings.

    Args:
        stability: Voice stability (0.0-1.0)
        similarity_boost: Voice similarity boost (0.0-1.0)
        style: Voice style exaggeration (0.0-1.0)
        use_speaker_boost: Whether to use speaker boost
    """

    stability: float = 0.5
    similarity_boost: float = 0.75
    style: float = 0.0
    use_speaker_boost: bool = True

    def __post_init__(self) -> None:
        """Validate voice settings."""
        if not 0.0 <= self.stability <= 1.0:
            raise ValueError("stability must be between 0.0 and 1.0")
        if not 0.0 <= self.similarity_boost <= 1.0:
            raise ValueError("similarity_boost must be between 0.0 and 1.0")
        if not 0.0 <= self.style <= 1.0:
            raise ValueError("style must be between 0.0 and 1.0")

    def to_dict(self) -> dict[str, Any]:
        return {
            "stability": self.stability,
            "similarity_boost": self.similarity_boost,
            "style": self.style,
            "use_speaker_boost": self.use_speaker_boost,
        }


class PurgeScope(str, Enum):
    """What a purge removes from the cache namespace."""

    ALL = "all"
    TENANT = "tenant"
    ONE = "one"


@dataclass(frozen=True)
class PurgeResult:
    """Outcome of a purge: how many entries went away and any soft error."""

    purged_count: int
    error: str | None = None
