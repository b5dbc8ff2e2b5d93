"""Provider abstraction for text-to-speech services.

This module provides a registry pattern for managing TTS providers,
allowing runtime selection of different TTS backends by name.
"""

from typing import TYPE_CHECKING, ClassVar

from ..errors import ValidationError

if TYPE_CHECKING:
    from .base import TTSProvider

from .aws import PollyProvider
from .base import ProviderContext
from .cartesia import CartesiaProvider
from .custom import CustomProvider
from .deepgram import DeepgramProvider
from .elevenlabs import ElevenLabsProvider
from .google import GoogleProvider
from .ibm import IBMProvider
from .lmnt import LMNTProvider
from .microsoft import MicrosoftProvider
from .nuance import NuanceProvider
from .playht import PlayHTProvider
from .rimelabs import RimeLabsProvider
from .speechmatics import SpeechmaticsProvider
from .verbio import VerbioProvider
from .wellsaid import WellSaidProvider
from .whisper import WhisperProvider

__all__ = ["ProviderContext", "ProviderRegistry"]

CUSTOM_PREFIX = "custom:"


class ProviderRegistry:
    """Registry for managing TTS providers.

    This class maintains a registry of available TTS providers,
    allowing registration and retrieval by name. Aliases map alternative
    names onto a canonical provider, and any ``custom:<name>`` resolves to
    the generic custom endpoint adapter.
    """

    _providers: ClassVar[dict[str, type["TTSProvider"]]] = {}
    _aliases: ClassVar[dict[str, str]] = {}
    _instances: ClassVar[dict[str, "TTSProvider"]] = {}

    @classmethod
    def register(cls, name: str, provider_class: type["TTSProvider"]) -> None:
        """Register a TTS provider.

        Args:
            name: Name to register the provider under
            provider_class: Provider class that implements TTSProvider
        """
        cls._providers[name] = provider_class
        cls._instances.pop(name, None)

    @classmethod
    def alias(cls, alias: str, name: str) -> None:
        """Make alias resolve to the provider registered as name."""
        cls._aliases[alias] = name

    @classmethod
    def available(cls) -> list[str]:
        return sorted(cls._providers)

    @classmethod
    def resolve(cls, name: str) -> str:
        """Resolve a provider discriminator to its canonical name.

        ``custom:<name>`` is returned as-is so each custom endpoint keeps
        its own cache namespace.

        Raises:
            ValidationError: If the name is not registered
        """
        if name.startswith(CUSTOM_PREFIX) and len(name) > len(CUSTOM_PREFIX):
            if "custom" in cls._providers:
                return name
        canonical = cls._aliases.get(name, name)
        if canonical not in cls._providers or canonical == "custom":
            available = ", ".join(cls.available()) or "none"
            raise ValidationError(
                f"Provider '{name}' not found. Available providers: {available}"
            )
        return canonical

    @classmethod
    def get(cls, name: str) -> type["TTSProvider"]:
        """Get a provider class by name or alias.

        Raises:
            ValidationError: If provider name not found
        """
        canonical = cls.resolve(name)
        if canonical.startswith(CUSTOM_PREFIX):
            return cls._providers["custom"]
        return cls._providers[canonical]

    @classmethod
    def get_instance(cls, name: str) -> "TTSProvider":
        """Get a shared provider instance by name or alias.

        Creates the instance on first call, returns cached instance after.
        Adapters are stateless, so one instance serves every request.

        Raises:
            ValidationError: If provider name not found
        """
        canonical = cls.resolve(name)
        key = "custom" if canonical.startswith(CUSTOM_PREFIX) else canonical
        if key not in cls._instances:
            cls._instances[key] = cls._providers[key]()
        return cls._instances[key]


# Register providers
for _provider in (
    GoogleProvider,
    PollyProvider,
    MicrosoftProvider,
    IBMProvider,
    NuanceProvider,
    WellSaidProvider,
    ElevenLabsProvider,
    WhisperProvider,
    DeepgramProvider,
    PlayHTProvider,
    RimeLabsProvider,
    CartesiaProvider,
    VerbioProvider,
    LMNTProvider,
    SpeechmaticsProvider,
    CustomProvider,
):
    ProviderRegistry.register(_provider.name, _provider)

ProviderRegistry.alias("polly", "aws")
ProviderRegistry.alias("azure", "microsoft")
ProviderRegistry.alias("openai", "whisper")
