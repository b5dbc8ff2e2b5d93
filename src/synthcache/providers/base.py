"""Abstract base class for text-to-speech providers.

This module defines the interface that all TTS providers must implement,
ensuring consistent behavior across different TTS backends.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, ClassVar

import httpx

from ..config import SynthCacheConfig
from ..credentials import CredentialCache
from ..errors import ProviderError, ValidationError
from ..markup import is_markup, strip_markup
from ..models import AudioFormat, ProviderAudio, SynthesisRequest, VoiceInfo


@dataclass
class ProviderContext:
    """Collaborators handed to an adapter for one synthesis call.

    Attributes:
        http: Shared HTTP client (proxy and timeout already applied)
        credential_cache: Cache for short-lived provider credentials
        config: Active configuration
        audio_format: Format the result must be produced in
    """

    http: httpx.AsyncClient
    credential_cache: CredentialCache
    config: SynthCacheConfig
    audio_format: AudioFormat


class TTSProvider(ABC):
    """Abstract base class for text-to-speech providers.

    All TTS providers must inherit from this class and implement
    synthesize(). Adapters hold no per-call state, so one instance serves
    every request.

    Class attributes describe what the provider needs and can do:
        name: Canonical provider name
        required_fields: Request attributes that must be set
        required_credentials: Keys that must be present in request.credentials
        supports_streaming: Provider can be handed off to a streaming engine
        supports_markup: Provider accepts SSML (others get stripped text)
        max_text_length: Hard ceiling on text size, or None
    """

    name: ClassVar[str] = ""
    required_fields: ClassVar[tuple[str, ...]] = ()
    required_credentials: ClassVar[tuple[str, ...]] = ()
    supports_streaming: ClassVar[bool] = False
    supports_markup: ClassVar[bool] = True
    max_text_length: ClassVar[int | None] = None

    def normalize(self, request: SynthesisRequest) -> SynthesisRequest:
        """Adjust a request before it is fingerprinted (identity by default)."""
        return request

    def text_length(self, text: str) -> int:
        """Size of text as counted against max_text_length."""
        return len(text)

    def validate(self, request: SynthesisRequest) -> None:
        """Check the request carries everything this provider needs.

        Raises:
            ValidationError: If a field or credential is missing, or the
                text exceeds the provider's ceiling
        """
        for attr in self.required_fields:
            if attr == "voice":
                if not request.voice_or_deployment:
                    raise ValidationError(f"{self.name} requires voice")
            elif not getattr(request, attr):
                raise ValidationError(f"{self.name} requires {attr}")

        for key in self.required_credentials:
            if not request.credentials.get(key):
                raise ValidationError(f"{self.name} requires {key} in credentials")

        if self.max_text_length is not None:
            size = self.text_length(request.text)
            if size > self.max_text_length:
                raise ValidationError(
                    f"{self.name} accepts at most {self.max_text_length} "
                    f"characters of text, got {size}"
                )

    def prepare_text(self, request: SynthesisRequest) -> str:
        """Text as the provider should receive it."""
        if self.supports_markup:
            return request.text
        return strip_markup(request.text)

    def is_markup(self, request: SynthesisRequest) -> bool:
        return is_markup(request.text)

    def streaming_params(self, request: SynthesisRequest) -> dict[str, Any]:
        """Provider-specific parameters a streaming engine needs.

        Only called for providers with supports_streaming set.
        """
        return {}

    @abstractmethod
    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        """Convert text to audio in context.audio_format.

        Args:
            request: Validated synthesis request
            context: HTTP client, credential cache and target format

        Returns:
            ProviderAudio with the audio bytes, extension and sample rate

        Raises:
            ProviderError: If the provider call fails
            CredentialError: If session credentials cannot be obtained
        """
        pass

    async def list_voices(
        self, credentials: Mapping[str, Any], context: ProviderContext
    ) -> list[VoiceInfo]:
        """Return available voices for this provider.

        Raises:
            ValidationError: If the provider does not support voice listing
            ProviderError: If voice listing fails
        """
        raise ValidationError(f"{self.name} does not support listing voices")

    def _audio(self, audio: bytes, audio_format: AudioFormat) -> ProviderAudio:
        if not audio:
            raise ProviderError("No audio data received from API", self.name)
        return ProviderAudio(
            audio=audio,
            extension=audio_format.extension,
            sample_rate=audio_format.sample_rate,
        )

    async def _request(
        self, context: ProviderContext, method: str, url: str, **kwargs: Any
    ) -> httpx.Response:
        """Send one HTTP request, mapping every failure to ProviderError."""
        try:
            response = await context.http.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise ProviderError(
                f"{self.name} request timed out: {e}", self.name, None, e
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(
                f"{self.name} request failed: {e}", self.name, None, e
            ) from e

        if response.status_code in (401, 403):
            raise ProviderError(
                f"Authentication failed ({response.status_code})",
                self.name,
                response.status_code,
            )
        if response.status_code == 429:
            raise ProviderError("Rate limit exceeded", self.name, 429)
        if response.status_code >= 300:
            raise ProviderError(
                f"API call failed with status {response.status_code}: "
                f"{response.text[:200]}",
                self.name,
                response.status_code,
            )
        return response

    async def _post(self, context: ProviderContext, url: str, **kwargs: Any) -> bytes:
        response = await self._request(context, "POST", url, **kwargs)
        return response.content

    async def _get_json(self, context: ProviderContext, url: str, **kwargs: Any) -> Any:
        response = await self._request(context, "GET", url, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ProviderError(
                f"{self.name} returned invalid JSON", self.name, response.status_code, e
            ) from e
