"""ElevenLabs text-to-speech provider implementation."""

import asyncio

from elevenlabs.client import ElevenLabs

from ..errors import ProviderError
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo, VoiceSettings
from .base import ProviderContext, TTSProvider

DEFAULT_MODEL = "eleven_turbo_v2_5"

OUTPUT_FORMATS = {
    "mp3": "mp3_44100_128",
    "r8": "pcm_8000",
}


def _status_of(error: Exception) -> int | None:
    status = getattr(error, "status_code", None)
    if isinstance(status, int):
        return status
    text = str(error)
    for code in (401, 403, 404, 422, 429, 500, 502, 503):
        if str(code) in text:
            return code
    return None


class ElevenLabsProvider(TTSProvider):
    """ElevenLabs TTS provider implementation.

    Uses the official SDK, which is synchronous, from a worker thread. A
    client is built per call from the request's ``api_key``.
    """

    name = "elevenlabs"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_streaming = True
    supports_markup = False

    def _model(self, request: SynthesisRequest) -> str:
        return request.model or request.credentials.get("model_id") or DEFAULT_MODEL

    def _voice_settings(self, request: SynthesisRequest) -> VoiceSettings:
        # v3 models only accept stability of 0.0, 0.5 or 1.0
        if self._model(request).startswith("eleven_v3"):
            return VoiceSettings(stability=0.5, similarity_boost=0.75, style=0.4)
        return VoiceSettings(stability=0.65, similarity_boost=0.75, style=0.4)

    def streaming_params(self, request: SynthesisRequest) -> dict:
        return {
            "api_key": request.credentials.get("api_key"),
            "model_id": self._model(request),
        }

    def _error(self, action: str, e: Exception) -> ProviderError:
        status = _status_of(e)
        if status in (401, 403):
            return ProviderError(f"Authentication failed: {e}", self.name, status, e)
        if status == 429:
            return ProviderError(f"Rate limit exceeded: {e}", self.name, 429, e)
        return ProviderError(f"{action} failed: {e}", self.name, status, e)

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        text = self.prepare_text(request).strip()
        voice_settings = self._voice_settings(request)
        output_format = OUTPUT_FORMATS.get(audio_format.extension, OUTPUT_FORMATS["mp3"])

        # Run synchronous ElevenLabs client in thread to avoid blocking event loop
        def _sync_convert() -> bytes:
            client = ElevenLabs(api_key=request.credentials["api_key"])
            audio_generator = client.text_to_speech.convert(
                text=text,
                voice_id=request.voice,
                model_id=self._model(request),
                output_format=output_format,
                voice_settings=voice_settings.to_dict(),
            )
            # Collect all audio chunks
            return b"".join(audio_generator)

        try:
            audio = await asyncio.to_thread(_sync_convert)
        except Exception as e:
            raise self._error("API call", e) from e

        return self._audio(audio, audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        def _sync_get_voices() -> list[VoiceInfo]:
            client = ElevenLabs(api_key=credentials.get("api_key"))
            response = client.voices.get_all()
            return [
                VoiceInfo(voice_id=voice.voice_id, name=voice.name, provider=self.name)
                for voice in response.voices
            ]

        try:
            return await asyncio.to_thread(_sync_get_voices)
        except Exception as e:
            raise self._error("Listing voices", e) from e
