"""Speechmatics text-to-speech provider implementation."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://preview.tts.speechmatics.com/generate"


class SpeechmaticsProvider(TTSProvider):
    """Speechmatics preview TTS. Produces 16 kHz WAV."""

    name = "speechmatics"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_markup = False

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        audio = await self._post(
            context,
            f"{API_URL}/{request.voice}",
            params={"output_format": f"wav_{audio_format.sample_rate}"},
            json={"text": self.prepare_text(request)},
            headers={"Authorization": f"Bearer {request.credentials['api_key']}"},
        )
        return self._audio(audio, audio_format)
