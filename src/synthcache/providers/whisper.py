"""OpenAI speech provider implementation."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.openai.com/v1/audio/speech"
DEFAULT_MODEL = "tts-1"


class WhisperProvider(TTSProvider):
    """OpenAI text-to-speech (``/v1/audio/speech``)."""

    name = "whisper"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_streaming = True
    supports_markup = False
    max_text_length = 4096

    def streaming_params(self, request: SynthesisRequest) -> dict:
        return {
            "api_key": request.credentials.get("api_key"),
            "model_id": request.model or DEFAULT_MODEL,
            "instructions": request.instructions,
        }

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        payload = {
            "model": request.model or DEFAULT_MODEL,
            "input": self.prepare_text(request),
            "voice": request.voice,
            "response_format": "mp3",
        }
        if request.instructions:
            payload["instructions"] = request.instructions

        audio = await self._post(
            context,
            API_URL,
            json=payload,
            headers={"Authorization": f"Bearer {request.credentials['api_key']}"},
        )
        return self._audio(audio, context.audio_format)
