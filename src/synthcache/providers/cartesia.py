"""Cartesia text-to-speech provider implementation."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.cartesia.ai/tts/bytes"
API_VERSION = "2024-06-10"
DEFAULT_MODEL = "sonic-english"


class CartesiaProvider(TTSProvider):
    name = "cartesia"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_streaming = True
    supports_markup = False

    def streaming_params(self, request: SynthesisRequest) -> dict:
        return {
            "api_key": request.credentials.get("api_key"),
            "model_id": request.model or DEFAULT_MODEL,
        }

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        payload = {
            "model_id": request.model or DEFAULT_MODEL,
            "transcript": self.prepare_text(request),
            "voice": {"mode": "id", "id": request.voice},
            "output_format": {
                "container": "mp3",
                "sample_rate": audio_format.sample_rate,
                "bit_rate": 128000,
            },
        }
        if request.language:
            # Cartesia takes the bare language, "en" rather than "en-US"
            payload["language"] = request.language.split("-")[0]

        audio = await self._post(
            context,
            API_URL,
            json=payload,
            headers={
                "X-API-Key": request.credentials["api_key"],
                "Cartesia-Version": API_VERSION,
            },
        )
        return self._audio(audio, audio_format)
