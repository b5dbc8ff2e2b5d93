"""Rime Labs text-to-speech provider implementation."""

from ..formats import R8
from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://users.rime.ai/v1/rime-tts"
DEFAULT_MODEL = "mist"


class RimeLabsProvider(TTSProvider):
    name = "rimelabs"
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
            "speaker": request.voice,
            "text": self.prepare_text(request),
            "modelId": request.model or DEFAULT_MODEL,
            "samplingRate": audio_format.sample_rate,
        }
        if request.language:
            payload["lang"] = request.language

        accept = "audio/pcm" if audio_format.extension == R8 else "audio/mp3"
        audio = await self._post(
            context,
            API_URL,
            json=payload,
            headers={
                "Authorization": f"Bearer {request.credentials['api_key']}",
                "Accept": accept,
            },
        )
        return self._audio(audio, audio_format)
