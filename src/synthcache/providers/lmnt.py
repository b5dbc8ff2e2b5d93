"""LMNT text-to-speech provider implementation."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.lmnt.com/v1/ai/speech/bytes"


class LMNTProvider(TTSProvider):
    name = "lmnt"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_markup = False

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        payload = {
            "voice": request.voice,
            "text": self.prepare_text(request),
            "format": "mp3",
            "sample_rate": audio_format.sample_rate,
        }
        if request.language:
            payload["language"] = request.language.split("-")[0]

        audio = await self._post(
            context,
            API_URL,
            json=payload,
            headers={"X-API-Key": request.credentials["api_key"]},
        )
        return self._audio(audio, audio_format)
