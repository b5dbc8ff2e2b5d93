"""PlayHT text-to-speech provider implementation."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.play.ht/api/v2/tts/stream"
DEFAULT_ENGINE = "PlayHT2.0-turbo"


class PlayHTProvider(TTSProvider):
    name = "playht"
    required_fields = ("voice",)
    required_credentials = ("api_key", "user_id")
    supports_streaming = True
    supports_markup = False

    def streaming_params(self, request: SynthesisRequest) -> dict:
        return {
            "api_key": request.credentials.get("api_key"),
            "user_id": request.credentials.get("user_id"),
            "voice_engine": request.engine or DEFAULT_ENGINE,
        }

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        payload = {
            "text": self.prepare_text(request),
            "voice": request.voice,
            "voice_engine": request.engine or DEFAULT_ENGINE,
            "output_format": "mp3",
            "sample_rate": audio_format.sample_rate,
        }
        if request.language:
            payload["language"] = request.language

        audio = await self._post(
            context,
            API_URL,
            json=payload,
            headers={
                "AUTHORIZATION": request.credentials["api_key"],
                "X-USER-ID": request.credentials["user_id"],
                "Accept": "audio/mpeg",
            },
        )
        return self._audio(audio, audio_format)
