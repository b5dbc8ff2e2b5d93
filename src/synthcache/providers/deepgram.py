"""Deepgram Aura text-to-speech provider implementation."""

from ..formats import R8
from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.deepgram.com/v1/speak"


class DeepgramProvider(TTSProvider):
    """Deepgram Aura. The voice is passed as the Deepgram model name."""

    name = "deepgram"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_streaming = True
    supports_markup = False

    def streaming_params(self, request: SynthesisRequest) -> dict:
        return {"api_key": request.credentials.get("api_key")}

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        params = {"model": request.voice}
        if audio_format.extension == R8:
            params.update(
                encoding="linear16",
                sample_rate=str(audio_format.sample_rate),
                container="none",
            )
        else:
            params["encoding"] = "mp3"

        audio = await self._post(
            context,
            API_URL,
            params=params,
            json={"text": self.prepare_text(request)},
            headers={"Authorization": f"Token {request.credentials['api_key']}"},
        )
        return self._audio(audio, audio_format)
