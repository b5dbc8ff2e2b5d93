"""WellSaid Labs text-to-speech provider implementation."""

from dataclasses import replace

from ..errors import ValidationError
from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

API_URL = "https://api.wellsaidlabs.com/v1/tts/stream"


class WellSaidProvider(TTSProvider):
    """WellSaid Labs TTS. English only, no SSML."""

    name = "wellsaid"
    required_fields = ("voice",)
    required_credentials = ("api_key",)
    supports_markup = False

    def normalize(self, request: SynthesisRequest) -> SynthesisRequest:
        # Only US English is offered, whatever the caller asked for
        return replace(request, language="en-US")

    def validate(self, request: SynthesisRequest) -> None:
        super().validate(request)
        if self.is_markup(request):
            raise ValidationError("wellsaid does not support SSML tags")

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio = await self._post(
            context,
            API_URL,
            json={"text": request.text, "speaker_id": request.voice},
            headers={
                "X-Api-Key": request.credentials["api_key"],
                "Accept": "audio/mpeg",
            },
        )
        return self._audio(audio, context.audio_format)
