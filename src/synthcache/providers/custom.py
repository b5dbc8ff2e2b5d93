"""Self-hosted speech endpoints addressed as ``custom:<name>``."""

from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider


class CustomProvider(TTSProvider):
    """Generic HTTP speech server.

    POSTs ``{language, voice, type, text}`` to ``custom_tts_url`` with an
    optional bearer ``auth_token`` and expects audio bytes back. ``type`` is
    ``"ssml"`` for markup and ``"text"`` otherwise.
    """

    name = "custom"
    required_credentials = ("custom_tts_url",)

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        headers = {"Accept": "audio/mpeg"}
        token = request.credentials.get("auth_token")
        if token:
            headers["Authorization"] = f"Bearer {token}"

        audio = await self._post(
            context,
            request.credentials["custom_tts_url"],
            json={
                "language": request.language,
                "voice": request.voice_or_deployment,
                "type": "ssml" if self.is_markup(request) else "text",
                "text": request.text,
            },
            headers=headers,
        )
        return self._audio(audio, context.audio_format)
