"""Verbio text-to-speech provider implementation."""

from ..credentials.fetchers import get_verbio_token
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo
from .base import ProviderContext, TTSProvider

API_URL = "https://us.rest.speechcenter.verbio.com/api/v1"


class VerbioProvider(TTSProvider):
    """Verbio Speech Center. Always produces 8 kHz 16-bit PCM."""

    name = "verbio"
    required_fields = ("voice",)
    required_credentials = ("client_id", "client_secret")

    async def _token(self, credentials, context: ProviderContext) -> str:
        token = await get_verbio_token(
            context.credential_cache,
            context.http,
            credentials.get("client_id", ""),
            credentials.get("client_secret", ""),
        )
        return token.access_token

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        token = await self._token(request.credentials, context)
        audio = await self._post(
            context,
            f"{API_URL}/synthesize",
            json={
                "voice_id": request.voice,
                "output_sample_rate": audio_format.sample_rate,
                "output_encoding": "pcm16",
                "text": request.text,
            },
            headers={"Authorization": f"Bearer {token}", "User-Agent": "synthcache"},
        )
        return self._audio(audio, audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        token = await self._token(credentials, context)
        data = await self._get_json(
            context,
            f"{API_URL}/voices",
            headers={"Authorization": f"Bearer {token}", "User-Agent": "synthcache"},
        )
        return [
            VoiceInfo(
                voice_id=voice["voice_id"],
                name=voice.get("name") or voice["voice_id"],
                provider=self.name,
                language=voice.get("language"),
                gender=voice.get("gender"),
            )
            for voice in data
        ]
