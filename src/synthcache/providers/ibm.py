"""IBM Watson text-to-speech provider implementation."""

from ..credentials.fetchers import get_ibm_token
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo
from .base import ProviderContext, TTSProvider


def _service_url(region: str) -> str:
    return f"https://api.{region}.text-to-speech.watson.cloud.ibm.com"


class IBMProvider(TTSProvider):
    """IBM Watson TTS, authenticated with a cached IAM bearer token."""

    name = "ibm"
    required_fields = ("voice",)
    required_credentials = ("tts_api_key", "tts_region")

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        credentials = request.credentials
        token = await get_ibm_token(
            context.credential_cache, context.http, credentials["tts_api_key"]
        )
        audio = await self._post(
            context,
            f"{_service_url(credentials['tts_region'])}/v1/synthesize",
            params={"voice": request.voice},
            json={"text": request.text},
            headers={
                "Authorization": f"Bearer {token.access_token}",
                "Accept": "audio/mp3",
            },
        )
        return self._audio(audio, context.audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        token = await get_ibm_token(
            context.credential_cache, context.http, credentials.get("tts_api_key", "")
        )
        data = await self._get_json(
            context,
            f"{_service_url(credentials.get('tts_region', ''))}/v1/voices",
            headers={"Authorization": f"Bearer {token.access_token}"},
        )
        return [
            VoiceInfo(
                voice_id=voice["name"],
                name=voice.get("description") or voice["name"],
                provider=self.name,
                language=voice.get("language"),
                gender=voice.get("gender"),
            )
            for voice in data.get("voices", [])
        ]
