"""Google Cloud Text-to-Speech provider implementation."""

import base64
import binascii

from ..errors import ProviderError
from ..models import ProviderAudio, SynthesisRequest, VoiceInfo
from .base import ProviderContext, TTSProvider

API_URL = "https://texttospeech.googleapis.com/v1"


class GoogleProvider(TTSProvider):
    """Google Cloud TTS over the v1 REST API, authenticated with an API key."""

    name = "google"
    required_fields = ("language",)
    required_credentials = ("api_key",)
    # Google counts the request payload in bytes, not characters
    max_text_length = 5000

    def text_length(self, text: str) -> int:
        return len(text.encode("utf-8"))

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        text = self.prepare_text(request)
        payload = {
            "input": {"ssml": text} if self.is_markup(request) else {"text": text},
            "voice": {
                "languageCode": request.language,
                "ssmlGender": request.gender or "SSML_VOICE_GENDER_UNSPECIFIED",
            },
            "audioConfig": {
                "audioEncoding": "MP3",
                "sampleRateHertz": audio_format.sample_rate,
            },
        }
        if request.voice:
            payload["voice"]["name"] = request.voice

        response = await self._request(
            context,
            "POST",
            f"{API_URL}/text:synthesize",
            params={"key": request.credentials["api_key"]},
            json=payload,
        )
        try:
            audio = base64.b64decode(response.json()["audioContent"])
        except (ValueError, KeyError, binascii.Error) as e:
            raise ProviderError(
                "Malformed synthesis response", self.name, response.status_code, e
            ) from e
        return self._audio(audio, audio_format)

    async def list_voices(self, credentials, context) -> list[VoiceInfo]:
        data = await self._get_json(
            context, f"{API_URL}/voices", params={"key": credentials.get("api_key", "")}
        )
        return [
            VoiceInfo(
                voice_id=voice["name"],
                name=voice["name"],
                provider=self.name,
                language=(voice.get("languageCodes") or [None])[0],
                gender=voice.get("ssmlGender"),
            )
            for voice in data.get("voices", [])
        ]
