"""Nuance Mix text-to-speech provider implementation."""

import base64
import binascii

from ..credentials.fetchers import get_nuance_token
from ..errors import ProviderError
from ..models import ProviderAudio, SynthesisRequest
from .base import ProviderContext, TTSProvider

# HTTP/JSON transcoding of the Mix Synthesizer.UnarySynthesize RPC
DEFAULT_SYNTH_URL = "https://tts.api.nuance.com/api/v1/synthesize"
DEFAULT_MODEL = "enhanced"


class NuanceProvider(TTSProvider):
    """Nuance Mix TTS, authenticated with a cached OAuth client-credentials token.

    Always produces 8 kHz linear PCM. ``nuance_tts_url`` in the credentials
    points the adapter at a self-hosted gateway.
    """

    name = "nuance"
    required_fields = ("voice",)
    required_credentials = ("client_id", "secret")

    async def synthesize(
        self, request: SynthesisRequest, context: ProviderContext
    ) -> ProviderAudio:
        audio_format = context.audio_format
        credentials = request.credentials
        token = await get_nuance_token(
            context.credential_cache,
            context.http,
            credentials["client_id"],
            credentials["secret"],
        )

        if self.is_markup(request):
            synth_input = {"ssml": {"text": request.text}}
        else:
            synth_input = {"text": {"text": request.text}}

        response = await self._request(
            context,
            "POST",
            credentials.get("nuance_tts_url") or DEFAULT_SYNTH_URL,
            json={
                "voice": {"name": request.voice, "model": request.model or DEFAULT_MODEL},
                "audio_params": {
                    "audio_format": {"pcm": {"sample_rate_hz": audio_format.sample_rate}}
                },
                "input": synth_input,
                "user_id": "synthcache",
            },
            headers={"Authorization": f"Bearer {token.access_token}"},
        )

        try:
            data = response.json()
            status = data.get("status", {})
            if status.get("code", 200) != 200:
                raise ProviderError(
                    f"Synthesis rejected: {status.get('message')} {status.get('details', '')}",
                    self.name,
                    status.get("code"),
                )
            audio = base64.b64decode(data["audio"])
        except (ValueError, KeyError, binascii.Error) as e:
            raise ProviderError(
                "Malformed synthesis response", self.name, response.status_code, e
            ) from e
        return self._audio(audio, audio_format)
